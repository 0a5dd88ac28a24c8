"""Remote embedder backed by the Gemini ``embedContent`` endpoint."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

import requests

from domain.errors import ConfigError, FormatError, ServiceError, TransportError
from domain.interfaces import RemoteEmbedder

logger = logging.getLogger(__name__)

_CJK_RUN = re.compile(r"[\u4e00-\u9fff\u3040-\u309f\u30a0-\u30ff\uac00-\ud7af]{5,}")
MULTILINGUAL_HINT = "Content for multilingual semantic embedding: "
PROGRESS_MESSAGE = "Generating embedding..."


@dataclass(slots=True)
class GeminiEmbeddingConfig:
    model: str = "gemini-embedding-exp-03-07"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float = 60.0


class GeminiEmbeddingClient(RemoteEmbedder):
    """Calls the embedding service once per text; never retries."""

    def __init__(
        self,
        config: GeminiEmbeddingConfig | None = None,
        *,
        session: requests.Session | None = None,
        progress: Callable[[str], None] | None = None,
    ) -> None:
        self._config = config or GeminiEmbeddingConfig()
        self._session = session or requests.Session()
        self._progress = progress

    @property
    def model_id(self) -> str:
        return self._config.model

    @property
    def endpoint(self) -> str:
        return f"{self._config.base_url.rstrip('/')}/models/{self._config.model}:embedContent"

    def embed_text(self, text: str, api_key: str) -> list[float]:
        if not api_key or not api_key.strip():
            raise ConfigError("Missing Gemini API key. Please add it in settings.")

        if self._progress is not None:
            self._progress(PROGRESS_MESSAGE)
        try:
            response = self._session.post(
                self.endpoint,
                params={"key": api_key.strip()},
                json=self.build_payload(text),
                timeout=self._config.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Embedding request failed: {exc}") from exc

        if not response.ok:
            raise ServiceError(response.status_code, self._error_message(response))
        try:
            payload = response.json()
        except ValueError as exc:
            raise FormatError("Embedding response is not valid JSON") from exc
        return self._parse_values(payload)

    @staticmethod
    def build_payload(text: str) -> dict[str, Any]:
        if _CJK_RUN.search(text):
            logger.debug("Detected significant non-Latin content, adding multilingual hint")
            text = f"{MULTILINGUAL_HINT}{text}"
        return {"content": {"parts": [{"text": text}]}}

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        message = f"API Error ({response.status_code})"
        try:
            data = response.json()
        except ValueError:
            return message
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict):
            logger.debug("Gemini API error details: %s", error)
            message = f"{error.get('message') or message} ({error.get('status') or 'unknown'})"
        return message

    @staticmethod
    def _parse_values(payload: Any) -> list[float]:
        embedding = payload.get("embedding") if isinstance(payload, dict) else None
        values = embedding.get("values") if isinstance(embedding, dict) else None
        if not isinstance(values, list) or not values:
            raise FormatError("Invalid API response format: missing embedding.values")
        if not all(isinstance(value, (int, float)) and not isinstance(value, bool) for value in values):
            raise FormatError("Invalid API response format: non-numeric embedding values")
        return [float(value) for value in values]


__all__ = ["GeminiEmbeddingClient", "GeminiEmbeddingConfig", "MULTILINGUAL_HINT"]
