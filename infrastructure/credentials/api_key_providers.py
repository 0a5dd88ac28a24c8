"""Credential providers that hand the remote API key to the core."""
from __future__ import annotations

import os
from typing import Sequence

from domain.interfaces import CredentialProvider

DEFAULT_API_KEY_VARIABLES = ("NOTETHREAD_API_KEY", "GEMINI_API_KEY")


class EnvCredentialProvider(CredentialProvider):
    """Reads the key from the first environment variable that is set."""

    def __init__(self, variables: Sequence[str] = DEFAULT_API_KEY_VARIABLES) -> None:
        self._variables = tuple(variables)

    def get_api_key(self) -> str:
        for name in self._variables:
            value = os.getenv(name, "").strip()
            if value:
                return value
        return ""


class StaticCredentialProvider(CredentialProvider):
    def __init__(self, api_key: str = "") -> None:
        self.api_key = api_key

    def get_api_key(self) -> str:
        return self.api_key


__all__ = ["EnvCredentialProvider", "StaticCredentialProvider"]
