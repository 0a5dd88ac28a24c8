"""FastAPI layer that exposes similar-note lookups and cache maintenance.

Run with ``uvicorn --factory ui.api.main:create_app``; the vault directory is
taken from ``NOTETHREAD_VAULT``.
"""
from __future__ import annotations

import os
from contextlib import AbstractContextManager, asynccontextmanager, nullcontext
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Query as FastAPIQuery
from pydantic import BaseModel, Field

from domain.errors import ConfigError, DocumentNotFound
from infrastructure.config import Container, ContainerConfig, build_default_container
from ui.logging_utils import setup_logging
from ui.presenters import CollectingPresenter, backend_label, format_score, score_category


class DocumentPayload(BaseModel):
    id: str
    modified_at: float


class SimilarNote(BaseModel):
    document_id: str
    score: float
    percent: str
    category: str


class SimilarResponse(BaseModel):
    query: str
    backend: str
    results: list[SimilarNote]
    notifications: list[str] = Field(default_factory=list)


class SettingsPayload(BaseModel):
    backend: str
    result_cap: int
    similarity_floor: float
    ignored_path_prefixes: list[str]
    cache_expiration_days: int


class SettingsUpdate(BaseModel):
    backend: str | None = None
    result_cap: int | None = None
    similarity_floor: float | None = None
    ignored_path_prefixes: list[str] | None = None
    cache_expiration_days: int | None = None


class CacheResponse(BaseModel):
    entries: int


class CacheClearResponse(CacheResponse):
    notifications: list[str] = Field(default_factory=list)


def create_app(container: Container | None = None) -> FastAPI:
    """Build the HTTP app around an existing container or a default one."""

    if container is None:
        setup_logging()
        container = build_default_container(
            ContainerConfig(vault_root=os.getenv("NOTETHREAD_VAULT", ".")),
            presenter=CollectingPresenter(),
        )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        container.close()

    app = FastAPI(title="NoteThread API", lifespan=lifespan)
    app.state.container = container

    def settings_payload() -> SettingsPayload:
        return SettingsPayload(**container.settings.to_mapping())

    def collect_notifications() -> AbstractContextManager[list[str]]:
        presenter = container.presenter
        if isinstance(presenter, CollectingPresenter):
            return presenter.collect()
        return nullcontext([])

    @app.get("/documents", response_model=list[DocumentPayload])
    def documents_endpoint() -> list[DocumentPayload]:
        return [
            DocumentPayload(id=doc.id, modified_at=doc.modified_at)
            for doc in container.corpus.list_documents()
        ]

    @app.get("/similar", response_model=SimilarResponse)
    def similar_endpoint(
        document_id: str = FastAPIQuery(..., description="Vault-relative note path"),
    ) -> SimilarResponse:
        settings = container.settings
        with collect_notifications() as notifications:
            try:
                results = container.find_similar(document_id)
            except DocumentNotFound as exc:
                raise HTTPException(status_code=404, detail=str(exc)) from exc
            except ConfigError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        return SimilarResponse(
            query=document_id,
            backend=backend_label(settings.backend),
            results=[
                SimilarNote(
                    document_id=result.document_id,
                    score=result.score,
                    percent=format_score(result.score),
                    category=score_category(result.score),
                )
                for result in results
            ],
            notifications=notifications,
        )

    @app.get("/settings", response_model=SettingsPayload)
    def get_settings_endpoint() -> SettingsPayload:
        return settings_payload()

    @app.put("/settings", response_model=SettingsPayload)
    def put_settings_endpoint(payload: SettingsUpdate) -> SettingsPayload:
        changes = {key: value for key, value in payload.model_dump().items() if value is not None}
        if "ignored_path_prefixes" in changes:
            changes["ignored_path_prefixes"] = tuple(
                prefix.strip() for prefix in changes["ignored_path_prefixes"] if prefix.strip()
            )
        try:
            container.update_settings(**changes)
        except ConfigError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return settings_payload()

    @app.get("/cache", response_model=CacheResponse)
    def cache_endpoint() -> CacheResponse:
        return CacheResponse(entries=len(container.cache))

    @app.post("/cache/clear", response_model=CacheClearResponse)
    def clear_cache_endpoint() -> CacheClearResponse:
        with collect_notifications() as notifications:
            container.clear_cache()
        return CacheClearResponse(entries=len(container.cache), notifications=notifications)

    return app


__all__ = ["create_app"]
