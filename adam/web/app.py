"""FastAPI application factory and routing definitions."""

from __future__ import annotations

import secrets
from typing import Any, Callable

from fastapi import Depends, FastAPI, Header, HTTPException, status
from loguru import logger
from pydantic import BaseModel, Field

from adam.catalog import CatalogBrowser, CatalogLoadError, CatalogLoadingError
from adam.config.app import AppConfig
from adam.config.web import WebAuthConfig


class LanguageRequest(BaseModel):
    language: str = Field("", description="Language to load; empty clears the selection")


class CriteriaUpdate(BaseModel):
    topic: str | None = None
    level: str | None = None
    low_bound: float | None = None
    high_bound: float | None = None


class PageRequest(BaseModel):
    delta: int = Field(..., description="Number of pages to move, negative to go back")


def create_app(browser: CatalogBrowser, config: AppConfig | None = None) -> FastAPI:
    """Creates and configures a FastAPI application around one browsing session."""
    web_config = config.web if config and config.web else None
    auth_config = web_config.auth if web_config and web_config.auth else None
    auth_dependency = _build_auth_dependency(auth_config)

    app = FastAPI(
        title="ADAM Catalog API",
        description="Browse, filter and page through language-learning articles.",
        version="0.1.0",
    )

    @app.get("/health", summary="Health Check", tags=["Monitoring"])
    async def health_check() -> dict[str, str]:
        """Check if the API is running."""
        return {"status": "ok"}

    @app.get("/languages", summary="List Languages", tags=["Catalog"])
    async def list_languages(_: None = Depends(auth_dependency)) -> list[str]:
        try:
            return browser.list_languages()
        except CatalogLoadError as exc:
            logger.error("Failed to list languages: {}", exc)
            raise HTTPException(status_code=502, detail=str(exc)) from exc

    @app.post("/language", summary="Select Language", tags=["Catalog"])
    async def select_language(
        payload: LanguageRequest, _: None = Depends(auth_dependency)
    ) -> dict[str, Any]:
        """Load the articles of a language; the most recent request wins."""
        logger.info("Language '{}' requested", payload.language)
        try:
            view = await browser.select_language(payload.language)
        except CatalogLoadError as exc:
            status_code = 404 if exc.not_found else 502
            raise HTTPException(status_code=status_code, detail=str(exc)) from exc
        return view.to_dict()

    @app.get("/view", summary="Current Page", tags=["Catalog"])
    async def current_view(_: None = Depends(auth_dependency)) -> dict[str, Any]:
        return browser.view().to_dict()

    @app.patch("/criteria", summary="Update Filter Criteria", tags=["Catalog"])
    async def update_criteria(
        payload: CriteriaUpdate, _: None = Depends(auth_dependency)
    ) -> dict[str, Any]:
        """Apply the provided fields only; the result starts again at page 1."""
        changes = {name: getattr(payload, name) for name in payload.model_fields_set}
        try:
            view = browser.update_criteria(**changes)
        except CatalogLoadingError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return view.to_dict()

    @app.post("/page", summary="Move Between Pages", tags=["Catalog"])
    async def change_page(payload: PageRequest, _: None = Depends(auth_dependency)) -> dict[str, Any]:
        try:
            view = browser.advance(payload.delta)
        except CatalogLoadingError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return view.to_dict()

    return app


def _build_auth_dependency(auth_config: WebAuthConfig | None) -> Callable[..., Any]:
    """Return a dependency that validates the configured auth token."""

    if not auth_config or not auth_config.enabled:
        async def _no_auth() -> None:  # pragma: no cover - trivial branch
            return None

        return _no_auth

    expected_token = auth_config.token_secret
    header_alias = auth_config.header_name

    async def _verify_token(
        provided_token: str | None = Header(default=None, alias=header_alias),
    ) -> None:
        if provided_token is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing authentication token.",
            )

        if not secrets.compare_digest(provided_token, expected_token):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication token.",
            )

    return _verify_token
