"""FastAPI application exposing badge rendering for previews."""

from __future__ import annotations

from typing import Any, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..postproc.badges import BadgeRenderer, badge_count
from ..postproc.markers import MarkerManager
from ..validation import (
    ConfigError,
    parse_badge_types,
    parse_products,
    validate_badge_service_url,
    validate_link_mode,
    validate_style,
)


class RenderRequest(BaseModel):
    products: str
    badge_types: str = "health"
    style: str = "flat"
    link_to: str = "badge-page"
    badge_service_url: Optional[str] = None


class RenderResponse(BaseModel):
    markdown: str
    badge_count: int
    warnings: List[str]


class SpliceRequest(RenderRequest):
    document: str


class SpliceResponse(BaseModel):
    markers_found: bool
    changed: bool
    content: str
    warnings: List[str]


class HealthResponse(BaseModel):
    status: str


def _render(payload: RenderRequest) -> RenderResponse:
    renderer = BadgeRenderer(
        style=validate_style(payload.style),
        link_mode=validate_link_mode(payload.link_to),
        base_url=validate_badge_service_url(payload.badge_service_url),
    )
    parsed = parse_products(payload.products)
    categories = parse_badge_types(payload.badge_types)
    return RenderResponse(
        markdown=renderer.render(parsed.products, categories),
        badge_count=badge_count(parsed.products, categories),
        warnings=parsed.warnings,
    )


def create_app(marker_manager: MarkerManager | None = None) -> FastAPI:
    """Create the FastAPI application exposing badgesync previews."""
    markers = marker_manager or MarkerManager()
    app = FastAPI(title="badgesync", version="1.0.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/render", response_model=RenderResponse)
    async def render(payload: RenderRequest) -> RenderResponse:
        return _render(payload)

    @app.post("/splice", response_model=SpliceResponse)
    async def splice(payload: SpliceRequest) -> SpliceResponse:
        rendered = _render(payload)
        result = markers.splice(payload.document, rendered.markdown)
        return SpliceResponse(
            markers_found=result.markers_found,
            changed=result.changed,
            content=result.content,
            warnings=rendered.warnings,
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
