from __future__ import annotations

from fastapi import APIRouter, FastAPI, Response

from .api import router as plan_router
from .metrics import render_latest


def create_app() -> FastAPI:
    app = FastAPI(title="shotplan")
    app.include_router(plan_router)

    metrics_router = APIRouter()

    @metrics_router.get("/metrics", include_in_schema=False)
    async def _metrics_endpoint() -> Response:
        data, content_type = render_latest()
        return Response(content=data, media_type=content_type)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(metrics_router)
    return app


app = create_app()
