"""FastAPI application entrypoint."""

from __future__ import annotations

import uvicorn
from fastapi import Depends, FastAPI

from formaction import __version__
from formaction.action_handlers import router, service_error_handler
from formaction.config import Settings, get_settings
from formaction.exceptions import ServiceError
from formaction.logging import configure_logging


def create_app() -> FastAPI:
    """Application factory."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Form Action Service",
        version=__version__,
    )

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    async def version(settings: Settings = Depends(get_settings)) -> dict[str, str]:
        return {"version": __version__, "environment": settings.environment}

    app.include_router(router)
    app.add_exception_handler(ServiceError, service_error_handler)

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":  # pragma: no cover
    run()
