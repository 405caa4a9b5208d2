"""FastAPI application factory."""

from fastapi import FastAPI

from pantry_score.api.jobs import router as jobs_router
from pantry_score.app_logging import configure_logging
from pantry_score.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    app = FastAPI()
    app.state.container = container

    app.include_router(jobs_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
