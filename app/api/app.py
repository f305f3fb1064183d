from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.routers.extraction import router as extraction_router
from app.api.routers.projects import router as projects_router
from app.api.services import AppServices


def create_app(services: AppServices) -> FastAPI:
    """Create the HTTP application around an already-built set of services."""
    app = FastAPI(title="Project Knowledge API")
    app.state.services = services

    app.include_router(extraction_router)
    app.include_router(projects_router)
    register_exception_handlers(app)

    origins = [o.strip() for o in services.settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
