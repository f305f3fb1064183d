import uvicorn

from app.api.app import create_app
from app.api.services import build_blob_store, build_services
from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.database.repositories.documents_repository import DocumentsRepository
from app.logging.logger import Log
from app.processor.processor import build_processor_from_settings
from app.worker.worker import Worker


def main() -> None:
    """Entry point: initialize pool -> build services -> serve the HTTP API."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        app = create_app(build_services(settings))
        Log.info(f"Serving API on {settings.http_host}:{settings.http_port}", env=settings.app_env)
        uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_level=settings.log_level.lower())
    finally:
        close_pool()


def run_worker() -> None:
    """Entry point: initialize pool -> build processor -> start the pending-document loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        blob_store = build_blob_store(settings) if settings.supabase_url else None
        processor = build_processor_from_settings(settings, blob_store=blob_store)
        worker = Worker(DocumentsRepository(), processor, settings)
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
