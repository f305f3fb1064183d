from dataclasses import dataclass

from app.api.rate_limiter import BaseRateLimiter, MovingWindowRateLimiter
from app.auth.base import BaseAuthVerifier
from app.auth.supabase_verifier import SupabaseAuthVerifier
from app.config.settings import Settings
from app.database.repositories.documents_repository import DocumentsRepository
from app.database.repositories.projects_repository import ProjectsRepository
from app.processor.processor import Processor, build_processor_from_settings
from app.storage.base import BaseBlobStore
from app.storage.supabase_blob_store import SupabaseBlobStore


@dataclass
class AppServices:
    """Collaborators shared by the request handlers of one application."""

    settings: Settings
    auth_verifier: BaseAuthVerifier
    rate_limiter: BaseRateLimiter
    blob_store: BaseBlobStore
    processor: Processor
    documents_repo: DocumentsRepository
    projects_repo: ProjectsRepository


def build_blob_store(settings: Settings) -> BaseBlobStore:
    return SupabaseBlobStore(
        base_url=settings.supabase_url,
        service_key=settings.supabase_service_key,
        bucket=settings.storage_bucket,
        timeout_seconds=settings.collaborator_timeout_seconds,
    )


def build_services(settings: Settings) -> AppServices:
    """Build the production collaborators from settings."""
    if not settings.supabase_url:
        raise ValueError("supabase_url is required to verify credentials and sign URLs")
    blob_store = build_blob_store(settings)
    return AppServices(
        settings=settings,
        auth_verifier=SupabaseAuthVerifier(
            base_url=settings.supabase_url,
            service_key=settings.supabase_service_key,
            timeout_seconds=settings.collaborator_timeout_seconds,
        ),
        rate_limiter=MovingWindowRateLimiter(
            settings.rate_limit_per_minute, settings.rate_limit_storage_uri
        ),
        blob_store=blob_store,
        processor=build_processor_from_settings(settings, blob_store=blob_store),
        documents_repo=DocumentsRepository(),
        projects_repo=ProjectsRepository(),
    )
