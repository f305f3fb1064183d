"""
Projects API Router
===================
Document upload and listing, and read access to a project's knowledge base.
"""

import mimetypes
import uuid
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, UploadFile

from app.api.dependencies import get_services, rate_limited_user
from app.api.errors import ApiError
from app.api.schemas import DocumentListResponse, DocumentResponse, KnowledgeBaseResponse
from app.api.services import AppServices
from app.database.models import ProjectRecord
from app.extraction.classification import is_allowed, normalize_mime_type
from app.knowledge.context import build_knowledge_prompt
from app.logging.logger import Log
from app.processor.exceptions import ProjectNotFoundError

router = APIRouter(prefix="/api/projects/{project_id}", tags=["projects"])


def _owned_project(services: AppServices, project_id: str, user_id: str) -> ProjectRecord:
    project = services.projects_repo.find_owned(project_id, user_id)
    if project is None:
        raise ProjectNotFoundError("Project not found or access denied")
    return project


def _declared_mime_type(upload: UploadFile) -> str:
    if upload.content_type and upload.content_type != "application/octet-stream":
        return normalize_mime_type(upload.content_type)
    guessed, _ = mimetypes.guess_type(upload.filename or "")
    return guessed or "application/octet-stream"


@router.post("/documents", response_model=DocumentResponse, status_code=201)
def upload_document(
    project_id: str,
    file: UploadFile = File(...),
    user_id: str = Depends(rate_limited_user),
    services: AppServices = Depends(get_services),
) -> DocumentResponse:
    """Store an uploaded file and register it as a pending document."""
    _owned_project(services, project_id, user_id)

    filename = PurePath(file.filename or "unnamed").name
    mime_type = _declared_mime_type(file)
    if not is_allowed(mime_type):
        raise ApiError(400, "Unsupported file type", mime_type)

    content = file.file.read(services.settings.max_upload_bytes + 1)
    if not content:
        raise ApiError(400, "Empty file", filename)
    if len(content) > services.settings.max_upload_bytes:
        raise ApiError(
            400,
            "File too large",
            f"Maximum file size is {services.settings.max_upload_bytes} bytes",
        )

    storage_path = f"{user_id}/{project_id}/{uuid.uuid4().hex}{PurePath(filename).suffix.lower()}"
    access_url = services.blob_store.upload(storage_path, content, mime_type)
    document = services.documents_repo.create_pending(
        project_id=project_id,
        owner_id=user_id,
        storage_path=storage_path,
        original_filename=filename,
        mime_type=mime_type,
        byte_size=len(content),
        access_url=access_url,
    )
    Log.info(f"Uploaded document {document.id} to project {project_id}", bytes=len(content))
    return DocumentResponse.from_record(document)


@router.get("/documents", response_model=DocumentListResponse)
def list_documents(
    project_id: str,
    user_id: str = Depends(rate_limited_user),
    services: AppServices = Depends(get_services),
) -> DocumentListResponse:
    _owned_project(services, project_id, user_id)
    documents = services.documents_repo.list_for_project(project_id, user_id)
    return DocumentListResponse(
        documents=[DocumentResponse.from_record(doc) for doc in documents]
    )


@router.get("/knowledge-base", response_model=KnowledgeBaseResponse)
def get_knowledge_base(
    project_id: str,
    user_id: str = Depends(rate_limited_user),
    services: AppServices = Depends(get_services),
) -> KnowledgeBaseResponse:
    """Return the aggregated knowledge text and the grounding prompt built from it."""
    project = _owned_project(services, project_id, user_id)
    knowledge_base = project.knowledge_base or ""
    return KnowledgeBaseResponse(
        project_id=project.id,
        knowledge_base=knowledge_base,
        total_characters=project.total_characters,
        document_count=project.document_count,
        system_prompt=build_knowledge_prompt(project.name, project.description, knowledge_base),
    )
