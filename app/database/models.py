from dataclasses import dataclass
from datetime import datetime

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


@dataclass
class DocumentRecord:
    """Represents a row from the project_documents table."""

    id: str
    project_id: str
    owner_id: str
    storage_path: str
    original_filename: str
    mime_type: str
    byte_size: int
    access_url: str | None = None
    extracted_text: str | None = None
    text_length: int | None = None
    processing_status: str = STATUS_PENDING
    processing_error: str | None = None
    processing_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ProjectRecord:
    """Represents a row from the projects table."""

    id: str
    owner_id: str
    name: str
    description: str | None = None
    knowledge_base: str | None = None
    total_characters: int = 0
    document_count: int = 0
    updated_at: datetime | None = None
