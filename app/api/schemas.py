from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.database.models import DocumentRecord


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtractTextRequest(CamelModel):
    """Body of an extraction request; completeness is checked by the handler."""

    document_id: str | None = None
    project_id: str | None = None
    file_url: str | None = None
    file_name: str | None = None
    file_type: str | None = None

    def missing_fields(self) -> list[str]:
        return [
            to_camel(name)
            for name in type(self).model_fields
            if not (getattr(self, name) or "").strip()
        ]


class ExtractTextResponse(CamelModel):
    success: bool
    text_length: int
    extraction_method: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class DocumentResponse(CamelModel):
    id: str
    project_id: str
    original_filename: str
    mime_type: str
    byte_size: int
    access_url: str | None = None
    text_length: int | None = None
    processing_status: str
    processing_error: str | None = None
    processing_notes: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "DocumentResponse":
        return cls(
            id=record.id,
            project_id=record.project_id,
            original_filename=record.original_filename,
            mime_type=record.mime_type,
            byte_size=record.byte_size,
            access_url=record.access_url,
            text_length=record.text_length,
            processing_status=record.processing_status,
            processing_error=record.processing_error,
            processing_notes=record.processing_notes,
            created_at=record.created_at,
        )


class DocumentListResponse(CamelModel):
    documents: list[DocumentResponse]


class KnowledgeBaseResponse(CamelModel):
    project_id: str
    knowledge_base: str
    total_characters: int
    document_count: int
    system_prompt: str
