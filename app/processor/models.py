from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionRequest:
    """One validated request to extract a document's text."""

    document_id: str
    project_id: str
    user_id: str
    file_url: str
    file_name: str
    file_type: str


@dataclass(frozen=True)
class ProcessingResult:
    """What the caller learns about a successful extraction."""

    document_id: str
    text_length: int
    extraction_method: str
    knowledge_base_characters: int
