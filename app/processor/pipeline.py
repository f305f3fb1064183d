from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.database.models import DocumentRecord
from app.extraction.models import DocumentClassification, ExtractionOutcome
from app.knowledge.aggregator import KnowledgeBaseSnapshot
from app.processor.models import ExtractionRequest


@dataclass(slots=True)
class PipelineContext:
    request: ExtractionRequest
    document: DocumentRecord | None = None
    previous_status: str | None = None
    claimed: bool = False
    classification: DocumentClassification | None = None
    outcome: ExtractionOutcome | None = None
    snapshot: KnowledgeBaseSnapshot | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
