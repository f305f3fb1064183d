import psycopg

from app.database.models import STATUS_COMPLETED, STATUS_PROCESSING, DocumentRecord
from app.database.repositories.documents_repository import DocumentsRepository
from app.extraction.models import ExtractionSource
from app.extraction.orchestrator import ExtractionOrchestrator
from app.knowledge.aggregator import KnowledgeBaseAggregator
from app.logging.logger import Log
from app.processor.exceptions import (
    DocumentBusyError,
    DocumentNotFoundError,
    PersistenceError,
)
from app.processor.models import ExtractionRequest
from app.processor.pipeline import PipelineContext, PipelineStep


def load_owned_document(
    doc_repo: DocumentsRepository, request: ExtractionRequest
) -> DocumentRecord:
    """Load the requested document, hiding documents of other users or projects.

    Raises:
        DocumentNotFoundError: if missing or not owned by the requester.
    """
    document = doc_repo.find_by_id(request.document_id)
    if document.owner_id != request.user_id or document.project_id != request.project_id:
        raise DocumentNotFoundError(f"Document {request.document_id} not found")
    return document


class ClassifyStep(PipelineStep):
    """Reject disallowed file types before anything is loaded or invoked."""

    def __init__(self, orchestrator: ExtractionOrchestrator) -> None:
        self._orchestrator = orchestrator

    def run(self, context: PipelineContext) -> PipelineContext:
        context.classification = self._orchestrator.classify(context.request.file_type)
        return context


class LoadDocumentStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = load_owned_document(self._doc_repo, context.request)
        context.document = document
        context.previous_status = document.processing_status
        return context


class CheckSizeStep(PipelineStep):
    """Reclassify with the stored size so oversize documents never enter processing."""

    def __init__(self, orchestrator: ExtractionOrchestrator) -> None:
        self._orchestrator = orchestrator

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before the size check")
        context.classification = self._orchestrator.classify(
            context.request.file_type, context.document.byte_size
        )
        return context


class MarkProcessingStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document_id = context.request.document_id
        previous_status = self._doc_repo.mark_processing(document_id)
        if previous_status is None:
            raise DocumentBusyError(f"Document {document_id} is already being processed")
        context.previous_status = previous_status
        context.claimed = True
        Log.info(f"Document {document_id} marked as processing")
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, orchestrator: ExtractionOrchestrator) -> None:
        self._orchestrator = orchestrator

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before extraction")
        request = context.request
        source = ExtractionSource(
            url=request.file_url,
            mime_type=request.file_type,
            file_name=request.file_name,
            byte_size=context.document.byte_size,
        )
        context.outcome = self._orchestrator.extract(
            source, storage_path=context.document.storage_path
        )
        return context


class PersistCompletedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.outcome is None:
            raise ValueError("PipelineContext.outcome must be set before persist")
        outcome = context.outcome
        try:
            self._doc_repo.mark_completed(
                context.request.document_id,
                outcome.text,
                notes=f"extracted via {outcome.strategy_name}",
            )
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to save extracted text: {exc}") from exc
        Log.info(
            f"Document {context.request.document_id} completed",
            method=outcome.strategy_name,
            chars=outcome.text_length,
        )
        return context


class RebuildKnowledgeBaseStep(PipelineStep):
    def __init__(self, aggregator: KnowledgeBaseAggregator) -> None:
        self._aggregator = aggregator

    def run(self, context: PipelineContext) -> PipelineContext:
        try:
            context.snapshot = self._aggregator.rebuild(context.request.project_id)
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to rebuild knowledge base: {exc}") from exc
        return context


class MarkFailedStep(PipelineStep):
    """Record the failure on the document, if it can be identified.

    A document that was completed before this run leaves the knowledge base,
    so the project is rebuilt once in that case. A document another run holds
    in processing is left to that run.
    """

    def __init__(
        self,
        doc_repo: DocumentsRepository,
        aggregator: KnowledgeBaseAggregator,
    ) -> None:
        self._doc_repo = doc_repo
        self._aggregator = aggregator

    def run(self, context: PipelineContext) -> PipelineContext:
        request = context.request
        if context.document is None:
            try:
                context.document = load_owned_document(self._doc_repo, request)
            except DocumentNotFoundError:
                Log.warning(f"Failure not recorded, document {request.document_id} not found")
                return context
            context.previous_status = context.document.processing_status

        if not context.claimed and context.previous_status == STATUS_PROCESSING:
            Log.warning(
                f"Failure not recorded, document {request.document_id} is held by another run"
            )
            return context

        self._doc_repo.mark_failed(request.document_id, context.error_message)
        Log.error(f"Document {request.document_id} marked as failed: {context.error_message}")
        if context.previous_status == STATUS_COMPLETED:
            context.snapshot = self._aggregator.rebuild(request.project_id)
        return context
