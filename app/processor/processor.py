from app.config.settings import Settings
from app.database.repositories.documents_repository import DocumentsRepository
from app.database.repositories.projects_repository import ProjectsRepository
from app.extraction.factory import StrategyFactory
from app.extraction.orchestrator import ExtractionOrchestrator
from app.knowledge.aggregator import KnowledgeBaseAggregator
from app.logging.logger import Log
from app.processor.exceptions import DocumentBusyError, DocumentNotFoundError
from app.processor.models import ExtractionRequest, ProcessingResult
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.steps import (
    CheckSizeStep,
    ClassifyStep,
    ExtractTextStep,
    LoadDocumentStep,
    MarkFailedStep,
    MarkProcessingStep,
    PersistCompletedStep,
    RebuildKnowledgeBaseStep,
)
from app.storage.base import BaseBlobStore


class Processor:
    """Drives one document through its processing-status state machine.

    Pipeline: classify -> load -> check size -> mark processing -> extract
    -> persist -> rebuild knowledge base. A missing or foreign document is reported as
    not found and a document held by another run as busy, both without
    touching any state; any other failure runs the failed step and re-raises
    the original error.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, request: ExtractionRequest) -> ProcessingResult:
        Log.info(
            f"Processing document {request.document_id} for project {request.project_id}",
            file_type=request.file_type,
        )
        context = PipelineContext(request=request)
        try:
            for step in self._steps:
                context = step.run(context)
        except (DocumentNotFoundError, DocumentBusyError):
            raise
        except Exception as exc:
            context.error_message = str(exc) or type(exc).__name__
            self._run_failed_step(context)
            raise

        if context.outcome is None:
            raise RuntimeError("Pipeline finished without an extraction outcome")
        return ProcessingResult(
            document_id=request.document_id,
            text_length=context.outcome.text_length,
            extraction_method=context.outcome.strategy_name,
            knowledge_base_characters=(
                context.snapshot.total_characters if context.snapshot is not None else 0
            ),
        )

    def reject(self, request: ExtractionRequest, reason: str) -> None:
        """Record a request rejected before processing on its document, if identifiable."""
        if not request.document_id or not request.project_id:
            return
        context = PipelineContext(request=request, error_message=reason)
        self._run_failed_step(context)

    def _run_failed_step(self, context: PipelineContext) -> None:
        try:
            self._failed_step.run(context)
        except Exception:
            Log.exception(
                f"Could not record failure for document {context.request.document_id}"
            )


def build_processor(
    orchestrator: ExtractionOrchestrator,
    doc_repo: DocumentsRepository,
    aggregator: KnowledgeBaseAggregator,
) -> Processor:
    """Build a Processor with the standard extraction pipeline."""
    steps: list[PipelineStep] = [
        ClassifyStep(orchestrator),
        LoadDocumentStep(doc_repo),
        CheckSizeStep(orchestrator),
        MarkProcessingStep(doc_repo),
        ExtractTextStep(orchestrator),
        PersistCompletedStep(doc_repo),
        RebuildKnowledgeBaseStep(aggregator),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep(doc_repo, aggregator))


def build_processor_from_settings(
    settings: Settings,
    blob_store: BaseBlobStore | None = None,
) -> Processor:
    doc_repo = DocumentsRepository()
    aggregator = KnowledgeBaseAggregator(doc_repo, ProjectsRepository())
    orchestrator = StrategyFactory.create_orchestrator(settings, blob_store=blob_store)
    return build_processor(orchestrator, doc_repo, aggregator)
