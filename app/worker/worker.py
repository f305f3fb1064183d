import time

from app.config.settings import Settings
from app.database.connection import get_connection
from app.database.models import DocumentRecord
from app.database.repositories.documents_repository import DocumentsRepository
from app.logging.logger import Log
from app.processor.exceptions import DocumentBusyError
from app.processor.models import ExtractionRequest
from app.processor.processor import Processor


def request_for(document: DocumentRecord) -> ExtractionRequest:
    """Build an extraction request for a stored document on its owner's behalf."""
    return ExtractionRequest(
        document_id=document.id,
        project_id=document.project_id,
        user_id=document.owner_id,
        file_url=document.access_url or "",
        file_name=document.original_filename,
        file_type=document.mime_type,
    )


class Worker:
    """Poll loop for documents uploaded but never submitted: sleep -> pick -> process.

    Documents younger than ``worker_pending_grace_seconds`` are left to the
    client that is about to submit them.
    """

    def __init__(
        self,
        doc_repo: DocumentsRepository,
        processor: Processor,
        settings: Settings,
    ) -> None:
        self._doc_repo = doc_repo
        self._processor = processor
        self._settings = settings

    def run(self, max_documents: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_documents is set, stop after processing that many documents (for testing).
        """
        Log.info("Worker started, polling for pending documents")
        processed = 0
        try:
            while True:
                if max_documents is not None and processed >= max_documents:
                    break
                document = self._next_document()
                if document:
                    self._process(document)
                    processed += 1
                else:
                    Log.debug("No pending documents, sleeping")
                    time.sleep(self._settings.worker_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _process(self, document: DocumentRecord) -> None:
        """Run one document; its failure is already recorded on the row."""
        try:
            result = self._processor.process(request_for(document))
            Log.info(
                f"Document {document.id} processed",
                method=result.extraction_method,
                chars=result.text_length,
            )
        except DocumentBusyError:
            Log.info(f"Document {document.id} already taken by another run, skipping")
        except Exception as exc:
            Log.error(f"Document {document.id} failed: {exc}")

    def _next_document(self) -> DocumentRecord | None:
        """Find the next pending document past its grace period. Gracefully handle DB errors."""
        try:
            with get_connection() as conn:
                return self._doc_repo.next_pending(
                    conn, self._settings.worker_pending_grace_seconds
                )
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
