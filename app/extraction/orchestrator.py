"""Ordered, fallback-driven extraction over the configured strategies."""

import dataclasses
import functools
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from app.extraction.base import BaseExtractionStrategy
from app.extraction.classification import classify
from app.extraction.exceptions import ExtractionExhaustedError
from app.extraction.models import (
    DocumentClassification,
    ExtractionOutcome,
    ExtractionSource,
    StrategyDescriptor,
)
from app.extraction.retry import run_with_deadline, with_retry
from app.extraction.validator import validate_result
from app.logging.logger import Log
from app.storage.base import BaseBlobStore
from app.storage.exceptions import BlobStoreError


@dataclass
class StrategyCatalog:
    """Strategies available in this deployment, grouped by role."""

    plain_text: BaseExtractionStrategy
    structured_parser: BaseExtractionStrategy | None = None
    ocr: BaseExtractionStrategy | None = None
    vision: list[BaseExtractionStrategy] = field(default_factory=list)
    native_pdf: BaseExtractionStrategy | None = None


class ExtractionOrchestrator:
    """Runs strategies in a fixed priority order until one yields validated text.

    The order depends only on the document classification. Attempts of one
    strategy are sequential with a fixed backoff; the first validated result
    wins and no lower-priority strategy runs after it.
    """

    def __init__(
        self,
        catalog: StrategyCatalog,
        *,
        blob_store: BaseBlobStore | None = None,
        signed_url_expiry_seconds: int = 3600,
        max_document_bytes: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._catalog = catalog
        self._blob_store = blob_store
        self._signed_url_expiry = signed_url_expiry_seconds
        self._max_document_bytes = max_document_bytes
        self._sleep = sleep

    def classify(self, mime_type: str, byte_size: int | None = None) -> DocumentClassification:
        return classify(mime_type, byte_size, self._max_document_bytes)

    def plan(self, classification: DocumentClassification) -> list[BaseExtractionStrategy]:
        """Build the ordered strategy list for a classified document."""
        catalog = self._catalog
        if classification.is_plain_text:
            return [catalog.plain_text]

        strategies: list[BaseExtractionStrategy] = []
        if classification.is_office:
            if catalog.structured_parser is not None:
                strategies.append(catalog.structured_parser)
            return strategies

        if catalog.structured_parser is not None:
            strategies.append(catalog.structured_parser)
            if catalog.ocr is not None:
                strategies.append(catalog.ocr)
        else:
            strategies.extend(catalog.vision)
        if classification.is_pdf and catalog.native_pdf is not None:
            strategies.append(catalog.native_pdf)
        return strategies

    def describe(self, classification: DocumentClassification) -> list[StrategyDescriptor]:
        return [strategy.describe() for strategy in self.plan(classification)]

    def resolve_source(
        self, source: ExtractionSource, storage_path: str | None
    ) -> ExtractionSource:
        """Swap the supplied URL for a time-limited signed one when possible."""
        if self._blob_store is None or not storage_path:
            return source
        try:
            signed_url = self._blob_store.create_signed_url(
                storage_path, expires_in=self._signed_url_expiry
            )
        except BlobStoreError as exc:
            Log.warning(
                "Signed URL unavailable, using supplied URL",
                storage_path=storage_path,
                error=exc,
            )
            return source
        return dataclasses.replace(source, url=signed_url)

    def extract(
        self,
        source: ExtractionSource,
        *,
        storage_path: str | None = None,
    ) -> ExtractionOutcome:
        """Extract validated text from ``source``.

        Raises:
            UnsupportedFileTypeError: before any strategy runs, for disallowed types.
            ExtractionExhaustedError: when every strategy and attempt failed.
        """
        classification = self.classify(source.mime_type, source.byte_size)
        strategies = self.plan(classification)
        if not strategies:
            raise ExtractionExhaustedError(
                None,
                f"No extraction strategy is configured for {classification.mime_type}",
            )

        source = dataclasses.replace(
            self.resolve_source(source, storage_path),
            mime_type=classification.mime_type,
        )
        Log.info(
            f"Extracting '{source.file_name}'",
            mime_type=classification.mime_type,
            strategies=",".join(s.name for s in strategies),
        )

        last_strategy: str | None = None
        last_error = ""
        for strategy in strategies:
            config = strategy.config
            try:
                text = with_retry(
                    functools.partial(self._attempt, strategy, source),
                    max_attempts=config.max_attempts,
                    backoff_seconds=config.backoff_seconds,
                    on_failure=functools.partial(self._log_attempt_failure, strategy),
                    sleep=self._sleep,
                )
            except Exception as exc:
                last_strategy = strategy.name
                last_error = str(exc) or type(exc).__name__
                Log.warning(f"Strategy {strategy.name} exhausted, falling back", error=last_error)
                continue

            Log.info(f"Strategy {strategy.name} succeeded", chars=len(text))
            return ExtractionOutcome(text=text, strategy_name=strategy.name)

        raise ExtractionExhaustedError(last_strategy, last_error)

    def _attempt(
        self, strategy: BaseExtractionStrategy, source: ExtractionSource, attempt: int
    ) -> str:
        config = strategy.config
        Log.debug(
            f"Invoking {strategy.name}",
            attempt=f"{attempt}/{config.max_attempts}",
            timeout=config.timeout_seconds,
        )
        raw = run_with_deadline(
            functools.partial(strategy.invoke, source, timeout_seconds=config.timeout_seconds),
            config.timeout_seconds,
        )
        return validate_result(raw, config.min_result_length)

    @staticmethod
    def _log_attempt_failure(
        strategy: BaseExtractionStrategy, attempt: int, exc: Exception
    ) -> None:
        Log.warning(
            f"Strategy {strategy.name} attempt {attempt}/{strategy.config.max_attempts} failed",
            error_type=type(exc).__name__,
            error=exc,
        )
