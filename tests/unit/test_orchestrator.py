import threading
from unittest.mock import MagicMock

import pytest

from app.extraction.base import BaseExtractionStrategy
from app.extraction.exceptions import (
    ExtractionExhaustedError,
    StrategyError,
    UnsupportedFileTypeError,
)
from app.extraction.models import ExtractionSource, StrategyConfig
from app.extraction.orchestrator import ExtractionOrchestrator, StrategyCatalog
from app.storage.base import BaseBlobStore
from app.storage.exceptions import BlobStoreError

LONG_TEXT = "Quarterly revenue grew by twelve percent year over year."


class StubStrategy(BaseExtractionStrategy):
    """Strategy returning scripted results; exceptions in the script are raised."""

    def __init__(
        self,
        name: str,
        results: list[object],
        config: StrategyConfig | None = None,
    ) -> None:
        super().__init__(config or StrategyConfig(timeout_seconds=1.0))
        self._name = name
        self._results = list(results)
        self.calls: list[ExtractionSource] = []

    @property
    def name(self) -> str:
        return self._name

    def invoke(self, source: ExtractionSource, *, timeout_seconds: float) -> object:
        self.calls.append(source)
        result = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if isinstance(result, Exception):
            raise result
        return result


class BlockingStrategy(StubStrategy):
    def __init__(self, name: str, release: threading.Event, timeout: float) -> None:
        super().__init__(name, [LONG_TEXT], StrategyConfig(timeout_seconds=timeout))
        self._release = release

    def invoke(self, source: ExtractionSource, *, timeout_seconds: float) -> object:
        self.calls.append(source)
        self._release.wait(5)
        return LONG_TEXT


def _source(mime_type: str = "application/pdf", byte_size: int | None = 2048) -> ExtractionSource:
    return ExtractionSource(
        url="https://files.example.com/report.pdf",
        mime_type=mime_type,
        file_name="report.pdf",
        byte_size=byte_size,
    )


def _orchestrator(catalog: StrategyCatalog, **kwargs: object) -> ExtractionOrchestrator:
    return ExtractionOrchestrator(catalog, sleep=lambda _s: None, **kwargs)  # type: ignore[arg-type]


class TestPlan:
    def test_pdf_with_structured_parser(self) -> None:
        catalog = StrategyCatalog(
            plain_text=StubStrategy("plain_text", [LONG_TEXT]),
            structured_parser=StubStrategy("structured_parser", [LONG_TEXT]),
            ocr=StubStrategy("ocr", [LONG_TEXT]),
            vision=[StubStrategy("vision:openai", [LONG_TEXT])],
            native_pdf=StubStrategy("native_pdf", [LONG_TEXT]),
        )
        orchestrator = _orchestrator(catalog)

        names = [d.name for d in orchestrator.describe(orchestrator.classify("application/pdf"))]

        assert names == ["structured_parser", "ocr", "native_pdf"]

    def test_pdf_without_structured_parser_uses_vision(self) -> None:
        catalog = StrategyCatalog(
            plain_text=StubStrategy("plain_text", [LONG_TEXT]),
            vision=[
                StubStrategy("vision:openai", [LONG_TEXT]),
                StubStrategy("vision:groq", [LONG_TEXT]),
            ],
            native_pdf=StubStrategy("native_pdf", [LONG_TEXT]),
        )
        orchestrator = _orchestrator(catalog)

        names = [d.name for d in orchestrator.describe(orchestrator.classify("application/pdf"))]

        assert names == ["vision:openai", "vision:groq", "native_pdf"]

    def test_image_skips_native_pdf(self) -> None:
        catalog = StrategyCatalog(
            plain_text=StubStrategy("plain_text", [LONG_TEXT]),
            structured_parser=StubStrategy("structured_parser", [LONG_TEXT]),
            native_pdf=StubStrategy("native_pdf", [LONG_TEXT]),
        )
        orchestrator = _orchestrator(catalog)

        names = [d.name for d in orchestrator.describe(orchestrator.classify("image/png"))]

        assert names == ["structured_parser"]

    def test_plain_text_only_reads_text(self) -> None:
        catalog = StrategyCatalog(
            plain_text=StubStrategy("plain_text", [LONG_TEXT]),
            structured_parser=StubStrategy("structured_parser", [LONG_TEXT]),
        )
        orchestrator = _orchestrator(catalog)

        names = [d.name for d in orchestrator.describe(orchestrator.classify("text/plain"))]

        assert names == ["plain_text"]

    def test_office_uses_structured_parser_only(self) -> None:
        catalog = StrategyCatalog(
            plain_text=StubStrategy("plain_text", [LONG_TEXT]),
            structured_parser=StubStrategy("structured_parser", [LONG_TEXT]),
            ocr=StubStrategy("ocr", [LONG_TEXT]),
            vision=[StubStrategy("vision:openai", [LONG_TEXT])],
        )
        orchestrator = _orchestrator(catalog)

        names = [d.name for d in orchestrator.describe(orchestrator.classify("application/msword"))]

        assert names == ["structured_parser"]


class TestExtract:
    def test_first_valid_result_wins(self) -> None:
        first = StubStrategy("structured_parser", [LONG_TEXT])
        second = StubStrategy("ocr", [LONG_TEXT])
        orchestrator = _orchestrator(
            StrategyCatalog(
                plain_text=StubStrategy("plain_text", [LONG_TEXT]),
                structured_parser=first,
                ocr=second,
            )
        )

        outcome = orchestrator.extract(_source(mime_type="image/png"))

        assert outcome.strategy_name == "structured_parser"
        assert outcome.text == LONG_TEXT
        assert second.calls == []

    def test_short_result_falls_back(self) -> None:
        short = StubStrategy(
            "structured_parser", ["abc"], StrategyConfig(timeout_seconds=1.0, max_attempts=3)
        )
        fallback = StubStrategy("ocr", ["x" * 50])
        orchestrator = _orchestrator(
            StrategyCatalog(
                plain_text=StubStrategy("plain_text", [LONG_TEXT]),
                structured_parser=short,
                ocr=fallback,
            )
        )

        outcome = orchestrator.extract(_source(mime_type="image/png"))

        assert len(short.calls) == 3
        assert outcome.strategy_name == "ocr"
        assert outcome.text_length == 50

    def test_retries_within_strategy_before_fallback(self) -> None:
        sleeps: list[float] = []
        flaky = StubStrategy(
            "structured_parser",
            [StrategyError("HTTP 503"), LONG_TEXT],
            StrategyConfig(timeout_seconds=1.0, max_attempts=3, backoff_seconds=2.0),
        )
        fallback = StubStrategy("ocr", [LONG_TEXT])
        orchestrator = ExtractionOrchestrator(
            StrategyCatalog(
                plain_text=StubStrategy("plain_text", [LONG_TEXT]),
                structured_parser=flaky,
                ocr=fallback,
            ),
            sleep=sleeps.append,
        )

        outcome = orchestrator.extract(_source(mime_type="image/png"))

        assert outcome.strategy_name == "structured_parser"
        assert len(flaky.calls) == 2
        assert sleeps == [2.0]
        assert fallback.calls == []

    def test_timeout_falls_back_to_next_strategy(self) -> None:
        release = threading.Event()
        slow = BlockingStrategy("structured_parser", release, timeout=0.05)
        fallback = StubStrategy("native_pdf", [LONG_TEXT])
        orchestrator = _orchestrator(
            StrategyCatalog(
                plain_text=StubStrategy("plain_text", [LONG_TEXT]),
                structured_parser=slow,
                native_pdf=fallback,
            )
        )

        try:
            outcome = orchestrator.extract(_source())
        finally:
            release.set()

        assert outcome.strategy_name == "native_pdf"

    def test_exhaustion_reports_last_strategy(self) -> None:
        orchestrator = _orchestrator(
            StrategyCatalog(
                plain_text=StubStrategy("plain_text", [LONG_TEXT]),
                structured_parser=StubStrategy("structured_parser", [StrategyError("HTTP 500")]),
                native_pdf=StubStrategy("native_pdf", [""]),
            )
        )

        with pytest.raises(ExtractionExhaustedError) as exc_info:
            orchestrator.extract(_source())

        assert exc_info.value.last_strategy == "native_pdf"
        assert "All extraction strategies failed" in str(exc_info.value)
        assert "native_pdf" in str(exc_info.value)

    def test_unsupported_type_invokes_nothing(self) -> None:
        strategy = StubStrategy("structured_parser", [LONG_TEXT])
        orchestrator = _orchestrator(
            StrategyCatalog(
                plain_text=StubStrategy("plain_text", [LONG_TEXT]),
                structured_parser=strategy,
            )
        )

        with pytest.raises(UnsupportedFileTypeError):
            orchestrator.extract(_source(mime_type="application/zip"))

        assert strategy.calls == []

    def test_oversize_document_is_rejected(self) -> None:
        strategy = StubStrategy("structured_parser", [LONG_TEXT])
        orchestrator = _orchestrator(
            StrategyCatalog(
                plain_text=StubStrategy("plain_text", [LONG_TEXT]),
                structured_parser=strategy,
            ),
            max_document_bytes=1000,
        )

        with pytest.raises(UnsupportedFileTypeError, match="too large"):
            orchestrator.extract(_source(byte_size=5000))
        assert strategy.calls == []

    def test_office_without_parser_is_exhausted(self) -> None:
        vision = StubStrategy("vision:openai", [LONG_TEXT])
        orchestrator = _orchestrator(
            StrategyCatalog(plain_text=StubStrategy("plain_text", [LONG_TEXT]), vision=[vision])
        )

        with pytest.raises(ExtractionExhaustedError, match="No extraction strategy"):
            orchestrator.extract(_source(mime_type="application/msword"))
        assert vision.calls == []


class TestResolveSource:
    def test_uses_signed_url(self) -> None:
        blob_store = MagicMock(spec=BaseBlobStore)
        blob_store.create_signed_url.return_value = "https://signed.example.com/doc?token=1"
        strategy = StubStrategy("structured_parser", [LONG_TEXT])
        orchestrator = _orchestrator(
            StrategyCatalog(plain_text=StubStrategy("plain_text", [LONG_TEXT]), structured_parser=strategy),
            blob_store=blob_store,
            signed_url_expiry_seconds=600,
        )

        orchestrator.extract(_source(mime_type="image/png"), storage_path="u1/p1/doc.png")

        blob_store.create_signed_url.assert_called_once_with("u1/p1/doc.png", expires_in=600)
        assert strategy.calls[0].url == "https://signed.example.com/doc?token=1"

    def test_falls_back_to_supplied_url(self) -> None:
        blob_store = MagicMock(spec=BaseBlobStore)
        blob_store.create_signed_url.side_effect = BlobStoreError("HTTP 404")
        strategy = StubStrategy("structured_parser", [LONG_TEXT])
        orchestrator = _orchestrator(
            StrategyCatalog(plain_text=StubStrategy("plain_text", [LONG_TEXT]), structured_parser=strategy),
            blob_store=blob_store,
        )

        orchestrator.extract(_source(mime_type="image/png"), storage_path="u1/p1/doc.png")

        assert strategy.calls[0].url == "https://files.example.com/report.pdf"

    def test_without_storage_path_keeps_url(self) -> None:
        blob_store = MagicMock(spec=BaseBlobStore)
        orchestrator = _orchestrator(
            StrategyCatalog(plain_text=StubStrategy("plain_text", [LONG_TEXT])),
            blob_store=blob_store,
        )

        resolved = orchestrator.resolve_source(_source(), storage_path=None)

        assert resolved.url == "https://files.example.com/report.pdf"
        blob_store.create_signed_url.assert_not_called()
