import httpx
import pytest

from app.config.settings import Settings
from app.extraction.factory import StrategyFactory
from app.extraction.ocr_adapter import OcrAdapter
from app.extraction.orchestrator import ExtractionOrchestrator
from app.extraction.pdfplumber_adapter import PdfPlumberAdapter
from app.extraction.plain_text_adapter import PlainTextAdapter
from app.extraction.pymupdf_adapter import PyMuPdfAdapter
from app.extraction.structured_parser_adapter import StructuredParserAdapter
from app.extraction.vision_adapter import VisionAdapter


def _client() -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))


class TestCreateCatalog:
    def test_without_credentials_only_local_strategies(self) -> None:
        settings = Settings(vision_openai_api_key="")

        catalog = StrategyFactory.create_catalog(settings, _client())

        assert isinstance(catalog.plain_text, PlainTextAdapter)
        assert catalog.structured_parser is None
        assert catalog.ocr is None
        assert catalog.vision == []
        assert isinstance(catalog.native_pdf, PdfPlumberAdapter)

    def test_with_credentials_builds_remote_strategies(self) -> None:
        settings = Settings(
            structured_parser_api_token="r8",
            structured_parser_max_attempts=4,
            ocr_api_key="ocr",
            vision_providers="openai, groq",
            vision_openai_api_key="sk-1",
            vision_groq_api_key="gsk",
            vision_groq_model_name="llama-vision",
        )

        catalog = StrategyFactory.create_catalog(settings, _client())

        assert isinstance(catalog.structured_parser, StructuredParserAdapter)
        assert catalog.structured_parser.config.max_attempts == 4
        assert isinstance(catalog.ocr, OcrAdapter)
        assert [s.name for s in catalog.vision] == ["vision:openai", "vision:groq"]
        assert all(isinstance(s, VisionAdapter) for s in catalog.vision)

    def test_provider_without_model_is_skipped(self) -> None:
        settings = Settings(vision_providers="groq", vision_groq_api_key="gsk", vision_groq_model_name="")

        catalog = StrategyFactory.create_catalog(settings, _client())

        assert catalog.vision == []

    def test_pymupdf_engine(self) -> None:
        settings = Settings(native_pdf_engine="pymupdf")

        catalog = StrategyFactory.create_catalog(settings, _client())

        assert isinstance(catalog.native_pdf, PyMuPdfAdapter)

    def test_unknown_pdf_engine_raises(self) -> None:
        settings = Settings(native_pdf_engine="tesseract")

        with pytest.raises(ValueError, match="Unknown PDF engine"):
            StrategyFactory.create_catalog(settings, _client())

    def test_unknown_vision_provider_raises(self) -> None:
        settings = Settings(vision_providers="acme")

        with pytest.raises(ValueError, match="Unknown vision provider"):
            StrategyFactory.create_catalog(settings, _client())

    def test_compatible_provider_requires_base_url(self) -> None:
        settings = Settings(
            vision_providers="openai_compatible",
            vision_openai_compatible_api_key="k",
            vision_openai_compatible_model_name="m",
        )

        with pytest.raises(ValueError, match="base_url is required"):
            StrategyFactory.create_catalog(settings, _client())


class TestCreateOrchestrator:
    def test_returns_orchestrator(self) -> None:
        orchestrator = StrategyFactory.create_orchestrator(Settings(), http_client=_client())

        assert isinstance(orchestrator, ExtractionOrchestrator)
        names = [d.name for d in orchestrator.describe(orchestrator.classify("text/plain"))]
        assert names == ["plain_text"]
