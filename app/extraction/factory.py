from typing import ClassVar

import httpx

from app.config.settings import Settings
from app.extraction.base import BaseExtractionStrategy
from app.extraction.file_loader import FileLoader
from app.extraction.models import StrategyConfig
from app.extraction.ocr_adapter import OcrAdapter
from app.extraction.openai_client_adapter import OpenAIClientAdapter
from app.extraction.orchestrator import ExtractionOrchestrator, StrategyCatalog
from app.extraction.pdfplumber_adapter import PdfPlumberAdapter
from app.extraction.plain_text_adapter import PlainTextAdapter
from app.extraction.pymupdf_adapter import PyMuPdfAdapter
from app.extraction.structured_parser_adapter import StructuredParserAdapter
from app.extraction.vision_adapter import VisionAdapter
from app.logging.logger import Log
from app.storage.base import BaseBlobStore


class StrategyFactory:
    """Creates the strategy catalog and orchestrator from settings.

    Backends without credentials are left out, so the orchestrator only
    ever plans strategies that can actually run.
    """

    NATIVE_PDF_ADAPTERS: ClassVar[dict[str, type[PdfPlumberAdapter | PyMuPdfAdapter]]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
    }

    @classmethod
    def create_orchestrator(
        cls,
        settings: Settings,
        blob_store: BaseBlobStore | None = None,
        http_client: httpx.Client | None = None,
    ) -> ExtractionOrchestrator:
        catalog = cls.create_catalog(settings, http_client)
        return ExtractionOrchestrator(
            catalog,
            blob_store=blob_store,
            signed_url_expiry_seconds=settings.signed_url_expiry_seconds,
            max_document_bytes=settings.max_document_bytes,
        )

    @classmethod
    def create_catalog(
        cls,
        settings: Settings,
        http_client: httpx.Client | None = None,
    ) -> StrategyCatalog:
        client = http_client if http_client is not None else httpx.Client(follow_redirects=True)
        file_loader = FileLoader(http_client=client, max_bytes=settings.max_document_bytes)
        catalog = StrategyCatalog(
            plain_text=PlainTextAdapter(cls._plain_text_config(settings), file_loader),
            structured_parser=cls._create_structured_parser(settings, client),
            ocr=cls._create_ocr(settings, client),
            vision=cls._create_vision(settings, file_loader),
            native_pdf=cls._create_native_pdf(settings, file_loader),
        )
        Log.info(
            "Extraction strategies configured",
            structured_parser=catalog.structured_parser is not None,
            ocr=catalog.ocr is not None,
            vision=",".join(s.name for s in catalog.vision) or "none",
            native_pdf=settings.native_pdf_engine,
        )
        return catalog

    @classmethod
    def _create_structured_parser(
        cls, settings: Settings, client: httpx.Client
    ) -> BaseExtractionStrategy | None:
        if not settings.structured_parser_api_token:
            return None
        config = StrategyConfig(
            timeout_seconds=settings.structured_parser_timeout_seconds,
            max_attempts=settings.structured_parser_max_attempts,
            backoff_seconds=settings.structured_parser_backoff_seconds,
            min_result_length=settings.structured_parser_min_result_length,
        )
        return StructuredParserAdapter(
            config,
            api_token=settings.structured_parser_api_token,
            model=settings.structured_parser_model,
            base_url=settings.structured_parser_base_url,
            http_client=client,
        )

    @classmethod
    def _create_ocr(cls, settings: Settings, client: httpx.Client) -> BaseExtractionStrategy | None:
        if not settings.ocr_api_key:
            return None
        config = StrategyConfig(
            timeout_seconds=settings.ocr_timeout_seconds,
            max_attempts=settings.ocr_max_attempts,
            backoff_seconds=settings.ocr_backoff_seconds,
            min_result_length=settings.ocr_min_result_length,
        )
        return OcrAdapter(
            config,
            api_key=settings.ocr_api_key,
            base_url=settings.ocr_base_url,
            language=settings.ocr_language,
            http_client=client,
        )

    @classmethod
    def _create_vision(
        cls, settings: Settings, file_loader: FileLoader
    ) -> list[BaseExtractionStrategy]:
        config = StrategyConfig(
            timeout_seconds=settings.vision_timeout_seconds,
            max_attempts=settings.vision_max_attempts,
            backoff_seconds=settings.vision_backoff_seconds,
            min_result_length=settings.vision_min_result_length,
        )
        strategies: list[BaseExtractionStrategy] = []
        for provider in cls._vision_provider_names(settings):
            base_url = cls._resolve_base_url(provider, settings)
            api_key = cls._resolve_api_key(provider, settings)
            model = cls._resolve_model_name(provider, settings)
            if not api_key or not model:
                Log.warning(f"Vision provider '{provider}' is missing credentials, skipping")
                continue
            client = OpenAIClientAdapter(
                api_key=api_key,
                base_url=base_url,
            )
            strategies.append(
                VisionAdapter(
                    config,
                    provider=provider,
                    client=client,
                    model=model,
                    file_loader=file_loader,
                )
            )
        return strategies

    @classmethod
    def _create_native_pdf(
        cls, settings: Settings, file_loader: FileLoader
    ) -> BaseExtractionStrategy:
        engine = settings.native_pdf_engine.lower()
        adapter_cls = cls.NATIVE_PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.NATIVE_PDF_ADAPTERS)}"
            )
        config = StrategyConfig(
            timeout_seconds=settings.native_pdf_timeout_seconds,
            max_attempts=settings.native_pdf_max_attempts,
            min_result_length=settings.native_pdf_min_result_length,
        )
        return adapter_cls(config, file_loader)

    @staticmethod
    def _plain_text_config(settings: Settings) -> StrategyConfig:
        return StrategyConfig(
            timeout_seconds=settings.plain_text_timeout_seconds,
            max_attempts=settings.plain_text_max_attempts,
            min_result_length=settings.plain_text_min_result_length,
        )

    @staticmethod
    def _vision_provider_names(settings: Settings) -> list[str]:
        names = [p.strip().lower() for p in settings.vision_providers.split(",")]
        return [name for name in names if name]

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.vision_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "vision_openai_compatible_base_url is required for "
                    "vision provider openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = ["openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]
        raise ValueError(f"Unknown vision provider '{provider}'. Choose from: {supported}")

    @staticmethod
    def _resolve_api_key(provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.vision_openai_api_key,
            "openai_compatible": settings.vision_openai_compatible_api_key,
            "openrouter": settings.vision_openrouter_api_key,
            "groq": settings.vision_groq_api_key,
            "together": settings.vision_together_api_key,
        }
        return key_map.get(provider, "") or ""

    @staticmethod
    def _resolve_model_name(provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.vision_openai_model_name,
            "openai_compatible": settings.vision_openai_compatible_model_name,
            "openrouter": settings.vision_openrouter_model_name,
            "groq": settings.vision_groq_model_name,
            "together": settings.vision_together_model_name,
        }
        return key_map.get(provider, "") or ""
