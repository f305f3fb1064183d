from typing import Any

import httpx

from app.extraction.base import BaseExtractionStrategy
from app.extraction.exceptions import StrategyError
from app.extraction.http_support import send_json
from app.extraction.models import ExtractionSource, StrategyConfig


class OcrAdapter(BaseExtractionStrategy):
    """OCR for scanned and low-quality documents via the OCR.space API."""

    def __init__(
        self,
        config: StrategyConfig,
        *,
        api_key: str,
        base_url: str,
        language: str = "eng",
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(config)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._language = language
        self._client = http_client if http_client is not None else httpx.Client()

    @property
    def name(self) -> str:
        return "ocr"

    def invoke(self, source: ExtractionSource, *, timeout_seconds: float) -> object:
        form = {
            "url": source.url,
            "language": self._language,
            "isOverlayRequired": "false",
            "scale": "true",
            "OCREngine": "2",
        }
        if source.mime_type == "application/pdf":
            form["filetype"] = "PDF"

        body = send_json(
            self._client,
            "POST",
            f"{self._base_url}/parse/image",
            timeout_seconds=timeout_seconds,
            service="OCR",
            data=form,
            headers={"apikey": self._api_key},
        )
        return self._parse_response(body)

    @staticmethod
    def _parse_response(body: Any) -> str:
        if not isinstance(body, dict):
            raise StrategyError("OCR returned a non-object response")
        if body.get("IsErroredOnProcessing"):
            message = body.get("ErrorMessage") or "OCR processing failed"
            if isinstance(message, list):
                message = "; ".join(str(m) for m in message)
            raise StrategyError(f"OCR error: {message}")

        results = body.get("ParsedResults") or []
        if not results:
            raise StrategyError("OCR returned no parsed results")
        return "\n".join(str(page.get("ParsedText") or "") for page in results)
