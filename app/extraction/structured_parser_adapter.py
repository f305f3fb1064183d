"""Structured document parsing through a hosted prediction API.

The parser takes a document URL and returns layout-aware markdown, which
handles pages that mix text, tables, and images better than plain OCR.
"""

import time
from collections.abc import Callable
from typing import Any, ClassVar

import httpx

from app.extraction.base import BaseExtractionStrategy
from app.extraction.exceptions import StrategyError, StrategyTimeoutError
from app.extraction.http_support import send_json
from app.extraction.models import ExtractionSource, StrategyConfig


class StructuredParserAdapter(BaseExtractionStrategy):
    """Runs a document-parsing model as a prediction and waits for its output."""

    TERMINAL_STATUSES: ClassVar[frozenset[str]] = frozenset(
        {"succeeded", "failed", "canceled"}
    )
    OUTPUT_FORMAT = "markdown_content"

    def __init__(
        self,
        config: StrategyConfig,
        *,
        api_token: str,
        model: str,
        base_url: str,
        http_client: httpx.Client | None = None,
        poll_interval_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(config)
        self._api_token = api_token
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._client = http_client if http_client is not None else httpx.Client()
        self._poll_interval = poll_interval_seconds
        self._sleep = sleep

    @property
    def name(self) -> str:
        return "structured_parser"

    def invoke(self, source: ExtractionSource, *, timeout_seconds: float) -> object:
        deadline = time.monotonic() + timeout_seconds
        prediction = self._create_prediction(source, timeout_seconds)

        while prediction.get("status") not in self.TERMINAL_STATUSES:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise StrategyTimeoutError(
                    f"Prediction {prediction.get('id')} still "
                    f"{prediction.get('status')} at deadline"
                )
            self._sleep(min(self._poll_interval, remaining))
            prediction = self._fetch_prediction(prediction, deadline - time.monotonic())

        status = prediction.get("status")
        if status != "succeeded":
            raise StrategyError(
                f"Prediction {status}: {prediction.get('error') or 'no error detail'}"
            )
        return prediction.get("output")

    def _create_prediction(
        self, source: ExtractionSource, timeout_seconds: float
    ) -> dict[str, Any]:
        model_path, _, version = self._model.partition(":")
        payload: dict[str, Any] = {
            "input": {"file": source.url, "output_format": self.OUTPUT_FORMAT},
        }
        if version:
            url = f"{self._base_url}/predictions"
            payload["version"] = version
        else:
            url = f"{self._base_url}/models/{model_path}/predictions"

        wait_seconds = max(1, min(60, int(timeout_seconds)))
        body = send_json(
            self._client,
            "POST",
            url,
            timeout_seconds=timeout_seconds,
            service="structured parser",
            json=payload,
            headers={**self._headers(), "Prefer": f"wait={wait_seconds}"},
        )
        return self._as_prediction(body)

    def _fetch_prediction(
        self, prediction: dict[str, Any], timeout_seconds: float
    ) -> dict[str, Any]:
        urls = prediction.get("urls") or {}
        poll_url = urls.get("get") or f"{self._base_url}/predictions/{prediction.get('id')}"
        body = send_json(
            self._client,
            "GET",
            poll_url,
            timeout_seconds=max(timeout_seconds, 0.001),
            service="structured parser",
            headers=self._headers(),
        )
        return self._as_prediction(body)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_token}"}

    @staticmethod
    def _as_prediction(body: Any) -> dict[str, Any]:
        if not isinstance(body, dict):
            raise StrategyError("structured parser returned a non-object prediction")
        return body
