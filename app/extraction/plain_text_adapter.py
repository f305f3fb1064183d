from typing import ClassVar

from app.extraction.base import BaseExtractionStrategy
from app.extraction.file_loader import FileLoader
from app.extraction.models import CAPABILITY_TEXT, ExtractionSource, StrategyConfig


class PlainTextAdapter(BaseExtractionStrategy):
    """Reads files whose declared type is already text."""

    capability_class: ClassVar[str] = CAPABILITY_TEXT

    def __init__(self, config: StrategyConfig, file_loader: FileLoader) -> None:
        super().__init__(config)
        self._file_loader = file_loader

    @property
    def name(self) -> str:
        return "plain_text"

    def invoke(self, source: ExtractionSource, *, timeout_seconds: float) -> object:
        raw = self._file_loader.load(source.url, timeout_seconds=timeout_seconds)
        return raw.decode("utf-8-sig", errors="replace")
