import io

import pdfplumber

from app.extraction.base import BaseExtractionStrategy
from app.extraction.exceptions import StrategyError
from app.extraction.file_loader import FileLoader
from app.extraction.models import ExtractionSource, StrategyConfig


class PdfPlumberAdapter(BaseExtractionStrategy):
    """Reads the embedded text layer of a PDF with pdfplumber."""

    def __init__(self, config: StrategyConfig, file_loader: FileLoader) -> None:
        super().__init__(config)
        self._file_loader = file_loader

    @property
    def name(self) -> str:
        return "native_pdf"

    def invoke(self, source: ExtractionSource, *, timeout_seconds: float) -> object:
        pdf_bytes = self._file_loader.load(source.url, timeout_seconds=timeout_seconds)
        return self.extract_text(pdf_bytes)

    def extract_text(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise StrategyError(f"pdfplumber extraction failed: {exc}") from exc
