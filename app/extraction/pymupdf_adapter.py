import pymupdf

from app.extraction.base import BaseExtractionStrategy
from app.extraction.exceptions import StrategyError
from app.extraction.file_loader import FileLoader
from app.extraction.models import ExtractionSource, StrategyConfig


class PyMuPdfAdapter(BaseExtractionStrategy):
    """Reads the embedded text layer of a PDF with PyMuPDF."""

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
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise StrategyError(f"pymupdf extraction failed: {exc}") from exc
