import io

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


def _render_pdf(pages: list[list[str]]) -> bytes:
    """Render one PDF page per entry, drawing each line of text down the page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    for lines in pages:
        y = 760
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """A single-page PDF with an embedded text layer."""
    return _render_pdf([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    return _render_pdf([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """A valid PDF without a text layer, as a scanned document would arrive."""
    return _render_pdf([[]])
