import pytest

from app.extraction.classification import classify, is_allowed, normalize_mime_type
from app.extraction.exceptions import UnsupportedFileTypeError


class TestNormalizeMimeType:
    def test_drops_parameters_and_case(self) -> None:
        assert normalize_mime_type("Text/Plain; charset=utf-8") == "text/plain"


class TestIsAllowed:
    @pytest.mark.parametrize(
        "mime_type",
        [
            "application/pdf",
            "image/png",
            "text/markdown",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ],
    )
    def test_allowed_types(self, mime_type: str) -> None:
        assert is_allowed(mime_type)

    @pytest.mark.parametrize("mime_type", ["application/zip", "video/mp4", ""])
    def test_disallowed_types(self, mime_type: str) -> None:
        assert not is_allowed(mime_type)


class TestClassify:
    def test_pdf(self) -> None:
        result = classify("application/pdf", 1024)
        assert result.is_pdf
        assert not result.is_plain_text
        assert result.byte_size == 1024

    def test_image(self) -> None:
        assert classify("image/jpeg").is_image

    def test_plain_text(self) -> None:
        result = classify("text/plain; charset=utf-8")
        assert result.is_plain_text
        assert result.mime_type == "text/plain"

    def test_office(self) -> None:
        assert classify("application/msword").is_office

    def test_rejects_unsupported_type(self) -> None:
        with pytest.raises(UnsupportedFileTypeError, match="application/zip"):
            classify("application/zip")

    def test_rejects_oversize_file(self) -> None:
        with pytest.raises(UnsupportedFileTypeError, match="too large"):
            classify("application/pdf", byte_size=200, max_bytes=100)

    def test_unknown_size_is_accepted(self) -> None:
        assert classify("application/pdf", byte_size=None, max_bytes=100).is_pdf
