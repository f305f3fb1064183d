"""Normalizes raw strategy output and screens it before it is accepted."""

import json
from typing import Any

from app.extraction.exceptions import ResultValidationError

DEFAULT_MIN_RESULT_LENGTH = 5


def validate_result(raw: Any, min_length: int = DEFAULT_MIN_RESULT_LENGTH) -> str:
    """Coerce a raw result to text, tidy it, and enforce the minimum length.

    Lists are joined without a separator, mappings are serialized as JSON,
    strings pass through. Trailing whitespace and leading blank lines are
    dropped; everything in between is kept as extracted.

    Raises:
        ResultValidationError: if the result is missing, of an unusable type,
            or shorter than ``min_length`` after normalization.
    """
    text = _coerce_to_text(raw)
    normalized = _tidy(text)
    if len(normalized) < min_length:
        raise ResultValidationError(
            f"Extracted text too short: {len(normalized)} chars (min {min_length})"
        )
    return normalized


def _coerce_to_text(raw: Any) -> str:
    if raw is None:
        raise ResultValidationError("Strategy returned no result")
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    if isinstance(raw, (list, tuple)):
        return "".join("" if item is None else str(item) for item in raw)
    if isinstance(raw, dict):
        try:
            return json.dumps(raw, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise ResultValidationError(f"Result object is not serializable: {exc}") from exc
    raise ResultValidationError(f"Unexpected result type: {type(raw).__name__}")


def _tidy(text: str) -> str:
    lines = text.rstrip().split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    return "\n".join(lines)
