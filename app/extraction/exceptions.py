class ExtractionError(Exception):
    """Base exception for all extraction-related errors."""


class StrategyError(ExtractionError):
    """Raised when a single strategy attempt fails (network, non-2xx, bad output)."""


class StrategyTimeoutError(StrategyError):
    """Raised when a strategy attempt exceeds its deadline."""


class ResultValidationError(StrategyError):
    """Raised when a strategy result fails normalization or length screening."""


class UnsupportedFileTypeError(ExtractionError):
    """Raised before any strategy runs when the file cannot be extracted."""


class ExtractionExhaustedError(ExtractionError):
    """Raised when every strategy and attempt failed for a document."""

    def __init__(self, last_strategy: str | None, last_error: str) -> None:
        self.last_strategy = last_strategy
        self.last_error = last_error
        if last_strategy is None:
            message = f"All extraction strategies failed: {last_error}"
        else:
            message = (
                f"All extraction strategies failed. "
                f"Last strategy '{last_strategy}': {last_error}"
            )
        super().__init__(message)
