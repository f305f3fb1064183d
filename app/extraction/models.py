from dataclasses import dataclass

CAPABILITY_DOCUMENT = "document"
CAPABILITY_TEXT = "text"


@dataclass(frozen=True)
class StrategyConfig:
    """Timeout, retry and quality budget for one extraction strategy."""

    timeout_seconds: float
    max_attempts: int = 1
    backoff_seconds: float = 0.0
    min_result_length: int = 5


@dataclass(frozen=True)
class StrategyDescriptor:
    """Runtime description of one candidate strategy for a request."""

    name: str
    capability_class: str
    timeout_seconds: float
    max_attempts: int


@dataclass(frozen=True)
class ExtractionSource:
    """An accessible document handed to every strategy of one request."""

    url: str
    mime_type: str
    file_name: str
    byte_size: int | None = None


@dataclass(frozen=True)
class DocumentClassification:
    """File-type facts that decide which strategy list applies."""

    mime_type: str
    byte_size: int | None
    is_pdf: bool = False
    is_image: bool = False
    is_plain_text: bool = False
    is_office: bool = False


@dataclass(frozen=True)
class ExtractionOutcome:
    """Validated text and the strategy that produced it."""

    text: str
    strategy_name: str

    @property
    def text_length(self) -> int:
        return len(self.text)
