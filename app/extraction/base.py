from abc import ABC, abstractmethod
from typing import ClassVar

from app.extraction.models import (
    CAPABILITY_DOCUMENT,
    ExtractionSource,
    StrategyConfig,
    StrategyDescriptor,
)


class BaseExtractionStrategy(ABC):
    """Contract for all extraction strategy adapters."""

    capability_class: ClassVar[str] = CAPABILITY_DOCUMENT

    def __init__(self, config: StrategyConfig) -> None:
        self._config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier recorded as the extraction method."""

    @property
    def config(self) -> StrategyConfig:
        return self._config

    def describe(self) -> StrategyDescriptor:
        return StrategyDescriptor(
            name=self.name,
            capability_class=self.capability_class,
            timeout_seconds=self._config.timeout_seconds,
            max_attempts=self._config.max_attempts,
        )

    @abstractmethod
    def invoke(self, source: ExtractionSource, *, timeout_seconds: float) -> object:
        """Extract raw text content from an accessible document.

        Args:
            source: Document URL and type information.
            timeout_seconds: Deadline for this attempt; passed on to remote calls.

        Returns:
            Raw result (string, list, or mapping); normalized by the validator.

        Raises:
            StrategyError: if the attempt fails for any reason.
        """
