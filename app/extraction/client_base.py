from abc import ABC, abstractmethod


class BaseVisionClient(ABC):
    """Contract for provider-specific multimodal AI clients."""

    @abstractmethod
    def create_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        content: list[dict[str, object]],
        timeout_seconds: float,
    ) -> str:
        """Return the provider's reply to one user message as plain text."""
