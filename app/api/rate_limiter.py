from abc import ABC, abstractmethod

from limits import parse, storage, strategies


class RateLimitExceededError(Exception):
    """Raised when a caller exceeds its request budget."""


class BaseRateLimiter(ABC):
    """Contract for per-caller request limiting."""

    @abstractmethod
    def allow(self, key: str) -> bool:
        """Consume one request for ``key``; False when over budget."""


class MovingWindowRateLimiter(BaseRateLimiter):
    """Per-caller moving-window limit backed by a ``limits`` storage.

    ``storage_uri`` selects the backend: ``memory://`` keeps counters in
    this process, ``redis://...`` shares them between instances.
    """

    NAMESPACE = "knowledge-api"

    def __init__(self, requests_per_minute: int, storage_uri: str = "memory://") -> None:
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1")
        self._item = parse(f"{requests_per_minute}/minute")
        self._limiter = strategies.MovingWindowRateLimiter(
            storage.storage_from_string(storage_uri)
        )

    def allow(self, key: str) -> bool:
        return self._limiter.hit(self._item, self.NAMESPACE, key)
