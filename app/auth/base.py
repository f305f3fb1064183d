from abc import ABC, abstractmethod


class BaseAuthVerifier(ABC):
    """Contract for bearer credential verification."""

    @abstractmethod
    def verify(self, token: str) -> str:
        """Return the user id the token belongs to.

        Raises:
            AuthError: if the token is empty, invalid, or expired.
        """
