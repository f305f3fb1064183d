from abc import ABC, abstractmethod


class BaseBlobStore(ABC):
    """Contract for the file blob store."""

    @abstractmethod
    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``path`` and return a retrievable URL.

        Raises:
            BlobStoreError: if the upload fails.
        """

    @abstractmethod
    def create_signed_url(self, path: str, *, expires_in: int) -> str:
        """Issue a time-limited URL for the object at ``path``.

        Raises:
            BlobStoreError: if signing fails.
        """
