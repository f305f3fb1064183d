class BlobStoreError(Exception):
    """Raised when the blob store rejects or fails an operation."""
