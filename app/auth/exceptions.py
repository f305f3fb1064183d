class AuthError(Exception):
    """Raised when a bearer credential is missing or rejected."""
