class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""


class ProjectNotFoundError(ProcessorError):
    """Raised when a project cannot be found in the database."""


class PersistenceError(ProcessorError):
    """Raised when an extraction outcome cannot be written to the database."""


class DocumentBusyError(ProcessorError):
    """Raised when another run already holds the document in processing."""
