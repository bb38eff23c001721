"""Domain errors.

Every error carries a stable, human-readable message. Presentation layers map
the classes, not the messages, to status codes.
"""


class OdfMonitorError(Exception):
    """Base class for all odf-monitor errors."""


class DocumentNotFoundError(OdfMonitorError):
    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(f"Document {document_id} not found")


class BadRequestError(OdfMonitorError):
    """Caller input is invalid and must be corrected."""


class DisciplineNotFoundError(BadRequestError):
    def __init__(self, discipline: str) -> None:
        self.discipline = discipline
        super().__init__(f"{discipline} not found")


class DocumentValidationError(BadRequestError):
    """A document is not acceptable for the requested operation."""


class ContentParseError(OdfMonitorError):
    def __init__(self, kind: str, cause: str) -> None:
        self.kind = kind
        self.cause = cause
        super().__init__(f"Failed to parse {kind.upper()}: {cause}")


class UpstreamUnavailableError(OdfMonitorError):
    """A backing store or remote service could not be reached."""
