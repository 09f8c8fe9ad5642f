"""
Domain errors raised by the service layer.

Handlers registered in `journaloo.main` translate these into HTTP responses.
"""


class JournalooError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class NotFoundError(JournalooError):
    """A row or stored object does not exist (or is not visible to the caller)."""


class DuplicateError(JournalooError):
    """A unique username/email is already taken."""


class JourneyClosedError(JournalooError):
    """The journey has ended or was archived and no longer accepts entries."""


class StorageError(JournalooError):
    """The object store failed for a reason other than a missing key."""


class ImageNotFoundError(NotFoundError):
    """No image is stored for the entry."""


class MailDeliveryError(JournalooError):
    """The email provider rejected the message or could not be reached."""
