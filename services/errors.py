"""Errors raised by the record and image stores."""


class ScanDeskError(Exception):
    """Base class for scan desk errors."""


class ValidationError(ScanDeskError):
    """A required field is missing or a payload is malformed."""


class NotFoundError(ScanDeskError):
    """The referenced customer does not exist."""


class StorageIOError(ScanDeskError):
    """Writing or removing an image file failed."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path
