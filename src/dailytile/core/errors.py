"""Exception hierarchy for dailytile."""


class DailyTileError(Exception):
    """Base class for every error raised by dailytile."""


class NotFound(DailyTileError):
    """A folder or document is absent; callers treat it as nothing to sync."""


class FolderNotFound(NotFound):
    pass


class NoNoteFound(NotFound):
    pass


class RenderError(DailyTileError):
    """A rewrite rule failed on pathological input."""

    def __init__(self, rule: str, cause: BaseException):
        super().__init__(f"rule {rule!r} failed: {cause}")
        self.rule = rule
        self.cause = cause


class TransportFailure(DailyTileError):
    """A send did not complete."""


class StorageError(DailyTileError):
    """Durable state could not be read or written."""


class MalformedRecord(DailyTileError, ValueError):
    """An incoming transport record has missing or mistyped fields."""
