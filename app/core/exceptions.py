"""Domain errors for matching and connections.

Each error carries a ``kind`` (surfaced to API clients) and the HTTP status
the exception handler in ``app.main`` responds with.
"""


class MatchingError(Exception):
    """Base class for failures returned to the caller as structured errors."""

    kind: str = "MatchingError"
    status_code: int = 400


class InvalidTarget(MatchingError):
    """A user targeted themselves, or is not a participant of a connection."""

    kind = "InvalidTarget"
    status_code = 400


class DuplicateRequest(MatchingError):
    """A connection request already exists for the ordered pair."""

    kind = "DuplicateRequest"
    status_code = 409


class NotFound(MatchingError):
    kind = "NotFound"
    status_code = 404


class InvalidState(MatchingError):
    """The connection is not in the status the operation requires."""

    kind = "InvalidState"
    status_code = 409
