"""
Domain errors raised by the core service layer.

Every error carries a user-facing ``detail`` message and the HTTP status the
router maps it to. Precondition failures use the 4xx range; storage failures
use 503 so that clients know a retry may succeed.
"""


class LinkMeError(Exception):
    """Base class for all errors surfaced to the transport layer."""

    status_code = 500
    default_detail = "Unexpected error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(LinkMeError):
    """Missing or malformed input."""

    status_code = 400
    default_detail = "Invalid input"


class NotFound(LinkMeError):
    """A referenced entity does not exist."""

    status_code = 404
    default_detail = "Not found"


class InvalidTransition(LinkMeError):
    """A help-request state machine precondition was violated."""

    status_code = 409
    default_detail = "This action is not allowed in the request's current state"


class DuplicateRating(LinkMeError):
    """The rater already rated this help request."""

    status_code = 409
    default_detail = "Already rated this request"


class DuplicateIdentity(LinkMeError):
    """Email or national identity hash already registered."""

    status_code = 409
    default_detail = "Account already registered"


class InvalidCredentials(LinkMeError):
    """Login with an unknown email or a wrong password."""

    status_code = 401
    default_detail = "Invalid credentials"


class PersistenceError(LinkMeError):
    """The storage layer failed; the caller may retry."""

    status_code = 503
    default_detail = "Storage is temporarily unavailable, please retry"
