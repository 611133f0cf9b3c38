"""Error taxonomy raised by the services and rendered by the HTTP layer."""
from typing import Dict


class TravelError(Exception):
    """Base class for request-level failures.

    Each subclass carries the HTTP status the route layer answers with; the
    message is returned to the client verbatim as ``{"error": message}``.
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {'error': self.message}


class ValidationError(TravelError):
    """Missing or malformed input."""
    status_code = 400


class AuthError(TravelError):
    """Not logged in, or credentials did not match."""
    status_code = 401


class ConflictError(TravelError):
    """The request clashes with stored state (e.g. duplicate user)."""
    status_code = 409


class LimitReachedError(ConflictError):
    """A per-user or per-city cap is already full."""
    status_code = 400


class NotFoundError(TravelError):
    status_code = 404
