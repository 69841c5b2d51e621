"""
Domain errors raised by the service layer.

Routers never translate these themselves; ``flavorhub.main`` registers a
single handler that maps each class to its HTTP status code.
"""


class FlavorHubError(Exception):
    """Base class for domain errors."""

    status_code = 400


class NotFoundError(FlavorHubError):
    """A referenced row does not exist."""

    status_code = 404


class AuthenticationError(FlavorHubError):
    """Credentials or token could not be verified."""

    status_code = 401


class PermissionDeniedError(FlavorHubError):
    """The acting user does not own the row or lacks the required role."""

    status_code = 403


class ConflictError(FlavorHubError):
    """The write would violate a uniqueness or referential rule."""

    status_code = 409


class InvalidStateError(FlavorHubError):
    """The requested status transition is not allowed from the current status."""

    status_code = 409
