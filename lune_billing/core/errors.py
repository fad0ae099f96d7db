"""Error taxonomy shared by the storage, service and HTTP layers."""


class LuneBillingError(Exception):
    """Base exception for the billing service.

    Each subclass carries the HTTP status and title it is rendered with, so
    the API layer maps errors without inspecting messages.
    """

    status_code: int = 500
    title: str = "Internal Server Error"
    retryable: bool = False

    @property
    def public_message(self) -> str:
        return str(self)


class InvalidArgumentError(LuneBillingError):
    """Bad month, year or request shape."""

    status_code = 400
    title = "Invalid Argument"


class NotFoundError(LuneBillingError):
    """Office, machine or invoice is absent (or soft-deleted)."""

    status_code = 404
    title = "Not Found"

    def __init__(self, entity_type: str, entity_id):
        super().__init__(f"{entity_type} {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConflictError(LuneBillingError):
    """Duplicate invoice for a period, or a duplicate unique field."""

    status_code = 409
    title = "Conflict"


class InvalidStateError(LuneBillingError):
    """The operation cannot proceed in the current state, e.g. nothing to bill."""

    status_code = 422
    title = "Invalid State"


class DependencyError(LuneBillingError):
    """Storage read or write failure. Safe to retry with backoff."""

    status_code = 503
    title = "Service Unavailable"
    retryable = True

    @property
    def public_message(self) -> str:
        return "A storage dependency is unavailable, please retry later"
