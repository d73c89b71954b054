"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly and display
user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ExternalServiceError(DomainException):
    """A collaborator (supplier panel, payment gateway) failed or timed out.

    Always recoverable: the caller surfaces it as a retryable state.
    """


class PaymentError(ExternalServiceError):
    """Creating a Pix charge failed."""


class PlacementError(ExternalServiceError):
    """Placing an order line with the supplier failed."""
