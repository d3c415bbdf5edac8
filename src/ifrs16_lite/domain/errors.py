"""Domain error classes.

Protocol-agnostic errors that represent lease-accounting failures.
These errors are translated to HTTP responses by the entrypoint adapters.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Protocol-agnostic. Contains business error information that
    can be translated to HTTP or any other transport format.
    """

    # Default error code (can be used as i18n key)
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """Create a domain error.

        Args:
            message: Human-readable error message (default locale)
            **context: Additional context for error (e.g., field names, values)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Field-level validation error raised at the adapter boundary.

    Used when incoming values cannot be turned into domain objects
    (e.g., a monetary string that is not a decimal).

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: List of field-specific errors, each with 'field' and 'message'
                   Example: [{"field": "payment_amount", "message": "Must be a valid decimal"}]
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format."""
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class InvalidTermError(DomainError):
    """Contract terms cannot be measured.

    Examples:
        - Non-positive lease term
        - Term not divisible by the payment frequency (e.g., 10 months quarterly)
        - Negative payment, rate or optional amount
        - End date not after start date

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "INVALID_TERM"


class InvalidScheduleError(DomainError):
    """Schedule builder received a zero/negative period count or a negative payment.

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "INVALID_SCHEDULE"


class InvalidModificationError(DomainError):
    """A modification produces a nonsensical contract or lacks its payload.

    Examples:
        - Term reduction leaving zero or negative months
        - Payment or rate change resulting in a negative value
        - Payment change without any of the three payload fields
        - Modification applied after the contract was terminated

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "INVALID_MODIFICATION"
