"""Tests for domain error classes."""

import pytest

from ifrs16_lite.domain.errors import (
    DomainError,
    InvalidModificationError,
    InvalidScheduleError,
    InvalidTermError,
    ValidationError,
)


class TestDomainError:
    """Tests for base DomainError class."""

    def test_creates_error_with_message(self) -> None:
        """DomainError stores message and has correct error code."""
        error = DomainError("Something went wrong")

        assert error.message == "Something went wrong"
        assert error.error_code == "DOMAIN_ERROR"
        assert error.context == {}

    def test_creates_error_with_context(self) -> None:
        """DomainError stores additional context."""
        error = DomainError("Error occurred", lease_term_months=0, payment_frequency="monthly")

        assert error.message == "Error occurred"
        assert error.context == {"lease_term_months": 0, "payment_frequency": "monthly"}

    def test_to_dict_returns_structured_format(self) -> None:
        """DomainError.to_dict() returns structured error format."""
        error = DomainError("Test error", field="test", value=123)

        result = error.to_dict()

        assert result == {
            "message": "Test error",
            "code": "DOMAIN_ERROR",
            "field": "test",
            "value": 123,
        }

    def test_str_representation(self) -> None:
        """DomainError string representation is the message."""
        error = DomainError("Test message")

        assert str(error) == "Test message"


class TestValidationError:
    """Tests for ValidationError class."""

    def test_creates_simple_validation_error(self) -> None:
        """ValidationError can be created with just a message."""
        error = ValidationError("Invalid input")

        assert error.message == "Invalid input"
        assert error.error_code == "VALIDATION_ERROR"
        assert error.errors is None

    def test_creates_validation_error_with_default_message(self) -> None:
        """ValidationError uses default message if none provided."""
        error = ValidationError()

        assert error.message == "Validation error"
        assert error.errors is None

    def test_creates_validation_error_with_field_errors(self) -> None:
        """ValidationError can store multiple field-level errors."""
        errors = [
            {"field": "payment_amount", "message": "Must be a valid decimal: x"},
            {"field": "discount_rate_annual", "message": "Must be a valid decimal: y"},
        ]

        error = ValidationError(errors=errors)

        assert error.message == "Validation failed"
        assert error.errors == errors

    def test_to_dict_includes_field_errors(self) -> None:
        """ValidationError.to_dict() includes field errors if present."""
        errors = [{"field": "terms.payment_amount", "message": "Must be a valid decimal: x"}]

        error = ValidationError(errors=errors)

        assert error.to_dict() == {
            "message": "Validation failed",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }

    def test_to_dict_without_field_errors(self) -> None:
        """ValidationError.to_dict() works without field errors."""
        error = ValidationError("Simple error")

        assert error.to_dict() == {"message": "Simple error", "code": "VALIDATION_ERROR"}


class TestCalculationErrors:
    """Error codes of the calculation errors."""

    @pytest.mark.parametrize(
        ("error_class", "code"),
        [
            (InvalidTermError, "INVALID_TERM"),
            (InvalidScheduleError, "INVALID_SCHEDULE"),
            (InvalidModificationError, "INVALID_MODIFICATION"),
        ],
    )
    def test_error_code(self, error_class: type[DomainError], code: str) -> None:
        error = error_class("boom")

        assert error.error_code == code
        assert error.to_dict() == {"message": "boom", "code": code}

    def test_calculation_errors_are_domain_errors(self) -> None:
        """All calculation errors can be caught as DomainError."""
        with pytest.raises(DomainError):
            raise InvalidModificationError("Contract has already been terminated")

    def test_context_is_carried_into_dict(self) -> None:
        error = InvalidTermError("not divisible", lease_term_months=10, payment_frequency="quarterly")

        assert error.to_dict()["lease_term_months"] == 10
        assert error.to_dict()["payment_frequency"] == "quarterly"
