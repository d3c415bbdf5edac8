"""Tests for REST error response models."""

from ifrs16_lite.entrypoints.http.error_responses import (
    ERROR_RESPONSES,
    ErrorDetail,
    ErrorResponse,
)


class TestErrorDetail:
    """Tests for ErrorDetail model."""

    def test_creates_error_detail_with_all_fields(self) -> None:
        detail = ErrorDetail(
            field="terms.payment_amount",
            message="Must be a valid decimal: abc",
            code="INVALID_DECIMAL",
        )

        assert detail.field == "terms.payment_amount"
        assert detail.message == "Must be a valid decimal: abc"
        assert detail.code == "INVALID_DECIMAL"

    def test_serializes_to_dict_without_code(self) -> None:
        """ErrorDetail serializes without code field when None."""
        detail = ErrorDetail(field="lease_term_months", message="Field required")

        assert detail.model_dump() == {
            "field": "lease_term_months",
            "message": "Field required",
            "code": None,
        }


class TestErrorResponse:
    """Tests for ErrorResponse model."""

    def test_creates_simple_error_response(self) -> None:
        response = ErrorResponse(detail="termination requires termination_date", code="INVALID_MODIFICATION")

        assert response.detail == "termination requires termination_date"
        assert response.code == "INVALID_MODIFICATION"
        assert response.errors is None

    def test_creates_error_response_with_field_errors(self) -> None:
        errors = [
            ErrorDetail(field="payment_amount", message="Must be a valid decimal: x"),
            ErrorDetail(field="discount_rate_annual", message="Must be a valid decimal: y"),
        ]

        response = ErrorResponse(detail="Validation failed", code="VALIDATION_ERROR", errors=errors)

        assert response.errors == errors

    def test_serializes_to_json(self) -> None:
        response = ErrorResponse(detail="lease_term_months must be > 0", code="INVALID_TERM")

        json_str = response.model_dump_json()

        assert '"detail":"lease_term_months must be > 0"' in json_str
        assert '"code":"INVALID_TERM"' in json_str

    def test_schema_includes_examples(self) -> None:
        schema = ErrorResponse.model_json_schema()

        assert "examples" in schema
        assert schema["examples"][0]["code"] == "INVALID_MODIFICATION"


def test_route_error_responses_document_422() -> None:
    assert ERROR_RESPONSES[422]["model"] is ErrorResponse
