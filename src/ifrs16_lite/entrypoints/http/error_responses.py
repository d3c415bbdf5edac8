"""REST API error response models.

Documents the error body produced by the exception handlers so it shows up
in the OpenAPI schema of every lease route.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Field-level problem inside a validation error."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "terms.payment_amount",
                "message": "Must be a valid decimal: abc",
                "code": "INVALID_DECIMAL",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error response format.

    Supports:
    - Business-rule errors (detail and code, e.g. INVALID_TERM)
    - Multi-field validation errors (detail + errors array)

    Examples:
        Business-rule error:
            {
                "detail": "lease_term_months (10) is not a whole number of quarterly periods",
                "code": "INVALID_TERM"
            }

        Validation error with multiple fields:
            {
                "detail": "Validation failed",
                "code": "VALIDATION_ERROR",
                "errors": [
                    {
                        "field": "payment_amount",
                        "message": "Must be a valid decimal: abc",
                        "code": "INVALID_DECIMAL"
                    }
                ]
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "detail": "termination requires termination_date",
                    "code": "INVALID_MODIFICATION",
                },
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "payment_amount",
                            "message": "Must be a valid decimal: abc",
                            "code": "INVALID_DECIMAL",
                        },
                        {
                            "field": "modifications.0.modification_fee",
                            "message": "Must be a valid decimal: -",
                            "code": "INVALID_DECIMAL",
                        },
                    ],
                },
            ]
        }
    )


ERROR_RESPONSES: dict[int | str, dict] = {
    422: {"model": ErrorResponse, "description": "Validation or business-rule error"},
}
