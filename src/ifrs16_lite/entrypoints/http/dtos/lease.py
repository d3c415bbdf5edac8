from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


MONEY_PATTERN = r"^\d+(\.\d{1,2})?$"
RATE_PATTERN = r"^\d+(\.\d+)?$"


class VariablePaymentDTO(BaseModel):
    """A dated payment outside the periodic stream."""

    payment_date: date = Field(examples=["2025-01-01"])
    amount: str = Field(examples=["5000.00"], pattern=MONEY_PATTERN)
    description: str = ""


class LeaseTermsDTO(BaseModel):
    """Contract terms used as calculation input."""

    lease_start_date: date = Field(description="Lease commencement date", examples=["2024-01-01"])
    lease_end_date: date = Field(description="Lease end date", examples=["2026-12-31"])
    lease_term_months: int = Field(
        description="Lease term in months; drives the schedule length",
        examples=[36],
        ge=1,
    )
    payment_amount: str = Field(
        description="Payment per period as decimal string",
        examples=["1000.00"],
        pattern=MONEY_PATTERN,
    )
    payment_frequency: Literal["monthly", "quarterly", "semiannual", "semi-annual", "annual"] = (
        Field(default="monthly", description="Payment frequency")
    )
    payment_timing: Literal["beginning", "end"] = Field(
        default="end", description="Payments at the beginning (due) or end (ordinary) of a period"
    )
    discount_rate_annual: str = Field(
        description="Annual discount rate in percent as decimal string (e.g., '8.5' = 8.5%)",
        examples=["8.5"],
        pattern=RATE_PATTERN,
    )
    initial_payment: str = Field(default="0", pattern=MONEY_PATTERN)
    guaranteed_residual_value: str = Field(default="0", pattern=MONEY_PATTERN)
    initial_direct_costs: str = Field(default="0", pattern=MONEY_PATTERN)
    lease_incentives: str = Field(default="0", pattern=MONEY_PATTERN)
    currency_code: str = Field(default="BRL", min_length=3, max_length=3)
    asset_fair_value: str | None = Field(default=None, pattern=MONEY_PATTERN)
    purchase_option_reasonably_certain: bool = False
    variable_payments: list[VariablePaymentDTO] = Field(
        default_factory=list,
        description="Dated payments discounted into the liability when inside the term",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "lease_start_date": "2024-01-01",
                "lease_end_date": "2026-12-31",
                "lease_term_months": 36,
                "payment_amount": "1000.00",
                "payment_frequency": "monthly",
                "payment_timing": "end",
                "discount_rate_annual": "8.5",
            }
        }
    )


class AmortizationPeriodDTO(BaseModel):
    period: int
    payment_date: date | None
    payment: str
    beginning_liability: str
    interest_expense: str
    principal_payment: str
    ending_liability: str
    beginning_asset: str
    amortization: str
    ending_asset: str


class LeaseMeasurementResponseDTO(BaseModel):
    """Measurement of a contract with its full amortization schedule."""

    lease_liability_initial: str = Field(examples=["31824.69"])
    right_of_use_asset_initial: str = Field(examples=["31824.69"])
    number_of_periods: int = Field(examples=[36])
    monthly_interest_expense: str
    monthly_principal_payment: str
    monthly_amortization: str
    total_interest_expense: str
    total_principal_payments: str
    total_lease_payments: str
    effective_interest_rate_annual: str = Field(examples=["8.500000"])
    effective_interest_rate_monthly: str = Field(examples=["0.682149"])
    amortization_schedule: list[AmortizationPeriodDTO]


class ValidationResponseDTO(BaseModel):
    """Aggregate validation outcome; every violated rule is listed."""

    is_valid: bool
    errors: list[str]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "is_valid": False,
                "errors": ["Lease end date must be after the start date"],
            }
        }
    )


class ExemptionResponseDTO(BaseModel):
    exception_type: str = Field(examples=["short_term"])
    accounting_treatment: str = Field(examples=["simplified"])
    is_short_term: bool
    is_low_value: bool
    low_value_threshold: str = Field(examples=["5000"])
    straight_line_expense_per_month: str | None = Field(examples=["1000.00"])
    justification: str


class SensitivityVariationDTO(BaseModel):
    variation: str = Field(examples=["1"])
    new_value: str = Field(examples=["9.5"])
    lease_liability_change: str = Field(examples=["-412.37"])
    right_of_use_asset_change: str
    total_payment_change: str
    impact_percentage: str = Field(examples=["-1.30"])


class SensitivityResultDTO(BaseModel):
    parameter: str = Field(examples=["discount_rate"])
    base_value: str = Field(examples=["8.5"])
    variations: list[SensitivityVariationDTO]


class StressScenarioDTO(BaseModel):
    scenario_type: str = Field(examples=["interest_rate_shock"])
    description: str
    probability: str = Field(examples=["15"])
    severity: str = Field(examples=["high"])
    lease_liability_change: str
    right_of_use_asset_change: str
    total_financial_impact: str
    probability_weighted_impact: str


class SensitivityAnalysisResponseDTO(BaseModel):
    """Base measurement figures with every variation and stress scenario."""

    lease_liability_initial: str = Field(examples=["31824.69"])
    right_of_use_asset_initial: str = Field(examples=["31824.69"])
    total_lease_payments: str = Field(examples=["36000.00"])
    sensitivity_results: list[SensitivityResultDTO]
    stress_scenarios: list[StressScenarioDTO]
    most_sensitive_parameter: str | None = Field(examples=["lease_term"])
