from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ifrs16_lite.entrypoints.http.dtos.lease import (
    MONEY_PATTERN,
    RATE_PATTERN,
    AmortizationPeriodDTO,
    LeaseMeasurementResponseDTO,
    LeaseTermsDTO,
)


SIGNED_DECIMAL_PATTERN = r"^-?\d+(\.\d+)?$"

ModificationTypeLiteral = Literal[
    "term_extension",
    "term_reduction",
    "payment_change",
    "rate_change",
    "asset_change",
    "termination",
    "renewal",
    "other",
]


class ModificationDTO(BaseModel):
    """A contract modification record. Dates may be omitted to let validation report them."""

    id: str | None = None
    modification_type: ModificationTypeLiteral
    modification_date: date | None = None
    effective_date: date | None = None
    description: str = ""
    status: Literal["pending", "approved", "rejected", "effective", "cancelled"] = "effective"

    new_term_months: int | None = Field(default=None, ge=1)
    term_change_months: int | None = Field(
        default=None, description="Positive for extension, negative for reduction"
    )

    new_monthly_payment: str | None = Field(default=None, pattern=MONEY_PATTERN)
    payment_change_amount: str | None = Field(default=None, pattern=SIGNED_DECIMAL_PATTERN)
    payment_change_percentage: str | None = Field(default=None, pattern=SIGNED_DECIMAL_PATTERN)

    new_discount_rate_annual: str | None = Field(default=None, pattern=RATE_PATTERN)
    rate_change_amount: str | None = Field(default=None, pattern=SIGNED_DECIMAL_PATTERN)
    rate_change_percentage: str | None = Field(default=None, pattern=SIGNED_DECIMAL_PATTERN)

    new_asset_fair_value: str | None = Field(default=None, pattern=MONEY_PATTERN)
    asset_change_amount: str | None = Field(default=None, pattern=SIGNED_DECIMAL_PATTERN)

    termination_date: date | None = None
    termination_fee: str | None = Field(default=None, pattern=MONEY_PATTERN)

    renewal_term_months: int | None = Field(default=None, ge=1)
    renewal_monthly_payment: str | None = Field(default=None, pattern=MONEY_PATTERN)
    renewal_discount_rate: str | None = Field(default=None, pattern=RATE_PATTERN)

    modification_fee: str = Field(default="0", pattern=MONEY_PATTERN)
    additional_costs: str = Field(default="0", pattern=MONEY_PATTERN)
    incentives_received: str = Field(default="0", pattern=MONEY_PATTERN)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "modification_type": "term_extension",
                "modification_date": "2025-01-01",
                "effective_date": "2025-01-01",
                "description": "Extend lease by one year",
                "term_change_months": 12,
            }
        }
    )


class ContractStateRequestDTO(BaseModel):
    """Base terms plus committed modifications, in application order."""

    terms: LeaseTermsDTO
    modifications: list[ModificationDTO] = Field(default_factory=list)


class ModificationRequestDTO(ContractStateRequestDTO):
    """A candidate modification evaluated against the committed contract state."""

    modification: ModificationDTO


class ModificationSnapshotDTO(BaseModel):
    lease_liability: str
    right_of_use_asset: str
    remaining_term_months: int
    monthly_payment: str
    discount_rate_annual: str


class ModificationImpactDTO(BaseModel):
    term_change: int
    payment_change: str
    rate_change: str
    liability_change: str
    asset_change: str
    net_impact: str


class ModificationSummaryDTO(BaseModel):
    modification_type: str
    effective_date: date | None
    total_impact: str
    new_total_payments: str
    new_total_interest: str
    new_effective_rate: str


class ModificationImpactResponseDTO(BaseModel):
    before_modification: ModificationSnapshotDTO
    after_modification: ModificationSnapshotDTO
    impact: ModificationImpactDTO
    summary: ModificationSummaryDTO
    new_schedule: list[AmortizationPeriodDTO]


class ModificationHistoryEntryDTO(BaseModel):
    modification: ModificationDTO
    impact: ModificationImpactResponseDTO


class ContractStateResponseDTO(BaseModel):
    """Current contract state after replaying every effective modification."""

    lease_term_months: int
    payment_amount: str
    discount_rate_annual: str
    elapsed_months: int
    terminated: bool
    measurement: LeaseMeasurementResponseDTO
    history: list[ModificationHistoryEntryDTO]
