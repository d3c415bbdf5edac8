from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from ifrs16_lite.domain.errors import InvalidTermError


class PaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"

    @property
    def months_per_period(self) -> int:
        return _MONTHS_PER_PERIOD[self]

    @property
    def periods_per_year(self) -> int:
        return 12 // self.months_per_period

    @classmethod
    def parse(cls, value: str) -> PaymentFrequency:
        """Accepts the enum values plus the hyphenated ``semi-annual`` spelling."""
        normalized = value.strip().lower().replace("-", "").replace("_", "")
        return cls(normalized)


_MONTHS_PER_PERIOD = {
    PaymentFrequency.MONTHLY: 1,
    PaymentFrequency.QUARTERLY: 3,
    PaymentFrequency.SEMIANNUAL: 6,
    PaymentFrequency.ANNUAL: 12,
}


class PaymentTiming(str, Enum):
    """Ordinary annuity (END) or annuity due (BEGINNING)."""

    BEGINNING = "beginning"
    END = "end"


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_between(start: date, end: date) -> int:
    """Calendar month difference, ignoring the day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


@dataclass(frozen=True, slots=True)
class VariablePayment:
    """A dated payment outside the regular periodic stream."""

    payment_date: date
    amount: Decimal
    description: str = ""


@dataclass(frozen=True, slots=True)
class LeaseContractTerms:
    """Immutable snapshot of the contract inputs used for measurement.

    ``lease_term_months`` is the source of truth for schedule length; the
    dates are carried for reporting and may disagree with it.
    """

    lease_start_date: date
    lease_end_date: date
    lease_term_months: int
    payment_amount: Decimal
    discount_rate_annual: Decimal
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    payment_timing: PaymentTiming = PaymentTiming.END
    initial_payment: Decimal = Decimal("0")
    guaranteed_residual_value: Decimal = Decimal("0")
    initial_direct_costs: Decimal = Decimal("0")
    lease_incentives: Decimal = Decimal("0")
    currency_code: str = "BRL"
    asset_fair_value: Decimal | None = None
    purchase_option_reasonably_certain: bool = False
    variable_payments: tuple[VariablePayment, ...] = ()

    def validate(self) -> None:
        if self.lease_term_months <= 0:
            raise InvalidTermError(
                "lease_term_months must be > 0", lease_term_months=self.lease_term_months
            )
        if self.payment_amount < 0:
            raise InvalidTermError("payment_amount must be >= 0")
        if self.discount_rate_annual < 0:
            raise InvalidTermError("discount_rate_annual must be >= 0")
        for name in (
            "initial_payment",
            "guaranteed_residual_value",
            "initial_direct_costs",
            "lease_incentives",
        ):
            if getattr(self, name) < 0:
                raise InvalidTermError(f"{name} must be >= 0")
        for payment in self.variable_payments:
            if payment.amount < 0:
                raise InvalidTermError(
                    "variable payment amount must be >= 0",
                    payment_date=payment.payment_date.isoformat(),
                )
        if self.lease_end_date <= self.lease_start_date:
            raise InvalidTermError("lease_end_date must be after lease_start_date")


@dataclass(frozen=True, slots=True)
class AmortizationPeriod:
    period: int
    payment_date: date | None
    payment: Decimal
    beginning_liability: Decimal
    interest_expense: Decimal
    principal_payment: Decimal
    ending_liability: Decimal
    beginning_asset: Decimal
    amortization: Decimal
    ending_asset: Decimal


@dataclass(frozen=True, slots=True)
class LeaseMeasurement:
    """Complete measurement of one version of a contract."""

    lease_liability_initial: Decimal
    right_of_use_asset_initial: Decimal
    number_of_periods: int
    monthly_interest_expense: Decimal
    monthly_principal_payment: Decimal
    monthly_amortization: Decimal
    total_interest_expense: Decimal
    total_principal_payments: Decimal
    total_lease_payments: Decimal
    effective_interest_rate_annual: Decimal
    effective_interest_rate_monthly: Decimal
    amortization_schedule: tuple[AmortizationPeriod, ...] = ()


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Aggregate validation outcome. Returned to callers, never raised."""

    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors
