"""Lease modification records and their resolved payloads.

A ``ModificationRecord`` mirrors what a host application stores: one flat
record with every optional field a modification form can carry. Before the
engine touches the contract, ``resolve_payload`` turns the record into exactly
one typed change, applying the precedence rule

    absolute value > absolute delta > percentage

so ambiguous input is resolved deterministically in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Union

from ifrs16_lite.domain.errors import InvalidModificationError
from ifrs16_lite.domain.lease import AmortizationPeriod


HUNDRED = Decimal("100")


class ModificationType(str, Enum):
    TERM_EXTENSION = "term_extension"
    TERM_REDUCTION = "term_reduction"
    PAYMENT_CHANGE = "payment_change"
    RATE_CHANGE = "rate_change"
    ASSET_CHANGE = "asset_change"
    TERMINATION = "termination"
    RENEWAL = "renewal"
    OTHER = "other"


class ModificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EFFECTIVE = "effective"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class ModificationRecord:
    """A contractual change, immutable once created."""

    modification_type: ModificationType
    modification_date: date | None
    effective_date: date | None
    description: str = ""

    new_term_months: int | None = None
    term_change_months: int | None = None

    new_monthly_payment: Decimal | None = None
    payment_change_amount: Decimal | None = None
    payment_change_percentage: Decimal | None = None

    new_discount_rate_annual: Decimal | None = None
    rate_change_amount: Decimal | None = None
    rate_change_percentage: Decimal | None = None

    new_asset_fair_value: Decimal | None = None
    asset_change_amount: Decimal | None = None

    termination_date: date | None = None
    termination_fee: Decimal | None = None

    renewal_term_months: int | None = None
    renewal_monthly_payment: Decimal | None = None
    renewal_discount_rate: Decimal | None = None

    modification_fee: Decimal = Decimal("0")
    additional_costs: Decimal = Decimal("0")
    incentives_received: Decimal = Decimal("0")

    status: ModificationStatus = ModificationStatus.EFFECTIVE
    id: str | None = None

    @property
    def is_effective(self) -> bool:
        return self.status is ModificationStatus.EFFECTIVE


# ============================================================================
# Resolved payload variants
# ============================================================================


@dataclass(frozen=True, slots=True)
class TermChange:
    new_term_months: int


@dataclass(frozen=True, slots=True)
class PaymentChange:
    new_payment: Decimal


@dataclass(frozen=True, slots=True)
class RateChange:
    new_rate: Decimal


@dataclass(frozen=True, slots=True)
class AssetChange:
    new_fair_value: Decimal


@dataclass(frozen=True, slots=True)
class Termination:
    termination_date: date
    termination_fee: Decimal


@dataclass(frozen=True, slots=True)
class Renewal:
    additional_months: int
    payment: Decimal | None
    rate: Decimal | None


@dataclass(frozen=True, slots=True)
class NoChange:
    pass


ModificationPayload = Union[
    TermChange, PaymentChange, RateChange, AssetChange, Termination, Renewal, NoChange
]


def resolve_value(
    current: Decimal,
    absolute: Decimal | None,
    delta: Decimal | None,
    percentage: Decimal | None,
) -> Decimal | None:
    """Pick the new value by precedence; None when no input mode is supplied."""
    if absolute is not None:
        return Decimal(absolute)
    if delta is not None:
        return current + Decimal(delta)
    if percentage is not None:
        return current * (1 + Decimal(percentage) / HUNDRED)
    return None


def resolve_payload(
    record: ModificationRecord,
    *,
    current_term_months: int,
    current_payment: Decimal,
    current_rate: Decimal,
    current_fair_value: Decimal | None,
) -> ModificationPayload:
    """
    Turn a flat record into the single change it describes.

    Raises:
        InvalidModificationError: If the record lacks every payload field its type requires
    """
    kind = record.modification_type

    if kind in (ModificationType.TERM_EXTENSION, ModificationType.TERM_REDUCTION):
        if record.new_term_months is not None:
            return TermChange(new_term_months=record.new_term_months)
        if record.term_change_months is not None:
            return TermChange(new_term_months=current_term_months + record.term_change_months)
        raise InvalidModificationError(
            f"{kind.value} requires new_term_months or term_change_months",
            modification_type=kind.value,
        )

    if kind is ModificationType.PAYMENT_CHANGE:
        payment = resolve_value(
            current_payment,
            record.new_monthly_payment,
            record.payment_change_amount,
            record.payment_change_percentage,
        )
        if payment is None:
            raise InvalidModificationError(
                "payment_change requires new_monthly_payment, "
                "payment_change_amount or payment_change_percentage",
                modification_type=kind.value,
            )
        return PaymentChange(new_payment=payment)

    if kind is ModificationType.RATE_CHANGE:
        rate = resolve_value(
            current_rate,
            record.new_discount_rate_annual,
            record.rate_change_amount,
            record.rate_change_percentage,
        )
        if rate is None:
            raise InvalidModificationError(
                "rate_change requires new_discount_rate_annual, "
                "rate_change_amount or rate_change_percentage",
                modification_type=kind.value,
            )
        return RateChange(new_rate=rate)

    if kind is ModificationType.ASSET_CHANGE:
        fair_value = resolve_value(
            current_fair_value or Decimal("0"),
            record.new_asset_fair_value,
            record.asset_change_amount,
            None,
        )
        if fair_value is None:
            raise InvalidModificationError(
                "asset_change requires new_asset_fair_value or asset_change_amount",
                modification_type=kind.value,
            )
        return AssetChange(new_fair_value=fair_value)

    if kind is ModificationType.TERMINATION:
        if record.termination_date is None:
            raise InvalidModificationError(
                "termination requires termination_date", modification_type=kind.value
            )
        return Termination(
            termination_date=record.termination_date,
            termination_fee=record.termination_fee or Decimal("0"),
        )

    if kind is ModificationType.RENEWAL:
        if record.renewal_term_months is None:
            raise InvalidModificationError(
                "renewal requires renewal_term_months", modification_type=kind.value
            )
        return Renewal(
            additional_months=record.renewal_term_months,
            payment=record.renewal_monthly_payment,
            rate=record.renewal_discount_rate,
        )

    return NoChange()


# ============================================================================
# Impact analysis results
# ============================================================================


@dataclass(frozen=True, slots=True)
class ModificationSnapshot:
    lease_liability: Decimal
    right_of_use_asset: Decimal
    remaining_term_months: int
    monthly_payment: Decimal
    discount_rate_annual: Decimal


@dataclass(frozen=True, slots=True)
class ModificationImpact:
    term_change: int
    payment_change: Decimal
    rate_change: Decimal
    liability_change: Decimal
    asset_change: Decimal
    net_impact: Decimal


@dataclass(frozen=True, slots=True)
class ModificationSummary:
    modification_type: ModificationType
    effective_date: date | None
    total_impact: Decimal
    new_total_payments: Decimal
    new_total_interest: Decimal
    new_effective_rate: Decimal


@dataclass(frozen=True, slots=True)
class ModificationImpactResult:
    before_modification: ModificationSnapshot
    after_modification: ModificationSnapshot
    impact: ModificationImpact
    summary: ModificationSummary
    new_schedule: tuple[AmortizationPeriod, ...] = ()


@dataclass(frozen=True, slots=True)
class ModificationHistoryEntry:
    """A committed modification and the impact computed when it was applied."""

    modification: ModificationRecord
    impact: ModificationImpactResult
