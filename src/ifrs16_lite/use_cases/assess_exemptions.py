"""Recognition exemptions for short-term and low-value leases (IFRS 16.5-8)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ifrs16_lite.domain.lease import LeaseContractTerms
from ifrs16_lite.domain.present_value import round_money
from ifrs16_lite.infra.config import DEFAULT_LOW_VALUE_THRESHOLD, low_value_thresholds


SHORT_TERM_LIMIT_MONTHS = 12


class ExemptionType(str, Enum):
    SHORT_TERM = "short_term"
    LOW_VALUE = "low_value"
    BOTH = "both"
    NONE = "none"


class AccountingTreatment(str, Enum):
    SIMPLIFIED = "simplified"
    FULL_IFRS16 = "full_ifrs16"


@dataclass(frozen=True, slots=True)
class ExemptionAssessment:
    exception_type: ExemptionType
    accounting_treatment: AccountingTreatment
    is_short_term: bool
    is_low_value: bool
    low_value_threshold: Decimal
    straight_line_expense_per_month: Decimal | None
    justification: str


class AssessLeaseExemptions:
    """
    Decide whether a lease may skip balance-sheet recognition.

    - Short term: 12 months or less, with no purchase option the lessee is
      reasonably certain to exercise
    - Low value: underlying asset fair value at or below the currency threshold

    Exempt leases are expensed straight-line over the term.
    """

    def __init__(self, thresholds: dict[str, Decimal] | None = None) -> None:
        self._thresholds = thresholds if thresholds is not None else low_value_thresholds()

    def threshold_for(self, currency_code: str) -> Decimal:
        return self._thresholds.get(currency_code.upper(), DEFAULT_LOW_VALUE_THRESHOLD)

    def execute(self, terms: LeaseContractTerms) -> ExemptionAssessment:
        terms.validate()

        threshold = self.threshold_for(terms.currency_code)
        is_short_term = (
            terms.lease_term_months <= SHORT_TERM_LIMIT_MONTHS
            and not terms.purchase_option_reasonably_certain
        )
        is_low_value = terms.asset_fair_value is not None and terms.asset_fair_value <= threshold

        if is_short_term and is_low_value:
            exception_type = ExemptionType.BOTH
        elif is_short_term:
            exception_type = ExemptionType.SHORT_TERM
        elif is_low_value:
            exception_type = ExemptionType.LOW_VALUE
        else:
            exception_type = ExemptionType.NONE

        reasons = []
        if is_short_term:
            reasons.append(
                f"lease term of {terms.lease_term_months} months is within "
                f"{SHORT_TERM_LIMIT_MONTHS} months"
            )
        if is_low_value:
            reasons.append(
                f"asset fair value {terms.asset_fair_value} {terms.currency_code} "
                f"does not exceed {threshold}"
            )

        if exception_type is ExemptionType.NONE:
            return ExemptionAssessment(
                exception_type=exception_type,
                accounting_treatment=AccountingTreatment.FULL_IFRS16,
                is_short_term=False,
                is_low_value=False,
                low_value_threshold=threshold,
                straight_line_expense_per_month=None,
                justification="No recognition exemption applies; full IFRS 16 measurement",
            )

        # Payments per period spread evenly over the months they cover
        months_per_period = terms.payment_frequency.months_per_period
        total_payments = terms.payment_amount * Decimal(terms.lease_term_months) / Decimal(
            months_per_period
        )
        expense = round_money(total_payments / Decimal(terms.lease_term_months))

        return ExemptionAssessment(
            exception_type=exception_type,
            accounting_treatment=AccountingTreatment.SIMPLIFIED,
            is_short_term=is_short_term,
            is_low_value=is_low_value,
            low_value_threshold=threshold,
            straight_line_expense_per_month=expense,
            justification="Exempt: " + "; ".join(reasons),
        )
