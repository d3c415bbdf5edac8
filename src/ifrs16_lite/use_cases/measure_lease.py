from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from ifrs16_lite.domain.errors import InvalidTermError
from ifrs16_lite.domain.lease import (
    AmortizationPeriod,
    LeaseContractTerms,
    LeaseMeasurement,
    PaymentTiming,
    ValidationResult,
    months_between,
)
from ifrs16_lite.domain.present_value import (
    HUNDRED,
    ZERO,
    annual_rate_from_periodic,
    periodic_rate_from_annual,
    present_value_of_annuity,
    present_value_of_lump_sum,
    round_money,
)
from ifrs16_lite.use_cases.build_amortization_schedule import AmortizationScheduleBuilder

logger = logging.getLogger(__name__)

RATE_PLACES = Decimal("0.000001")
REALISTIC_RATE_CEILING = Decimal("100")


@dataclass(frozen=True, slots=True)
class LeaseMeasurementEngine:
    """
    Measure the initial lease liability and right-of-use asset of a contract.

    Liability = PV(periodic payments) + PV(guaranteed residual value)
                + PV(variable payments) + initial payment
    ROU asset = liability + initial direct costs - lease incentives

    Variable payments are discounted monthly from commencement; only those
    falling inside the term count.

    Monetary results are rounded to cents (ROUND_HALF_UP); discounting runs
    at full Decimal precision. The ROU asset may legitimately be negative when
    incentives exceed the liability plus direct costs.
    """

    schedule_builder: AmortizationScheduleBuilder = field(
        default_factory=AmortizationScheduleBuilder
    )

    def number_of_periods(self, terms: LeaseContractTerms) -> int:
        terms.validate()

        months_per_period = terms.payment_frequency.months_per_period
        if terms.lease_term_months % months_per_period:
            raise InvalidTermError(
                f"lease_term_months ({terms.lease_term_months}) is not a whole number "
                f"of {terms.payment_frequency.value} periods",
                lease_term_months=terms.lease_term_months,
                payment_frequency=terms.payment_frequency.value,
            )
        return terms.lease_term_months // months_per_period

    def periodic_rate(self, terms: LeaseContractTerms) -> Decimal:
        return periodic_rate_from_annual(
            terms.discount_rate_annual, terms.payment_frequency.periods_per_year
        )

    def initial_lease_liability(self, terms: LeaseContractTerms) -> Decimal:
        periods = self.number_of_periods(terms)
        rate = self.periodic_rate(terms)

        payments_pv = present_value_of_annuity(
            terms.payment_amount, rate, periods, terms.payment_timing
        )
        residual_pv = present_value_of_lump_sum(terms.guaranteed_residual_value, rate, periods)

        monthly_rate = periodic_rate_from_annual(terms.discount_rate_annual, 12)
        variable_pv = sum(
            (
                present_value_of_lump_sum(amount, monthly_rate, month)
                for month, amount in self.variable_payments_in_term(terms)
            ),
            ZERO,
        )

        return round_money(payments_pv + residual_pv + variable_pv + terms.initial_payment)

    def variable_payments_in_term(self, terms: LeaseContractTerms) -> list[tuple[int, Decimal]]:
        """(months from commencement, amount) for each variable payment inside the term."""
        in_term = []
        for payment in terms.variable_payments:
            month = months_between(terms.lease_start_date, payment.payment_date)
            if 0 <= month < terms.lease_term_months:
                in_term.append((month, payment.amount))
        return in_term

    def variable_payment_periods(self, terms: LeaseContractTerms) -> dict[int, Decimal]:
        """
        Variable amounts keyed by the schedule period that settles them.

        Period 0 means commencement. With END timing a payment due at month m
        is settled by the first period ending on or after month m; with BEGINNING
        timing, by the period whose months contain m.
        """
        months_per_period = terms.payment_frequency.months_per_period
        periods: dict[int, Decimal] = {}
        for month, amount in self.variable_payments_in_term(terms):
            if terms.payment_timing is PaymentTiming.BEGINNING:
                period = month // months_per_period + 1
            else:
                period = -(-month // months_per_period)
            periods[period] = periods.get(period, ZERO) + amount
        return periods

    def initial_right_of_use_asset(self, terms: LeaseContractTerms) -> Decimal:
        liability = self.initial_lease_liability(terms)
        return round_money(liability + terms.initial_direct_costs - terms.lease_incentives)

    def effective_interest_rate_monthly(self, terms: LeaseContractTerms) -> Decimal:
        """Monthly equivalent of the annual discount rate, as a percentage."""
        monthly = periodic_rate_from_annual(terms.discount_rate_annual, 12)
        return (monthly * HUNDRED).quantize(RATE_PLACES)

    def effective_interest_rate_annual(self, terms: LeaseContractTerms) -> Decimal:
        """Annual rate recovered from the monthly rate, as a percentage."""
        monthly = periodic_rate_from_annual(terms.discount_rate_annual, 12)
        return annual_rate_from_periodic(monthly, 12).quantize(RATE_PLACES)

    def total_lease_payments(self, terms: LeaseContractTerms) -> Decimal:
        """Undiscounted periodic and variable payments over the term (disclosure figure)."""
        variable = sum((amount for _, amount in self.variable_payments_in_term(terms)), ZERO)
        return round_money(terms.payment_amount * self.number_of_periods(terms) + variable)

    def schedule(self, terms: LeaseContractTerms) -> list[AmortizationPeriod]:
        """
        Amortization schedule for the contract.

        The initial payment, and any variable payment due at commencement, is
        settled before the first period, so the schedule opens on the
        liability net of them and they accrue no interest.
        """
        liability = self.initial_lease_liability(terms)
        asset = self.initial_right_of_use_asset(terms)
        extra_payments = self.variable_payment_periods(terms)
        settled_at_commencement = terms.initial_payment + extra_payments.pop(0, ZERO)

        return self.schedule_builder.build(
            initial_liability=liability - settled_at_commencement,
            initial_asset=asset,
            periodic_rate=self.periodic_rate(terms),
            payment_amount=terms.payment_amount,
            number_of_periods=self.number_of_periods(terms),
            timing=terms.payment_timing,
            residual_value=terms.guaranteed_residual_value,
            start_date=terms.lease_start_date,
            months_per_period=terms.payment_frequency.months_per_period,
            extra_payments=extra_payments,
        )

    def measure(self, terms: LeaseContractTerms) -> LeaseMeasurement:
        schedule = self.schedule(terms)
        first = schedule[0]

        measurement = LeaseMeasurement(
            lease_liability_initial=self.initial_lease_liability(terms),
            right_of_use_asset_initial=self.initial_right_of_use_asset(terms),
            number_of_periods=len(schedule),
            monthly_interest_expense=first.interest_expense,
            monthly_principal_payment=first.principal_payment,
            monthly_amortization=first.amortization,
            total_interest_expense=sum((p.interest_expense for p in schedule), ZERO),
            total_principal_payments=sum((p.principal_payment for p in schedule), ZERO),
            total_lease_payments=self.total_lease_payments(terms),
            effective_interest_rate_annual=self.effective_interest_rate_annual(terms),
            effective_interest_rate_monthly=self.effective_interest_rate_monthly(terms),
            amortization_schedule=tuple(schedule),
        )

        logger.debug(
            "Lease measured",
            extra={
                "lease_liability_initial": str(measurement.lease_liability_initial),
                "right_of_use_asset_initial": str(measurement.right_of_use_asset_initial),
                "number_of_periods": measurement.number_of_periods,
            },
        )

        return measurement

    def validate_terms(self, terms: LeaseContractTerms) -> ValidationResult:
        """Collect every rule the terms violate instead of stopping at the first."""
        errors: list[str] = []

        if terms.lease_term_months <= 0:
            errors.append("Lease term must be greater than zero")
        elif terms.lease_term_months % terms.payment_frequency.months_per_period:
            errors.append(
                f"Lease term of {terms.lease_term_months} months is not a whole number "
                f"of {terms.payment_frequency.value} payment periods"
            )
        if terms.payment_amount < 0:
            errors.append("Payment amount cannot be negative")
        if terms.discount_rate_annual < 0:
            errors.append("Discount rate cannot be negative")
        elif terms.discount_rate_annual > REALISTIC_RATE_CEILING:
            errors.append("Discount rate must be between 0% and 100%")
        for name, label in (
            ("initial_payment", "Initial payment"),
            ("guaranteed_residual_value", "Guaranteed residual value"),
            ("initial_direct_costs", "Initial direct costs"),
            ("lease_incentives", "Lease incentives"),
        ):
            if getattr(terms, name) < 0:
                errors.append(f"{label} cannot be negative")
        if any(payment.amount < 0 for payment in terms.variable_payments):
            errors.append("Variable payment amounts cannot be negative")
        if terms.lease_end_date <= terms.lease_start_date:
            errors.append("Lease end date must be after the start date")

        return ValidationResult(errors=tuple(errors))
