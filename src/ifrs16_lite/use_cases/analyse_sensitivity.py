"""Sensitivity of the initial measurement to rate, payment and term."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum

from ifrs16_lite.domain.lease import LeaseContractTerms, LeaseMeasurement, add_months
from ifrs16_lite.domain.present_value import HUNDRED, ZERO, round_money
from ifrs16_lite.use_cases.measure_lease import LeaseMeasurementEngine

logger = logging.getLogger(__name__)

PERCENT_PLACES = Decimal("0.01")

RATE_VARIATIONS = tuple(Decimal(v) for v in ("-2", "-1", "-0.5", "0.5", "1", "2"))
PAYMENT_VARIATIONS = tuple(Decimal(v) for v in ("-20", "-10", "-5", "5", "10", "20"))
TERM_VARIATIONS = (-12, -6, -3, 3, 6, 12)


class SensitivityParameter(str, Enum):
    DISCOUNT_RATE = "discount_rate"
    PAYMENT_AMOUNT = "payment_amount"
    LEASE_TERM = "lease_term"


class StressScenarioType(str, Enum):
    INTEREST_RATE_SHOCK = "interest_rate_shock"
    PAYMENT_REDUCTION = "payment_reduction"
    EARLY_TERMINATION = "early_termination"
    MARKET_CRASH = "market_crash"


class StressSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


@dataclass(frozen=True, slots=True)
class StressScenarioDefinition:
    scenario_type: StressScenarioType
    description: str
    probability: Decimal
    severity: StressSeverity
    rate_change: Decimal = ZERO
    payment_change_percent: Decimal = ZERO
    term_change_months: int = 0


STRESS_SCENARIOS = (
    StressScenarioDefinition(
        scenario_type=StressScenarioType.INTEREST_RATE_SHOCK,
        description="Discount rate rises by 3 percentage points",
        probability=Decimal("15"),
        severity=StressSeverity.HIGH,
        rate_change=Decimal("3"),
    ),
    StressScenarioDefinition(
        scenario_type=StressScenarioType.PAYMENT_REDUCTION,
        description="Periodic payments renegotiated 20% lower",
        probability=Decimal("10"),
        severity=StressSeverity.MEDIUM,
        payment_change_percent=Decimal("-20"),
    ),
    StressScenarioDefinition(
        scenario_type=StressScenarioType.EARLY_TERMINATION,
        description="Contract ends 12 months before the agreed term",
        probability=Decimal("5"),
        severity=StressSeverity.HIGH,
        term_change_months=-12,
    ),
    StressScenarioDefinition(
        scenario_type=StressScenarioType.MARKET_CRASH,
        description="Market crisis lifts the discount rate by 5 percentage points",
        probability=Decimal("3"),
        severity=StressSeverity.EXTREME,
        rate_change=Decimal("5"),
    ),
)


@dataclass(frozen=True, slots=True)
class SensitivityVariation:
    variation: Decimal
    new_value: Decimal
    lease_liability_change: Decimal
    right_of_use_asset_change: Decimal
    total_payment_change: Decimal
    impact_percentage: Decimal


@dataclass(frozen=True, slots=True)
class SensitivityResult:
    parameter: SensitivityParameter
    base_value: Decimal
    variations: tuple[SensitivityVariation, ...]

    @property
    def max_impact_percentage(self) -> Decimal:
        return max((abs(v.impact_percentage) for v in self.variations), default=ZERO)


@dataclass(frozen=True, slots=True)
class StressScenario:
    scenario_type: StressScenarioType
    description: str
    probability: Decimal
    severity: StressSeverity
    lease_liability_change: Decimal
    right_of_use_asset_change: Decimal
    total_financial_impact: Decimal
    probability_weighted_impact: Decimal


@dataclass(frozen=True, slots=True)
class SensitivityAnalysis:
    base_measurement: LeaseMeasurement
    sensitivity_results: tuple[SensitivityResult, ...]
    stress_scenarios: tuple[StressScenario, ...]
    most_sensitive_parameter: SensitivityParameter | None


class AnalyseLeaseSensitivity:
    """
    Remeasure a contract under shifted inputs and report the differences.

    Each variant is measured from scratch by the same engine as the base
    case. Rates never go below zero and payment variants are rounded to
    cents. Term variants keep at least one payment period; those that do not
    divide into whole payment periods are left out.
    """

    def __init__(self, measurement_engine: LeaseMeasurementEngine | None = None) -> None:
        self._engine = measurement_engine or LeaseMeasurementEngine()

    def execute(self, terms: LeaseContractTerms) -> SensitivityAnalysis:
        base = self._engine.measure(terms)

        results = (
            self._vary(
                base,
                SensitivityParameter.DISCOUNT_RATE,
                terms.discount_rate_annual,
                [(step, _with_rate(terms, step)) for step in RATE_VARIATIONS],
            ),
            self._vary(
                base,
                SensitivityParameter.PAYMENT_AMOUNT,
                terms.payment_amount,
                [(step, _with_payment(terms, step)) for step in PAYMENT_VARIATIONS],
            ),
            self._vary(
                base,
                SensitivityParameter.LEASE_TERM,
                Decimal(terms.lease_term_months),
                _term_variants(terms),
            ),
        )
        scenarios = tuple(self._stress(terms, base, definition) for definition in STRESS_SCENARIOS)

        ranked = [result for result in results if result.variations]
        most_sensitive = (
            max(ranked, key=lambda result: result.max_impact_percentage).parameter
            if ranked
            else None
        )

        logger.info(
            "Sensitivity analysis completed",
            extra={
                "lease_liability_initial": str(base.lease_liability_initial),
                "variations": sum(len(result.variations) for result in results),
                "most_sensitive_parameter": most_sensitive.value if most_sensitive else None,
            },
        )

        return SensitivityAnalysis(
            base_measurement=base,
            sensitivity_results=results,
            stress_scenarios=scenarios,
            most_sensitive_parameter=most_sensitive,
        )

    def _vary(
        self,
        base: LeaseMeasurement,
        parameter: SensitivityParameter,
        base_value: Decimal,
        variants: list[tuple[Decimal, LeaseContractTerms]],
    ) -> SensitivityResult:
        variations = []
        for step, variant in variants:
            measured = self._engine.measure(variant)
            liability_change = measured.lease_liability_initial - base.lease_liability_initial
            variations.append(
                SensitivityVariation(
                    variation=step,
                    new_value=_parameter_value(variant, parameter),
                    lease_liability_change=liability_change,
                    right_of_use_asset_change=(
                        measured.right_of_use_asset_initial - base.right_of_use_asset_initial
                    ),
                    total_payment_change=(
                        measured.total_lease_payments - base.total_lease_payments
                    ),
                    impact_percentage=_impact_percentage(
                        liability_change, base.lease_liability_initial
                    ),
                )
            )
        return SensitivityResult(
            parameter=parameter, base_value=base_value, variations=tuple(variations)
        )

    def _stress(
        self,
        terms: LeaseContractTerms,
        base: LeaseMeasurement,
        definition: StressScenarioDefinition,
    ) -> StressScenario:
        variant = terms
        if definition.rate_change:
            variant = _with_rate(variant, definition.rate_change)
        if definition.payment_change_percent:
            variant = _with_payment(variant, definition.payment_change_percent)
        if definition.term_change_months:
            variant = _with_term(variant, definition.term_change_months) or variant

        measured = self._engine.measure(variant)
        liability_change = measured.lease_liability_initial - base.lease_liability_initial
        asset_change = measured.right_of_use_asset_initial - base.right_of_use_asset_initial
        total = liability_change + asset_change

        return StressScenario(
            scenario_type=definition.scenario_type,
            description=definition.description,
            probability=definition.probability,
            severity=definition.severity,
            lease_liability_change=liability_change,
            right_of_use_asset_change=asset_change,
            total_financial_impact=total,
            probability_weighted_impact=round_money(total * definition.probability / HUNDRED),
        )


def _with_rate(terms: LeaseContractTerms, change: Decimal) -> LeaseContractTerms:
    return replace(terms, discount_rate_annual=max(ZERO, terms.discount_rate_annual + change))


def _with_payment(terms: LeaseContractTerms, change_percent: Decimal) -> LeaseContractTerms:
    factor = 1 + change_percent / HUNDRED
    return replace(terms, payment_amount=round_money(terms.payment_amount * factor))


def _with_term(terms: LeaseContractTerms, change_months: int) -> LeaseContractTerms | None:
    months_per_period = terms.payment_frequency.months_per_period
    new_term = max(months_per_period, terms.lease_term_months + change_months)
    if new_term == terms.lease_term_months or new_term % months_per_period:
        return None
    return replace(
        terms,
        lease_term_months=new_term,
        lease_end_date=add_months(terms.lease_start_date, new_term),
    )


def _term_variants(terms: LeaseContractTerms) -> list[tuple[Decimal, LeaseContractTerms]]:
    variants = []
    for step in TERM_VARIATIONS:
        variant = _with_term(terms, step)
        if variant is not None:
            variants.append((Decimal(step), variant))
    return variants


def _parameter_value(terms: LeaseContractTerms, parameter: SensitivityParameter) -> Decimal:
    if parameter is SensitivityParameter.DISCOUNT_RATE:
        return terms.discount_rate_annual
    if parameter is SensitivityParameter.PAYMENT_AMOUNT:
        return terms.payment_amount
    return Decimal(terms.lease_term_months)


def _impact_percentage(change: Decimal, base: Decimal) -> Decimal:
    if not base:
        return ZERO
    return (change / base * HUNDRED).quantize(PERCENT_PLACES)
