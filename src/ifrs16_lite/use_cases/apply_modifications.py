"""Contract modification engine.

Replays an ordered list of modifications over a base contract and
remeasures after each one. Remeasurement always restarts the schedule from
period 1 of the new terms; the unexpired stub of the prior schedule is not
carried forward.

Engines are immutable. ``with_modification`` returns a new engine with the
record committed, and impact previews never touch committed state, so one
instance can be shared freely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable

from ifrs16_lite.domain.errors import InvalidModificationError, InvalidTermError
from ifrs16_lite.domain.lease import (
    LeaseContractTerms,
    LeaseMeasurement,
    ValidationResult,
    add_months,
    months_between,
)
from ifrs16_lite.domain.modification import (
    AssetChange,
    ModificationHistoryEntry,
    ModificationImpact,
    ModificationImpactResult,
    ModificationPayload,
    ModificationRecord,
    ModificationSnapshot,
    ModificationSummary,
    ModificationType,
    NoChange,
    PaymentChange,
    RateChange,
    Renewal,
    TermChange,
    Termination,
    resolve_payload,
)
from ifrs16_lite.domain.present_value import ZERO, round_money
from ifrs16_lite.use_cases.measure_lease import LeaseMeasurementEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ContractState:
    """Committed state after replaying some prefix of the modification list."""

    terms: LeaseContractTerms
    elapsed_months: int = 0
    terminated: bool = False
    history: tuple[ModificationHistoryEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class ContractSnapshot:
    """Current terms together with their measurement."""

    terms: LeaseContractTerms
    measurement: LeaseMeasurement
    elapsed_months: int
    terminated: bool


_TERMINATED_MEASUREMENT = LeaseMeasurement(
    lease_liability_initial=ZERO,
    right_of_use_asset_initial=ZERO,
    number_of_periods=0,
    monthly_interest_expense=ZERO,
    monthly_principal_payment=ZERO,
    monthly_amortization=ZERO,
    total_interest_expense=ZERO,
    total_principal_payments=ZERO,
    total_lease_payments=ZERO,
    effective_interest_rate_annual=ZERO,
    effective_interest_rate_monthly=ZERO,
)


class ModificationEngine:
    """
    Apply modification records to a base contract.

    Records are applied in the order given; callers wanting chronological
    semantics sort by effective date first. Only records whose status is
    ``effective`` change the contract; the rest are skipped during replay.

    Raises (on construction or ``with_modification``):
        InvalidTermError: If the base terms cannot be measured
        InvalidModificationError: If a record leaves a nonsensical contract
    """

    def __init__(
        self,
        base_terms: LeaseContractTerms,
        modifications: Iterable[ModificationRecord] = (),
        measurement_engine: LeaseMeasurementEngine | None = None,
    ) -> None:
        """
        Initialize the engine and replay the committed modifications.

        Args:
            base_terms: Contract terms at inception
            modifications: Committed records, in application order
            measurement_engine: Engine used for every remeasurement
        """
        self._base_terms = base_terms
        self._modifications = tuple(modifications)
        self._measurement = measurement_engine or LeaseMeasurementEngine()

        # Fail fast on unmeasurable base terms
        self._measurement.number_of_periods(base_terms)

        state = ContractState(terms=base_terms)
        for record in self._modifications:
            state = self._transition(state, record)
        self._state = state

    @property
    def base_terms(self) -> LeaseContractTerms:
        return self._base_terms

    @property
    def modifications(self) -> tuple[ModificationRecord, ...]:
        return self._modifications

    @property
    def state(self) -> ContractState:
        return self._state

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def with_modification(self, record: ModificationRecord) -> ModificationEngine:
        """Return a new engine with ``record`` committed after the existing ones."""
        return ModificationEngine(
            self._base_terms,
            self._modifications + (record,),
            measurement_engine=self._measurement,
        )

    apply_modification = with_modification

    def calculate_modification_impact(
        self, record: ModificationRecord
    ) -> ModificationImpactResult:
        """Preview the impact of ``record`` on the current state without committing it."""
        self._ensure_active(self._state, record)
        impact, _, _ = self._evaluate(self._state, record)
        return impact

    def get_current_contract_state(self) -> ContractSnapshot:
        state = self._state
        if state.terminated:
            measurement = _TERMINATED_MEASUREMENT
        else:
            measurement = self._measurement.measure(state.terms)

        return ContractSnapshot(
            terms=state.terms,
            measurement=measurement,
            elapsed_months=state.elapsed_months,
            terminated=state.terminated,
        )

    def get_modification_history(self) -> list[ModificationHistoryEntry]:
        return list(self._state.history)

    def validate_modification(self, record: ModificationRecord) -> ValidationResult:
        """Check a record against every rule and report all violations at once."""
        errors: list[str] = []

        if not record.description or not record.description.strip():
            errors.append("Modification description is required")
        if record.modification_date is None:
            errors.append("Modification date is required")
        if record.effective_date is None:
            errors.append("Effective date is required")
        if (
            record.modification_date is not None
            and record.effective_date is not None
            and record.effective_date < record.modification_date
        ):
            errors.append("Effective date must be on or after the modification date")

        for name, label in (
            ("modification_fee", "Modification fee"),
            ("additional_costs", "Additional costs"),
            ("incentives_received", "Incentives received"),
        ):
            if getattr(record, name) < 0:
                errors.append(f"{label} cannot be negative")
        if record.termination_fee is not None and record.termination_fee < 0:
            errors.append("Termination fee cannot be negative")

        if self._state.terminated:
            errors.append("Contract has already been terminated")
        else:
            try:
                payload = self._resolve(self._state.terms, record)
                if not isinstance(payload, Termination):
                    self._checked_terms(self._state.terms, payload)
            except InvalidModificationError as exc:
                errors.append(exc.message)

        result = ValidationResult(errors=tuple(errors))
        if not result.is_valid:
            logger.info(
                "Modification rejected by validation",
                extra={
                    "modification_type": record.modification_type.value,
                    "modification_id": record.id,
                    "errors": list(result.errors),
                },
            )
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(self, state: ContractState, record: ModificationRecord) -> ContractState:
        if not record.is_effective:
            logger.debug(
                "Skipping non-effective modification",
                extra={"modification_id": record.id, "status": record.status.value},
            )
            return state

        self._ensure_active(state, record)
        impact, new_terms, terminated = self._evaluate(state, record)

        elapsed = state.elapsed_months
        if record.effective_date is not None:
            elapsed = months_between(state.terms.lease_start_date, record.effective_date)
            elapsed = max(0, min(elapsed, state.terms.lease_term_months))

        logger.debug(
            "Modification applied",
            extra={
                "modification_type": record.modification_type.value,
                "modification_id": record.id,
                "liability_change": str(impact.impact.liability_change),
                "lease_term_months": new_terms.lease_term_months,
            },
        )

        return ContractState(
            terms=new_terms,
            elapsed_months=elapsed,
            terminated=terminated,
            history=state.history + (ModificationHistoryEntry(record, impact),),
        )

    @staticmethod
    def _ensure_active(state: ContractState, record: ModificationRecord) -> None:
        if state.terminated:
            raise InvalidModificationError(
                "Contract has already been terminated",
                modification_type=record.modification_type.value,
            )

    @staticmethod
    def _resolve(terms: LeaseContractTerms, record: ModificationRecord) -> ModificationPayload:
        return resolve_payload(
            record,
            current_term_months=terms.lease_term_months,
            current_payment=terms.payment_amount,
            current_rate=terms.discount_rate_annual,
            current_fair_value=terms.asset_fair_value,
        )

    @staticmethod
    def _apply(terms: LeaseContractTerms, payload: ModificationPayload) -> LeaseContractTerms:
        if isinstance(payload, TermChange):
            return _with_term(terms, payload.new_term_months)

        if isinstance(payload, PaymentChange):
            _require_non_negative(payload.new_payment, "payment amount")
            return replace(terms, payment_amount=round_money(payload.new_payment))

        if isinstance(payload, RateChange):
            _require_non_negative(payload.new_rate, "discount rate")
            return replace(terms, discount_rate_annual=payload.new_rate)

        if isinstance(payload, AssetChange):
            _require_non_negative(payload.new_fair_value, "asset fair value")
            return replace(terms, asset_fair_value=round_money(payload.new_fair_value))

        if isinstance(payload, Renewal):
            if payload.additional_months <= 0:
                raise InvalidModificationError("Renewal term must be greater than zero")
            renewed = _with_term(terms, terms.lease_term_months + payload.additional_months)
            if payload.payment is not None:
                _require_non_negative(payload.payment, "renewal payment")
                renewed = replace(renewed, payment_amount=round_money(payload.payment))
            if payload.rate is not None:
                _require_non_negative(payload.rate, "renewal discount rate")
                renewed = replace(renewed, discount_rate_annual=payload.rate)
            return renewed

        if isinstance(payload, NoChange):
            return terms

        raise InvalidModificationError(f"Unsupported modification payload: {payload!r}")

    def _checked_terms(
        self, terms: LeaseContractTerms, payload: ModificationPayload
    ) -> LeaseContractTerms:
        """Apply ``payload`` and make sure the result can still be measured."""
        new_terms = self._apply(terms, payload)
        try:
            self._measurement.number_of_periods(new_terms)
        except InvalidTermError as exc:
            raise InvalidModificationError(exc.message, **exc.context) from exc
        return new_terms

    def _evaluate(
        self, state: ContractState, record: ModificationRecord
    ) -> tuple[ModificationImpactResult, LeaseContractTerms, bool]:
        """Compute the impact of ``record`` on ``state`` and the resulting terms."""
        current = state.terms
        before_measurement = self._measurement.measure(current)

        remaining_before = current.lease_term_months
        if record.effective_date is not None:
            elapsed = months_between(current.lease_start_date, record.effective_date)
            remaining_before = max(0, current.lease_term_months - elapsed)

        before = ModificationSnapshot(
            lease_liability=before_measurement.lease_liability_initial,
            right_of_use_asset=before_measurement.right_of_use_asset_initial,
            remaining_term_months=remaining_before,
            monthly_payment=current.payment_amount,
            discount_rate_annual=current.discount_rate_annual,
        )

        payload = self._resolve(current, record)
        fees = record.modification_fee + record.additional_costs - record.incentives_received

        if isinstance(payload, Termination):
            # Derecognise what is still carried on the termination date
            elapsed = months_between(current.lease_start_date, payload.termination_date)
            liability, asset = _carrying_amounts(before_measurement, current, elapsed)
            before = replace(
                before,
                lease_liability=liability,
                right_of_use_asset=asset,
                remaining_term_months=max(0, current.lease_term_months - elapsed),
            )
            remaining_before = before.remaining_term_months
            new_terms = replace(
                current,
                lease_term_months=0,
                lease_end_date=payload.termination_date,
            )
            after_measurement = _TERMINATED_MEASUREMENT
            after = ModificationSnapshot(
                lease_liability=ZERO,
                right_of_use_asset=ZERO,
                remaining_term_months=0,
                monthly_payment=ZERO,
                discount_rate_annual=current.discount_rate_annual,
            )
            term_change = -remaining_before
            fees -= payload.termination_fee
            terminated = True
        else:
            new_terms = self._checked_terms(current, payload)
            after_measurement = self._measurement.measure(new_terms)
            after = ModificationSnapshot(
                lease_liability=after_measurement.lease_liability_initial,
                right_of_use_asset=after_measurement.right_of_use_asset_initial,
                remaining_term_months=new_terms.lease_term_months,
                monthly_payment=new_terms.payment_amount,
                discount_rate_annual=new_terms.discount_rate_annual,
            )
            term_change = new_terms.lease_term_months - current.lease_term_months
            terminated = False

        liability_change = after.lease_liability - before.lease_liability
        net_impact = round_money(liability_change + fees)

        impact = ModificationImpact(
            term_change=term_change,
            payment_change=after.monthly_payment - before.monthly_payment,
            rate_change=after.discount_rate_annual - before.discount_rate_annual,
            liability_change=liability_change,
            asset_change=after.right_of_use_asset - before.right_of_use_asset,
            net_impact=net_impact,
        )

        summary = ModificationSummary(
            modification_type=record.modification_type,
            effective_date=record.effective_date,
            total_impact=net_impact,
            new_total_payments=after_measurement.total_lease_payments,
            new_total_interest=after_measurement.total_interest_expense,
            new_effective_rate=after_measurement.effective_interest_rate_annual,
        )

        result = ModificationImpactResult(
            before_modification=before,
            after_modification=after,
            impact=impact,
            summary=summary,
            new_schedule=after_measurement.amortization_schedule,
        )
        return result, new_terms, terminated


def _carrying_amounts(
    measurement: LeaseMeasurement, terms: LeaseContractTerms, elapsed_months: int
) -> tuple[Decimal, Decimal]:
    """Liability and ROU asset carried after ``elapsed_months`` of the schedule."""
    if elapsed_months <= 0:
        return measurement.lease_liability_initial, measurement.right_of_use_asset_initial

    schedule = measurement.amortization_schedule
    settled = elapsed_months // terms.payment_frequency.months_per_period
    if settled >= len(schedule):
        return schedule[-1].ending_liability, schedule[-1].ending_asset
    if settled == 0:
        return schedule[0].beginning_liability, schedule[0].beginning_asset
    return schedule[settled - 1].ending_liability, schedule[settled - 1].ending_asset


def _with_term(terms: LeaseContractTerms, new_term_months: int) -> LeaseContractTerms:
    if new_term_months <= 0:
        raise InvalidModificationError(
            f"Resulting lease term must be greater than zero (got {new_term_months})",
            lease_term_months=new_term_months,
        )
    return replace(
        terms,
        lease_term_months=new_term_months,
        lease_end_date=add_months(terms.lease_start_date, new_term_months),
    )


def _require_non_negative(value: Decimal, label: str) -> None:
    if value < 0:
        raise InvalidModificationError(f"Resulting {label} cannot be negative ({value})")
