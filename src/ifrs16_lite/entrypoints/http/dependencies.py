"""
Dependency injection for FastAPI routes.

Key principle: the calculation engines are stateless, so they are built once
and shared (lru_cache). Modification engines hold the contract being
evaluated, so routes get a factory and build one per request.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable, Iterable

from fastapi import Depends

from ifrs16_lite.domain.lease import LeaseContractTerms
from ifrs16_lite.domain.modification import ModificationRecord
from ifrs16_lite.use_cases.analyse_sensitivity import AnalyseLeaseSensitivity
from ifrs16_lite.use_cases.apply_modifications import ModificationEngine
from ifrs16_lite.use_cases.assess_exemptions import AssessLeaseExemptions
from ifrs16_lite.use_cases.measure_lease import LeaseMeasurementEngine


ModificationEngineFactory = Callable[
    [LeaseContractTerms, Iterable[ModificationRecord]], ModificationEngine
]


@lru_cache
def get_measurement_engine() -> LeaseMeasurementEngine:
    """Shared, stateless measurement engine."""
    return LeaseMeasurementEngine()


def get_assess_exemptions_use_case() -> AssessLeaseExemptions:
    """
    Factory returning the exemption use case.

    Built per request so threshold overrides from the environment are
    picked up without restarting the process.
    """
    return AssessLeaseExemptions()


def get_analyse_sensitivity_use_case(
    measurement_engine: LeaseMeasurementEngine = Depends(get_measurement_engine),
) -> AnalyseLeaseSensitivity:
    """Sensitivity use case sharing the measurement engine."""
    return AnalyseLeaseSensitivity(measurement_engine=measurement_engine)


def get_modification_engine_factory(
    measurement_engine: LeaseMeasurementEngine = Depends(get_measurement_engine),
) -> ModificationEngineFactory:
    """
    Factory function that returns a builder of ModificationEngine instances.

    Args:
        measurement_engine: Engine injected into every modification engine

    Returns:
        Callable taking base terms and committed modifications
    """

    def build(
        terms: LeaseContractTerms, modifications: Iterable[ModificationRecord]
    ) -> ModificationEngine:
        return ModificationEngine(terms, modifications, measurement_engine=measurement_engine)

    return build
