from fastapi import APIRouter, Depends

from ifrs16_lite.entrypoints.http.dependencies import (
    ModificationEngineFactory,
    get_modification_engine_factory,
)
from ifrs16_lite.entrypoints.http.dtos.lease import ValidationResponseDTO
from ifrs16_lite.entrypoints.http.dtos.modification import (
    ContractStateRequestDTO,
    ContractStateResponseDTO,
    ModificationImpactResponseDTO,
    ModificationRequestDTO,
)
from ifrs16_lite.entrypoints.http.error_responses import ERROR_RESPONSES
from ifrs16_lite.entrypoints.http.mappers.lease_mapper import LeaseMapper
from ifrs16_lite.entrypoints.http.mappers.modification_mapper import ModificationMapper


router = APIRouter(tags=["Modifications"])


@router.post(
    "/leases/state",
    response_model=ContractStateResponseDTO,
    responses=ERROR_RESPONSES,
    summary="Replay modifications and return the current contract state",
    description="""
    Replays the committed modifications over the base terms, in the order
    given, and returns the remeasured contract with its modification history.

    Only modifications with status "effective" change the contract.
    """,
)
def get_contract_state(
    payload: ContractStateRequestDTO,
    build_engine: ModificationEngineFactory = Depends(get_modification_engine_factory),
) -> ContractStateResponseDTO:
    terms = LeaseMapper.to_domain_terms(payload.terms, field_prefix="terms.")
    records = ModificationMapper.to_domain_records(payload.modifications)

    engine = build_engine(terms, records)

    return ModificationMapper.to_state_response(
        engine.get_current_contract_state(), engine.get_modification_history()
    )


@router.post(
    "/leases/modifications/impact",
    response_model=ModificationImpactResponseDTO,
    responses=ERROR_RESPONSES,
    summary="Preview the impact of a modification",
    description="""
    Computes before/after measurements and deltas for a candidate
    modification without committing it.

    net_impact = liability_change + modification_fee + additional_costs
    - incentives_received (- termination_fee for terminations)
    """,
)
def preview_modification_impact(
    payload: ModificationRequestDTO,
    build_engine: ModificationEngineFactory = Depends(get_modification_engine_factory),
) -> ModificationImpactResponseDTO:
    terms = LeaseMapper.to_domain_terms(payload.terms, field_prefix="terms.")
    records = ModificationMapper.to_domain_records(payload.modifications)
    candidate = ModificationMapper.to_domain_record(
        payload.modification, field_prefix="modification."
    )

    engine = build_engine(terms, records)
    result = engine.calculate_modification_impact(candidate)

    return ModificationMapper.to_impact_response(result)


@router.post(
    "/leases/modifications/validation",
    response_model=ValidationResponseDTO,
    responses=ERROR_RESPONSES,
    summary="Validate a modification",
    description="Returns every violated rule at once so all problems can be shown together.",
)
def validate_modification(
    payload: ModificationRequestDTO,
    build_engine: ModificationEngineFactory = Depends(get_modification_engine_factory),
) -> ValidationResponseDTO:
    terms = LeaseMapper.to_domain_terms(payload.terms, field_prefix="terms.")
    records = ModificationMapper.to_domain_records(payload.modifications)
    candidate = ModificationMapper.to_domain_record(
        payload.modification, field_prefix="modification."
    )

    engine = build_engine(terms, records)
    result = engine.validate_modification(candidate)

    return LeaseMapper.to_validation_response(result)
