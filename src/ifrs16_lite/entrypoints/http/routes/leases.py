from fastapi import APIRouter, Depends

from ifrs16_lite.entrypoints.http.dependencies import (
    get_analyse_sensitivity_use_case,
    get_assess_exemptions_use_case,
    get_measurement_engine,
)
from ifrs16_lite.entrypoints.http.dtos.lease import (
    ExemptionResponseDTO,
    LeaseMeasurementResponseDTO,
    LeaseTermsDTO,
    SensitivityAnalysisResponseDTO,
    ValidationResponseDTO,
)
from ifrs16_lite.entrypoints.http.error_responses import ERROR_RESPONSES, ErrorResponse
from ifrs16_lite.entrypoints.http.mappers.lease_mapper import LeaseMapper
from ifrs16_lite.use_cases.analyse_sensitivity import AnalyseLeaseSensitivity
from ifrs16_lite.use_cases.assess_exemptions import AssessLeaseExemptions
from ifrs16_lite.use_cases.measure_lease import LeaseMeasurementEngine


router = APIRouter(tags=["Leases"])


@router.post(
    "/leases/measurement",
    response_model=LeaseMeasurementResponseDTO,
    summary="Measure lease liability and right-of-use asset",
    description="""
    Measure a lease under IFRS 16 and build its amortization schedule.

    ## Monetary Values
    - All monetary values are strings (e.g., "1000.00")
    - Rates are percentages as strings (e.g., "8.5" = 8.5% per year)

    ## Calculation
    - Periodic rate = (1 + annual/100)^(1/periods_per_year) - 1
    - Liability = PV(payments) + PV(guaranteed residual value) + PV(variable payments)
      + initial payment
    - ROU asset = liability + initial direct costs - lease incentives
    - The final period closes the liability and asset to the residual value; its
      payment absorbs accumulated cent rounding

    ## Example
    ```
    POST /v1/leases/measurement
    {
        "lease_start_date": "2024-01-01",
        "lease_end_date": "2026-12-31",
        "lease_term_months": 36,
        "payment_amount": "1000.00",
        "discount_rate_annual": "8.5"
    }
    ```
    """,
    responses={
        422: {
            "model": ErrorResponse,
            "description": "Validation error",
            "content": {
                "application/json": {
                    "examples": {
                        "invalid_term": {
                            "summary": "Term not divisible by the payment frequency",
                            "value": {
                                "detail": "lease_term_months (10) is not a whole number "
                                "of quarterly periods",
                                "code": "INVALID_TERM",
                            },
                        },
                    }
                }
            },
        },
    },
)
def measure_lease(
    payload: LeaseTermsDTO,
    engine: LeaseMeasurementEngine = Depends(get_measurement_engine),
) -> LeaseMeasurementResponseDTO:
    """Parse → map → execute → map → return."""
    terms = LeaseMapper.to_domain_terms(payload)

    measurement = engine.measure(terms)

    return LeaseMapper.to_measurement_response(measurement)


@router.post(
    "/leases/validation",
    response_model=ValidationResponseDTO,
    responses=ERROR_RESPONSES,
    summary="Validate contract terms",
    description="Returns every violated rule at once; never fails with 422 for business rules.",
)
def validate_lease(
    payload: LeaseTermsDTO,
    engine: LeaseMeasurementEngine = Depends(get_measurement_engine),
) -> ValidationResponseDTO:
    terms = LeaseMapper.to_domain_terms(payload)

    result = engine.validate_terms(terms)

    return LeaseMapper.to_validation_response(result)


@router.post(
    "/leases/exemptions",
    response_model=ExemptionResponseDTO,
    responses=ERROR_RESPONSES,
    summary="Assess short-term and low-value exemptions",
)
def assess_exemptions(
    payload: LeaseTermsDTO,
    use_case: AssessLeaseExemptions = Depends(get_assess_exemptions_use_case),
) -> ExemptionResponseDTO:
    terms = LeaseMapper.to_domain_terms(payload)

    assessment = use_case.execute(terms)

    return LeaseMapper.to_exemption_response(assessment)


@router.post(
    "/leases/sensitivity",
    response_model=SensitivityAnalysisResponseDTO,
    responses=ERROR_RESPONSES,
    summary="Analyse sensitivity to rate, payment and term",
    description="""
    Remeasure the contract under shifted inputs and stress scenarios.

    - Discount rate: -2, -1, -0.5, +0.5, +1, +2 percentage points (floored at 0)
    - Payment amount: -20%, -10%, -5%, +5%, +10%, +20%
    - Lease term: -12, -6, -3, +3, +6, +12 months (whole payment periods only)

    Changes are reported against the base measurement.
    """,
)
def analyse_sensitivity(
    payload: LeaseTermsDTO,
    use_case: AnalyseLeaseSensitivity = Depends(get_analyse_sensitivity_use_case),
) -> SensitivityAnalysisResponseDTO:
    terms = LeaseMapper.to_domain_terms(payload)

    analysis = use_case.execute(terms)

    return LeaseMapper.to_sensitivity_response(analysis)
