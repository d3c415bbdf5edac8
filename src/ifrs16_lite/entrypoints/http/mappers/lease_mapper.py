from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ifrs16_lite.domain.errors import ValidationError
from ifrs16_lite.domain.lease import (
    AmortizationPeriod,
    LeaseContractTerms,
    LeaseMeasurement,
    PaymentFrequency,
    PaymentTiming,
    ValidationResult,
    VariablePayment,
)
from ifrs16_lite.entrypoints.http.dtos.lease import (
    AmortizationPeriodDTO,
    ExemptionResponseDTO,
    LeaseMeasurementResponseDTO,
    LeaseTermsDTO,
    SensitivityAnalysisResponseDTO,
    SensitivityResultDTO,
    SensitivityVariationDTO,
    StressScenarioDTO,
    ValidationResponseDTO,
)
from ifrs16_lite.use_cases.analyse_sensitivity import SensitivityAnalysis
from ifrs16_lite.use_cases.assess_exemptions import ExemptionAssessment


def parse_decimal(
    value: str | None, field: str, errors: list[dict[str, str]]
) -> Decimal | None:
    """
    Convert a decimal string, recording a field error instead of raising.

    Returns None for None input or when conversion fails; callers raise one
    ValidationError with every collected error afterwards.
    """
    if value is None:
        return None
    try:
        return Decimal(value)
    except (InvalidOperation, ValueError):
        errors.append(
            {
                "field": field,
                "message": f"Must be a valid decimal: {value}",
                "code": "INVALID_DECIMAL",
            }
        )
        return None


def _required(value: Decimal | None) -> Decimal:
    # Placeholder to continue validation; never reaches the domain
    return value if value is not None else Decimal("0")


class LeaseMapper:
    """Maps between REST DTOs and domain models for lease measurement."""

    @staticmethod
    def to_domain_terms(dto: LeaseTermsDTO, field_prefix: str = "") -> LeaseContractTerms:
        """
        Converts request DTO to domain LeaseContractTerms.

        Handles string → Decimal conversion at the boundary.

        Raises:
            ValidationError: If string values cannot be converted to valid Decimals
        """
        errors: list[dict[str, str]] = []

        def money(name: str) -> Decimal:
            return _required(parse_decimal(getattr(dto, name), field_prefix + name, errors))

        payment_amount = money("payment_amount")
        discount_rate_annual = money("discount_rate_annual")
        initial_payment = money("initial_payment")
        guaranteed_residual_value = money("guaranteed_residual_value")
        initial_direct_costs = money("initial_direct_costs")
        lease_incentives = money("lease_incentives")
        asset_fair_value = parse_decimal(
            dto.asset_fair_value, field_prefix + "asset_fair_value", errors
        )
        variable_payments = tuple(
            VariablePayment(
                payment_date=item.payment_date,
                amount=_required(
                    parse_decimal(
                        item.amount, f"{field_prefix}variable_payments.{index}.amount", errors
                    )
                ),
                description=item.description,
            )
            for index, item in enumerate(dto.variable_payments)
        )

        if errors:
            raise ValidationError(errors=errors)

        return LeaseContractTerms(
            lease_start_date=dto.lease_start_date,
            lease_end_date=dto.lease_end_date,
            lease_term_months=dto.lease_term_months,
            payment_amount=payment_amount,
            discount_rate_annual=discount_rate_annual,
            payment_frequency=PaymentFrequency.parse(dto.payment_frequency),
            payment_timing=PaymentTiming(dto.payment_timing),
            initial_payment=initial_payment,
            guaranteed_residual_value=guaranteed_residual_value,
            initial_direct_costs=initial_direct_costs,
            lease_incentives=lease_incentives,
            currency_code=dto.currency_code.upper(),
            asset_fair_value=asset_fair_value,
            purchase_option_reasonably_certain=dto.purchase_option_reasonably_certain,
            variable_payments=variable_payments,
        )

    @staticmethod
    def to_period_response(period: AmortizationPeriod) -> AmortizationPeriodDTO:
        return AmortizationPeriodDTO(
            period=period.period,
            payment_date=period.payment_date,
            payment=str(period.payment),
            beginning_liability=str(period.beginning_liability),
            interest_expense=str(period.interest_expense),
            principal_payment=str(period.principal_payment),
            ending_liability=str(period.ending_liability),
            beginning_asset=str(period.beginning_asset),
            amortization=str(period.amortization),
            ending_asset=str(period.ending_asset),
        )

    @staticmethod
    def to_measurement_response(measurement: LeaseMeasurement) -> LeaseMeasurementResponseDTO:
        """
        Converts domain LeaseMeasurement to response DTO.

        Handles Decimal → string conversion at the boundary.
        """
        return LeaseMeasurementResponseDTO(
            lease_liability_initial=str(measurement.lease_liability_initial),
            right_of_use_asset_initial=str(measurement.right_of_use_asset_initial),
            number_of_periods=measurement.number_of_periods,
            monthly_interest_expense=str(measurement.monthly_interest_expense),
            monthly_principal_payment=str(measurement.monthly_principal_payment),
            monthly_amortization=str(measurement.monthly_amortization),
            total_interest_expense=str(measurement.total_interest_expense),
            total_principal_payments=str(measurement.total_principal_payments),
            total_lease_payments=str(measurement.total_lease_payments),
            effective_interest_rate_annual=str(measurement.effective_interest_rate_annual),
            effective_interest_rate_monthly=str(measurement.effective_interest_rate_monthly),
            amortization_schedule=[
                LeaseMapper.to_period_response(p) for p in measurement.amortization_schedule
            ],
        )

    @staticmethod
    def to_validation_response(result: ValidationResult) -> ValidationResponseDTO:
        return ValidationResponseDTO(is_valid=result.is_valid, errors=list(result.errors))

    @staticmethod
    def to_exemption_response(assessment: ExemptionAssessment) -> ExemptionResponseDTO:
        expense = assessment.straight_line_expense_per_month
        return ExemptionResponseDTO(
            exception_type=assessment.exception_type.value,
            accounting_treatment=assessment.accounting_treatment.value,
            is_short_term=assessment.is_short_term,
            is_low_value=assessment.is_low_value,
            low_value_threshold=str(assessment.low_value_threshold),
            straight_line_expense_per_month=str(expense) if expense is not None else None,
            justification=assessment.justification,
        )

    @staticmethod
    def to_sensitivity_response(analysis: SensitivityAnalysis) -> SensitivityAnalysisResponseDTO:
        base = analysis.base_measurement
        most_sensitive = analysis.most_sensitive_parameter
        return SensitivityAnalysisResponseDTO(
            lease_liability_initial=str(base.lease_liability_initial),
            right_of_use_asset_initial=str(base.right_of_use_asset_initial),
            total_lease_payments=str(base.total_lease_payments),
            sensitivity_results=[
                SensitivityResultDTO(
                    parameter=result.parameter.value,
                    base_value=str(result.base_value),
                    variations=[
                        SensitivityVariationDTO(
                            variation=str(v.variation),
                            new_value=str(v.new_value),
                            lease_liability_change=str(v.lease_liability_change),
                            right_of_use_asset_change=str(v.right_of_use_asset_change),
                            total_payment_change=str(v.total_payment_change),
                            impact_percentage=str(v.impact_percentage),
                        )
                        for v in result.variations
                    ],
                )
                for result in analysis.sensitivity_results
            ],
            stress_scenarios=[
                StressScenarioDTO(
                    scenario_type=s.scenario_type.value,
                    description=s.description,
                    probability=str(s.probability),
                    severity=s.severity.value,
                    lease_liability_change=str(s.lease_liability_change),
                    right_of_use_asset_change=str(s.right_of_use_asset_change),
                    total_financial_impact=str(s.total_financial_impact),
                    probability_weighted_impact=str(s.probability_weighted_impact),
                )
                for s in analysis.stress_scenarios
            ],
            most_sensitive_parameter=most_sensitive.value if most_sensitive else None,
        )
