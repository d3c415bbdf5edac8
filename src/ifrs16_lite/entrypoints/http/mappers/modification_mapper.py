from __future__ import annotations

from decimal import Decimal

from ifrs16_lite.domain.errors import ValidationError
from ifrs16_lite.domain.modification import (
    ModificationHistoryEntry,
    ModificationImpactResult,
    ModificationRecord,
    ModificationSnapshot,
    ModificationStatus,
    ModificationType,
)
from ifrs16_lite.entrypoints.http.dtos.modification import (
    ContractStateResponseDTO,
    ModificationDTO,
    ModificationHistoryEntryDTO,
    ModificationImpactDTO,
    ModificationImpactResponseDTO,
    ModificationSnapshotDTO,
    ModificationSummaryDTO,
)
from ifrs16_lite.entrypoints.http.mappers.lease_mapper import LeaseMapper, parse_decimal
from ifrs16_lite.use_cases.apply_modifications import ContractSnapshot


def _optional_str(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


class ModificationMapper:
    """Maps between REST DTOs and domain models for contract modifications."""

    @staticmethod
    def to_domain_record(dto: ModificationDTO, field_prefix: str = "") -> ModificationRecord:
        """
        Converts a modification DTO to a domain ModificationRecord.

        Raises:
            ValidationError: If any monetary string is not a valid Decimal
        """
        errors: list[dict[str, str]] = []

        def optional(name: str) -> Decimal | None:
            return parse_decimal(getattr(dto, name), field_prefix + name, errors)

        def required(name: str) -> Decimal:
            value = optional(name)
            return value if value is not None else Decimal("0")

        record_kwargs = {
            "new_monthly_payment": optional("new_monthly_payment"),
            "payment_change_amount": optional("payment_change_amount"),
            "payment_change_percentage": optional("payment_change_percentage"),
            "new_discount_rate_annual": optional("new_discount_rate_annual"),
            "rate_change_amount": optional("rate_change_amount"),
            "rate_change_percentage": optional("rate_change_percentage"),
            "new_asset_fair_value": optional("new_asset_fair_value"),
            "asset_change_amount": optional("asset_change_amount"),
            "termination_fee": optional("termination_fee"),
            "renewal_monthly_payment": optional("renewal_monthly_payment"),
            "renewal_discount_rate": optional("renewal_discount_rate"),
            "modification_fee": required("modification_fee"),
            "additional_costs": required("additional_costs"),
            "incentives_received": required("incentives_received"),
        }

        if errors:
            raise ValidationError(errors=errors)

        return ModificationRecord(
            modification_type=ModificationType(dto.modification_type),
            modification_date=dto.modification_date,
            effective_date=dto.effective_date,
            description=dto.description,
            new_term_months=dto.new_term_months,
            term_change_months=dto.term_change_months,
            termination_date=dto.termination_date,
            renewal_term_months=dto.renewal_term_months,
            status=ModificationStatus(dto.status),
            id=dto.id,
            **record_kwargs,
        )

    @staticmethod
    def to_domain_records(dtos: list[ModificationDTO]) -> list[ModificationRecord]:
        return [
            ModificationMapper.to_domain_record(dto, field_prefix=f"modifications.{index}.")
            for index, dto in enumerate(dtos)
        ]

    @staticmethod
    def to_dto(record: ModificationRecord) -> ModificationDTO:
        return ModificationDTO(
            id=record.id,
            modification_type=record.modification_type.value,
            modification_date=record.modification_date,
            effective_date=record.effective_date,
            description=record.description,
            status=record.status.value,
            new_term_months=record.new_term_months,
            term_change_months=record.term_change_months,
            new_monthly_payment=_optional_str(record.new_monthly_payment),
            payment_change_amount=_optional_str(record.payment_change_amount),
            payment_change_percentage=_optional_str(record.payment_change_percentage),
            new_discount_rate_annual=_optional_str(record.new_discount_rate_annual),
            rate_change_amount=_optional_str(record.rate_change_amount),
            rate_change_percentage=_optional_str(record.rate_change_percentage),
            new_asset_fair_value=_optional_str(record.new_asset_fair_value),
            asset_change_amount=_optional_str(record.asset_change_amount),
            termination_date=record.termination_date,
            termination_fee=_optional_str(record.termination_fee),
            renewal_term_months=record.renewal_term_months,
            renewal_monthly_payment=_optional_str(record.renewal_monthly_payment),
            renewal_discount_rate=_optional_str(record.renewal_discount_rate),
            modification_fee=str(record.modification_fee),
            additional_costs=str(record.additional_costs),
            incentives_received=str(record.incentives_received),
        )

    @staticmethod
    def _snapshot(snapshot: ModificationSnapshot) -> ModificationSnapshotDTO:
        return ModificationSnapshotDTO(
            lease_liability=str(snapshot.lease_liability),
            right_of_use_asset=str(snapshot.right_of_use_asset),
            remaining_term_months=snapshot.remaining_term_months,
            monthly_payment=str(snapshot.monthly_payment),
            discount_rate_annual=str(snapshot.discount_rate_annual),
        )

    @staticmethod
    def to_impact_response(result: ModificationImpactResult) -> ModificationImpactResponseDTO:
        impact = result.impact
        summary = result.summary
        return ModificationImpactResponseDTO(
            before_modification=ModificationMapper._snapshot(result.before_modification),
            after_modification=ModificationMapper._snapshot(result.after_modification),
            impact=ModificationImpactDTO(
                term_change=impact.term_change,
                payment_change=str(impact.payment_change),
                rate_change=str(impact.rate_change),
                liability_change=str(impact.liability_change),
                asset_change=str(impact.asset_change),
                net_impact=str(impact.net_impact),
            ),
            summary=ModificationSummaryDTO(
                modification_type=summary.modification_type.value,
                effective_date=summary.effective_date,
                total_impact=str(summary.total_impact),
                new_total_payments=str(summary.new_total_payments),
                new_total_interest=str(summary.new_total_interest),
                new_effective_rate=str(summary.new_effective_rate),
            ),
            new_schedule=[LeaseMapper.to_period_response(p) for p in result.new_schedule],
        )

    @staticmethod
    def to_history_entry(entry: ModificationHistoryEntry) -> ModificationHistoryEntryDTO:
        return ModificationHistoryEntryDTO(
            modification=ModificationMapper.to_dto(entry.modification),
            impact=ModificationMapper.to_impact_response(entry.impact),
        )

    @staticmethod
    def to_state_response(
        snapshot: ContractSnapshot, history: list[ModificationHistoryEntry]
    ) -> ContractStateResponseDTO:
        return ContractStateResponseDTO(
            lease_term_months=snapshot.terms.lease_term_months,
            payment_amount=str(snapshot.terms.payment_amount),
            discount_rate_annual=str(snapshot.terms.discount_rate_annual),
            elapsed_months=snapshot.elapsed_months,
            terminated=snapshot.terminated,
            measurement=LeaseMapper.to_measurement_response(snapshot.measurement),
            history=[ModificationMapper.to_history_entry(entry) for entry in history],
        )
