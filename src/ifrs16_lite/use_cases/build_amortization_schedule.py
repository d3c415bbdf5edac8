from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Mapping

from ifrs16_lite.domain.errors import InvalidScheduleError
from ifrs16_lite.domain.lease import AmortizationPeriod, PaymentTiming, add_months
from ifrs16_lite.domain.present_value import ZERO, round_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AmortizationScheduleBuilder:
    """
    Build the period-by-period liability and right-of-use asset schedule.

    Rounding policy:
    - Interest is rounded to cents every period, the final one included
    - The final period's principal is whatever brings the liability to the
      residual value, and its payment is that principal plus interest, so
      accumulated rounding drift lands in the last payment
    - Asset amortization is straight-line in cents; the final period takes
      the remainder so the asset lands exactly on the residual value

    With payments at the beginning of a period, interest accrues on the
    balance left after that period's payment. ``extra_payments`` maps a
    period number to an amount settled together with that period's payment.
    """

    def build(
        self,
        initial_liability: Decimal,
        initial_asset: Decimal,
        periodic_rate: Decimal,
        payment_amount: Decimal,
        number_of_periods: int,
        timing: PaymentTiming = PaymentTiming.END,
        residual_value: Decimal = ZERO,
        start_date: date | None = None,
        months_per_period: int = 1,
        extra_payments: Mapping[int, Decimal] | None = None,
    ) -> list[AmortizationPeriod]:
        if number_of_periods <= 0:
            raise InvalidScheduleError(
                "number_of_periods must be > 0", number_of_periods=number_of_periods
            )
        if payment_amount < 0:
            raise InvalidScheduleError("payment_amount must be >= 0")

        extra_payments = extra_payments or {}
        payment_amount = Decimal(payment_amount)
        periodic_rate = Decimal(periodic_rate)
        liability = Decimal(initial_liability)
        asset = Decimal(initial_asset)
        residual = Decimal(residual_value)

        asset_base = asset - residual
        straight_line = round_money(asset_base / Decimal(number_of_periods))

        schedule: list[AmortizationPeriod] = []

        for period in range(1, number_of_periods + 1):
            is_last = period == number_of_periods

            beginning_liability = liability
            payment = payment_amount + Decimal(extra_payments.get(period, ZERO))
            interest_base = beginning_liability
            if timing is PaymentTiming.BEGINNING:
                interest_base -= payment

            if is_last:
                # Drift can leave the due balance a few cents short of the payment
                interest = round_money(max(interest_base, ZERO) * periodic_rate)
                principal = beginning_liability - residual
                payment = principal + interest
            else:
                interest = round_money(interest_base * periodic_rate)
                principal = payment - interest
            liability = beginning_liability + interest - payment

            beginning_asset = asset
            if is_last:
                amortization = beginning_asset - residual
            else:
                amortization = straight_line
                if asset_base >= 0:
                    # Never amortize below the residual before the final period
                    amortization = min(amortization, max(beginning_asset - residual, ZERO))
            asset = beginning_asset - amortization

            payment_date = None
            if start_date is not None:
                payment_date = add_months(start_date, (period - 1) * months_per_period)

            schedule.append(
                AmortizationPeriod(
                    period=period,
                    payment_date=payment_date,
                    payment=payment,
                    beginning_liability=beginning_liability,
                    interest_expense=interest,
                    principal_payment=principal,
                    ending_liability=liability,
                    beginning_asset=beginning_asset,
                    amortization=amortization,
                    ending_asset=asset,
                )
            )

        logger.debug(
            "Amortization schedule built",
            extra={
                "number_of_periods": number_of_periods,
                "initial_liability": str(initial_liability),
                "final_payment": str(schedule[-1].payment),
            },
        )

        return schedule
