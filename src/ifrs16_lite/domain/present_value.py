"""Present value math for lease measurement.

Pure Decimal routines. Nothing here rounds except ``round_money``; callers
round only the figures they publish.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ifrs16_lite.domain.lease import PaymentTiming


ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round a monetary amount to cents (ROUND_HALF_UP)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def periodic_rate_from_annual(annual_rate_percent: Decimal, periods_per_year: int) -> Decimal:
    """
    Convert an annual rate (percent) to the equivalent effective periodic rate.

    periodic = (1 + annual/100) ** (1/periods_per_year) - 1
    """
    annual = Decimal(annual_rate_percent)
    if annual == 0:
        return ZERO

    exponent = ONE / Decimal(periods_per_year)
    return (ONE + annual / HUNDRED) ** exponent - ONE


def annual_rate_from_periodic(periodic_rate: Decimal, periods_per_year: int) -> Decimal:
    """Inverse of ``periodic_rate_from_annual``; returns a percentage."""
    rate = Decimal(periodic_rate)
    if rate == 0:
        return ZERO

    return ((ONE + rate) ** periods_per_year - ONE) * HUNDRED


def present_value_of_annuity(
    payment: Decimal,
    periodic_rate: Decimal,
    number_of_periods: int,
    timing: PaymentTiming = PaymentTiming.END,
) -> Decimal:
    """
    Present value of a level payment stream.

    Ordinary annuity: PV = payment * (1 - (1 + r)^-n) / r
    Annuity due: ordinary PV * (1 + r)

    The formula is indeterminate at r = 0, where the PV is the plain sum.
    """
    payment = Decimal(payment)
    rate = Decimal(periodic_rate)

    if rate == 0:
        return payment * Decimal(number_of_periods)

    discount_factor = (ONE + rate) ** -number_of_periods
    pv = payment * (ONE - discount_factor) / rate

    if timing is PaymentTiming.BEGINNING:
        pv *= ONE + rate

    return pv


def present_value_of_lump_sum(
    amount: Decimal,
    periodic_rate: Decimal,
    number_of_periods: int,
) -> Decimal:
    """Present value of a single amount due after ``number_of_periods`` periods."""
    amount = Decimal(amount)
    rate = Decimal(periodic_rate)

    if rate == 0:
        return amount

    return amount / (ONE + rate) ** number_of_periods
