"""Money helpers. All amounts are Decimal rounded to cents."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Round an amount to two decimal places, half up."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def seat_total(base_price: Decimal, surcharge: Decimal | None, quantity: int) -> Decimal:
    """
    Price a block of seats.

    Args:
        base_price: Screening base price per seat
        surcharge: Room surcharge per seat (None counts as zero)
        quantity: Number of seats

    Returns:
        (base_price + surcharge) * quantity, rounded to cents
    """
    unit = Decimal(base_price) + Decimal(surcharge or 0)
    return to_money(unit * quantity)
