"""Money helpers using Decimal at the edges and integer cents inside."""

from decimal import ROUND_HALF_UP, Decimal

MONEY_PRECISION = Decimal("0.01")
CENTS_PER_UNIT = 100


def quantize_money(value: Decimal) -> Decimal:
    """Return value rounded to two decimal places with HALF_UP strategy."""

    return value.quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def parse_money(value: str) -> Decimal:
    """Parse and normalize input money string into Decimal."""

    return quantize_money(Decimal(value))


def format_money(value: Decimal) -> str:
    """Render money as string with exactly two decimal places."""

    return f"{quantize_money(value):.2f}"


def to_cents(value: Decimal) -> int:
    """Convert a decimal amount into integer minor units."""

    return int(quantize_money(value) * CENTS_PER_UNIT)


def from_cents(cents: int) -> Decimal:
    """Convert integer minor units back into a two-place Decimal."""

    return quantize_money(Decimal(cents) / CENTS_PER_UNIT)


def format_cents(cents: int) -> str:
    """Render integer minor units as a two-place money string."""

    return format_money(from_cents(cents))


def split_evenly(total_cents: int, parts: int) -> list[int]:
    """Split total into `parts` integer shares that add up exactly to total.

    Every share gets the floor of the division; the leading shares absorb the
    remainder one cent each, so the output depends only on the input order.
    """

    if parts <= 0:
        raise ValueError("parts must be greater than zero")
    base, remainder = divmod(total_cents, parts)
    return [base + 1 if index < remainder else base for index in range(parts)]
