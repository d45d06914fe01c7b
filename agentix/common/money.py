from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 19.99 do not carry binary noise
    return Decimal(str(value))


def dollars_to_cents(dollars: Number) -> int:
    return int((to_decimal(dollars) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_dollars(cents: int) -> Decimal:
    return (Decimal(int(cents)) / 100).quantize(CENT)
