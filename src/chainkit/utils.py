from __future__ import annotations

from decimal import Decimal, InvalidOperation


def strip_0x(value: str) -> str:
    return value[2:] if value[:2].lower() == "0x" else value


def hex_to_int(value: str | None) -> int:
    if not value or value == "0x":
        return 0
    return int(value, 16)


def format_units(value: int, decimals: int = 18) -> str:
    """Render a raw integer amount in human units without float rounding."""
    scaled = Decimal(value).scaleb(-decimals)
    text = format(scaled, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def parse_units(amount: str, decimals: int = 18) -> int:
    """Convert a human-readable amount (e.g. "1.5") to a raw integer."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    raw = value.scaleb(decimals)
    if raw != raw.to_integral_value():
        raise ValueError(f"Amount {amount} has more than {decimals} decimal places")
    return int(raw)
