from __future__ import annotations

from typing import Optional

from ..core.constants import PIN_LENGTH, VIN_LENGTH
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], message: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_vin(value: Optional[str]) -> str:
    vin = (value or "").strip().upper()
    if len(vin) != VIN_LENGTH:
        raise ValidationError(f"VIN muss {VIN_LENGTH} Zeichen lang sein")
    return vin


def require_pin(value: Optional[str]) -> str:
    pin = (value or "").strip()
    if len(pin) != PIN_LENGTH or not pin.isdigit():
        raise ValidationError(f"Bitte {PIN_LENGTH}-stelligen PIN eingeben")
    return pin


def parse_float(value, default: Optional[float] = None) -> Optional[float]:
    """Parse a form number; accepts a decimal comma."""
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", ".")
    if not text:
        return default
    try:
        return float(text)
    except ValueError:
        return default


def parse_int(value) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"Ungültige Zahl: {value}")


def require_positive(value, message: str) -> float:
    number = parse_float(value)
    if not number or number <= 0:
        raise ValidationError(message)
    return number


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
