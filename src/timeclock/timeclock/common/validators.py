from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.constants import PIN_LENGTH, WAGE_DECIMALS, WAGE_MAX_INTEGER_DIGITS
from ..core.enums import Role
from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_non_negative_decimal(value: Any, field_name: str) -> Decimal:
    # bool is an int subclass; reject it explicitly
    if value is None or isinstance(value, bool) or value == "":
        raise ValidationError(f"{field_name} is required")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if amount < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return amount


def require_role(value: Any) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(r.value for r in Role)
        raise ValidationError(f"Invalid role {value!r} (allowed: {allowed})")


def require_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false", "1", "0"}:
        return value.strip().lower() in {"true", "1"}
    raise ValidationError(f"{field_name} must be true or false")


def require_pin(value: Any) -> str:
    pin = str(value).strip() if value is not None else ""
    if len(pin) != PIN_LENGTH or not pin.isdigit():
        raise ValidationError(f"PIN must be exactly {PIN_LENGTH} digits")
    return pin


def require_wage(value: Any) -> Decimal:
    """Hourly wage that fits the DECIMAL(12, 2) column exactly."""
    wage = require_non_negative_decimal(value, "Hourly wage")
    if wage >= Decimal(10) ** WAGE_MAX_INTEGER_DIGITS:
        raise ValidationError("Hourly wage is too large")

    step = Decimal(1).scaleb(-WAGE_DECIMALS)
    if wage.quantize(step) != wage:
        raise ValidationError(f"Hourly wage allows at most {WAGE_DECIMALS} decimal places")
    return wage.quantize(step)
