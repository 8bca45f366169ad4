"""Input validation utilities."""
import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from hostd_pin.utils.errors import ValidationError

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(h|ms|m|s)")
_DURATION_UNITS = {
    "h": 3600.0,
    "m": 60.0,
    "s": 1.0,
    "ms": 0.001,
}


def validate_currency_code(code: str) -> str:
    """
    Validate and normalize a currency code.

    Args:
        code: Currency code (e.g., "usd", "EUR")

    Returns:
        Lowercase currency code

    Raises:
        ValidationError: If the code is empty or not alphabetic
    """
    if not isinstance(code, str):
        raise ValidationError(f"Invalid currency code: {code!r}")
    code = code.strip().lower()
    if not code or not code.isalpha():
        raise ValidationError(f"Invalid currency code: {code!r}")
    return code


def parse_duration(value: Any) -> timedelta:
    """
    Parse a duration value.

    Accepts Go-style duration strings ("90s", "5m", "1h30m", "48h"),
    plain numbers of seconds, or a timedelta.

    Raises:
        ValidationError: If the value cannot be parsed or is not positive
    """
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, bool):
        raise ValidationError(f"Invalid duration: {value!r}")
    elif isinstance(value, (int, float)):
        try:
            duration = timedelta(seconds=value)
        except (ValueError, OverflowError):
            raise ValidationError(f"Invalid duration: {value!r}")
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError("Invalid duration: empty string")
        try:
            duration = timedelta(seconds=float(text))
        except (ValueError, OverflowError):
            pos = 0
            seconds = 0.0
            for match in _DURATION_PART.finditer(text):
                if match.start() != pos:
                    break
                seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
                pos = match.end()
            if pos != len(text):
                raise ValidationError(f"Invalid duration: {value!r}")
            duration = timedelta(seconds=seconds)
    else:
        raise ValidationError(f"Invalid duration: {value!r}")

    if duration <= timedelta(0):
        raise ValidationError(f"Duration must be positive, got: {value!r}")
    return duration


def parse_decimal(value: Any, name: str) -> Decimal:
    """Parse a non-negative decimal configuration value."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid {name}: {value!r}")
    try:
        # str() keeps YAML floats like 0.1 from carrying binary noise
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {name}: {value!r}")
    if not result.is_finite():
        raise ValidationError(f"Invalid {name}: {value!r}")
    if result < 0:
        raise ValidationError(f"{name} must not be negative, got: {value!r}")
    return result


def validate_threshold(value: Any) -> Decimal:
    """Validate the deviation threshold, a fraction in [0, 1]."""
    threshold = parse_decimal(value, "threshold")
    if threshold > 1:
        raise ValidationError(
            f"threshold is a fraction and must be <= 1, got: {value!r}"
        )
    return threshold
