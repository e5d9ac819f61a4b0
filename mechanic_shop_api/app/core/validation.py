"""
Pure field validators.

Each validator takes a raw value, returns the normalised value and
raises :class:`~mechanic_shop_api.app.core.exceptions.ValidationError`
naming the offending field when the value is not acceptable.  They do
not touch the database, so the service layer and any interactive
front end can share them.
"""

import re
from typing import Optional

from .config import settings
from .exceptions import ValidationError

NAME_MAX_LENGTH = 32
ADDRESS_MAX_LENGTH = 256
VIN_LENGTH = 16
ODOMETER_MAX = 9_999_999
EXPERIENCE_MAX = 99
# SQLite INTEGER columns hold signed 64-bit values.
SQLITE_INTEGER_MIN = -(2**63)
SQLITE_INTEGER_MAX = 2**63 - 1

# ``(555)123-4567`` style: separators at positions 0, 4 and 8.
_PHONE_BRACKETED = re.compile(r"^\D\d{3}\D\d{3}\D\d{4}$")
_PHONE_DASHED = re.compile(r"^\d{3}-\d{3}-\d{4}$")
_VIN_STRICT = re.compile(r"^\D{6}\d{10}$")
_VIN_ALNUM = re.compile(r"^[A-Z0-9]{16}$")


def _bounded_text(field: str, value: Optional[str], max_length: int) -> str:
    if value is None:
        raise ValidationError(field, "is required")
    value = value.strip()
    if not value:
        raise ValidationError(field, "must not be empty")
    if len(value) > max_length:
        raise ValidationError(field, f"must be at most {max_length} characters")
    return value


def _bounded_int(field: str, value: Optional[int], low: int, high: int = SQLITE_INTEGER_MAX) -> int:
    if value is None or isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "must be an integer")
    if value < low:
        raise ValidationError(field, f"must be at least {low}")
    if value > high:
        raise ValidationError(field, f"must be at most {high}")
    return value


def validate_name(field: str, value: Optional[str]) -> str:
    """Person names, car makes and models: 1 to 32 characters."""
    return _bounded_text(field, value, NAME_MAX_LENGTH)


def validate_address(value: Optional[str]) -> str:
    return _bounded_text("address", value, ADDRESS_MAX_LENGTH)


def validate_phone(value: Optional[str]) -> str:
    """Accept ``(NXX)NXX-XXXX`` (13 characters) or ``NXX-NXX-XXXX``."""
    if value is None:
        raise ValidationError("phone", "is required")
    value = value.strip()
    if _PHONE_BRACKETED.match(value) or _PHONE_DASHED.match(value):
        return value
    raise ValidationError("phone", "must look like (555)123-4567 or 555-123-4567")


def validate_experience(value: Optional[int]) -> int:
    return _bounded_int("experience", value, 1, EXPERIENCE_MAX)


def validate_vin(value: Optional[str]) -> str:
    """Return the upper-cased VIN.

    The VIN is always 16 characters.  With ``settings.strict_vin`` the
    first six must be non-digits and the last ten digits.
    """
    if value is None:
        raise ValidationError("vin", "is required")
    value = value.strip().upper()
    if len(value) != VIN_LENGTH:
        raise ValidationError("vin", f"must be exactly {VIN_LENGTH} characters")
    if settings.strict_vin:
        if not _VIN_STRICT.match(value):
            raise ValidationError("vin", "must be 6 non-digit characters followed by 10 digits")
    elif not _VIN_ALNUM.match(value):
        raise ValidationError("vin", "must contain only letters and digits")
    return value


def validate_year(value: Optional[int]) -> int:
    return _bounded_int("year", value, 1, settings.max_car_year)


def validate_odometer(value: Optional[int]) -> int:
    return _bounded_int("odometer", value, 0, ODOMETER_MAX)


def validate_complaint(value: Optional[str]) -> str:
    # Free text; an empty complaint is allowed.
    return (value or "").strip()


def validate_comment(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValidationError("comment", "must not be empty")
    return value.strip()


def validate_bill(value: Optional[int]) -> int:
    return _bounded_int("bill", value, 0)


def validate_positive(field: str, value: Optional[int]) -> int:
    return _bounded_int(field, value, 1)


def validate_integer(field: str, value: Optional[int]) -> int:
    """Any integer a SQLite INTEGER column can hold."""
    return _bounded_int(field, value, SQLITE_INTEGER_MIN)


def fits_integer(value: int) -> bool:
    """True when ``value`` can be bound as a SQLite INTEGER.

    A key outside this range cannot name a stored row, so lookups treat
    it as not found instead of passing it to the driver.
    """
    return SQLITE_INTEGER_MIN <= value <= SQLITE_INTEGER_MAX
