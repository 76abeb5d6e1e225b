"""Validation rules applied before a record enters the directory."""

import re
from typing import Optional

from phone_directory.exceptions import ValidationError
from phone_directory.models.schemas import PhoneNumber, Subscriber

MIN_PHONE_LENGTH = 5
MAX_PHONE_LENGTH = 15

# Optional "+" and a 1-3 digit prefix, then at least four more digits
PHONE_PATTERN = re.compile(r'^(\+?[0-9]{1,3})?[0-9]{4,}$')
_NOT_PHONE_CHAR = re.compile(r'[^0-9+]')


def _is_name_char(char: str) -> bool:
    return char.isalpha() or char.isspace() or char in "-'"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_name(value: Optional[str], field_name: str = "Name") -> None:
    """Reject blank names and names with characters other than letters,
    whitespace, hyphens and apostrophes.

    Raises:
        ValidationError: If the name is rejected
    """
    if _is_blank(value):
        raise ValidationError(f"{field_name} cannot be empty", field=field_name)

    if not all(_is_name_char(char) for char in value):
        raise ValidationError(f"{field_name} contains invalid characters", field=field_name)


def is_valid_name(value: Optional[str]) -> bool:
    try:
        validate_name(value)
    except ValidationError:
        return False
    return True


def validate_subscriber_fields(last_name: Optional[str], first_name: Optional[str],
                               middle_name: Optional[str] = None) -> None:
    """Validate proposed subscriber name fields.

    Last and first name are required; the middle name is checked only
    when it is present and non-blank.

    Raises:
        ValidationError: On the first rejected field
    """
    validate_name(last_name, "Last name")
    validate_name(first_name, "First name")

    if not _is_blank(middle_name):
        validate_name(middle_name, "Middle name")


def normalize_phone_number(raw: str) -> str:
    """Strip everything except digits and plus signs."""
    return _NOT_PHONE_CHAR.sub("", raw)


def validate_phone_number(raw: Optional[str]) -> None:
    """Validate a phone number as entered.

    Length and shape are checked on the normalized form, but the caller
    keeps and stores the raw input.

    Raises:
        ValidationError: If the number is empty, too short, too long or malformed
    """
    if _is_blank(raw):
        raise ValidationError("Phone number cannot be empty", field="number")

    normalized = normalize_phone_number(raw)

    if len(normalized) < MIN_PHONE_LENGTH:
        raise ValidationError("Phone number is too short", field="number")

    if len(normalized) > MAX_PHONE_LENGTH:
        raise ValidationError("Phone number is too long", field="number")

    if not PHONE_PATTERN.match(normalized):
        raise ValidationError("Invalid phone number format", field="number")


def is_valid_subscriber(subscriber: Optional[Subscriber]) -> bool:
    if subscriber is None:
        return False
    try:
        validate_subscriber_fields(
            subscriber.last_name,
            subscriber.first_name,
            subscriber.middle_name
        )
    except ValidationError:
        return False
    return True


def is_valid_phone_number(phone_number: Optional[PhoneNumber]) -> bool:
    if phone_number is None:
        return False
    try:
        validate_phone_number(phone_number.number)
    except ValidationError:
        return False
    return True
