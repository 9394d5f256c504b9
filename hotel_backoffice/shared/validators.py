"""Shared validation utilities"""

import re
from typing import Optional

_TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """Validate a 24h ``HH:MM`` clock time"""
    if value is None:
        return value

    value = value.strip()
    if not _TIME_OF_DAY.match(value):
        raise ValueError("Time must use 24h HH:MM format")
    return value
