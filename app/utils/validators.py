"""
Custom validators for application data.
Provides reusable validation functions used by the request schemas.
"""
import re
from datetime import date

from app.utils.datetime_utils import calculate_age, utc_now

MIN_AGE = 18
MAX_AGE = 120
EARLIEST_YEAR_BUILT = 1900


def validate_password_strength(password: str) -> str:
    """
    Require at least 6 characters including a letter, a digit and a symbol.

    Raises:
        ValueError: If the password is too weak
    """
    if len(password) < 6:
        raise ValueError("Password must be at least 6 characters long")
    if not re.search(r"[a-zA-Z]", password) or not re.search(r"\d", password) or not re.search(r"[^\w\s]", password):
        raise ValueError("Password must include letters, numbers, and a special character")
    return password


def validate_birth_date(birth_date: date) -> date:
    """
    Require an age between MIN_AGE and MAX_AGE.

    Raises:
        ValueError: If the age is out of range
    """
    age = calculate_age(birth_date)
    if age < MIN_AGE or age > MAX_AGE:
        raise ValueError(f"Age must be between {MIN_AGE} and {MAX_AGE}")
    return birth_date


def validate_year_built(year: int) -> int:
    """
    Require a construction year between 1900 and the current year.

    Raises:
        ValueError: If the year is out of range
    """
    current_year = utc_now().year
    if year < EARLIEST_YEAR_BUILT or year > current_year:
        raise ValueError(f"Year built must be between {EARLIEST_YEAR_BUILT} and {current_year}")
    return year


def validate_date_available(
    available: date,
    today: date | None = None,
    earliest: date | None = None,
) -> date:
    """
    Require an availability date between `earliest` (default today) and one
    year from today.

    Raises:
        ValueError: If the date is too early or too far ahead
    """
    today = today or utc_now().date()
    earliest = earliest or today
    try:
        one_year_ahead = today.replace(year=today.year + 1)
    except ValueError:
        # 29 February
        one_year_ahead = today.replace(year=today.year + 1, day=28)
    if available < earliest or available > one_year_ahead:
        raise ValueError(
            f"Date available must be between {earliest.isoformat()} and {one_year_ahead.isoformat()}"
        )
    return available


def validate_edited_date_available(
    available: date,
    stored: date | None,
    today: date | None = None,
) -> date:
    """
    Availability rule when editing a listing.

    A listing whose stored date is still ahead follows the creation rule.
    One whose date has already passed may keep any date from the stored one
    up to a year from today.

    Raises:
        ValueError: If the date is outside the allowed window
    """
    today = today or utc_now().date()
    earliest = stored if stored is not None and stored < today else today
    return validate_date_available(available, today=today, earliest=earliest)
