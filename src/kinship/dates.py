"""Free-form date handling for person records."""

import re
from datetime import date

MONTHS = {
    "JAN": 1,
    "FEB": 2,
    "MAR": 3,
    "APR": 4,
    "MAY": 5,
    "JUN": 6,
    "JUL": 7,
    "AUG": 8,
    "SEP": 9,
    "OCT": 10,
    "NOV": 11,
    "DEC": 12,
}

_QUALIFIERS = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|CIRCA|CA\.?|AROUND):?\s*",
    flags=re.IGNORECASE,
)
_YEAR = re.compile(r"\d{4}")

_ISO = re.compile(r"^(\d{4})([-/])(\d{1,2})(?:\2(\d{1,2})(?:[T ].*)?)?$")
_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?,?\s*(\d{4})$")
_MONTH_DAY_YEAR = re.compile(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$")
_MONTH_YEAR = re.compile(r"^([A-Za-z]+)\.?,?\s*(\d{4})$")
_NUMERIC_US = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$")
_YEAR_ONLY = re.compile(r"^(\d{4})$")


def month_number(name: str) -> int | None:
    """Map a month name or abbreviation ("Sept.", "NOVEMBER") to 1-12."""
    return MONTHS.get(name.upper().rstrip(".")[:3])


def _iso(year: int, month: int | None, day: int) -> str | None:
    if month is None or not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return f"{year:04d}-{month:02d}-{day:02d}"


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a free-form date string into ISO format (YYYY-MM-DD).
    Returns None if the date cannot be parsed.

    Handles formats like:
    - "1954-11-25", "1954-11-25T00:00:00.000Z", "1954/11/25" and "1954-11"
    - "25 NOV 1954", "25 November 1954", "11 Aug. 1968"
    - "April 17, 1850", "SEPT. 17,1910"
    - "NOV 1954", "May, 1837"
    - "05/15/1923", "01-27-1920" (month first)
    - "1698", "ABT 1905", "(about 1833)", "1789?"

    Partial dates resolve to the first day of the month or year.
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    s = _QUALIFIERS.sub("", s).strip()
    if not s:
        return None

    match = _ISO.match(s)
    if match:
        year, _, month, day = match.groups()
        # Zeroed or missing month/day ("1746-00-00", "1990-05") means unknown
        return _iso(int(year), int(month) or 1, int(day or 0) or 1)

    match = _DAY_MONTH_YEAR.match(s)
    if match:
        return _iso(int(match.group(3)), month_number(match.group(2)), int(match.group(1)))

    match = _MONTH_DAY_YEAR.match(s)
    if match:
        return _iso(int(match.group(3)), month_number(match.group(1)), int(match.group(2)))

    match = _MONTH_YEAR.match(s)
    if match:
        return _iso(int(match.group(2)), month_number(match.group(1)), 1)

    match = _NUMERIC_US.match(s)
    if match:
        return _iso(int(match.group(3)), int(match.group(1)), int(match.group(2)))

    match = _YEAR_ONLY.match(s)
    if match:
        return f"{int(match.group(1)):04d}-01-01"

    return None


def extract_year(date_str: str | None) -> int | None:
    """Return the first 4-digit year token in a date string, if any."""
    if not date_str:
        return None
    match = _YEAR.search(date_str)
    return int(match.group(0)) if match else None


def is_future(iso_date: str, today: date) -> bool:
    """ISO dates compare correctly as strings."""
    return iso_date > today.isoformat()
