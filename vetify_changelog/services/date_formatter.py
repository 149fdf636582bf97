"""
Spanish display dates for changelog entries.
"""

import re
from datetime import date
from typing import Optional

from vetify_changelog.config.logging_config import get_logger

logger = get_logger(__name__)

SPANISH_MONTHS = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)

# Date part of an ISO date or datetime ("2024-01-15", "2024-01-15T10:30:00Z")
ISO_DATE_PATTERN = re.compile(r'^\s*(\d{4}-\d{2}-\d{2})(?:[T ]\S*)?\s*$')


def format_date_spanish(iso_date: Optional[str]) -> str:
    """
    Render an ISO date as a Spanish display date.

    "2024-01-15" becomes "15 de enero de 2024". The calendar date is used as
    written, without timezone conversion. Empty input returns an empty
    string and unparseable input is returned unchanged.

    Args:
        iso_date: ISO date string from a changelog heading.

    Returns:
        Display string; never raises.
    """
    if not iso_date:
        return ""
    if not isinstance(iso_date, str):
        return str(iso_date)

    match = ISO_DATE_PATTERN.match(iso_date)
    if not match:
        logger.debug("Unrecognized changelog date", value=iso_date)
        return iso_date

    try:
        parsed = date.fromisoformat(match.group(1))
    except ValueError:
        logger.debug("Invalid changelog date", value=iso_date)
        return iso_date

    return f"{parsed.day} de {SPANISH_MONTHS[parsed.month - 1]} de {parsed.year}"
