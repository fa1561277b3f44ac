#!/usr/bin/env python3
"""
Shared title and year normalization for catalog matching

CRITICAL: This module provides symmetric normalization for the catalog index.
The same functions MUST be used for:
1. Building the catalog index (intake)
2. Querying the catalog index with external records (query)

If these differ, lookups will fail silently.
"""

import re
import logging
from datetime import datetime
from typing import Optional

from idmatch.constants import RELEASE_DATE_FORMAT, UNKNOWN_YEAR

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r'[^a-z0-9]')


def normalize_title(title: Optional[str]) -> str:
    """
    Reduce a title to its comparison key

    Normalization steps:
    1. Lowercase
    2. Remove everything that is not an ASCII letter or digit
       (spaces, punctuation, quotes, accented letters)

    Total and idempotent: never raises, and normalizing a key again
    returns the same key.

    Args:
        title: Raw title string (None is treated as empty)

    Returns:
        Normalized title string

    Examples:
        >>> normalize_title("The Matrix")
        'thematrix'

        >>> normalize_title("the-matrix!!")
        'thematrix'

        >>> normalize_title("Amélie")
        'amlie'
    """
    if not title:
        return ''
    return _NON_ALNUM.sub('', title.lower())


def extract_year(date: Optional[str], log: Optional[logging.Logger] = None) -> int:
    """
    Derive the calendar year from an external release date

    Expected format: "M/D/YYYY h:mm:ss AM|PM", e.g. "3/13/1991 12:00:00 AM".

    Empty or unparseable input is logged and mapped to UNKNOWN_YEAR (0).
    Never raises.

    Args:
        date: Raw release date string
        log: Diagnostic sink (defaults to this module's logger)

    Returns:
        Four-digit year, or 0 when the date is missing or malformed
    """
    log = log or logger

    if date is None or not date.strip():
        log.warning("Release date is missing or empty")
        return UNKNOWN_YEAR

    try:
        return datetime.strptime(date.strip(), RELEASE_DATE_FORMAT).year
    except ValueError as e:
        log.warning(f"Invalid release date format: '{date}' ({e})")
        return UNKNOWN_YEAR
