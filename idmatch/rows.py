#!/usr/bin/env python3
"""
Row contracts for the three tabular inputs

Rows arrive already tokenized (see idmatch.sources). These parsers turn one
positional row into a model object or raise:
- MalformedRowError: caller logs and skips the row
- FatalCatalogError: catalog id is corrupt, loading must stop
"""

import logging
from typing import List, Optional, Sequence

from idmatch.constants import (
    CATALOG_COLUMNS, ROSTER_COLUMNS, NULL_YEAR_MARKERS, UNKNOWN_YEAR,
    EXTERNAL_ID_COLUMN, EXTERNAL_TITLE_COLUMN, EXTERNAL_DATE_COLUMN,
    EXTERNAL_MIN_COLUMNS,
)
from idmatch.exceptions import MalformedRowError, FatalCatalogError
from idmatch.models import CatalogEntry, PersonRole, ExternalRecord, Role

logger = logging.getLogger(__name__)


def clean_field(value: Optional[str]) -> str:
    """Trim whitespace and drop embedded double quotes"""
    if value is None:
        return ''
    return value.strip().replace('"', '')


def _check_width(row: Sequence[str], width: int, kind: str):
    if len(row) < width:
        raise MalformedRowError(
            f"{kind} row has {len(row)} columns, expected {width}: {list(row)}"
        )


def parse_catalog_row(row: Sequence[str]) -> CatalogEntry:
    """
    Parse [id, title, year] into a CatalogEntry

    "NULL" or empty year maps to UNKNOWN_YEAR. A non-numeric id is fatal
    because every downstream mapping depends on it.
    """
    _check_width(row, CATALOG_COLUMNS, 'Catalog')

    id_str = clean_field(row[0])
    try:
        movie_id = int(id_str)
    except ValueError:
        raise FatalCatalogError(f"Catalog id is not an integer: '{id_str}' in {list(row)}")

    title = clean_field(row[1])

    year_str = clean_field(row[2])
    if year_str in NULL_YEAR_MARKERS:
        year = UNKNOWN_YEAR
    else:
        try:
            year = int(year_str)
        except ValueError:
            raise MalformedRowError(f"Catalog year is not an integer: '{year_str}' in {list(row)}")

    return CatalogEntry(movie_id, title, year)


def parse_roster_row(row: Sequence[str]) -> PersonRole:
    """Parse [movie_id, name, role] into a PersonRole"""
    _check_width(row, ROSTER_COLUMNS, 'Roster')

    id_str = clean_field(row[0])
    try:
        movie_id = int(id_str)
    except ValueError:
        raise MalformedRowError(f"Roster movie id is not an integer: '{id_str}' in {list(row)}")

    name = clean_field(row[1])
    if not name:
        raise MalformedRowError(f"Roster row has no name: {list(row)}")

    role_str = clean_field(row[2]).lower()
    try:
        role = Role(role_str)
    except ValueError:
        raise MalformedRowError(f"Unknown roster role '{role_str}' in {list(row)}")

    return PersonRole(movie_id, name, role)


def parse_external_row(row: Sequence[str], signal_column: Optional[int] = None) -> ExternalRecord:
    """
    Parse an external feed row into an ExternalRecord

    Only the id, title and release date columns are read, plus the
    person-signal column when one is configured.
    """
    _check_width(row, EXTERNAL_MIN_COLUMNS, 'External')

    external_id = clean_field(row[EXTERNAL_ID_COLUMN])
    if not external_id:
        raise MalformedRowError(f"External row has no id: {list(row)}")

    person_signal = None
    if signal_column is not None and 0 <= signal_column < len(row):
        person_signal = clean_field(row[signal_column]) or None

    return ExternalRecord(
        external_id=external_id,
        title=clean_field(row[EXTERNAL_TITLE_COLUMN]),
        release_date=clean_field(row[EXTERNAL_DATE_COLUMN]),
        person_signal=person_signal,
    )


def parse_external_rows(rows, signal_column: Optional[int] = None,
                        log: Optional[logging.Logger] = None) -> List[ExternalRecord]:
    """Parse a feed, skipping malformed rows with a warning"""
    log = log or logger
    records = []
    for line_no, row in enumerate(rows, start=1):
        try:
            records.append(parse_external_row(row, signal_column))
        except MalformedRowError as e:
            log.warning(f"Skipping external row {line_no}: {e}")
    return records
