#!/usr/bin/env python3
"""
Entry points over tokenized rows

    indices = build_indices(catalog_rows, roster_rows)
    results = match_all(indices, external_rows, signal_column=7)

Rows are any iterables of string sequences, e.g. idmatch.sources.read_rows().
"""

import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence

from idmatch.catalog import CatalogIndex
from idmatch.models import MatchResult, Resolution
from idmatch.resolver import Resolver
from idmatch.roster import RosterIndex
from idmatch.rows import parse_external_rows

logger = logging.getLogger(__name__)

Rows = Iterable[Sequence[str]]


class Indices(NamedTuple):
    catalog: CatalogIndex
    roster: RosterIndex


def build_indices(catalog_rows: Rows, roster_rows: Rows,
                  log: Optional[logging.Logger] = None) -> Indices:
    """
    Build both frozen indices, one pass over each input

    Raises:
        FatalCatalogError: a catalog id is non-numeric or repeated
    """
    log = log or logger
    log.info("Importing catalog")
    catalog = CatalogIndex.from_rows(catalog_rows, log=log)
    roster = RosterIndex.from_rows(roster_rows, log=log)
    log.info("Catalog imported")
    return Indices(catalog, roster)


def resolve_rows(indices: Indices, external_rows: Rows, signal_column: Optional[int] = None,
                 workers: int = 1, log: Optional[logging.Logger] = None) -> List[Resolution]:
    """Resolve every well-formed external row, in input order"""
    log = log or logger
    records = parse_external_rows(external_rows, signal_column=signal_column, log=log)
    resolver = Resolver(indices.catalog, indices.roster, log=log)
    return resolver.resolve_all(records, workers=workers)


def match_all(indices: Indices, external_rows: Rows, signal_column: Optional[int] = None,
              workers: int = 1, log: Optional[logging.Logger] = None) -> List[MatchResult]:
    """
    Map external rows to internal ids

    Args:
        indices: Output of build_indices()
        external_rows: Tokenized external feed rows
        signal_column: Column holding the person/crew text used to break
            title+year ties (None: ties stay unresolved)
        workers: Thread count for matching
        log: Diagnostic sink

    Returns:
        MatchResult list in external-row order, at most one per row
    """
    resolutions = resolve_rows(indices, external_rows, signal_column=signal_column,
                               workers=workers, log=log)
    return [r.result for r in resolutions if r.result is not None]
