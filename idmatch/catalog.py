#!/usr/bin/env python3
"""
Internal catalog index: (normalized title, year) -> candidate internal ids

Built once from the reference catalog and read-only afterwards. Keys that
collide (remakes, re-releases, franchise reuses) keep every id in their
candidate set; nothing is overwritten. Collisions are what the resolver's
roster disambiguation works on.
"""

import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from idmatch.constants import UNKNOWN_YEAR
from idmatch.exceptions import FatalCatalogError, MalformedRowError
from idmatch.models import CatalogEntry
from idmatch.normalization import normalize_title
from idmatch.rows import parse_catalog_row

logger = logging.getLogger(__name__)

_EMPTY: FrozenSet[int] = frozenset()


class CatalogIndex:
    """Frozen title+year -> internal id lookup over the reference catalog"""

    def __init__(self, entries: Iterable[CatalogEntry], log: Optional[logging.Logger] = None):
        self.log = log or logger
        by_key: Dict[Tuple[str, int], set] = defaultdict(set)
        by_id: Dict[int, CatalogEntry] = {}

        for entry in entries:
            if entry.id in by_id:
                raise FatalCatalogError(
                    f"Duplicate catalog id {entry.id}: '{by_id[entry.id].title}' and '{entry.title}'"
                )
            by_id[entry.id] = entry
            by_key[(normalize_title(entry.title), entry.year)].add(entry.id)

        self._by_id = MappingProxyType(by_id)
        self._by_key = MappingProxyType({key: frozenset(ids) for key, ids in by_key.items()})

        collisions = len(self.collisions())
        self.log.info(f"Indexed {len(self._by_id)} catalog entries under {len(self._by_key)} title+year keys")
        if collisions:
            self.log.info(f"{collisions} title+year keys are shared by several catalog entries")

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]],
                  log: Optional[logging.Logger] = None) -> 'CatalogIndex':
        """
        Build the index from tokenized catalog rows

        Malformed rows are skipped with a warning. FatalCatalogError
        (non-numeric or repeated id) propagates and aborts the load.
        """
        log = log or logger
        entries: List[CatalogEntry] = []
        skipped = 0
        for line_no, row in enumerate(rows, start=1):
            try:
                entries.append(parse_catalog_row(row))
            except MalformedRowError as e:
                skipped += 1
                log.warning(f"Skipping catalog row {line_no}: {e}")

        if skipped:
            log.warning(f"Skipped {skipped} malformed catalog rows")
        return cls(entries, log=log)

    def lookup(self, normalized_title: str, year: int) -> FrozenSet[int]:
        """
        Return candidate internal ids for an already-normalized title and year

        Callers MUST pass a key produced by normalize_title(); the index was
        built with it. Returns an empty frozenset on a miss.
        """
        return self._by_key.get((normalized_title, year), _EMPTY)

    def get(self, internal_id: int) -> Optional[CatalogEntry]:
        return self._by_id.get(internal_id)

    def collisions(self) -> List[Tuple[Tuple[str, int], FrozenSet[int]]]:
        """Keys with more than one candidate, sorted by key"""
        return sorted(
            ((key, ids) for key, ids in self._by_key.items() if len(ids) > 1),
            key=lambda item: item[0],
        )

    def __contains__(self, internal_id: int) -> bool:
        return internal_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def get_stats(self) -> Dict:
        """Get catalog index statistics"""
        return {
            'total_entries': len(self._by_id),
            'distinct_keys': len(self._by_key),
            'collision_keys': len(self.collisions()),
            'unknown_year_entries': sum(
                1 for entry in self._by_id.values() if entry.year == UNKNOWN_YEAR
            ),
        }
