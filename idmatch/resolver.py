#!/usr/bin/env python3
"""
Resolver: external record -> at most one internal catalog id

Resolution order:
1. [PRECISION] Normalize title, extract year from release date
2. [PRECISION] Catalog lookup by (normalized title, year)
   - no candidate      → MISS (expected, not an error)
   - one candidate     → MATCHED
3. [REASONING] Several candidates → roster disambiguation, ascending id:
   - any cast name contained in the record's person signal, or
   - director equal to the person signal
   First candidate satisfying either → DISAMBIGUATED, none → AMBIGUOUS

The resolver never mutates the indices, so a batch can be fanned out
over worker threads and run any number of times with identical output.
"""

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple

from idmatch.catalog import CatalogIndex
from idmatch.models import ExternalRecord, MatchResult, Outcome, Resolution
from idmatch.normalization import normalize_title, extract_year
from idmatch.roster import RosterIndex

logger = logging.getLogger(__name__)


class Resolver:
    """Match external records against frozen catalog and roster indices"""

    def __init__(self, catalog: CatalogIndex, roster: RosterIndex,
                 log: Optional[logging.Logger] = None):
        self.catalog = catalog
        self.roster = roster
        self.log = log or logger

    def resolve(self, record: ExternalRecord) -> Resolution:
        """Resolve one record and explain the verdict"""
        key = (normalize_title(record.title), extract_year(record.release_date, log=self.log))
        candidates = tuple(sorted(self.catalog.lookup(*key)))

        if not candidates:
            self.log.debug(f"Miss: '{record.title}' ({key[1]}) → normalized: '{key[0]}'")
            return Resolution(record, Outcome.MISS, key,
                              reason=f"no catalog entry for '{key[0]}' ({key[1]})")

        if len(candidates) == 1:
            self.log.debug(f"Hit: '{record.title}' ({key[1]}) → {candidates[0]}")
            return Resolution(record, Outcome.MATCHED, key, candidates,
                              internal_id=candidates[0], reason='unique title+year')

        return self._disambiguate(record, key, candidates)

    def _disambiguate(self, record: ExternalRecord, key: Tuple[str, int],
                      candidates: Tuple[int, ...]) -> Resolution:
        signal = record.person_signal
        if not signal:
            self.log.warning(
                f"Ambiguous: '{record.title}' ({key[1]}) [{record.external_id}] matches "
                f"{list(candidates)} and the record has no person signal"
            )
            return Resolution(record, Outcome.AMBIGUOUS, key, candidates,
                              reason='several candidates, no person signal')

        for internal_id in candidates:
            reason = self._roster_evidence(internal_id, signal)
            if reason:
                self.log.debug(f"Disambiguated '{record.title}' ({key[1]}) → {internal_id}: {reason}")
                return Resolution(record, Outcome.DISAMBIGUATED, key, candidates,
                                  internal_id=internal_id, reason=reason)

        self.log.warning(
            f"Ambiguous: '{record.title}' ({key[1]}) [{record.external_id}] matches "
            f"{list(candidates)}; no cast or director agrees with '{signal}'"
        )
        return Resolution(record, Outcome.AMBIGUOUS, key, candidates,
                          reason='several candidates, roster did not agree with person signal')

    def _roster_evidence(self, internal_id: int, signal: str) -> Optional[str]:
        """Return why the candidate fits the signal, or None"""
        # sorted so the reported name is stable
        for name in sorted(self.roster.cast_of(internal_id)):
            if name in signal:
                return f"cast '{name}'"

        director = self.roster.director_of(internal_id)
        if director is not None and director == signal:
            return f"director '{director}'"

        return None

    def match(self, record: ExternalRecord) -> Optional[MatchResult]:
        return self.resolve(record).result

    def resolve_all(self, records: Iterable[ExternalRecord], workers: int = 1) -> List[Resolution]:
        """
        Resolve a batch, one Resolution per record, in input order

        Args:
            records: External records
            workers: Thread count; 1 resolves inline

        Returns:
            List of Resolution in the same order as records
        """
        if workers <= 1:
            return [self.resolve(record) for record in records]

        # Executor.map yields results in submission order
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.resolve, records))

    def match_all(self, records: Iterable[ExternalRecord], workers: int = 1) -> List[MatchResult]:
        """Matched records only, in input order; misses and ambiguities contribute nothing"""
        return [
            resolution.result
            for resolution in self.resolve_all(records, workers=workers)
            if resolution.result is not None
        ]


def summarize(resolutions: Iterable[Resolution]) -> Counter:
    """Count resolutions by outcome name"""
    return Counter(resolution.outcome.value for resolution in resolutions)
