#!/usr/bin/env python3
"""
Data containers shared by the catalog indices and the resolver
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Role(Enum):
    """Credit kind on a roster row"""
    CAST = 'cast'
    DIRECTOR = 'director'


class Outcome(Enum):
    """How an external record was resolved"""
    MATCHED = 'matched'              # exactly one candidate
    DISAMBIGUATED = 'disambiguated'  # several candidates, roster picked one
    AMBIGUOUS = 'ambiguous'          # several candidates, roster could not pick
    MISS = 'miss'                    # no candidate


@dataclass(frozen=True)
class CatalogEntry:
    """One movie of the internal reference catalog"""
    id: int
    title: str
    year: int  # 0 = unknown year


@dataclass(frozen=True)
class PersonRole:
    """One cast or director credit for a catalog movie"""
    movie_id: int
    name: str
    role: Role


@dataclass(frozen=True)
class ExternalRecord:
    """One row of the external feed"""
    external_id: str
    title: str
    release_date: str
    # Free-text person/crew column used to break title+year ties
    person_signal: Optional[str] = None


@dataclass(frozen=True)
class MatchResult:
    """Internal id -> external id mapping"""
    internal_id: int
    external_id: str


@dataclass(frozen=True)
class Resolution:
    """Per-record verdict with enough context to explain it"""
    record: ExternalRecord
    outcome: Outcome
    key: Tuple[str, int]
    candidates: Tuple[int, ...] = field(default_factory=tuple)
    internal_id: Optional[int] = None
    reason: str = ''

    @property
    def result(self) -> Optional[MatchResult]:
        if self.internal_id is None:
            return None
        return MatchResult(self.internal_id, self.record.external_id)
