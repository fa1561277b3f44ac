#!/usr/bin/env python3
"""
Cast and director roster per internal movie id

- Cast: set of names per movie
- Director: first director in input order. The source data does not
  guarantee one director per movie; extra directors are kept in
  directors_of() but never change director_of().
- Read-only after construction
"""

import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from idmatch.exceptions import MalformedRowError
from idmatch.models import PersonRole, Role
from idmatch.rows import parse_roster_row

logger = logging.getLogger(__name__)


class RosterIndex:
    """Load and query cast/director credits by internal id"""

    def __init__(self, roles: Iterable[PersonRole], log: Optional[logging.Logger] = None):
        self.log = log or logger

        # Structure: {42: {'Keanu Reeves', 'Carrie-Anne Moss'}, ...}
        cast: Dict[int, set] = defaultdict(set)
        # Structure: {42: ['Lana Wachowski', 'Lilly Wachowski'], ...} in input order
        directors: Dict[int, List[str]] = defaultdict(list)
        credits = 0

        for person in roles:
            if person.role is Role.CAST:
                cast[person.movie_id].add(person.name)
                credits += 1
            elif person.name not in directors[person.movie_id]:
                directors[person.movie_id].append(person.name)
                if len(directors[person.movie_id]) > 1:
                    self.log.debug(
                        f"Movie {person.movie_id} has several directors; "
                        f"keeping '{directors[person.movie_id][0]}', also saw '{person.name}'"
                    )

        self._cast = MappingProxyType({k: frozenset(v) for k, v in cast.items()})
        self._directors = MappingProxyType({k: tuple(v) for k, v in directors.items()})
        self._credits = credits

        self.log.info(
            f"Loaded roster: {credits} cast credits for {len(self._cast)} movies, "
            f"directors for {len(self._directors)} movies"
        )

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]],
                  log: Optional[logging.Logger] = None) -> 'RosterIndex':
        """Build the roster from tokenized rows, skipping malformed ones"""
        log = log or logger
        roles: List[PersonRole] = []
        skipped = 0
        for line_no, row in enumerate(rows, start=1):
            try:
                roles.append(parse_roster_row(row))
            except MalformedRowError as e:
                skipped += 1
                log.warning(f"Skipping roster row {line_no}: {e}")

        if skipped:
            log.warning(f"Skipped {skipped} malformed roster rows")
        return cls(roles, log=log)

    def cast_of(self, internal_id: int) -> FrozenSet[str]:
        return self._cast.get(internal_id, frozenset())

    def director_of(self, internal_id: int) -> Optional[str]:
        """First director seen for the movie, or None"""
        directors = self._directors.get(internal_id)
        return directors[0] if directors else None

    def directors_of(self, internal_id: int) -> Tuple[str, ...]:
        return self._directors.get(internal_id, ())

    def get_stats(self) -> Dict:
        return {
            'movies_with_cast': len(self._cast),
            'movies_with_director': len(self._directors),
            'multi_director_movies': sum(1 for d in self._directors.values() if len(d) > 1),
            'cast_credits': self._credits,
        }
