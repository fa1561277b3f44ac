#!/usr/bin/env python3
"""
CSV row source and result writers

read_rows() is the tokenizer the matcher expects upstream: quoted fields may
contain commas, the header row is skipped, blank lines are dropped.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, Iterator, List

from idmatch.constants import MAPPING_FIELDS, UNRESOLVED_FIELDS
from idmatch.models import MatchResult, Outcome, Resolution

logger = logging.getLogger(__name__)


def read_rows(path: Path, skip_header: bool = True) -> Iterator[List[str]]:
    """Yield data rows of a CSV file as lists of raw strings"""
    with open(path, 'r', newline='', encoding='utf-8') as f:
        reader = csv.reader(f)
        if skip_header:
            next(reader, None)
        for row in reader:
            if not row or not any(cell.strip() for cell in row):
                continue
            yield row


def write_mappings(results: Iterable[MatchResult], output_path: Path) -> int:
    """Write internal_id,external_id pairs; returns rows written"""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(MAPPING_FIELDS)
        for result in results:
            writer.writerow([result.internal_id, result.external_id])
            count += 1

    logger.info(f"Mappings written to {output_path} ({count} rows)")
    return count


def write_unresolved(resolutions: Iterable[Resolution], output_path: Path) -> int:
    """
    Write review report for records that did not map

    One row per AMBIGUOUS or MISS resolution, with candidates and reason,
    so a curator can follow up on each.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=UNRESOLVED_FIELDS)
        writer.writeheader()
        for resolution in resolutions:
            if resolution.outcome not in (Outcome.AMBIGUOUS, Outcome.MISS):
                continue
            record = resolution.record
            writer.writerow({
                'external_id': record.external_id,
                'title': record.title,
                'release_date': record.release_date,
                'outcome': resolution.outcome.value,
                'candidates': ';'.join(str(c) for c in resolution.candidates),
                'reason': resolution.reason,
            })
            count += 1

    logger.info(f"Unresolved report written to {output_path} ({count} rows)")
    return count
