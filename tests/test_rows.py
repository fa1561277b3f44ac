#!/usr/bin/env python3
"""
Test suite for idmatch/rows.py — positional row contracts
"""

import logging
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from idmatch.exceptions import FatalCatalogError, MalformedRowError
from idmatch.models import CatalogEntry, ExternalRecord, PersonRole, Role
from idmatch.rows import (
    clean_field, parse_catalog_row, parse_roster_row,
    parse_external_row, parse_external_rows,
)


class TestCleanField:

    def test_strips_whitespace(self):
        assert clean_field("  Heat ") == "Heat"

    def test_removes_quotes(self):
        assert clean_field('"Crouching Tiger, Hidden Dragon"') == "Crouching Tiger, Hidden Dragon"

    def test_none(self):
        assert clean_field(None) == ""


class TestCatalogRow:

    def test_basic_row(self):
        assert parse_catalog_row(["1", "Inception", "2010"]) == CatalogEntry(1, "Inception", 2010)

    def test_quoted_title(self):
        entry = parse_catalog_row([" 7 ", '"Heat"', " 1995 "])
        assert entry == CatalogEntry(7, "Heat", 1995)

    def test_null_year_is_sentinel(self):
        assert parse_catalog_row(["3", "Lost Film", "NULL"]).year == 0

    def test_empty_year_is_sentinel(self):
        assert parse_catalog_row(["3", "Lost Film", ""]).year == 0

    def test_extra_columns_ignored(self):
        entry = parse_catalog_row(["4", "Alien", "1979", "ignored"])
        assert entry == CatalogEntry(4, "Alien", 1979)

    def test_non_numeric_id_is_fatal(self):
        with pytest.raises(FatalCatalogError):
            parse_catalog_row(["abc", "Alien", "1979"])

    def test_short_row_is_malformed(self):
        with pytest.raises(MalformedRowError):
            parse_catalog_row(["4", "Alien"])

    def test_non_numeric_year_is_malformed(self):
        with pytest.raises(MalformedRowError):
            parse_catalog_row(["4", "Alien", "late seventies"])


class TestRosterRow:

    def test_cast_row(self):
        assert parse_roster_row(["1", '"Keanu Reeves"', "cast"]) == \
            PersonRole(1, "Keanu Reeves", Role.CAST)

    def test_director_row_case_insensitive(self):
        assert parse_roster_row(["1", "Lana Wachowski", " Director "]).role is Role.DIRECTOR

    def test_unknown_role(self):
        with pytest.raises(MalformedRowError):
            parse_roster_row(["1", "Someone", "producer"])

    def test_non_numeric_movie_id(self):
        """Roster ids are skippable, unlike catalog ids"""
        with pytest.raises(MalformedRowError):
            parse_roster_row(["x1", "Someone", "cast"])

    def test_empty_name(self):
        with pytest.raises(MalformedRowError):
            parse_roster_row(["1", '""', "cast"])

    def test_short_row(self):
        with pytest.raises(MalformedRowError):
            parse_roster_row(["1", "Someone"])


class TestExternalRow:

    ROW = ["xbox", "movie", "EXT-42", '"Inception"', "7/16/2010 12:00:00 AM", "Leonardo DiCaprio"]

    def test_reads_id_title_date(self):
        record = parse_external_row(self.ROW)
        assert record == ExternalRecord("EXT-42", "Inception", "7/16/2010 12:00:00 AM")

    def test_no_signal_by_default(self):
        assert parse_external_row(self.ROW).person_signal is None

    def test_signal_column(self):
        assert parse_external_row(self.ROW, signal_column=5).person_signal == "Leonardo DiCaprio"

    def test_signal_column_out_of_range(self):
        assert parse_external_row(self.ROW, signal_column=12).person_signal is None

    def test_empty_signal_is_none(self):
        row = self.ROW[:5] + ["  "]
        assert parse_external_row(row, signal_column=5).person_signal is None

    def test_short_row(self):
        with pytest.raises(MalformedRowError):
            parse_external_row(["a", "b", "EXT-1", "Title"])

    def test_empty_external_id(self):
        with pytest.raises(MalformedRowError):
            parse_external_row(["a", "b", " ", "Title", "1/1/2000 12:00:00 AM"])

    def test_batch_skips_malformed_rows(self, caplog):
        rows = [
            self.ROW,
            ["too", "short"],
            ["a", "b", "EXT-43", "Heat", "12/15/1995 12:00:00 AM"],
        ]
        with caplog.at_level(logging.WARNING):
            records = parse_external_rows(rows)
        assert [r.external_id for r in records] == ["EXT-42", "EXT-43"]
        assert "external row 2" in caplog.text
