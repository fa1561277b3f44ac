#!/usr/bin/env python3
"""
Shared constants for catalog ID matching

Single source of truth for date formats, sentinel values, and row layouts.
DO NOT duplicate these values in other modules - import from here instead.
"""

# External release dates look like "3/13/1991 12:00:00 AM"
RELEASE_DATE_FORMAT = '%m/%d/%Y %I:%M:%S %p'

# Year value meaning "unknown" - never a real calendar year
UNKNOWN_YEAR = 0

# Catalog year cells that mean "no year recorded"
NULL_YEAR_MARKERS = ('', 'NULL')

# Roster role column values (compared lowercase)
ROLE_CAST = 'cast'
ROLE_DIRECTOR = 'director'

# Catalog row: id, title, year
CATALOG_COLUMNS = 3

# Roster row: movie_id, name, role
ROSTER_COLUMNS = 3

# External feed row positions (other columns are ignored)
EXTERNAL_ID_COLUMN = 2
EXTERNAL_TITLE_COLUMN = 3
EXTERNAL_DATE_COLUMN = 4
EXTERNAL_MIN_COLUMNS = 5

# Output CSV headers
MAPPING_FIELDS = ['internal_id', 'external_id']
UNRESOLVED_FIELDS = ['external_id', 'title', 'release_date', 'outcome', 'candidates', 'reason']
