#!/usr/bin/env python3
"""
Test suite for match_catalog.py — config merging and end-to-end CLI runs
"""

import argparse
import csv
import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import match_catalog
from idmatch.exceptions import ConfigError

MOVIES_CSV = (
    'id,title,year\n'
    '1,"Inception",2010\n'
    '2,"Dune",2021\n'
    '3,"Dune",2021\n'
    '4,"Crouching Tiger, Hidden Dragon",2000\n'
)

ROSTER_CSV = (
    'movie_id,name,role\n'
    '2,"Timothee Chalamet",cast\n'
    '3,"Kyle MacLachlan",cast\n'
    '3,"Someone Else",director\n'
)

FEED_CSV = (
    'source,kind,MediaId,Title,OriginalReleaseDate,Crew\n'
    'xbox,movie,X-1,"Inception",7/16/2010 12:00:00 AM,\n'
    'xbox,movie,X-2,"Dune",10/22/2021 12:00:00 AM,"Kyle MacLachlan, Sting"\n'
    'xbox,movie,X-3,"Dune",10/22/2021 12:00:00 AM,\n'
    'xbox,movie,X-4,"Crouching Tiger, Hidden Dragon",12/8/2000 12:00:00 AM,\n'
    'xbox,movie,X-5,"Tenet",9/3/2020 12:00:00 AM,\n'
)


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / 'movies.csv').write_text(MOVIES_CSV, encoding='utf-8')
    (tmp_path / 'roster.csv').write_text(ROSTER_CSV, encoding='utf-8')
    (tmp_path / 'feed.csv').write_text(FEED_CSV, encoding='utf-8')
    return tmp_path


def read_csv(path):
    with open(path, newline='', encoding='utf-8') as f:
        return list(csv.reader(f))


def namespace(**overrides):
    values = {
        'config': Path('config.yaml'), 'config_explicit': False,
        'catalog': None, 'roster': None, 'external': None,
        'output': None, 'unresolved': None,
        'signal_column': None, 'workers': None,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestResolveSettings:

    def test_yaml_config_loaded(self, workspace):
        (workspace / 'config.yaml').write_text(
            'catalog_path: movies.csv\n'
            'roster_path: roster.csv\n'
            'external_path: feed.csv\n'
            'signal_column: 5\n',
            encoding='utf-8',
        )
        settings = match_catalog.resolve_settings(namespace())
        assert settings['catalog_path'] == Path('movies.csv')
        assert settings['signal_column'] == 5
        assert settings['workers'] == 1
        assert settings['output_path'] == Path('output/id_mapping.csv')

    def test_flags_override_config(self, workspace):
        (workspace / 'config.yaml').write_text(
            'catalog_path: movies.csv\n'
            'roster_path: roster.csv\n'
            'external_path: feed.csv\n'
            'workers: 2\n',
            encoding='utf-8',
        )
        settings = match_catalog.resolve_settings(
            namespace(external=Path('other.csv'), workers=4)
        )
        assert settings['external_path'] == Path('other.csv')
        assert settings['workers'] == 4

    def test_missing_paths(self, workspace):
        with pytest.raises(ConfigError, match='external_path'):
            match_catalog.resolve_settings(
                namespace(catalog=Path('movies.csv'), roster=Path('roster.csv'))
            )

    def test_explicit_missing_config(self, workspace):
        with pytest.raises(ConfigError, match='not found'):
            match_catalog.resolve_settings(
                namespace(config=Path('nope.yaml'), config_explicit=True)
            )

    def test_bad_workers(self, workspace):
        with pytest.raises(ConfigError):
            match_catalog.resolve_settings(namespace(
                catalog=Path('movies.csv'), roster=Path('roster.csv'),
                external=Path('feed.csv'), workers=0,
            ))

    def test_non_mapping_config(self, workspace):
        (workspace / 'config.yaml').write_text('- just\n- a list\n', encoding='utf-8')
        with pytest.raises(ConfigError, match='mapping'):
            match_catalog.resolve_settings(namespace())


class TestMain:

    ARGS = ['--catalog', 'movies.csv', '--roster', 'roster.csv', '--external', 'feed.csv']

    def test_end_to_end(self, workspace, capsys):
        code = match_catalog.main(self.ARGS + ['--signal-column', '5'])
        assert code == 0

        assert read_csv(workspace / 'output' / 'id_mapping.csv') == [
            ['internal_id', 'external_id'],
            ['1', 'X-1'],
            ['3', 'X-2'],
            ['4', 'X-4'],
        ]
        unresolved = read_csv(workspace / 'output' / 'unresolved.csv')
        assert [row[0] for row in unresolved[1:]] == ['X-3', 'X-5']
        assert 'Match rate: 60.0% (3/5)' in capsys.readouterr().out

    def test_config_file_run(self, workspace):
        (workspace / 'feed.yaml').write_text(
            'catalog_path: movies.csv\n'
            'roster_path: roster.csv\n'
            'external_path: feed.csv\n'
            'output_path: results/map.csv\n'
            'unresolved_path: results/review.csv\n'
            'workers: 2\n',
            encoding='utf-8',
        )
        assert match_catalog.main(['--config', 'feed.yaml']) == 0
        rows = read_csv(workspace / 'results' / 'map.csv')
        assert [row[1] for row in rows[1:]] == ['X-1', 'X-4']

    def test_missing_input_file(self, workspace):
        assert match_catalog.main(['--catalog', 'absent.csv', '--roster', 'roster.csv',
                                   '--external', 'feed.csv']) == 1

    def test_missing_settings(self, workspace):
        assert match_catalog.main(['--catalog', 'movies.csv']) == 1

    def test_corrupt_catalog_aborts(self, workspace):
        (workspace / 'movies.csv').write_text(
            'id,title,year\n1,Heat,1995\nxx,Heat,1986\n', encoding='utf-8'
        )
        assert match_catalog.main(self.ARGS) == 1
        assert not (workspace / 'output' / 'id_mapping.csv').exists()
