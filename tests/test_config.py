"""Tests for configuration and logging setup."""

import logging

import pytest
from pydantic import ValidationError

import leaguehistory.config as config_module
from leaguehistory.config import (
    clear_config_cache,
    find_config_file,
    get_config,
    get_data_dir,
    get_data_files,
    get_league_name,
    get_log_dir,
    get_pythagorean_exponent,
    get_records_limit,
    get_score_epsilon,
)
from leaguehistory.diagnostics import DiagnosticKind, DiagnosticLog
from leaguehistory.logging_config import setup_logging
from leaguehistory.schemas import LeagueConfig
from leaguehistory.utils import save_json


@pytest.fixture
def fresh_config():
    """Drop the cached config before and after a test."""
    clear_config_cache()
    yield
    clear_config_cache()


def close_handlers(logger):
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []


class TestConfig:
    """Tests for data/league_config.json."""

    def test_defaults_loaded(self, fresh_config):
        config = get_config()
        assert config.league_name
        assert get_score_epsilon() == pytest.approx(1e-6)
        assert get_pythagorean_exponent() == pytest.approx(2.37)
        assert get_records_limit() == 10

    def test_config_is_cached(self):
        assert get_config() is get_config()

    def test_config_found_in_working_directory(self, tmp_path, monkeypatch, fresh_config):
        save_json(tmp_path / 'data' / 'league_config.json', {
            'league_name': 'Local League',
            'records_limit': 5,
        })
        monkeypatch.chdir(tmp_path)

        assert get_league_name() == 'Local League'
        assert get_records_limit() == 5
        assert get_data_dir().resolve() == (tmp_path / 'data').resolve()
        assert get_log_dir().resolve() == (tmp_path / 'logs').resolve()

    def test_defaults_without_config_file(self, tmp_path, monkeypatch, fresh_config):
        """Test that an installed package with no config file falls back to defaults."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(config_module, 'PROJECT_DIR', tmp_path / 'site-packages')

        assert find_config_file() is None
        assert get_config() == LeagueConfig()
        assert get_league_name() == 'League History'
        assert get_data_dir().resolve() == (tmp_path / 'data').resolve()

    def test_data_files(self):
        assert get_data_files() == {
            'owners': 'owners-data.json',
            'standings': 'season_standings-data.json',
            'weekly': 'weekly_matchups-data.json',
            'metadata': 'league-metadata.json',
        }

    def test_rejects_non_json_file_names(self):
        with pytest.raises(ValidationError):
            LeagueConfig(league_name='Test', owners_file='owners.csv')

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            LeagueConfig(league_name='Test', scoring_mode='ppr')


class TestLogging:
    """Tests for logging setup."""

    def test_writes_log_file(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path / 'logs', log_to_console=False)
        logger.info('Building all-time records')
        for handler in logger.handlers:
            handler.flush()

        log_files = list((tmp_path / 'logs').glob('leaguehistory_*.log'))
        assert len(log_files) == 1
        assert 'Building all-time records' in log_files[0].read_text()

        close_handlers(logger)

    def test_diagnostics_written_to_own_file(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path, log_to_console=False)
        DiagnosticLog().report(
            DiagnosticKind.UNRESOLVED_OWNER, '2006', 3, 'big dogs',
            'No owner found for team "Big Dogs" in season 2006 week 3',
        )
        logger.info('Building all-time records')
        for handler in logger.handlers:
            handler.flush()

        diagnostics_text = next(tmp_path.glob('diagnostics_*.log')).read_text()
        assert diagnostics_text.strip() == 'No owner found for team "Big Dogs" in season 2006 week 3'

        run_text = next(tmp_path.glob('leaguehistory_*.log')).read_text()
        assert 'Building all-time records' in run_text
        assert 'Big Dogs' in run_text

        close_handlers(logger)

    def test_rerun_replaces_handlers(self):
        logger = setup_logging(log_to_file=False, level=logging.WARNING)
        setup_logging(log_to_file=False, level=logging.WARNING)
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        close_handlers(logger)
        logger.setLevel(logging.NOTSET)
