"""League history configuration management."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from .schemas import LeagueConfig
from .utils import load_json

logger = logging.getLogger('leaguehistory.config')

PROJECT_DIR = Path(__file__).parent.parent
CONFIG_FILE = Path('data') / 'league_config.json'


def find_config_file() -> Optional[Path]:
    """
    Locate data/league_config.json.

    The working directory is searched first, then the source checkout
    the package was imported from.
    """
    for base_dir in (Path.cwd(), PROJECT_DIR):
        path = base_dir / CONFIG_FILE
        if path.is_file():
            return path
    return None


def get_base_dir() -> Path:
    """Directory that relative config paths are resolved against."""
    path = find_config_file()
    return path.parent.parent if path is not None else Path.cwd()


@lru_cache(maxsize=1)
def get_config() -> LeagueConfig:
    """
    Load configuration from data/league_config.json.

    Configuration is cached after first load. Without a config file the
    LeagueConfig defaults are used.

    Returns:
        LeagueConfig object with validated settings

    Raises:
        ValueError: If config file has invalid structure

    Example:
        from leaguehistory.config import get_config
        config = get_config()
        print(f"League: {config.league_name}")
    """
    config_path = find_config_file()
    if config_path is None:
        logger.info(f'No {CONFIG_FILE} under {Path.cwd()}; using default settings')
        return LeagueConfig()
    return load_json(config_path, schema=LeagueConfig)


def get_league_name() -> str:
    """Get the league display name from config."""
    return get_config().league_name


def get_data_dir() -> Path:
    """Get the source data directory, resolved against the config's project directory."""
    data_dir = Path(get_config().data_dir)
    return data_dir if data_dir.is_absolute() else get_base_dir() / data_dir


def get_data_files() -> dict[str, str]:
    """Get source data file names keyed by source."""
    config = get_config()
    return {
        'owners': config.owners_file,
        'standings': config.standings_file,
        'weekly': config.weekly_matchups_file,
        'metadata': config.league_metadata_file,
    }


def get_score_epsilon() -> float:
    """Get the score comparison tolerance from config."""
    return get_config().score_epsilon


def get_pythagorean_exponent() -> float:
    """Get the Pythagorean expected wins exponent from config."""
    return get_config().pythagorean_exponent


def get_records_limit() -> int:
    """Get the default length of top-N record lists."""
    return get_config().records_limit


def get_log_dir() -> Path:
    """Get the log directory, resolved like the data directory."""
    log_dir = Path(get_config().log_dir)
    return log_dir if log_dir.is_absolute() else get_base_dir() / log_dir


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
