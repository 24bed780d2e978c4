"""Application configuration management."""

import logging
from functools import lru_cache
from pathlib import Path

from .handicap import HandicapStyle
from .schemas import TornConfig
from .utils import load_json

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'torn_config.json'

logger = logging.getLogger('torn.config')


@lru_cache(maxsize=1)
def get_config() -> TornConfig:
    """
    Load application configuration from data/torn_config.json.

    Configuration is cached after first load. A missing file gives the
    defaults; an invalid one raises.

    Returns:
        TornConfig object with validated settings

    Raises:
        ValueError: If the config file has invalid structure

    Example:
        from torn.config import get_config
        config = get_config()
        print(f'Game server: {config.server}')
    """
    if not CONFIG_PATH.exists():
        logger.debug(f'No config at {CONFIG_PATH}, using defaults')
        return TornConfig()
    return load_json(CONFIG_PATH, schema=TornConfig)


def get_server_name() -> str:
    """Get the configured game server connector name."""
    return get_config().server


def get_handicap_style() -> HandicapStyle:
    """Get the handicap style new leagues start with."""
    return HandicapStyle.from_text(get_config().handicap_style)


def get_log_level() -> int:
    """Get the configured logging level as a logging module constant."""
    return getattr(logging, get_config().log_level)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime.
    """
    get_config.cache_clear()
