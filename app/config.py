"""Configuration manager for data file locations and list limits.

The configuration lives in a small JSON file (``config/database.json`` by
default)::

    {
        "files":    {"cities": "data.json", "users": "users.json"},
        "paths":    {"root": "./", "data": "./data.json", "users": "./users.json"},
        "defaults": {"maxCitiesPerUser": 10,
                     "maxAttractionsPerCity": 5,
                     "maxRestaurantsPerCity": 5}
    }

Stores never read this directly; they receive an immutable :class:`Settings`
built by :meth:`ConfigManager.settings`.
"""
import copy
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .repositories.base import atomic_write_json

logger = logging.getLogger('travel.config')

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, 'config', 'database.json')

DEFAULT_CONFIG: Dict[str, Any] = {
    'files': {
        'cities': 'data.json',
        'users': 'users.json',
    },
    'paths': {
        'root': './',
        'data': './data.json',
        'users': './users.json',
    },
    'defaults': {
        'maxCitiesPerUser': 10,
        'maxAttractionsPerCity': 5,
        'maxRestaurantsPerCity': 5,
    },
}

DEFAULT_CORS_ORIGIN = 'http://localhost:5173'
DEFAULT_SECRET_KEY = 'demo-secret'


@dataclass(frozen=True)
class Settings:
    """Resolved configuration handed to the stores and the Flask app."""

    cities_file: str
    users_file: str
    max_cities_per_user: int = 10
    max_attractions_per_city: int = 5
    max_restaurants_per_city: int = 5
    secret_key: str = DEFAULT_SECRET_KEY
    cors_origin: str = DEFAULT_CORS_ORIGIN
    log_level: str = 'INFO'


def deep_merge(target: Dict, source: Dict) -> Dict:
    """Return a copy of *target* with *source* merged in recursively.

    Nested dicts are merged key by key; any other value (lists included)
    from *source* replaces the one in *target*.
    """
    result = dict(target)
    for key, value in source.items():
        if isinstance(value, dict):
            result[key] = deep_merge(result.get(key) or {}, value)
        else:
            result[key] = value
    return result


class ConfigManager:
    """Loads, queries and updates the JSON configuration file.

    Args:
        config_path: Location of the JSON config file.
        base_dir:    Directory the data paths are resolved against.  Defaults
                     to the parent of the directory holding *config_path*.
    """

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH,
                 base_dir: Optional[str] = None) -> None:
        self.config_path = config_path
        self.base_dir = base_dir or os.path.dirname(
            os.path.dirname(os.path.abspath(config_path)))
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        """Read the config file, falling back to the built-in defaults."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as fh:
                loaded = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning('Could not load config %s: %s (using defaults)',
                           self.config_path, exc)
            return copy.deepcopy(DEFAULT_CONFIG)
        if not isinstance(loaded, dict):
            logger.warning('Ignoring non-object config in %s', self.config_path)
            return copy.deepcopy(DEFAULT_CONFIG)
        # Fill in sections an older or hand-edited file may be missing
        return deep_merge(copy.deepcopy(DEFAULT_CONFIG), loaded)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def _resolve(self, relative: str) -> str:
        return os.path.normpath(os.path.join(self.base_dir, relative))

    def get_cities_file_path(self) -> str:
        override = os.getenv('TRAVEL_CITIES_FILE')
        if override:
            return self._resolve(override)
        return self._resolve(self.config['paths']['data'])

    def get_users_file_path(self) -> str:
        override = os.getenv('TRAVEL_USERS_FILE')
        if override:
            return self._resolve(override)
        return self._resolve(self.config['paths']['users'])

    def get_cities_file_name(self) -> str:
        return self.config['files']['cities']

    def get_users_file_name(self) -> str:
        return self.config['files']['users']

    def get_max_cities_per_user(self) -> int:
        return int(self.config['defaults']['maxCitiesPerUser'])

    def get_max_attractions_per_city(self) -> int:
        return int(self.config['defaults']['maxAttractionsPerCity'])

    def get_max_restaurants_per_city(self) -> int:
        return int(self.config['defaults']['maxRestaurantsPerCity'])

    def get_config(self) -> Dict[str, Any]:
        return self.config

    def settings(self) -> Settings:
        """Snapshot the current configuration plus environment overrides."""
        return Settings(
            cities_file=self.get_cities_file_path(),
            users_file=self.get_users_file_path(),
            max_cities_per_user=self.get_max_cities_per_user(),
            max_attractions_per_city=self.get_max_attractions_per_city(),
            max_restaurants_per_city=self.get_max_restaurants_per_city(),
            secret_key=os.getenv('TRAVEL_SECRET_KEY', DEFAULT_SECRET_KEY),
            cors_origin=os.getenv('TRAVEL_CORS_ORIGIN', DEFAULT_CORS_ORIGIN),
            log_level=os.getenv('TRAVEL_LOG_LEVEL', 'INFO'),
        )

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update_config(self, new_config: Dict[str, Any]) -> None:
        """Merge *new_config* into the current configuration and save it.

        Renaming a data file (``files.cities`` / ``files.users``) also points
        the matching entry under ``paths`` at ``./<name>``.

        Raises:
            OSError: If the config file cannot be written.
        """
        self.config = deep_merge(self.config, new_config)
        files = new_config.get('files') or {}
        if files.get('cities'):
            self.config['paths']['data'] = f"./{files['cities']}"
        if files.get('users'):
            self.config['paths']['users'] = f"./{files['users']}"
        self._save()
        logger.info('Configuration updated: %s', self.config_path)

    def _save(self) -> None:
        atomic_write_json(self.config_path, self.config)
