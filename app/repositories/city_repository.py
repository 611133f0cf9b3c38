"""Repository for per-user city lists ({username: [city, ...], latest: [...]})."""
from typing import Dict, List, Optional
from .base import BaseRepository

LATEST_KEY = 'latest'


class CityRepository(BaseRepository):
    """Persists the city database to a JSON file.

    Schema::

        {
            "<username>": [
                {"name": "<str>", "attractions": [<str>], "restaurants": [<str>]}
            ],
            "latest": [ ...the most recently mutated user's list... ]
        }

    A missing or unreadable file is treated as an empty database.
    """

    def __init__(self, file_path: str = 'data.json') -> None:
        super().__init__(file_path)

    def load(self) -> Dict:
        data = self._load({})
        if not isinstance(data, dict):
            self._log.warning("Ignoring non-object city data in %s", self._path)
            return {}
        return data

    @staticmethod
    def user_cities(data: Dict, username: str) -> Optional[List[Dict]]:
        """Return *username*'s list inside a loaded *data* dict, or ``None``."""
        if not username or username == LATEST_KEY:
            return None
        return data.get(username)

    @staticmethod
    def latest(data: Dict) -> List[Dict]:
        return data.get(LATEST_KEY) or []

    def save(self, data: Dict) -> None:
        self._save(data)
