"""Repository for registered users ([{username, password}, ...])."""
from typing import Dict, List, Optional
from .base import BaseRepository


class UserRepository(BaseRepository):
    """Persists the user list to a JSON file.

    Schema::

        [
            {"username": "<email>", "password": "<plaintext>"}
        ]
    """

    def __init__(self, file_path: str = 'users.json') -> None:
        super().__init__(file_path)

    def load(self) -> List[Dict]:
        users = self._load([])
        if not isinstance(users, list):
            self._log.warning("Ignoring non-list user data in %s", self._path)
            return []
        return users

    def find(self, username: str) -> Optional[Dict]:
        """Return the stored record for *username*, or ``None``."""
        return next((u for u in self.load() if u.get('username') == username), None)

    def append(self, user: Dict) -> None:
        """Add *user* to the end of the list, then persist."""
        users = self.load()
        users.append(user)
        self.save(users)

    def save(self, users: List[Dict]) -> None:
        self._save(users)
