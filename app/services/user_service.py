"""Business logic for registration and login."""
import logging
import re
from typing import Dict

from ..errors import AuthError, ConflictError, ValidationError
from ..repositories.user_repository import UserRepository

logger = logging.getLogger('travel.services.user')

_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def is_valid_email(value) -> bool:
    """Return ``True`` if *value* looks like ``local@domain.tld``."""
    return isinstance(value, str) and bool(_EMAIL_RE.match(value))


class UserService:
    """Validates credentials and manages the user list, delegating
    persistence to :class:`~app.repositories.user_repository.UserRepository`.

    Rules
    -----
    * Usernames must be email-shaped (``local@domain.tld``, no whitespace).
    * Usernames are unique; a second registration raises ``ConflictError``.
    * Passwords are stored and compared as plaintext.
    """

    def __init__(self, repository: UserRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register(self, username: str, password: str) -> Dict[str, str]:
        """Create a new user.

        Returns:
            ``{"username": ...}`` for the new account.

        Raises:
            ValidationError: missing fields or a non-email username.
            ConflictError:   the username is already taken.
        """
        if not username or not password:
            raise ValidationError('Username and password required')
        if not is_valid_email(username):
            raise ValidationError('A valid email is required')
        if self._repo.find(username) is not None:
            raise ConflictError('User already exists')
        self._repo.append({'username': username, 'password': password})
        logger.info('Registered new user: %s', username)
        return {'username': username}

    def login(self, username: str, password: str) -> Dict[str, str]:
        """Check *username*/*password* against the stored records.

        Raises:
            ValidationError: non-email username.
            AuthError:       no record matches both fields exactly.
        """
        if not is_valid_email(username):
            raise ValidationError('A valid email is required')
        user = self._repo.find(username)
        if user is None or user.get('password') != password:
            logger.info('Rejected login for %s', username)
            raise AuthError('Invalid credentials')
        return {'username': username}

    def exists(self, username: str) -> bool:
        return self._repo.find(username) is not None

    def count(self) -> int:
        """Return the number of registered users."""
        return len(self._repo.load())
