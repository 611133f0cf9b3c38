"""Repository package: expose all concrete repositories from one import."""
from .user_repository import UserRepository
from .city_repository import CityRepository

__all__ = [
    'UserRepository',
    'CityRepository',
]
