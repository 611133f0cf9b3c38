"""Services package: expose all concrete services from one import."""
from .user_service import UserService, is_valid_email
from .city_service import CityService

__all__ = [
    'UserService',
    'CityService',
    'is_valid_email',
]
