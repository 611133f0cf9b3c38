"""Business logic for per-user city lists and their attractions/restaurants."""
import logging
from typing import Dict, List, Optional

from ..errors import AuthError, LimitReachedError, NotFoundError, ValidationError
from ..repositories.city_repository import LATEST_KEY, CityRepository

logger = logging.getLogger('travel.services.city')


def _as_list(value) -> List:
    """Return *value* if it is a list, otherwise an empty list."""
    return value if isinstance(value, list) else []


class CityService:
    """Applies the city-list rules, delegating persistence to
    :class:`~app.repositories.city_repository.CityRepository`.

    Rules
    -----
    * A user holds at most ``max_cities`` cities; adding a new name to a full
      list raises ``LimitReachedError``.  Re-posting an existing name replaces
      that city in place.
    * A city holds at most ``max_attractions`` attractions and
      ``max_restaurants`` restaurants.  On write the incoming lists keep
      their *first* N items; on read every list shows its *last* N items.
    * Every mutation copies the user's full list to ``latest``, which is
      what guests see.
    * Each call re-reads the whole file and each mutation rewrites it.
    """

    def __init__(self, repository: CityRepository,
                 max_cities: int = 10,
                 max_attractions: int = 5,
                 max_restaurants: int = 5) -> None:
        self._repo = repository
        self.max_cities = max_cities
        self.max_attractions = max_attractions
        self.max_restaurants = max_restaurants

    @classmethod
    def from_settings(cls, repository: CityRepository, settings) -> 'CityService':
        return cls(
            repository,
            max_cities=settings.max_cities_per_user,
            max_attractions=settings.max_attractions_per_city,
            max_restaurants=settings.max_restaurants_per_city,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_user(username: Optional[str]) -> str:
        if not username:
            raise AuthError('Login required')
        return username

    def _limit_for(self, field: str) -> int:
        return self.max_attractions if field == 'attractions' else self.max_restaurants

    @staticmethod
    def _find_city(data: Dict, username: str, city_name: str) -> Dict:
        cities = CityRepository.user_cities(data, username) or []
        city = next((c for c in cities if c.get('name') == city_name), None)
        if city is None:
            raise NotFoundError('City not found')
        return city

    def _commit(self, data: Dict, username: str) -> None:
        data[LATEST_KEY] = data[username]
        self._repo.save(data)

    def _add_item(self, username: Optional[str], city_name: str,
                  field: str, label: str, item: str) -> Dict:
        username = self._require_user(username)
        if not item:
            raise ValidationError(f'{label} required')
        data = self._repo.load()
        city = self._find_city(data, username, city_name)
        items = _as_list(city.get(field))
        city[field] = items
        limit = self._limit_for(field)
        if len(items) >= limit:
            raise LimitReachedError(f'{label} limit ({limit}) reached')
        if item not in items:
            items.append(item)
        self._commit(data, username)
        logger.info('Added %s %r to %s for %s', field[:-1], item, city_name, username)
        return city

    def _remove_item(self, username: Optional[str], city_name: str,
                     field: str, item: str) -> Dict:
        username = self._require_user(username)
        data = self._repo.load()
        city = self._find_city(data, username, city_name)
        city[field] = [x for x in _as_list(city.get(field)) if x != item]
        self._commit(data, username)
        logger.info('Removed %s %r from %s for %s', field[:-1], item, city_name, username)
        return city

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_cities(self, username: Optional[str] = None) -> List[Dict]:
        """Return the display view of *username*'s cities.

        Guests (or users with no stored list) get the ``latest`` snapshot.
        Only the last ``max_cities`` cities are returned, each with only its
        last ``max_attractions`` attractions and ``max_restaurants``
        restaurants.
        """
        data = self._repo.load()
        cities = CityRepository.user_cities(data, username)
        if cities is None:
            cities = CityRepository.latest(data)
        return [
            dict(city,
                 attractions=_as_list(city.get('attractions'))[-self.max_attractions:],
                 restaurants=_as_list(city.get('restaurants'))[-self.max_restaurants:])
            for city in cities[-self.max_cities:]
        ]

    def add_or_update_city(self, username: Optional[str], city: Optional[Dict]) -> Dict:
        """Add *city* to the user's list, or replace the city with the same name.

        Returns:
            The city as stored.

        Raises:
            AuthError:         no logged-in user.
            ValidationError:   *city* has no name.
            LimitReachedError: the list is full and *city* is new.
        """
        username = self._require_user(username)
        if not isinstance(city, dict) or not city.get('name'):
            raise ValidationError('City name required')
        data = self._repo.load()
        cities = data.setdefault(username, [])
        idx = next((i for i, c in enumerate(cities) if c.get('name') == city['name']), -1)
        if idx == -1 and len(cities) >= self.max_cities:
            raise LimitReachedError(f'City limit ({self.max_cities}) reached')

        stored = dict(city)
        stored['attractions'] = _as_list(city.get('attractions'))[:self.max_attractions]
        stored['restaurants'] = _as_list(city.get('restaurants'))[:self.max_restaurants]
        if idx >= 0:
            cities[idx] = stored
        else:
            cities.append(stored)
        self._commit(data, username)
        logger.info('%s city %r for %s', 'Updated' if idx >= 0 else 'Added',
                    stored['name'], username)
        return stored

    def delete_city(self, username: Optional[str], city_name: str) -> Dict[str, bool]:
        """Remove every city called *city_name* from the user's list.

        Succeeds even when no city matched, as long as the user has a list.

        Raises:
            AuthError:     no logged-in user.
            NotFoundError: the user has never stored a city.
        """
        username = self._require_user(username)
        data = self._repo.load()
        cities = CityRepository.user_cities(data, username)
        if cities is None:
            raise NotFoundError('No cities found')
        data[username] = [c for c in cities if c.get('name') != city_name]
        self._commit(data, username)
        logger.info('Deleted city %r for %s', city_name, username)
        return {'deleted': True}

    def add_attraction(self, username: Optional[str], city_name: str, attraction: str) -> Dict:
        """Append *attraction* to a city; duplicates are ignored silently."""
        return self._add_item(username, city_name, 'attractions', 'Attraction', attraction)

    def delete_attraction(self, username: Optional[str], city_name: str, attraction: str) -> Dict:
        return self._remove_item(username, city_name, 'attractions', attraction)

    def add_restaurant(self, username: Optional[str], city_name: str, restaurant: str) -> Dict:
        """Append *restaurant* to a city; duplicates are ignored silently."""
        return self._add_item(username, city_name, 'restaurants', 'Restaurant', restaurant)

    def delete_restaurant(self, username: Optional[str], city_name: str, restaurant: str) -> Dict:
        return self._remove_item(username, city_name, 'restaurants', restaurant)
