"""
Map placement for merged companies.

Geocoding is an external collaborator: anything with a
``geocode(city, state, country)`` method returning ``(lat, lng)`` or None.
Lookups go through an explicit GeocodeCache owned by the caller. Companies
that cannot be placed fall back to a fixed list of US metro coordinates.
"""

import logging
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from .models.schemas import MergedRecord, MapPoint
from .config.settings import FALLBACK_COORDINATES, MAP_POINT_LIMIT

logger = logging.getLogger(__name__)

Coordinates = Tuple[float, float]
LocationKey = Tuple[str, str, str]


class Geocoder(Protocol):
    def geocode(
        self, city: Optional[str], state: Optional[str], country: Optional[str]
    ) -> Optional[Coordinates]:
        ...


class GeocodeCache:
    """Remembers geocoder answers, including misses, per location"""

    def __init__(self):
        self._entries: Dict[LocationKey, Optional[Coordinates]] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key(city: Optional[str], state: Optional[str], country: Optional[str]) -> LocationKey:
        return tuple((part or "").strip().lower() for part in (city, state, country))

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self):
        self._entries.clear()

    def lookup(
        self,
        geocoder: Geocoder,
        city: Optional[str],
        state: Optional[str],
        country: Optional[str],
    ) -> Optional[Coordinates]:
        """Return cached coordinates or ask the geocoder; errors are not cached"""
        key = self.key(city, state, country)
        if key in self._entries:
            self.hits += 1
            return self._entries[key]

        self.misses += 1
        coords = geocoder.geocode(city, state, country)
        self._entries[key] = coords
        return coords


def generate_map_data(
    records: Sequence[MergedRecord],
    geocoder: Optional[Geocoder] = None,
    cache: Optional[GeocodeCache] = None,
    limit: int = MAP_POINT_LIMIT,
) -> List[MapPoint]:
    """
    Place the first ``limit`` records on the map.

    Args:
        records: Merged records, usually already sorted by score
        geocoder: Optional geocoding collaborator
        cache: Cache for geocoder answers (a fresh one if omitted)
        limit: Maximum number of points

    Returns:
        MapPoints; ``approximate`` marks fallback coordinates
    """
    cache = cache if cache is not None else GeocodeCache()
    points = []

    for index, record in enumerate(records[:limit]):
        company = record.company
        coords = None

        if geocoder is not None and (company.city or company.state or company.country):
            try:
                coords = cache.lookup(geocoder, company.city, company.state, company.country)
            except Exception as e:
                logger.warning("Geocoding failed for %s: %s", company.name, e)

        approximate = coords is None
        if coords is None:
            coords = FALLBACK_COORDINATES[index % len(FALLBACK_COORDINATES)]

        points.append(MapPoint(
            lat=coords[0],
            lng=coords[1],
            company=company,
            contact_count=record.contact_count,
            priority=record.priority,
            approximate=approximate,
        ))

    return points
