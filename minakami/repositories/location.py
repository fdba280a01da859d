"""
Location repository: the `locations` table.

find_nearby_location is a bounding-box approximation (about 111 km per
degree of latitude), ranked by squared planar distance in degrees. It is
not a great-circle search and gets worse near the poles.
"""
from __future__ import annotations

import math
from typing import Optional

from minakami.core.dates import DateLike, now_ms, to_epoch_ms
from minakami.db.connection import ExecuteResult
from minakami.repositories.base import BaseRepository, Fields, as_dict

METERS_PER_DEGREE = 111_000


class LocationRepository(BaseRepository):
    table = "locations"

    async def add_location(self, location: Fields) -> ExecuteResult:
        loc = as_dict(location)
        visit_count = max(int(loc.get("visit_count") or 1), 1)
        with self._tracked("addLocation"):
            return await self.connection.execute(
                """
                INSERT INTO locations (
                    latitude, longitude, timestamp, accuracy, name, visit_count, last_visited
                ) VALUES (
                    :latitude, :longitude, :timestamp, :accuracy, :name, :visit_count, :last_visited
                )
                """,
                {
                    "latitude": loc.get("latitude"),
                    "longitude": loc.get("longitude"),
                    "timestamp": loc.get("timestamp"),
                    "accuracy": loc.get("accuracy"),
                    "name": loc.get("name"),
                    "visit_count": visit_count,
                    "last_visited": loc.get("last_visited") or loc.get("timestamp"),
                },
            )

    async def get_locations_for_date_range(self, start: DateLike, end: DateLike) -> list[dict]:
        with self._tracked("getLocationsForDateRange"):
            return await self.connection.query_all(
                """
                SELECT * FROM locations
                WHERE timestamp >= :start AND timestamp <= :end
                ORDER BY timestamp DESC
                """,
                {"start": to_epoch_ms(start), "end": to_epoch_ms(end)},
            )

    async def get_recent_locations(self, limit: int = 20) -> list[dict]:
        with self._tracked("getRecentLocations"):
            return await self.connection.query_all(
                "SELECT * FROM locations ORDER BY timestamp DESC LIMIT :limit",
                {"limit": limit},
            )

    async def find_nearby_location(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float = 100,
    ) -> Optional[dict]:
        lat_delta = radius_meters / METERS_PER_DEGREE
        cos_lat = math.cos(math.radians(latitude))
        # At the poles every longitude is within range.
        lon_delta = radius_meters / (METERS_PER_DEGREE * cos_lat) if cos_lat > 1e-9 else 180.0

        with self._tracked("findNearbyLocation"):
            return await self.connection.query_one(
                """
                SELECT * FROM locations
                WHERE latitude BETWEEN :lat_min AND :lat_max
                  AND longitude BETWEEN :lon_min AND :lon_max
                ORDER BY ((latitude - :lat) * (latitude - :lat)
                        + (longitude - :lon) * (longitude - :lon)) ASC
                LIMIT 1
                """,
                {
                    "lat_min": latitude - lat_delta,
                    "lat_max": latitude + lat_delta,
                    "lon_min": longitude - lon_delta,
                    "lon_max": longitude + lon_delta,
                    "lat": latitude,
                    "lon": longitude,
                },
            )

    async def update_location_visit(
        self, location_id: int, timestamp: Optional[DateLike] = None
    ) -> ExecuteResult:
        """visit_count += 1 and last_visited = timestamp (default: now)."""
        visited = now_ms() if timestamp is None else to_epoch_ms(timestamp)
        with self._tracked("updateLocationVisit"):
            return await self.connection.execute(
                """
                UPDATE locations
                SET visit_count = COALESCE(visit_count, 1) + 1, last_visited = :last_visited
                WHERE id = :id
                """,
                {"last_visited": visited, "id": location_id},
            )

    async def update_location_name(self, location_id: int, name: Optional[str]) -> ExecuteResult:
        with self._tracked("updateLocationName"):
            return await self.connection.execute(
                "UPDATE locations SET name = :name WHERE id = :id",
                {"name": name, "id": location_id},
            )

    async def get_most_visited_locations(self, limit: int = 10) -> list[dict]:
        with self._tracked("getMostVisitedLocations"):
            return await self.connection.query_all(
                """
                SELECT * FROM locations
                WHERE visit_count > 0
                ORDER BY visit_count DESC, last_visited DESC
                LIMIT :limit
                """,
                {"limit": limit},
            )

    async def get_location_by_id(self, location_id: int) -> Optional[dict]:
        with self._tracked("getLocationById"):
            return await self.connection.query_one(
                "SELECT * FROM locations WHERE id = :id", {"id": location_id}
            )

    async def delete_location(self, location_id: int) -> ExecuteResult:
        with self._tracked("deleteLocation"):
            return await self.connection.execute(
                "DELETE FROM locations WHERE id = :id", {"id": location_id}
            )

    async def get_location_stats(self, start: DateLike, end: DateLike) -> dict:
        params = {"start": to_epoch_ms(start), "end": to_epoch_ms(end)}
        with self._tracked("getLocationStats"):
            stats = await self.connection.query_one(
                """
                SELECT
                    COUNT(DISTINCT id) AS unique_locations,
                    COUNT(*) AS total_visits,
                    COALESCE(MAX(visit_count), 0) AS max_visits_single_location
                FROM locations
                WHERE timestamp >= :start AND timestamp <= :end
                """,
                params,
            )
            most_visited = await self.connection.query_one(
                """
                SELECT name, visit_count
                FROM locations
                WHERE timestamp >= :start AND timestamp <= :end
                ORDER BY visit_count DESC
                LIMIT 1
                """,
                params,
            )

        return {
            "unique_locations": 0,
            "total_visits": 0,
            "max_visits_single_location": 0,
            **(stats or {}),
            "most_visited_location": (most_visited or {}).get("name") or "None",
            "most_visited_count": (most_visited or {}).get("visit_count") or 0,
        }
