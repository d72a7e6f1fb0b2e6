# relief-smart-dispatch/relief_dispatch/utils.py
"""
Utility functions for the Relief Smart Dispatch optimizer.

Provides geographic calculations and the id-keyed distance matrix used by
route construction, route improvement and result aggregation.
"""

from __future__ import annotations

import math
import logging
from typing import Dict, Iterator, List, Mapping, Sequence, Tuple

from . import config
from .models import BASE_ID

# Configure logging
logger = logging.getLogger(__name__)


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Uses the Haversine formula to compute the distance between two GPS coordinates.

    Args:
        lat1: Latitude of point 1 in decimal degrees
        lon1: Longitude of point 1 in decimal degrees
        lat2: Latitude of point 2 in decimal degrees
        lon2: Longitude of point 2 in decimal degrees

    Returns:
        Distance in kilometers between the two points

    Example:
        >>> round(haversine_distance(0.0, 0.0, 0.0, 1.0), 2)
        111.19
    """
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2)
    # Rounding can push a just past 1.0 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return config.EARTH_RADIUS_KM * c


class DistanceMatrix:
    """
    Symmetric pairwise distance table keyed by zone id.

    The base is always id 0. Rows are reachable as ``matrix[i][j]`` and
    through ``distance(i, j)``. Each unordered pair is computed once and
    mirrored, so ``matrix[i][j] == matrix[j][i]`` holds exactly.

    The matrix is a snapshot: it goes stale when locations change and must
    be rebuilt by the caller.
    """

    def __init__(self, rows: Dict[int, Dict[int, float]]) -> None:
        self._rows = rows

    @property
    def ids(self) -> List[int]:
        """Ids in build order (base first)."""
        return list(self._rows)

    def distance(self, from_id: int, to_id: int) -> float:
        return self._rows[from_id][to_id]

    def __getitem__(self, from_id: int) -> Dict[int, float]:
        return self._rows[from_id]

    def __contains__(self, zone_id: int) -> bool:
        return zone_id in self._rows

    def __iter__(self) -> Iterator[int]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def to_rows(self) -> List[List[float]]:
        """Return the matrix as a positional square list (build order)."""
        ids = self.ids
        return [[self._rows[i][j] for j in ids] for i in ids]

    def __repr__(self) -> str:
        return f"DistanceMatrix(n={len(self._rows)})"


def build_distance_matrix(locations: Mapping[int, Tuple[float, float]]) -> DistanceMatrix:
    """
    Build the pairwise haversine distance matrix for all locations.

    Complexity: O(n²) time and space.

    Args:
        locations: Ordered mapping of zone id -> (lat, lng), base first

    Returns:
        DistanceMatrix with a zero diagonal. Empty input gives an empty
        matrix, a single location gives a 1x1 matrix.
    """
    ids = list(locations)
    rows: Dict[int, Dict[int, float]] = {zone_id: {} for zone_id in ids}

    for i, id_a in enumerate(ids):
        rows[id_a][id_a] = 0.0
        lat_a, lng_a = locations[id_a]
        for id_b in ids[i + 1:]:
            lat_b, lng_b = locations[id_b]
            dist = haversine_distance(lat_a, lng_a, lat_b, lng_b)
            rows[id_a][id_b] = dist
            rows[id_b][id_a] = dist

    logger.debug(f"Built {len(ids)}x{len(ids)} distance matrix")
    return DistanceMatrix(rows)


def route_distance(route: Sequence[int], matrix: DistanceMatrix) -> float:
    """
    Round-trip distance of a route: base -> route[0] -> ... -> route[-1] -> base.

    Routes produced by the optimizer start with the base id, in which case
    the first leg is zero.

    Args:
        route: Zone ids in visiting order
        matrix: Distance matrix covering every id in the route

    Returns:
        Total distance in kilometers (0 for an empty route)
    """
    if not route:
        return 0.0

    total = matrix[BASE_ID][route[0]]
    for i in range(len(route) - 1):
        total += matrix[route[i]][route[i + 1]]
    total += matrix[route[-1]][BASE_ID]
    return total


def format_distance(km: float) -> str:
    """
    Format a distance for display.

    Returns:
        String like "12.34 km"
    """
    return f"{km:.2f} km"


def format_percent(value: float) -> str:
    """Format a percentage with one decimal, e.g. "47.5%"."""
    return f"{value:.1f}%"
