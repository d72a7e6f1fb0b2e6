# relief-smart-dispatch/relief_dispatch/routing.py
"""
Single-drone route building for the Relief Smart Dispatch optimizer.

Two stages run for every drone:

1. **Construction**: priority-weighted nearest neighbour from the base.
   Each step moves to the feasible zone with the smallest
   distance / priority weight. A zone is feasible only if it fits the
   remaining payload and the drone can still get back to the base
   within its battery range afterwards.

2. **Improvement**: bounded 2-opt. Reverses route segments that shorten
   the round trip, never exceeding the battery range, for at most
   ``config.MAX_TWO_OPT_PASSES`` full sweeps.

Both stages are deterministic for a given scan order.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from . import config, scoring, utils
from .models import BASE_ID, Drone, Zone
from .utils import DistanceMatrix

logger = logging.getLogger(__name__)


def construct_route(
    available: Sequence[Zone],
    drone: Drone,
    matrix: DistanceMatrix
) -> List[int]:
    """
    Build a route with priority-weighted nearest neighbour.

    Candidates are evaluated in the order given, which must be the
    priority scan order. Ties on effective distance keep the earliest
    candidate.

    Args:
        available: Unserved zones this drone can carry, in scan order
        drone: Drone whose payload and battery limits apply
        matrix: Distance matrix covering the base and all candidates

    Returns:
        Zone ids in visiting order, starting with the base id
    """
    route: List[int] = [BASE_ID]
    visited = {BASE_ID}

    current = BASE_ID
    current_distance = 0.0
    current_load = 0

    while True:
        nearest: Optional[Zone] = None
        min_effective = float("inf")

        for zone in available:
            if zone.zone_id in visited:
                continue

            # Payload check
            if current_load + zone.demand > drone.payload_capacity:
                continue

            # Battery check: reach the zone and still make it home
            dist = matrix[current][zone.zone_id]
            return_dist = matrix[zone.zone_id][BASE_ID]
            if current_distance + dist + return_dist > drone.battery_range_km:
                continue

            effective = scoring.effective_distance(dist, zone)
            if effective < min_effective:
                min_effective = effective
                nearest = zone

        if nearest is None:
            break  # No feasible zone left

        current_distance += matrix[current][nearest.zone_id]
        current_load += nearest.demand
        route.append(nearest.zone_id)
        visited.add(nearest.zone_id)
        current = nearest.zone_id

    return route


def reverse_segment(route: Sequence[int], start: int, end: int) -> List[int]:
    """Return a copy of the route with route[start..end] reversed (inclusive)."""
    return list(route[:start]) + list(reversed(route[start:end + 1])) + list(route[end + 1:])


def _two_opt_delta(route: Sequence[int], i: int, j: int, matrix: DistanceMatrix) -> float:
    """Change in length from reversing route[i..j]; only the two boundary edges move."""
    old_edges = matrix[route[i - 1]][route[i]] + matrix[route[j]][route[j + 1]]
    new_edges = matrix[route[i - 1]][route[j]] + matrix[route[i]][route[j + 1]]
    return new_edges - old_edges


def improve_route(
    route: Sequence[int],
    max_distance_km: float,
    matrix: DistanceMatrix,
    max_passes: int = None
) -> List[int]:
    """
    Shorten a route with bounded 2-opt.

    For every pair 1 <= i < j <= len(route) - 2 the edge delta of reversing
    route[i..j] is computed. A negative delta triggers a full round-trip
    recomputation of the reversed route, which is accepted only if it is
    strictly shorter than the current route and within ``max_distance_km``.

    The search stops after a sweep with no accepted reversal or after
    ``max_passes`` sweeps, whichever comes first.

    Args:
        route: Constructed route starting with the base id
        max_distance_km: Battery range of the drone (hard ceiling)
        matrix: Distance matrix covering every id in the route
        max_passes: Sweep cap (default: config.MAX_TWO_OPT_PASSES)

    Returns:
        Improved route. Its round-trip distance never exceeds the input's.
    """
    if max_passes is None:
        max_passes = config.MAX_TWO_OPT_PASSES

    best = list(route)
    if len(best) < 4:
        return best

    best_distance = utils.route_distance(best, matrix)
    improved = True
    passes = 0

    while improved and passes < max_passes:
        improved = False
        passes += 1

        for i in range(1, len(best) - 2):
            for j in range(i + 1, len(best) - 1):
                if _two_opt_delta(best, i, j, matrix) >= 0:
                    continue

                candidate = reverse_segment(best, i, j)
                candidate_distance = utils.route_distance(candidate, matrix)

                if candidate_distance < best_distance and candidate_distance <= max_distance_km:
                    best = candidate
                    best_distance = candidate_distance
                    improved = True

    logger.debug(f"2-opt finished after {passes} pass(es): {best_distance:.3f} km")
    return best
