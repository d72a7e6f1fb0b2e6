# relief-smart-dispatch/relief_dispatch/dispatch.py
"""
Fleet assignment for the Relief Smart Dispatch optimizer.

Drones are processed strictly in registration order. Each drone builds its
route from the zones still unserved that fit its payload, then improves
it with 2-opt. Every zone on an accepted route is marked served and drops
out of consideration for all later drones.

There is no backtracking across drones: a zone taken by an early drone is
never handed to a later one, even if the later drone could serve it more
cheaply. Zones no drone can carry or reach stay unserved for the run.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from . import routing, utils
from .models import BASE_ID, Drone, Zone
from .utils import DistanceMatrix

logger = logging.getLogger(__name__)


def available_zones(scan_order: Sequence[Zone], drone: Drone) -> List[Zone]:
    """
    Zones a drone may consider: unserved and within its payload capacity.

    Args:
        scan_order: All zones in priority scan order
        drone: Drone being routed

    Returns:
        Candidate zones, still in scan order
    """
    return [
        zone for zone in scan_order
        if not zone.served and zone.demand <= drone.payload_capacity
    ]


def _assign_route_to_drone(
    drone: Drone,
    route: List[int],
    zones_by_id: dict,
    matrix: DistanceMatrix
) -> None:
    """
    Record an accepted route on a drone and mark its zones served.

    Updates drone state:
    - Sets the route and its round-trip distance
    - Sums delivered supplies
    - Marks every visited zone as served
    """
    drone.route = route
    drone.total_distance_km = utils.route_distance(route, matrix)
    drone.total_delivered = 0

    for zone_id in route:
        if zone_id == BASE_ID:
            continue
        zone = zones_by_id[zone_id]
        if zone.served:
            continue
        zone.served = True
        drone.total_delivered += zone.demand


def assign_fleet(
    scan_order: Sequence[Zone],
    drones: Sequence[Drone],
    matrix: DistanceMatrix
) -> None:
    """
    Route every drone in registration order.

    Mutates the given zones (served flags) and drones (route, distance,
    delivered supplies). Callers reset both before a fresh run.

    Args:
        scan_order: All zones in priority scan order
        drones: Fleet in registration order
        matrix: Distance matrix covering the base and every zone
    """
    zones_by_id = {zone.zone_id: zone for zone in scan_order}

    for drone in drones:
        candidates = available_zones(scan_order, drone)

        if not candidates:
            logger.debug(f"Drone {drone.drone_id}: no zones available")
            drone.reset()
            continue

        route = routing.construct_route(candidates, drone, matrix)

        if len(route) > 1:
            route = routing.improve_route(route, drone.battery_range_km, matrix)

        _assign_route_to_drone(drone, route, zones_by_id, matrix)

        logger.debug(
            f"Drone {drone.drone_id}: {len(route) - 1} zone(s), "
            f"{drone.total_distance_km:.2f}/{drone.battery_range_km:.2f} km, "
            f"{drone.total_delivered}/{drone.payload_capacity} units"
        )
