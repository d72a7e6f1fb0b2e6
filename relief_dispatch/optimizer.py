# relief-smart-dispatch/relief_dispatch/optimizer.py
"""
Optimization pipeline for the Relief Smart Dispatch optimizer.

The pipeline runs in fixed order on an explicit OptimizerState:
1. Build the distance matrix over the base and all zones
2. Sort zones into priority scan order
3. Route each drone in registration order (construction + 2-opt)
4. Aggregate per-drone and fleet-wide metrics

``optimize(state)`` is a deterministic function of the state's base, zones
and drones. DeliveryOptimizer wraps a state with validated setters for
callers such as the CLI and the dashboard. Neither is safe for
overlapping optimize() calls on the same state.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from . import dispatch, scoring, utils
from .exceptions import InsufficientInputError, ValidationError
from .models import BASE_ID, Base, Drone, Priority, Zone
from .results import OptimizationResult, aggregate_results
from .utils import DistanceMatrix

logger = logging.getLogger(__name__)


@dataclass
class OptimizerState:
    """
    Everything an optimization run depends on.

    Attributes:
        base: Drone base, None until set
        zones: Zones keyed by id, in insertion order
        drones: Fleet in registration order
        distance_matrix: Matrix of the last run (stale once locations change)
    """
    base: Optional[Base] = None
    zones: Dict[int, Zone] = field(default_factory=dict)
    drones: List[Drone] = field(default_factory=list)
    distance_matrix: Optional[DistanceMatrix] = None


# =============================================================================
# VALIDATION
# =============================================================================

def _check_coordinates(lat, lng) -> None:
    for name, value, limit in (("latitude", lat, 90.0), ("longitude", lng, 180.0)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{name} must be a number, got {value!r}")
        if not math.isfinite(value) or abs(value) > limit:
            raise ValidationError(f"{name} must be within ±{limit:g}, got {value!r}")


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_zone(priority, demand, lat, lng) -> Priority:
    """
    Validate zone input.

    Returns:
        The priority as a Priority member

    Raises:
        ValidationError: priority not in {1, 2, 3}, demand not a positive
            integer, or coordinates out of range
    """
    if isinstance(priority, bool) or not isinstance(priority, int) or priority not in (1, 2, 3):
        raise ValidationError(f"priority must be 1, 2 or 3, got {priority!r}")
    if not _is_positive_int(demand):
        raise ValidationError(f"demand must be a positive integer, got {demand!r}")
    _check_coordinates(lat, lng)
    return Priority(priority)


def validate_drone(battery_range_km, payload_capacity) -> None:
    """
    Validate drone input.

    Raises:
        ValidationError: battery range not a positive number or payload not
            a positive integer
    """
    if (isinstance(battery_range_km, bool)
            or not isinstance(battery_range_km, (int, float))
            or not math.isfinite(battery_range_km)
            or battery_range_km <= 0):
        raise ValidationError(f"battery range must be a positive number, got {battery_range_km!r}")
    if not _is_positive_int(payload_capacity):
        raise ValidationError(f"payload capacity must be a positive integer, got {payload_capacity!r}")


# =============================================================================
# PIPELINE
# =============================================================================

def optimize(state: OptimizerState) -> OptimizationResult:
    """
    Run the full pipeline on a state.

    Served flags and drone outputs from earlier runs are reset first, so two
    calls on identical state produce identical routes and metrics.

    Args:
        state: Base, zones and fleet to optimize. Zones and drones are
            updated in place; the distance matrix is replaced.

    Returns:
        OptimizationResult with detached copies of all zones

    Raises:
        InsufficientInputError: No base set, or no zones to serve
    """
    start = time.perf_counter()

    if state.base is None:
        raise InsufficientInputError("base location has not been set")
    if not state.zones:
        raise InsufficientInputError("at least one zone is required to optimize")

    # Step 1: distance matrix - O(n²)
    locations = {BASE_ID: state.base.location}
    locations.update({zone_id: zone.location for zone_id, zone in state.zones.items()})
    state.distance_matrix = utils.build_distance_matrix(locations)

    # Step 2: scan order - O(n log n)
    scan_order = scoring.prioritize_zones(state.zones.values())

    # Step 3: fresh run
    for zone in scan_order:
        zone.served = False
    for drone in state.drones:
        drone.reset()

    max_payload = max((d.payload_capacity for d in state.drones), default=0)
    for zone in scan_order:
        if zone.demand > max_payload:
            logger.warning(f"Zone {zone.zone_id} demand {zone.demand} exceeds every drone's payload")

    # Step 4: route the fleet - O(k × n²)
    dispatch.assign_fleet(scan_order, state.drones, state.distance_matrix)

    elapsed_ms = (time.perf_counter() - start) * 1000
    result = aggregate_results(state.base, list(state.zones.values()), state.drones, elapsed_ms)

    summary = result.summary
    logger.info(
        f"Optimized {summary.total_zones} zone(s) with {len(state.drones)} drone(s): "
        f"{summary.zones_served} served, {summary.total_distance_km:.2f} km in {elapsed_ms:.2f} ms"
    )
    return result


class DeliveryOptimizer:
    """
    Validated front end over an OptimizerState.

    Zone ids are assigned sequentially from 1; drone ids likewise. The base
    always has id 0.

    Attributes:
        state: The underlying OptimizerState
    """

    def __init__(self, state: Optional[OptimizerState] = None) -> None:
        self.state: OptimizerState = state if state is not None else OptimizerState()

    # -------------------------------------------------------------------------
    # Read-only projections
    # -------------------------------------------------------------------------

    @property
    def base(self) -> Optional[Base]:
        return self.state.base

    @property
    def zones(self) -> List[Zone]:
        return list(self.state.zones.values())

    @property
    def drones(self) -> List[Drone]:
        return list(self.state.drones)

    @property
    def distance_matrix(self) -> Optional[DistanceMatrix]:
        return self.state.distance_matrix

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def set_base(self, lat: float, lng: float) -> Base:
        """
        Replace the base location.

        Existing zones are kept; use clear() or clear_zones() to drop them.
        The cached distance matrix is discarded.
        """
        _check_coordinates(lat, lng)
        self.state.base = Base(lat=float(lat), lng=float(lng))
        self.state.distance_matrix = None
        return self.state.base

    def add_zone(self, priority: int, demand: int, lat: float, lng: float) -> Zone:
        """
        Add a zone with the next sequential id.

        Raises:
            ValidationError: See validate_zone()
        """
        tier = validate_zone(priority, demand, lat, lng)
        zone = Zone(
            zone_id=len(self.state.zones) + 1,
            priority=tier,
            demand=demand,
            lat=float(lat),
            lng=float(lng),
        )
        self.state.zones[zone.zone_id] = zone
        self.state.distance_matrix = None
        return zone

    def add_drone(self, battery_range_km: float, payload_capacity: int) -> Drone:
        """
        Append a drone to the fleet.

        Raises:
            ValidationError: See validate_drone()
        """
        validate_drone(battery_range_km, payload_capacity)
        drone = Drone(
            drone_id=len(self.state.drones) + 1,
            battery_range_km=float(battery_range_km),
            payload_capacity=payload_capacity,
        )
        self.state.drones.append(drone)
        return drone

    def replace_fleet(self, count: int, battery_range_km: float, payload_capacity: int) -> List[Drone]:
        """Replace the fleet with ``count`` identical drones."""
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise ValidationError(f"drone count must be a non-negative integer, got {count!r}")
        validate_drone(battery_range_km, payload_capacity)
        self.clear_drones()
        return [self.add_drone(battery_range_km, payload_capacity) for _ in range(count)]

    # -------------------------------------------------------------------------
    # Running and resetting
    # -------------------------------------------------------------------------

    def optimize(self) -> OptimizationResult:
        """Run the full pipeline. See optimize()."""
        return optimize(self.state)

    def clear_zones(self) -> None:
        """Drop all zones, keep the base and the fleet."""
        self.state.zones = {}
        self.state.distance_matrix = None

    def clear_drones(self) -> None:
        """Drop the fleet, keep the base and the zones."""
        self.state.drones = []

    def clear(self) -> None:
        """Reset to a fresh instance: no base, zones, drones or matrix."""
        self.state = OptimizerState()

    def __repr__(self) -> str:
        return (
            f"DeliveryOptimizer(base={self.state.base!r}, "
            f"zones={len(self.state.zones)}, drones={len(self.state.drones)})"
        )
