# relief-smart-dispatch/relief_dispatch/results.py
"""
Result aggregation for the Relief Smart Dispatch optimizer.

Turns the routed fleet into read-only result objects: one DroneResult per
drone and a FleetSummary with per-priority coverage, total distance,
average battery usage and execution time.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from . import utils
from .models import BASE_ID, Base, Drone, Priority, Stop, Zone


@dataclass(frozen=True)
class DroneResult:
    """
    Outcome of one drone's sortie.

    Attributes:
        drone_id: Drone identifier
        route: Stops in visiting order, base first (copies, safe to keep)
        total_distance_km: Round-trip distance
        total_delivered: Supply units delivered
        battery_usage_pct: total_distance_km / battery_range_km * 100
        battery_range_km/payload_capacity: The drone's limits
    """
    drone_id: int
    route: List[Stop]
    total_distance_km: float
    total_delivered: int
    battery_usage_pct: float
    battery_range_km: float
    payload_capacity: int

    @property
    def zone_ids(self) -> List[int]:
        """Visited zone ids, base excluded."""
        return [stop.zone_id for stop in self.route if stop.zone_id != BASE_ID]

    @property
    def zones_visited(self) -> int:
        return len(self.zone_ids)

    def route_label(self) -> str:
        """Human-readable path, e.g. "Base → Zone3(P1) → Zone1(P2)"."""
        parts = [
            "Base" if stop.zone_id == BASE_ID else f"Zone{stop.zone_id}(P{int(stop.priority)})"
            for stop in self.route
        ]
        return " → ".join(parts) if parts else "(idle)"


@dataclass(frozen=True)
class FleetSummary:
    """
    Fleet-wide metrics of an optimization run.

    Attributes:
        total_distance_km: Sum of round-trip distances
        zones_served/total_zones: Coverage, base excluded
        served_by_priority/total_by_priority: Coverage per priority tier
        avg_battery_usage_pct: Mean over all drones (0.0 for an empty fleet)
        execution_time_ms: Wall-clock duration of optimize()
    """
    total_distance_km: float
    zones_served: int
    total_zones: int
    served_by_priority: Dict[Priority, int]
    total_by_priority: Dict[Priority, int]
    avg_battery_usage_pct: float
    execution_time_ms: float

    @property
    def critical_served(self) -> int:
        return self.served_by_priority[Priority.CRITICAL]

    @property
    def total_critical(self) -> int:
        return self.total_by_priority[Priority.CRITICAL]


@dataclass(frozen=True)
class OptimizationResult:
    """Per-drone results, fleet summary and the zones left unserved."""
    drones: List[DroneResult]
    summary: FleetSummary
    unserved_zone_ids: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the summary to display strings."""
        s = self.summary
        out: Dict[str, Any] = {
            "Total Zones": s.total_zones,
            "Zones Served": f"{s.zones_served}/{s.total_zones}",
        }
        for priority in Priority:
            out[f"{priority.label} (P{int(priority)})"] = (
                f"{s.served_by_priority[priority]}/{s.total_by_priority[priority]}"
            )
        out["Total Distance"] = utils.format_distance(s.total_distance_km)
        out["Avg Battery Usage"] = utils.format_percent(s.avg_battery_usage_pct)
        out["Execution Time"] = f"{s.execution_time_ms:.2f} ms"
        return out


def _materialize_route(route: Sequence[int], base: Base, zones_by_id: Dict[int, Zone]) -> List[Stop]:
    return [
        base if zone_id == BASE_ID else dataclasses.replace(zones_by_id[zone_id])
        for zone_id in route
    ]


def aggregate_results(
    base: Base,
    zones: Sequence[Zone],
    drones: Sequence[Drone],
    execution_time_ms: float
) -> OptimizationResult:
    """
    Compute per-drone and fleet-wide metrics.

    Args:
        base: Base of the run
        zones: All zones with their served flags set by the fleet assignment
        drones: Routed fleet in registration order
        execution_time_ms: Duration of the whole optimize() call

    Returns:
        OptimizationResult with detached copies of every zone
    """
    zones_by_id = {zone.zone_id: zone for zone in zones}

    drone_results = [
        DroneResult(
            drone_id=drone.drone_id,
            route=_materialize_route(drone.route, base, zones_by_id),
            total_distance_km=drone.total_distance_km,
            total_delivered=drone.total_delivered,
            battery_usage_pct=drone.battery_usage_pct,
            battery_range_km=drone.battery_range_km,
            payload_capacity=drone.payload_capacity,
        )
        for drone in drones
    ]

    served_by_priority = {priority: 0 for priority in Priority}
    total_by_priority = {priority: 0 for priority in Priority}
    for zone in zones:
        total_by_priority[zone.priority] += 1
        if zone.served:
            served_by_priority[zone.priority] += 1

    if drone_results:
        avg_battery = sum(d.battery_usage_pct for d in drone_results) / len(drone_results)
    else:
        avg_battery = 0.0

    summary = FleetSummary(
        total_distance_km=sum(d.total_distance_km for d in drone_results),
        zones_served=sum(served_by_priority.values()),
        total_zones=len(zones),
        served_by_priority=served_by_priority,
        total_by_priority=total_by_priority,
        avg_battery_usage_pct=avg_battery,
        execution_time_ms=execution_time_ms,
    )

    return OptimizationResult(
        drones=drone_results,
        summary=summary,
        unserved_zone_ids=sorted(zone.zone_id for zone in zones if not zone.served),
    )
