# relief-smart-dispatch/relief_dispatch/models.py
"""
Core domain models for the Relief Smart Dispatch optimizer.

This module defines the fundamental data structures used throughout the optimizer:
- Priority: Urgency tier of a relief zone
- Base: The single origin/return point of every drone
- Zone: A location requesting a quantity of supplies
- Drone: A range- and payload-limited delivery vehicle and its computed route
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, List, Tuple, Union


BASE_ID = 0
"""Reserved id of the base in routes and distance lookups."""


class Priority(IntEnum):
    """
    Urgency tier of a zone. Lower value = more urgent.

    The numeric value doubles as the route construction weight:
    candidate distances are divided by it during route construction.
    """
    CRITICAL = 1
    MODERATE = 2
    LOW = 3

    @property
    def label(self) -> str:
        return self.name.title()


@dataclass(frozen=True)
class Base:
    """
    The drone base. Always id 0, never a deliverable stop, always served.

    Attributes:
        lat/lng: Base coordinates in decimal degrees
    """
    lat: float
    lng: float

    zone_id: ClassVar[int] = BASE_ID
    priority: ClassVar[int] = 0
    demand: ClassVar[int] = 0
    served: ClassVar[bool] = True

    @property
    def location(self) -> Tuple[float, float]:
        """Returns the base location as a (lat, lng) tuple."""
        return (self.lat, self.lng)

    def __repr__(self) -> str:
        return f"Base({self.lat:.4f}, {self.lng:.4f})"


@dataclass
class Zone:
    """
    Represents a relief zone requesting supplies.

    Attributes:
        zone_id: Stable identifier, 1..N in insertion order
        priority: Urgency tier
        demand: Supply units requested (positive)
        lat/lng: Zone location
        served: Whether a drone route accepted this zone in the last run
    """
    zone_id: int
    priority: Priority
    demand: int
    lat: float
    lng: float
    served: bool = False

    @property
    def location(self) -> Tuple[float, float]:
        """Returns the zone location as a (lat, lng) tuple."""
        return (self.lat, self.lng)

    def __repr__(self) -> str:
        return f"Zone({self.zone_id}, P{int(self.priority)}, {self.demand}u)"


Stop = Union[Base, Zone]


@dataclass
class Drone:
    """
    Represents a drone in the relief fleet.

    Attributes:
        drone_id: Identifier, 1..K in registration order
        battery_range_km: Maximum round-trip distance per sortie
        payload_capacity: Maximum supply units per sortie

    Computed by the optimizer:
        route: Zone ids in visiting order, starting with the base id.
            Empty when no zone was available to this drone. The return
            leg to the base is implicit.
        total_distance_km: Round-trip distance of the route
        total_delivered: Supply units delivered on the route
    """
    drone_id: int
    battery_range_km: float
    payload_capacity: int

    route: List[int] = field(default_factory=list)
    total_distance_km: float = 0.0
    total_delivered: int = 0

    @property
    def battery_usage_pct(self) -> float:
        """Share of the battery range consumed by the route."""
        if self.battery_range_km <= 0:
            return 0.0
        return self.total_distance_km / self.battery_range_km * 100

    def reset(self) -> None:
        """Drop the outputs of a previous optimization run."""
        self.route = []
        self.total_distance_km = 0.0
        self.total_delivered = 0

    def __repr__(self) -> str:
        return f"Drone({self.drone_id}, stops={max(len(self.route) - 1, 0)})"
