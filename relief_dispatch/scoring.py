# relief-smart-dispatch/relief_dispatch/scoring.py
"""
Priority scoring for route construction.

Zones are sorted into a scan order (most urgent first) and, during route
construction, each candidate distance is divided by the zone's priority
tier. The divisor grows with the tier number, so at equal raw distance a
low-priority zone ranks ahead of a critical one. Scan order decides ties.

Key Design Principles:
1. Lower priority number = more urgent = scanned first
2. Within a tier, larger demands are scanned first
3. Weighting only biases the greedy choice; feasibility is never relaxed
"""

from __future__ import annotations

from typing import Iterable, List

from .models import Zone


def priority_weight(zone: Zone) -> float:
    """
    Get the divisor applied to a candidate's distance.

    The priority tier is used directly: 1 for critical, 3 for low.

    Args:
        zone: Candidate zone

    Returns:
        Weight as a float
    """
    return float(zone.priority)


def effective_distance(distance_km: float, zone: Zone) -> float:
    """Priority-weighted distance used to rank construction candidates."""
    return distance_km / priority_weight(zone)


def prioritize_zones(zones: Iterable[Zone]) -> List[Zone]:
    """
    Order zones by (priority ascending, demand descending).

    The sort is stable: zones tied on both keys keep their insertion order.
    This is a scan order for candidate evaluation, not a route order.

    Args:
        zones: Non-base zones in insertion order

    Returns:
        New list in scan order
    """
    return sorted(zones, key=lambda z: (int(z.priority), -z.demand))
