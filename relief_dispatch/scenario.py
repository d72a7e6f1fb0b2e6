# relief-smart-dispatch/relief_dispatch/scenario.py
"""
Scenario tooling: location presets, random zones and CSV input.

Zone CSV columns:   priority, demand, lat, lng
Drone CSV columns:  battery_range_km, payload_capacity
"""

from __future__ import annotations

import csv
import math
import os
import random
from typing import Dict, List, Optional

from . import config
from .exceptions import InsufficientInputError, ValidationError
from .models import Drone, Zone
from .optimizer import DeliveryOptimizer


def get_preset(name: str) -> Dict:
    """
    Look up a location preset by key.

    Raises:
        ValidationError: Unknown preset
    """
    try:
        return config.LOCATION_PRESETS[name]
    except KeyError:
        raise ValidationError(
            f"unknown preset '{name}'. Available: {', '.join(config.LOCATION_PRESETS)}"
        ) from None


def generate_random_zones(
    optimizer: DeliveryOptimizer,
    count: int,
    seed: Optional[int] = None
) -> List[Zone]:
    """
    Scatter zones around the base.

    Each zone sits at a random bearing and a radius of
    ZONE_RADIUS_MIN_DEG..ZONE_RADIUS_MAX_DEG degrees from the base, with a
    priority drawn from ZONE_PRIORITY_POOL and a uniform demand in
    ZONE_DEMAND_MIN..ZONE_DEMAND_MAX.

    Args:
        optimizer: Optimizer with a base set; zones are appended to it
        count: Number of zones to generate
        seed: Seed for reproducible scenarios

    Returns:
        The zones that were added

    Raises:
        InsufficientInputError: No base set
        ValidationError: Negative count
    """
    if optimizer.base is None:
        raise InsufficientInputError("set a base before generating zones")
    if count < 0:
        raise ValidationError(f"zone count must be non-negative, got {count}")

    rng = random.Random(seed)
    base = optimizer.base
    zones: List[Zone] = []

    for _ in range(count):
        angle = rng.random() * 2 * math.pi
        radius = rng.uniform(config.ZONE_RADIUS_MIN_DEG, config.ZONE_RADIUS_MAX_DEG)

        lat = base.lat + radius * math.cos(angle)
        lng = base.lng + radius * math.sin(angle)

        priority = rng.choice(config.ZONE_PRIORITY_POOL)
        demand = rng.randint(config.ZONE_DEMAND_MIN, config.ZONE_DEMAND_MAX)

        zones.append(optimizer.add_zone(priority, demand, lat, lng))

    return zones


def load_zones_csv(optimizer: DeliveryOptimizer, path: str) -> List[Zone]:
    """
    Load zones from a CSV file and add them to the optimizer.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If a row is missing a column or holds invalid values
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Zone file not found: {path}")

    zones: List[Zone] = []
    with open(path, "r", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                zones.append(optimizer.add_zone(
                    int(row["priority"]),
                    int(row["demand"]),
                    float(row["lat"]),
                    float(row["lng"]),
                ))
            except (KeyError, TypeError, ValueError) as e:
                raise ValidationError(f"Invalid zone data in {path} line {reader.line_num}: {e}") from e
    return zones


def load_drones_csv(optimizer: DeliveryOptimizer, path: str) -> List[Drone]:
    """
    Load drones from a CSV file and append them to the fleet.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If a row is missing a column or holds invalid values
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Drone file not found: {path}")

    drones: List[Drone] = []
    with open(path, "r", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                drones.append(optimizer.add_drone(
                    float(row["battery_range_km"]),
                    int(row["payload_capacity"]),
                ))
            except (KeyError, TypeError, ValueError) as e:
                raise ValidationError(f"Invalid drone data in {path} line {reader.line_num}: {e}") from e
    return drones


def add_clicked_zone(
    optimizer: DeliveryOptimizer,
    clicked: Optional[Dict],
    priority: int,
    demand: int
) -> Zone:
    """
    Add a zone where the user clicked on the map.

    Args:
        optimizer: Optimizer the zone is added to
        clicked: Map click payload with "lat" and "lng" keys, as returned
            by streamlit-folium's ``last_clicked``
        priority: Priority tier chosen for the new zone
        demand: Demand chosen for the new zone

    Raises:
        ValidationError: No click position, or invalid zone values
    """
    if not clicked or "lat" not in clicked or "lng" not in clicked:
        raise ValidationError(f"map click has no position: {clicked!r}")
    return optimizer.add_zone(priority, demand, clicked["lat"], clicked["lng"])
