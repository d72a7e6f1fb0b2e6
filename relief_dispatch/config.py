# relief-smart-dispatch/relief_dispatch/config.py
"""
Configuration parameters for the Relief Smart Dispatch optimizer.

This module centralizes all tunable parameters, making it easy to:
- Adjust the route search limits
- Change the default drone fleet used by the CLI and dashboard
- Tune the random zone generator and map presets

All parameters are documented with their purpose and typical value ranges.
"""

from typing import Dict, Final, List, Tuple

# =============================================================================
# GEODESY
# =============================================================================

EARTH_RADIUS_KM: Final[float] = 6371.0
"""Mean Earth radius used by the haversine distance."""

# =============================================================================
# ROUTE SEARCH PARAMETERS
# =============================================================================

MAX_TWO_OPT_PASSES: int = 5
"""
Upper bound on full 2-opt sweeps per route.
The search also stops early after a sweep without an accepted reversal.
"""

# =============================================================================
# FLEET DEFAULTS
# =============================================================================

DEFAULT_DRONE_COUNT: int = 3
"""Number of drones registered when no fleet file is given."""

DEFAULT_BATTERY_RANGE_KM: float = 50.0
"""Round-trip distance budget per drone (km)."""

DEFAULT_PAYLOAD_CAPACITY: int = 100
"""Supply units a drone can carry per trip."""

# =============================================================================
# RANDOM ZONE GENERATION
# =============================================================================

DEFAULT_ZONE_COUNT: int = 10
"""Number of zones generated around the base when no zone file is given."""

ZONE_RADIUS_MIN_DEG: float = 0.05
"""Minimum offset from the base in degrees (~5 km)."""

ZONE_RADIUS_MAX_DEG: float = 0.20
"""Maximum offset from the base in degrees (~20 km)."""

ZONE_DEMAND_MIN: int = 20
"""Smallest generated demand (units)."""

ZONE_DEMAND_MAX: int = 59
"""Largest generated demand (units, inclusive)."""

ZONE_PRIORITY_POOL: List[int] = [1, 1, 1, 2, 2, 2, 2, 3, 3, 3]
"""
Pool the generator draws priorities from.
30% critical, 40% moderate, 30% low.
"""

# =============================================================================
# LOCATION PRESETS
# =============================================================================

LOCATION_PRESETS: Dict[str, Dict] = {
    "pakistan": {"lat": 34.0151, "lng": 73.0169, "zoom": 9, "name": "2005 Earthquake Region (Muzaffarabad)"},
    "islamabad": {"lat": 33.6844, "lng": 73.0479, "zoom": 12, "name": "Islamabad"},
    "lahore": {"lat": 31.5204, "lng": 74.3587, "zoom": 12, "name": "Lahore"},
    "karachi": {"lat": 24.8607, "lng": 67.0011, "zoom": 12, "name": "Karachi"},
    "custom": {"lat": 33.6844, "lng": 73.0479, "zoom": 10, "name": "Custom Location"},
}
"""Base locations offered by the CLI and dashboard."""

DEFAULT_PRESET: str = "pakistan"
"""Preset used when neither a preset nor explicit base coordinates are given."""

# =============================================================================
# DISPLAY
# =============================================================================

PRIORITY_COLORS: Dict[int, str] = {
    1: "#dc2626",  # Critical - red
    2: "#f59e0b",  # Moderate - amber
    3: "#10b981",  # Low - green
}

DRONE_COLORS: List[str] = [
    "#2563eb", "#7c3aed", "#db2777", "#ea580c", "#65a30d",
    "#0891b2", "#4f46e5", "#be123c", "#c026d3", "#0d9488",
]

BASE_COLOR_RGB: Tuple[int, int, int] = (37, 99, 235)
"""Marker color for the base on pydeck maps."""

# =============================================================================
# FLIGHT PLAYBACK
# =============================================================================

PLAYBACK_KM_PER_FRAME: float = 0.5
"""
Distance a drone covers per playback frame.
Smaller = smoother animation, more frames.
"""

PLAYBACK_STAGGER_FRAMES: int = 5
"""Frames between the departures of consecutive drones."""
