# relief-smart-dispatch/relief_dispatch/__init__.py

from .models import Base, Zone, Drone, Priority, Stop, BASE_ID
from .exceptions import DispatchError, ValidationError, InsufficientInputError
from .config import (
    EARTH_RADIUS_KM,
    MAX_TWO_OPT_PASSES,
    LOCATION_PRESETS,
)
from .utils import DistanceMatrix, build_distance_matrix, haversine_distance, route_distance
from .scoring import prioritize_zones, priority_weight
from .routing import construct_route, improve_route
from .dispatch import assign_fleet
from .results import OptimizationResult, DroneResult, FleetSummary, aggregate_results
from .optimizer import DeliveryOptimizer, OptimizerState, optimize

__version__ = "1.0.0"

__all__ = [
    # Models
    "Base",
    "Zone",
    "Drone",
    "Priority",
    "Stop",
    "BASE_ID",
    # Errors
    "DispatchError",
    "ValidationError",
    "InsufficientInputError",
    # Core
    "DeliveryOptimizer",
    "OptimizerState",
    "OptimizationResult",
    "DroneResult",
    "FleetSummary",
    "DistanceMatrix",
    # Functions
    "optimize",
    "haversine_distance",
    "build_distance_matrix",
    "route_distance",
    "prioritize_zones",
    "priority_weight",
    "construct_route",
    "improve_route",
    "assign_fleet",
    "aggregate_results",
    # Config
    "EARTH_RADIUS_KM",
    "MAX_TWO_OPT_PASSES",
    "LOCATION_PRESETS",
]
