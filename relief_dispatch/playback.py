# relief-smart-dispatch/relief_dispatch/playback.py
"""
Flight playback: turns computed routes into per-frame drone positions.

Each route leg is split into a number of frames proportional to its
haversine length, so drones move at a constant apparent speed. Drones
depart one after another, ``stagger_frames`` apart, and wait at the base
once their sortie is complete. Positions are interpolated linearly in
latitude/longitude, which is accurate enough at relief-zone distances.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

from . import config, utils
from .models import Base
from .results import DroneResult, OptimizationResult

LatLng = Tuple[float, float]


@dataclass(frozen=True)
class FlightFrame:
    """Drone positions at one playback step."""
    index: int
    positions: Dict[int, LatLng]
    in_flight: List[int]


def route_coordinates(drone: DroneResult, base: Base) -> List[LatLng]:
    """
    Closed lat/lng path of a drone's route: base, stops, back to base.

    Returns an empty list for a drone without a route.
    """
    if not drone.route:
        return []
    return [stop.location for stop in drone.route] + [base.location]


def interpolate_position(start: LatLng, end: LatLng, fraction: float) -> LatLng:
    lat = start[0] + (end[0] - start[0]) * fraction
    lng = start[1] + (end[1] - start[1]) * fraction
    return lat, lng


def _track(path: List[LatLng], km_per_frame: float) -> List[LatLng]:
    """Positions of one drone, one per frame, from departure to landing."""
    track = [path[0]]
    for start, end in zip(path, path[1:]):
        leg_km = utils.haversine_distance(start[0], start[1], end[0], end[1])
        steps = max(1, math.ceil(leg_km / km_per_frame))
        for k in range(1, steps + 1):
            track.append(interpolate_position(start, end, k / steps))
    return track


def build_flight_frames(
    result: OptimizationResult,
    base: Base,
    km_per_frame: float = None,
    stagger_frames: int = None
) -> List[FlightFrame]:
    """
    Build the playback timeline of an optimization result.

    Drones whose route has fewer than two entries (nothing to deliver) are
    not animated.

    Args:
        result: Output of optimize()
        base: Base of the run
        km_per_frame: Distance covered per frame (default: config.PLAYBACK_KM_PER_FRAME)
        stagger_frames: Delay between departures (default: config.PLAYBACK_STAGGER_FRAMES)

    Returns:
        Frames in order; empty when no drone flies
    """
    if km_per_frame is None:
        km_per_frame = config.PLAYBACK_KM_PER_FRAME
    if stagger_frames is None:
        stagger_frames = config.PLAYBACK_STAGGER_FRAMES
    if km_per_frame <= 0:
        raise ValueError(f"km_per_frame must be positive, got {km_per_frame}")

    tracks: Dict[int, List[LatLng]] = {}
    departures: Dict[int, int] = {}
    for idx, drone in enumerate(result.drones):
        if len(drone.route) < 2:
            continue
        tracks[drone.drone_id] = _track(route_coordinates(drone, base), km_per_frame)
        departures[drone.drone_id] = idx * stagger_frames

    if not tracks:
        return []

    total = max(departures[d] + len(track) for d, track in tracks.items())
    frames: List[FlightFrame] = []

    for f in range(total):
        positions: Dict[int, LatLng] = {}
        in_flight: List[int] = []
        for drone_id, track in tracks.items():
            step = f - departures[drone_id]
            if step <= 0:
                positions[drone_id] = track[0]
            elif step >= len(track) - 1:
                positions[drone_id] = track[-1]
            else:
                positions[drone_id] = track[step]
                in_flight.append(drone_id)
        frames.append(FlightFrame(index=f, positions=positions, in_flight=in_flight))

    return frames
