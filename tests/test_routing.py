import itertools
import logging

import pytest

from relief_dispatch import config, routing
from relief_dispatch.models import Drone, Priority, Zone
from relief_dispatch.routing import construct_route, improve_route, reverse_segment
from relief_dispatch.utils import DistanceMatrix, build_distance_matrix, route_distance


def _zone(zone_id, priority=2, demand=10):
    return Zone(zone_id=zone_id, priority=Priority(priority), demand=demand, lat=0.0, lng=0.0)


def _matrix(pairs):
    """Symmetric matrix from {(a, b): km} over ids 0..n."""
    ids = sorted({i for pair in pairs for i in pair})
    rows = {i: {j: 0.0 for j in ids} for i in ids}
    for (a, b), km in pairs.items():
        rows[a][b] = km
        rows[b][a] = km
    return DistanceMatrix(rows)


EQUIDISTANT = _matrix({(0, 1): 5.0, (0, 2): 5.0, (1, 2): 6.0})


# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

def test_route_starts_at_base_and_visits_everything_reachable():
    drone = Drone(drone_id=1, battery_range_km=1000.0, payload_capacity=100)
    route = construct_route([_zone(1), _zone(2)], drone, EQUIDISTANT)
    assert route[0] == 0
    assert sorted(route[1:]) == [1, 2]


@pytest.mark.parametrize("order,expected", [
    ([1, 2], [0, 1, 2]),
    ([2, 1], [0, 2, 1]),
])
def test_ties_go_to_earliest_in_scan_order(order, expected):
    drone = Drone(drone_id=1, battery_range_km=1000.0, payload_capacity=100)
    route = construct_route([_zone(z) for z in order], drone, EQUIDISTANT)
    assert route == expected


def test_payload_limits_the_route():
    drone = Drone(drone_id=1, battery_range_km=1000.0, payload_capacity=100)
    route = construct_route([_zone(1, demand=60), _zone(2, demand=60)], drone, EQUIDISTANT)
    assert route == [0, 1]


def test_battery_reserves_the_return_leg():
    matrix = _matrix({(0, 1): 5.0, (0, 2): 30.0, (1, 2): 26.0})
    drone = Drone(drone_id=1, battery_range_km=20.0, payload_capacity=100)
    assert construct_route([_zone(1), _zone(2)], drone, matrix) == [0, 1]


def test_nothing_reachable_gives_base_only():
    drone = Drone(drone_id=1, battery_range_km=9.99, payload_capacity=100)
    assert construct_route([_zone(1), _zone(2)], drone, EQUIDISTANT) == [0]


def test_candidates_ranked_by_distance_over_tier():
    # 4 / 1 = 4.0 for the critical zone, 9 / 3 = 3.0 for the low one
    matrix = _matrix({(0, 1): 4.0, (0, 2): 9.0, (1, 2): 6.0})
    drone = Drone(drone_id=1, battery_range_km=1000.0, payload_capacity=100)
    route = construct_route([_zone(1, priority=1), _zone(2, priority=3)], drone, matrix)
    assert route == [0, 2, 1]


# -----------------------------------------------------------------------------
# 2-opt
# -----------------------------------------------------------------------------

# Base plus three corners of a small square at the equator
SQUARE = build_distance_matrix({
    0: (0.0, 0.0),
    1: (0.0, 0.01),
    2: (0.01, 0.01),
    3: (0.01, 0.0),
})
CROSSED = [0, 2, 1, 3]


def test_reverse_segment_is_inclusive():
    assert reverse_segment([0, 1, 2, 3, 4], 1, 3) == [0, 3, 2, 1, 4]
    assert reverse_segment([0, 1, 2], 1, 1) == [0, 1, 2]


@pytest.mark.parametrize("route", [[], [0], [0, 1], [0, 1, 2]])
def test_short_routes_unchanged(route):
    matrix = _matrix({(0, 1): 1.0, (0, 2): 1.0, (1, 2): 1.0})
    assert improve_route(route, 100.0, matrix) == route


def test_crossing_is_removed():
    improved = improve_route(CROSSED, 100.0, SQUARE)
    assert improved == [0, 1, 2, 3]
    assert route_distance(improved, SQUARE) < route_distance(CROSSED, SQUARE)


def test_improvement_over_battery_range_is_rejected():
    uncrossed = route_distance([0, 1, 2, 3], SQUARE)
    assert improve_route(CROSSED, uncrossed - 0.01, SQUARE) == CROSSED


def test_zero_passes_leaves_route_alone():
    assert improve_route(CROSSED, 100.0, SQUARE, max_passes=0) == CROSSED


def test_input_route_not_mutated():
    route = list(CROSSED)
    improve_route(route, 100.0, SQUARE)
    assert route == CROSSED


# -----------------------------------------------------------------------------
# Sweep limits
# -----------------------------------------------------------------------------

def _sweeps(caplog):
    finished = [r.getMessage() for r in caplog.records if "2-opt finished" in r.getMessage()]
    assert len(finished) == 1
    return int(finished[0].split("after ")[1].split(" pass")[0])


def test_optimal_route_stops_after_one_sweep(caplog):
    with caplog.at_level(logging.DEBUG, logger="relief_dispatch.routing"):
        assert improve_route([0, 1, 2, 3], 100.0, SQUARE) == [0, 1, 2, 3]
    assert _sweeps(caplog) == 1


def test_stops_after_sweep_without_improvement(caplog):
    with caplog.at_level(logging.DEBUG, logger="relief_dispatch.routing"):
        improve_route(CROSSED, 100.0, SQUARE)
    # One improving sweep, one confirming sweep, well under the cap
    assert _sweeps(caplog) == 2


def test_cap_cuts_search_short(caplog):
    with caplog.at_level(logging.DEBUG, logger="relief_dispatch.routing"):
        assert improve_route(CROSSED, 100.0, SQUARE, max_passes=1) == [0, 1, 2, 3]
    assert _sweeps(caplog) == 1


@pytest.mark.parametrize("max_passes,expected", [
    (None, config.MAX_TWO_OPT_PASSES),
    (3, 3),
])
def test_always_improving_search_runs_to_cap(monkeypatch, caplog, max_passes, expected):
    # Every reversal looks shorter and every recomputed length is lower
    lengths = itertools.count(1000, -1)
    monkeypatch.setattr(routing, "_two_opt_delta", lambda route, i, j, matrix: -1.0)
    monkeypatch.setattr(routing.utils, "route_distance", lambda route, matrix: next(lengths))

    with caplog.at_level(logging.DEBUG, logger="relief_dispatch.routing"):
        improve_route([0, 1, 2, 3, 4], 10_000.0, SQUARE, max_passes=max_passes)

    assert _sweeps(caplog) == expected


def test_default_cap_is_five():
    assert config.MAX_TWO_OPT_PASSES == 5
