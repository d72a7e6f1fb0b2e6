import pytest

from relief_dispatch.playback import (
    build_flight_frames,
    interpolate_position,
    route_coordinates,
)


@pytest.fixture
def two_sorties(optimizer):
    """Two drones that each carry exactly one zone."""
    optimizer.add_zone(1, 10, 0.0, 0.01)
    optimizer.add_zone(1, 10, 0.0, -0.01)
    optimizer.add_drone(50.0, 10)
    optimizer.add_drone(50.0, 10)
    return optimizer


def test_route_coordinates_close_the_loop(scenario_a):
    result = scenario_a.optimize()
    path = route_coordinates(result.drones[0], scenario_a.base)

    assert path[0] == scenario_a.base.location
    assert path[-1] == scenario_a.base.location
    assert len(path) == len(result.drones[0].route) + 1


def test_interpolate_position():
    assert interpolate_position((0.0, 0.0), (1.0, 2.0), 0.0) == (0.0, 0.0)
    assert interpolate_position((0.0, 0.0), (1.0, 2.0), 0.5) == (0.5, 1.0)
    assert interpolate_position((0.0, 0.0), (1.0, 2.0), 1.0) == (1.0, 2.0)


def test_frames_start_and_end_at_base(two_sorties):
    result = two_sorties.optimize()
    base = two_sorties.base
    frames = build_flight_frames(result, base, km_per_frame=0.5, stagger_frames=3)

    assert frames[0].index == 0
    assert frames[0].in_flight == []
    assert frames[-1].in_flight == []
    for drone_id in (1, 2):
        assert frames[0].positions[drone_id] == base.location
        assert frames[-1].positions[drone_id] == pytest.approx(base.location)


def test_departures_are_staggered(two_sorties):
    result = two_sorties.optimize()
    frames = build_flight_frames(result, two_sorties.base, km_per_frame=0.5, stagger_frames=3)

    assert frames[1].in_flight == [1]
    assert frames[3].in_flight == [1]
    assert frames[4].in_flight == [1, 2]
    assert frames[1].positions[2] == two_sorties.base.location


def test_idle_drones_not_animated(scenario_a):
    scenario_a.add_drone(50.0, 100)
    result = scenario_a.optimize()
    frames = build_flight_frames(result, scenario_a.base)

    assert frames
    assert all(set(frame.positions) == {1} for frame in frames)


def test_no_sorties_gives_no_frames(optimizer):
    optimizer.add_zone(1, 500, 0.0, 0.01)
    optimizer.add_drone(50.0, 10)
    result = optimizer.optimize()

    assert build_flight_frames(result, optimizer.base) == []


def test_km_per_frame_must_be_positive(scenario_a):
    result = scenario_a.optimize()
    with pytest.raises(ValueError):
        build_flight_frames(result, scenario_a.base, km_per_frame=0)
