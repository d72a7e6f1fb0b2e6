import math

import pytest

from relief_dispatch import config
from relief_dispatch.exceptions import InsufficientInputError, ValidationError
from relief_dispatch.optimizer import DeliveryOptimizer
from relief_dispatch.scenario import (
    add_clicked_zone,
    generate_random_zones,
    get_preset,
    load_drones_csv,
    load_zones_csv,
)


def test_presets_resolve():
    for key in config.LOCATION_PRESETS:
        preset = get_preset(key)
        assert {"lat", "lng", "zoom", "name"} <= set(preset)


def test_unknown_preset():
    with pytest.raises(ValidationError, match="unknown preset"):
        get_preset("atlantis")


def test_random_zones_reproducible_for_seed():
    def snapshot(seed):
        opt = DeliveryOptimizer()
        opt.set_base(33.6844, 73.0479)
        return [(z.priority, z.demand, z.lat, z.lng) for z in generate_random_zones(opt, 15, seed=seed)]

    assert snapshot(7) == snapshot(7)
    assert snapshot(7) != snapshot(8)


def test_random_zones_within_bounds(optimizer):
    zones = generate_random_zones(optimizer, 40, seed=3)

    assert [z.zone_id for z in zones] == list(range(1, 41))
    for zone in zones:
        radius = math.hypot(zone.lat - optimizer.base.lat, zone.lng - optimizer.base.lng)
        assert config.ZONE_RADIUS_MIN_DEG - 1e-9 <= radius <= config.ZONE_RADIUS_MAX_DEG + 1e-9
        assert zone.priority in (1, 2, 3)
        assert config.ZONE_DEMAND_MIN <= zone.demand <= config.ZONE_DEMAND_MAX


def test_random_zones_append_to_existing(optimizer):
    optimizer.add_zone(1, 10, 0.0, 0.01)
    added = generate_random_zones(optimizer, 2, seed=1)
    assert [z.zone_id for z in added] == [2, 3]
    assert len(optimizer.zones) == 3


def test_random_zones_need_a_base():
    with pytest.raises(InsufficientInputError):
        generate_random_zones(DeliveryOptimizer(), 5)


def test_random_zones_reject_negative_count(optimizer):
    with pytest.raises(ValidationError):
        generate_random_zones(optimizer, -1)


def test_load_zones_csv(optimizer, zones_csv):
    zones = load_zones_csv(optimizer, str(zones_csv))

    assert [(z.zone_id, int(z.priority), z.demand) for z in zones] == [(1, 1, 30), (2, 2, 25), (3, 3, 40)]
    assert zones[0].location == (33.70, 73.05)


def test_load_drones_csv(optimizer, drones_csv):
    drones = load_drones_csv(optimizer, str(drones_csv))

    assert [(d.drone_id, d.battery_range_km, d.payload_capacity) for d in drones] == [
        (1, 60.0, 100),
        (2, 45.5, 80),
    ]


def test_missing_files(optimizer, tmp_path):
    with pytest.raises(FileNotFoundError):
        load_zones_csv(optimizer, str(tmp_path / "nope.csv"))
    with pytest.raises(FileNotFoundError):
        load_drones_csv(optimizer, str(tmp_path / "nope.csv"))


@pytest.mark.parametrize("body", [
    "priority,demand,lat,lng\n1,ten,33.7,73.0\n",
    "priority,demand,lat,lng\n5,10,33.7,73.0\n",
    "priority,demand,lat\n1,10,33.7\n",
    "priority,demand,lat,lng\n1,10,95.0,73.0\n",
])
def test_malformed_zone_rows(optimizer, tmp_path, body):
    path = tmp_path / "zones.csv"
    path.write_text(body)

    with pytest.raises(ValidationError, match="line 2"):
        load_zones_csv(optimizer, str(path))


def test_malformed_drone_rows(optimizer, tmp_path):
    path = tmp_path / "drones.csv"
    path.write_text("battery_range_km,payload_capacity\n50,100\n-1,100\n")

    with pytest.raises(ValidationError, match="line 3"):
        load_drones_csv(optimizer, str(path))
    assert len(optimizer.drones) == 1


def test_clicked_zone_added_at_click_position(optimizer):
    zone = add_clicked_zone(optimizer, {"lat": 0.05, "lng": -0.03}, 1, 25)

    assert zone.zone_id == 1
    assert zone.location == (0.05, -0.03)
    assert (int(zone.priority), zone.demand) == (1, 25)
    assert optimizer.zones == [zone]


@pytest.mark.parametrize("clicked", [None, {}, {"lat": 0.05}])
def test_click_without_position_rejected(optimizer, clicked):
    with pytest.raises(ValidationError, match="no position"):
        add_clicked_zone(optimizer, clicked, 1, 25)
    assert optimizer.zones == []


def test_clicked_zone_values_validated(optimizer):
    with pytest.raises(ValidationError):
        add_clicked_zone(optimizer, {"lat": 0.05, "lng": 0.05}, 4, 25)
