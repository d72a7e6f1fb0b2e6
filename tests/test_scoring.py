from relief_dispatch.models import Priority, Zone
from relief_dispatch.scoring import effective_distance, prioritize_zones, priority_weight


def _zone(zone_id, priority, demand):
    return Zone(zone_id=zone_id, priority=Priority(priority), demand=demand, lat=0.0, lng=0.0)


def test_priority_then_larger_demand_first():
    zones = [_zone(1, 3, 50), _zone(2, 1, 10), _zone(3, 2, 30), _zone(4, 1, 40), _zone(5, 2, 35)]
    assert [z.zone_id for z in prioritize_zones(zones)] == [4, 2, 5, 3, 1]


def test_full_ties_keep_insertion_order():
    zones = [_zone(1, 2, 20), _zone(2, 2, 20), _zone(3, 2, 20)]
    assert [z.zone_id for z in prioritize_zones(zones)] == [1, 2, 3]


def test_prioritize_returns_new_list():
    zones = [_zone(1, 3, 10), _zone(2, 1, 10)]
    ordered = prioritize_zones(zones)
    assert ordered is not zones
    assert [z.zone_id for z in zones] == [1, 2]


def test_weights_follow_priority_tier():
    assert priority_weight(_zone(1, 1, 10)) == 1.0
    assert priority_weight(_zone(1, 2, 10)) == 2.0
    assert priority_weight(_zone(1, 3, 10)) == 3.0


def test_effective_distance_divides_by_tier():
    critical = _zone(1, 1, 10)
    low = _zone(2, 3, 10)
    assert effective_distance(6.0, critical) == 6.0
    assert effective_distance(6.0, low) == 2.0
