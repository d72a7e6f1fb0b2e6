import pytest

from relief_dispatch.optimizer import DeliveryOptimizer


@pytest.fixture
def optimizer():
    """Optimizer with a base at the origin and no zones or drones."""
    opt = DeliveryOptimizer()
    opt.set_base(0.0, 0.0)
    return opt


@pytest.fixture
def scenario_a(optimizer):
    """Two critical zones east of the base, one low-priority zone west of it."""
    optimizer.add_zone(1, 10, 0.0, 0.01)
    optimizer.add_zone(1, 10, 0.0, 0.02)
    optimizer.add_zone(3, 10, 0.0, -0.01)
    optimizer.add_drone(1000.0, 100)
    return optimizer


@pytest.fixture
def zones_csv(tmp_path):
    path = tmp_path / "zones.csv"
    path.write_text(
        "priority,demand,lat,lng\n"
        "1,30,33.70,73.05\n"
        "2,25,33.65,73.10\n"
        "3,40,33.60,73.00\n"
    )
    return path


@pytest.fixture
def drones_csv(tmp_path):
    path = tmp_path / "drones.csv"
    path.write_text(
        "battery_range_km,payload_capacity\n"
        "60,100\n"
        "45.5,80\n"
    )
    return path
