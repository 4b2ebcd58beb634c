import math
from datetime import datetime as DateTime
from datetime import timedelta as TimeDelta
import numpy as np
import pytest
from fdthermal import Quantity
from fdthermal.building import AnotherZone, Building, Ground, Outdoor, Polygon3D, Space, Surface
from fdthermal.building.reference import (
    SingleZoneOptions,
    SingleZoneTestModel,
    single_zone_building
)
from fdthermal.convection import FixedConvection
from fdthermal.discretization import Scheme
from fdthermal.exceptions import (
    InvariantViolationError,
    MissingWeatherError,
    OutOfBoundsError,
    TimestepWarning,
    UnsupportedBoundaryError
)
from fdthermal.heat_balance import calculate_zones_abc
from fdthermal.model import ThermalModel, ThermalOptions
from fdthermal.simulation_state import SimulationStateHeader
from fdthermal.weather import ScheduleConstant, SyntheticWeather

Q_ = Quantity

T_OUT = 30.0
T_START = 22.0
H = 2.0
# outdoor air to zone air through 2 cm of massless polyurethane
FACADE_R = 1.0 / H + 0.02 / 0.0252 + 1.0 / H

START = DateTime(2023, 7, 1)


def _simulate(options: SingleZoneOptions, steps_per_hour: int, n_steps: int, dtype=np.float64):
    """Runs the single-zone building with a constant outdoor temperature for
    `n_steps` main timesteps. Returns the times (s) since the start and the
    zone air temperatures at those times.
    """
    header = SimulationStateHeader()
    building = single_zone_building(options, header)
    model = ThermalModel.create(
        None, ThermalOptions(convection=FixedConvection(H)), building, header, steps_per_hour
    )
    state = header.take_values(dtype)
    weather = SyntheticWeather(dry_bulb_temperature=ScheduleConstant(T_OUT))
    date = START
    found = []
    for _ in range(n_steps + 1):
        found.append(model.zone_temperatures(state)[0])
        date = model.march(date, weather, building, state)
    t = np.arange(n_steps + 1) * model.main_dt
    return t, np.array(found)


def _test_model(options: SingleZoneOptions) -> SingleZoneTestModel:
    return SingleZoneTestModel(
        zone_volume=options.zone_volume,
        surface_area=options.surface_area,
        facade_r=FACADE_R,
        infiltration_rate=options.infiltration_rate,
        heating_power=options.heating_power,
        lighting_power=options.lighting_power,
        temp_out=T_OUT,
        temp_start=T_START
    )


def test_wall_only_follows_closed_form(air):
    options = SingleZoneOptions()
    t, found = _simulate(options, 60, 800)
    f = _test_model(options).get_closed_solution(air)
    expected = np.array([f(ti) for ti in t])
    assert np.max(np.abs(found - expected)) <= 0.15


def test_wall_only_rises_monotonically_towards_outdoor_temperature():
    _, found = _simulate(SingleZoneOptions(), 60, 800)
    assert found[0] == T_START
    assert np.all(np.diff(found) >= 0.0)
    assert np.all(found < T_OUT)
    assert found[-1] > T_OUT - 1.0


def test_wall_and_window_follow_closed_form(air):
    options = SingleZoneOptions(window_area=1.0)
    t, found = _simulate(options, 6, 80)
    f = _test_model(options).get_closed_solution(air)
    expected = np.array([f(ti) for ti in t])
    assert np.max(np.abs(found - expected)) <= 0.15


@pytest.mark.parametrize('options', [
    SingleZoneOptions(lighting_power=100.0),
    SingleZoneOptions(heating_power=100.0),
    SingleZoneOptions(heating_power=100.0, infiltration_rate=0.1, infiltration_temperature=T_OUT)
], ids=['luminaire', 'heater', 'heater+infiltration'])
def test_zone_with_gains_follows_reference_solution(air, options):
    t, found = _simulate(options, 20, 800)
    f = _test_model(options).get_reference_solution(t[-1], air)
    expected = np.array([f(ti) for ti in t])
    assert np.max(np.abs(found - expected)) <= 0.55


def test_single_precision_state(air):
    options = SingleZoneOptions()
    t, found = _simulate(options, 60, 200, dtype=np.float32)
    f = _test_model(options).get_closed_solution(air)
    expected = np.array([f(ti) for ti in t])
    assert np.max(np.abs(found - expected)) <= 0.15


@pytest.fixture
def wall_model():
    """Returns a factory of (model, building, header, state) of the
    single-zone building with a massless facade."""
    def _make(steps_per_hour=6, options=None):
        header = SimulationStateHeader()
        building = single_zone_building(SingleZoneOptions(), header)
        model = ThermalModel.create(None, options, building, header, steps_per_hour)
        return model, building, header, header.take_values()
    return _make


@pytest.mark.parametrize('steps_per_hour', [6, 12, 60])
def test_date_advances_by_one_main_timestep(wall_model, steps_per_hour):
    model, building, _, state = wall_model(steps_per_hour)
    weather = SyntheticWeather(dry_bulb_temperature=ScheduleConstant(T_OUT))
    date = START
    for _ in range(3):
        new_date = model.march(date, weather, building, state)
        assert isinstance(new_date, DateTime)
        assert new_date - date == TimeDelta(seconds=3600 / steps_per_hour)
        date = new_date


def test_safety_multiplier_adds_substeps(wall_model):
    model, building, _, state = wall_model(6, ThermalOptions(safety_multiplier=3))
    assert model.dt_subdivisions == 3
    assert model.dt == pytest.approx(200.0)
    weather = SyntheticWeather(dry_bulb_temperature=ScheduleConstant(T_OUT))
    assert model.march(START, weather, building, state) == START + TimeDelta(minutes=10)


def test_invalid_options_are_rejected(wall_model):
    with pytest.raises(ValueError):
        wall_model(0)
    with pytest.raises(ValueError):
        wall_model(6, ThermalOptions(safety_multiplier=0))


def test_few_substeps_per_hour_warns():
    header = SimulationStateHeader()
    building = single_zone_building(SingleZoneOptions(), header)
    with pytest.warns(TimestepWarning):
        ThermalModel.create(None, None, building, header, 1)


def test_isolated_zone_keeps_its_temperature():
    header = SimulationStateHeader()
    building = Building('box')
    building.add_space(Space.create('zone', Q_(40.0, 'm ** 3')))
    model = ThermalModel.create(None, None, building, header, 6)
    state = header.take_values()
    weather = SyntheticWeather(dry_bulb_temperature=ScheduleConstant(-10.0))
    date = START
    for _ in range(10):
        date = model.march(date, weather, building, state)
        assert model.zone_temperatures(state)[0] == T_START


def test_missing_outdoor_temperature_raises(wall_model):
    model, building, _, state = wall_model()
    with pytest.raises(MissingWeatherError):
        model.march(START, SyntheticWeather(wind_speed=ScheduleConstant(3.0)), building, state)


def test_ground_boundary_is_unsupported(make_construction, massless_insulation):
    header = SimulationStateHeader()
    building = Building('basement')
    building.add_space(Space.create('zone', Q_(40.0, 'm ** 3')))
    building.add_surface(Surface.create(
        'floor',
        Polygon3D.vertical_rectangle(2.0, 2.0),
        make_construction('slab', (massless_insulation, 2.0)),
        front_boundary=Outdoor(),
        back_boundary=Ground()
    ))
    model = ThermalModel.create(None, None, building, header, 6)
    state = header.take_values()
    weather = SyntheticWeather(dry_bulb_temperature=ScheduleConstant(T_OUT))
    with pytest.raises(UnsupportedBoundaryError):
        model.march(START, weather, building, state)


def test_thermal_objects_by_index(wall_model):
    model, *_ = wall_model()
    assert model.get_thermal_zone(0) is model.zones[0]
    assert model.get_thermal_surface(0) is model.surfaces[0]
    with pytest.raises(OutOfBoundsError):
        model.get_thermal_zone(1)
    with pytest.raises(OutOfBoundsError):
        model.get_thermal_surface(-1)
    with pytest.raises(OutOfBoundsError):
        model.get_thermal_fenestration(0)


def test_corrupted_handle_is_detected(wall_model):
    model, building, _, state = wall_model()
    # point the zone at the slot of a surface node
    model.zones[0].temperature_index = building.surfaces[0].first_node_index
    weather = SyntheticWeather(dry_bulb_temperature=ScheduleConstant(T_OUT))
    with pytest.raises(InvariantViolationError):
        model.march(START, weather, building, state)


def test_massive_wall_stays_bounded():
    header = SimulationStateHeader()
    options = SingleZoneOptions(
        zone_volume=600.0,
        surface_area=60.0,
        material_is_massive=True,
        emissivity=0.9,
        solar_absorptance=0.7
    )
    building = single_zone_building(options, header)
    model = ThermalModel.create(None, None, building, header, 6)
    state = header.take_values()
    weather = SyntheticWeather(
        dry_bulb_temperature=lambda d: 20.0 + 10.0 * math.sin(2 * math.pi * (d.hour + d.minute / 60) / 24),
        wind_speed=ScheduleConstant(3.0),
        wind_direction=lambda d: 15.0 * d.hour
    )
    date = START
    for _ in range(5000):
        date = model.march(date, weather, building, state)
        T_zone = model.zone_temperatures(state)[0]
        assert 10.0 - 0.5 <= T_zone <= 30.0 + 0.5
    T_nodes = building.surfaces[0].node_temperatures(state)
    assert np.all(np.isfinite(T_nodes))
    assert np.all(np.abs(T_nodes) < 1000.0)
    assert model.dt * model.dt_subdivisions == pytest.approx(600.0)


def test_explicit_scheme_with_massless_layer_stays_bounded(
    header, make_construction, concrete, massless_conductor, make_wall_building
):
    construction = make_construction('sandwich', (concrete, 20.0), (massless_conductor, 1.0), (concrete, 20.0))
    building = make_wall_building(construction)
    options = ThermalOptions(scheme=Scheme.EXPLICIT, convection=FixedConvection(H))
    model = ThermalModel.create(None, options, building, header, 1)
    state = header.take_values()
    weather = SyntheticWeather(dry_bulb_temperature=ScheduleConstant(T_OUT))
    date = START
    for _ in range(48):
        date = model.march(date, weather, building, state)
        T_nodes = building.surfaces[0].node_temperatures(state)
        assert np.all(np.isfinite(T_nodes))
        assert np.all(np.abs(T_nodes) < 1000.0)
        assert np.all(T_nodes <= T_OUT + 1e-9)
        assert np.all(T_nodes >= T_START - 1e-9)


def test_partition_between_two_zones(header, make_construction, massless_insulation):
    building = Building('two rooms')
    building.add_space(Space.create('warm', Q_(40.0, 'm ** 3')), header)
    building.add_space(Space.create('cold', Q_(40.0, 'm ** 3')), header)
    building.add_surface(Surface.create(
        'partition',
        Polygon3D.vertical_rectangle(4.0, 4.0),
        make_construction('board', (massless_insulation, 2.0)),
        front_boundary=AnotherZone(0),
        back_boundary=AnotherZone(1)
    ))
    model = ThermalModel.create(None, ThermalOptions(convection=FixedConvection(H)), building, header, 6)
    state = header.take_values()
    model.zones[0].set_temperature(state, 30.0)
    weather = SyntheticWeather(dry_bulb_temperature=ScheduleConstant(T_OUT))

    date = model.march(START, weather, building, state)
    partition = building.surfaces[0]
    a, b, _ = calculate_zones_abc(model.zones, model.surfaces, model.fenestrations, building, state)
    hA = H * 16.0
    assert b[0] == pytest.approx(hA)
    assert b[1] == pytest.approx(hA)
    assert a[0] == pytest.approx(hA * partition.front_temperature(state))
    assert a[1] == pytest.approx(hA * partition.back_temperature(state))

    differences = []
    for _ in range(72):
        T_zones = model.zone_temperatures(state)
        differences.append(T_zones[0] - T_zones[1])
        assert T_zones[0] + T_zones[1] == pytest.approx(30.0 + T_START, abs=0.2)
        date = model.march(date, weather, building, state)
    assert np.all(np.diff(differences) < 0.0)
    assert 0.0 <= differences[-1] < 0.01
