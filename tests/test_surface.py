import math
import numpy as np
import pytest
from fdthermal import Quantity, SIGMA
from fdthermal.building import Fenestration, Material, Polygon3D, AnotherZone
from fdthermal.convection import FixedConvection
from fdthermal.discretization import Discretization, Scheme
from fdthermal.exceptions import SolverError
from fdthermal.surface import SurfaceKind, ThermalSurface

Q_ = Quantity


@pytest.fixture
def make_thermal_wall(header, make_wall_building):
    """Returns a factory of (thermal surface, building, state) for a wall of
    4 m2 with a fixed convection coefficient of 10 W/(m2.K)."""
    def _make(construction, scheme=Scheme.IMPLICIT, main_dt=900.0, h=10.0):
        building = make_wall_building(construction)
        surface = building.surfaces[0]
        disc = Discretization.create(construction, main_dt, scheme=scheme)
        ts = ThermalSurface.create(header, surface, disc, FixedConvection(h))
        state = header.take_values()
        return ts, building, state
    return _make


def test_node_slots_are_reserved(make_construction, concrete, make_thermal_wall):
    ts, building, state = make_thermal_wall(make_construction('slab', (concrete, 20.0)))
    surface = building.surfaces[0]
    assert surface.n_nodes == ts.discretization.n_nodes == 6
    np.testing.assert_array_equal(surface.node_temperatures(state), np.full(6, 22.0))
    assert surface.front_ir_irradiance(state) == pytest.approx(SIGMA * 295.15 ** 4)
    assert surface.front_incident_solar_irradiance(state) == 0.0
    assert ts.kind is SurfaceKind.OPAQUE
    assert not ts.is_transparent


def test_massless_wall_reaches_steady_state_in_one_step(make_construction, massless_insulation, make_thermal_wall):
    ts, building, state = make_thermal_wall(make_construction('board', (massless_insulation, 2.0)))
    q_front, q_back = ts.march(state, 30.0, 20.0, 0.0, 0.0, 900.0)
    R = 0.1 + 0.02 / 0.0252 + 0.1
    q = (30.0 - 20.0) / R
    surface = building.surfaces[0]
    assert surface.front_temperature(state) == pytest.approx(30.0 - q / 10.0)
    assert surface.back_temperature(state) == pytest.approx(20.0 + q / 10.0)
    assert q_front == pytest.approx(q * 4.0)
    assert q_back == pytest.approx(-q * 4.0)
    assert surface.front_convective_heat_flow(state) == pytest.approx(q_front)
    assert surface.back_convective_heat_flow(state) == pytest.approx(q_back)
    assert surface.front_convection_coefficient(state) == 10.0
    assert surface.back_convection_coefficient(state) == 10.0


@pytest.mark.parametrize('scheme', list(Scheme))
def test_massive_wall_converges_to_steady_state(make_construction, concrete, make_thermal_wall, scheme):
    construction = make_construction('slab', (concrete, 20.0))
    ts, building, state = make_thermal_wall(construction, scheme=scheme)
    dt = 900.0 / ts.discretization.tstep_subdivision
    for _ in range(3000):
        ts.march(state, 30.0, 20.0, 0.0, 0.0, dt)
    T = building.surfaces[0].node_temperatures(state)
    R = 0.1 + 0.2 / 1.4 + 0.1
    q = 10.0 / R
    expected = np.linspace(30.0 - q / 10.0, 20.0 + q / 10.0, len(T))
    np.testing.assert_allclose(T, expected, atol=1e-3)


def test_temperatures_stay_between_boundary_temperatures(make_construction, concrete, insulation, make_thermal_wall):
    construction = make_construction('wall', (concrete, 10.0), (insulation, 8.0))
    ts, building, state = make_thermal_wall(construction)
    for k in range(200):
        t_out = 10.0 + 10.0 * math.sin(2 * math.pi * k / 96)
        ts.march(state, t_out, 22.0, 0.0, 0.0, 900.0 / ts.discretization.tstep_subdivision)
        T = building.surfaces[0].node_temperatures(state)
        assert np.all(np.isfinite(T))
        assert np.all(T >= 0.0 - 1e-9) and np.all(T <= 22.0 + 1e-9)


def test_isothermal_radiation_exchange_is_neutral(header, make_construction, make_wall_building):
    material = Material(
        k=Q_(1.4, 'W / (m * K)'),
        rho=Q_(2300.0, 'kg / m ** 3'),
        c=Q_(880.0, 'J / (kg * K)'),
        thermal_emissivity=Q_(0.9, 'frac')
    )
    construction = make_construction('slab', (material, 20.0))
    building = make_wall_building(construction)
    disc = Discretization.create(construction, 900.0)
    ts = ThermalSurface.create(header, building.surfaces[0], disc, FixedConvection(3.0))
    state = header.take_values()
    ts.march(state, 22.0, 22.0, 0.0, 0.0, 900.0)
    np.testing.assert_allclose(building.surfaces[0].node_temperatures(state), 22.0, atol=1e-9)


def test_cold_sky_cools_the_front_face(header, make_construction, make_wall_building):
    material = Material(
        k=Q_(1.4, 'W / (m * K)'),
        rho=Q_(2300.0, 'kg / m ** 3'),
        c=Q_(880.0, 'J / (kg * K)'),
        thermal_emissivity=Q_(0.9, 'frac')
    )
    construction = make_construction('slab', (material, 20.0))
    building = make_wall_building(construction)
    disc = Discretization.create(construction, 900.0)
    ts = ThermalSurface.create(header, building.surfaces[0], disc, FixedConvection(3.0))
    state = header.take_values()
    surface = building.surfaces[0]
    surface.set_front_ir_irradiance(state, SIGMA * (273.15 - 10.0) ** 4)
    ts.march(state, 22.0, 22.0, 0.0, 0.0, 900.0)
    assert surface.front_temperature(state) < 22.0
    assert surface.back_temperature(state) == pytest.approx(22.0, abs=0.5)


def test_absorbed_solar_heats_the_front_face(header, make_construction, make_wall_building):
    material = Material(
        k=Q_(1.4, 'W / (m * K)'),
        rho=Q_(2300.0, 'kg / m ** 3'),
        c=Q_(880.0, 'J / (kg * K)'),
        solar_absorptance=Q_(0.7, 'frac'),
        thermal_emissivity=Q_(0.0, 'frac')
    )
    construction = make_construction('slab', (material, 20.0))
    building = make_wall_building(construction)
    disc = Discretization.create(construction, 900.0)
    ts = ThermalSurface.create(header, building.surfaces[0], disc, FixedConvection(3.0))
    state = header.take_values()
    surface = building.surfaces[0]
    surface.set_front_incident_solar_irradiance(state, 500.0)
    q_front, _ = ts.march(state, 22.0, 22.0, 0.0, 0.0, 900.0)
    assert surface.front_temperature(state) > 22.0
    # the warm face heats the outdoor air
    assert q_front < 0.0


def test_non_finite_boundary_temperature_raises(make_construction, massless_insulation, make_thermal_wall):
    ts, building, state = make_thermal_wall(make_construction('board', (massless_insulation, 2.0)))
    with pytest.raises(SolverError):
        ts.march(state, math.nan, 20.0, 0.0, 0.0, 900.0)


def test_fenestration_is_transparent(header, make_construction, massless_insulation, make_wall_building):
    construction = make_construction('glass', (massless_insulation, 2.0))
    building = make_wall_building(construction)
    window = Fenestration.create(
        'window',
        Polygon3D.vertical_rectangle(1.0, 1.0),
        construction,
        back_boundary=AnotherZone(0)
    )
    building.add_fenestration(window)
    disc = Discretization.create(construction, 900.0)
    ts = ThermalSurface.create(header, window, disc, FixedConvection(2.0))
    state = header.take_values()
    assert ts.kind is SurfaceKind.FENESTRATION
    assert ts.is_transparent
    assert ts.area == pytest.approx(1.0)
    np.testing.assert_array_equal(window.node_temperatures(state), [22.0, 22.0])


@pytest.mark.parametrize('scheme', list(Scheme))
def test_massless_layer_between_massive_layers_stays_bounded(
    make_construction, concrete, massless_conductor, make_thermal_wall, scheme
):
    construction = make_construction('sandwich', (concrete, 20.0), (massless_conductor, 1.0), (concrete, 20.0))
    ts, building, state = make_thermal_wall(construction, scheme=scheme, main_dt=3600.0)
    n = ts.discretization.tstep_subdivision
    for _ in range(48 * n):
        ts.march(state, 30.0, 20.0, 0.0, 0.0, 3600.0 / n)
        T = building.surfaces[0].node_temperatures(state)
        assert np.all(np.isfinite(T))
        assert np.all(T >= 20.0 - 1e-9) and np.all(T <= 30.0 + 1e-9)
