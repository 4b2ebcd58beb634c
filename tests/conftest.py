import pytest
from fdthermal import Quantity
from fdthermal.building import (
    AnotherZone,
    Building,
    Construction,
    ConstructionLayer,
    Material,
    Polygon3D,
    Space,
    Surface
)
from fdthermal.fluids import Gas
from fdthermal.simulation_state import SimulationStateHeader

Q_ = Quantity


@pytest.fixture(scope='session')
def air():
    return Gas.air()


@pytest.fixture
def header():
    return SimulationStateHeader()


@pytest.fixture
def concrete():
    return Material(
        k=Q_(1.4, 'W / (m * K)'),
        rho=Q_(2300.0, 'kg / m ** 3'),
        c=Q_(880.0, 'J / (kg * K)'),
        thermal_emissivity=Q_(0.0, 'frac'),
        solar_absorptance=Q_(0.0, 'frac')
    )


@pytest.fixture
def insulation():
    return Material(
        k=Q_(0.0252, 'W / (m * K)'),
        rho=Q_(17.5, 'kg / m ** 3'),
        c=Q_(2400.0, 'J / (kg * K)'),
        thermal_emissivity=Q_(0.0, 'frac'),
        solar_absorptance=Q_(0.0, 'frac')
    )


@pytest.fixture
def massless_insulation():
    # polyurethane without heat capacity
    return Material(
        k=Q_(0.0252, 'W / (m * K)'),
        thermal_emissivity=Q_(0.0, 'frac'),
        solar_absorptance=Q_(0.0, 'frac')
    )


@pytest.fixture
def make_construction():
    """Returns a factory of constructions from (material, thickness in cm)
    pairs."""
    def _make(ID, *layers):
        return Construction.create(ID, [
            ConstructionLayer.create(f'{ID}-{i}', material, Q_(t, 'cm'))
            for i, (material, t) in enumerate(layers)
        ])
    return _make


@pytest.fixture
def make_wall_building(header):
    """Returns a factory of buildings with one space and one south facing
    wall between the outdoor air (front) and the space (back)."""
    def _make(construction, area=4.0, volume=40.0):
        building = Building('test')
        space = Space.create('zone', Q_(volume, 'm ** 3'))
        building.add_space(space, header)
        side = area ** 0.5
        wall = Surface.create(
            'wall',
            Polygon3D.vertical_rectangle(side, side),
            construction,
            front_boundary=None,
            back_boundary=AnotherZone(space.index)
        )
        building.add_surface(wall)
        return building
    return _make


@pytest.fixture
def massless_conductor():
    # thin, highly conductive layer without heat capacity (e.g. a metal sheet
    # or an air gap modelled as a resistance)
    return Material(
        k=Q_(1.0, 'W / (m * K)'),
        thermal_emissivity=Q_(0.0, 'frac'),
        solar_absorptance=Q_(0.0, 'frac')
    )
