"""
A single-zone reference building and the closed-form solution of its zone
air temperature, used to check the thermal model.

The zone has one facade that borders the outdoor air on its front face and
the zone on its back face, and optionally a window in the facade made of the
same construction, a luminaire, an electric heater and infiltration. When the
facade has no heat capacity, the zone air temperature follows

    C * dT/dt = A - B * T

with constant A, B and C, of which the solution is known.
"""
from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Callable
import numpy as np
from scipy.integrate import solve_ivp
from .. import Quantity
from ..constants import T_ABS_ZERO
from ..fluids import Gas
from ..simulation_state import SimulationStateHeader
from .boundary import AnotherZone
from .building import Building
from .construction import Material, ConstructionLayer, Construction
from .geometry import Polygon3D
from .hvac import ElectricHeater
from .luminaire import Luminaire
from .space import Space
from .surface import Surface, Fenestration

Q_ = Quantity


POLYURETHANE = Material(
    k=Q_(0.0252, 'W / (m * K)'),
    rho=Q_(17.5, 'kg / m ** 3'),
    c=Q_(2400.0, 'J / (kg * K)')
)

CONCRETE = Material(
    k=Q_(1.4, 'W / (m * K)'),
    rho=Q_(2300.0, 'kg / m ** 3'),
    c=Q_(880.0, 'J / (kg * K)')
)


@dataclass
class SingleZoneOptions:
    """
    Attributes
    ----------
    zone_volume:
        Air volume of the zone (m3).
    surface_area:
        Gross area of the facade (m2), window included.
    window_area:
        Area of the window in the facade (m2); no window if 0.
    material_is_massive:
        If False, the facade and window are a 2 cm layer of massless
        polyurethane; if True, a 20 cm layer of concrete.
    emissivity, solar_absorptance:
        Surface properties of the material. Both are 0 by default, so that
        only convection acts at the faces.
    lighting_power, heating_power:
        Power (W) of the luminaire and the electric heater; they are only
        added when not 0.
    infiltration_rate:
        Volume flow rate (m3/s) of the outdoor air leaking into the zone; no
        infiltration if 0.
    infiltration_temperature:
        Temperature (degC) of the infiltration air.
    """
    zone_volume: float = 40.0
    surface_area: float = 4.0
    window_area: float = 0.0
    material_is_massive: bool = False
    emissivity: float = 0.0
    solar_absorptance: float = 0.0
    lighting_power: float = 0.0
    heating_power: float = 0.0
    infiltration_rate: float = 0.0
    infiltration_temperature: float = 0.0


def single_zone_building(options: SingleZoneOptions, state_header: SimulationStateHeader) -> Building:
    """Builds the single-zone reference building described by `options`."""
    building = Building('single zone')

    infiltration = None
    if options.infiltration_rate > 0.0:
        infiltration = (
            Q_(options.infiltration_rate, 'm ** 3 / s'),
            Q_(options.infiltration_temperature, 'degC')
        )
    space = Space.create('zone', Q_(options.zone_volume, 'm ** 3'), infiltration=infiltration)
    building.add_space(space, state_header)

    if options.material_is_massive:
        base, thickness = CONCRETE, Q_(20.0, 'cm')
    else:
        base, thickness = Material(k=POLYURETHANE.k), Q_(2.0, 'cm')
    material = Material(
        k=base.k,
        rho=base.rho,
        c=base.c,
        solar_absorptance=Q_(options.solar_absorptance, 'frac'),
        thermal_emissivity=Q_(options.emissivity, 'frac')
    )
    construction = Construction.create(
        'facade',
        [ConstructionLayer.create('layer', material, thickness)]
    )
    building.add_construction(construction)

    # square facade facing south, window centred in it
    side = math.sqrt(options.surface_area)
    wall = Polygon3D.vertical_rectangle(side, side)
    window = None
    if options.window_area > 0.0:
        w = math.sqrt(options.window_area)
        if w >= side:
            raise ValueError('the window must be smaller than the facade')
        offset = (side - w) / 2
        window = Polygon3D.vertical_rectangle(w, w, origin=(offset, 0.0, offset))
        wall = Polygon3D(wall.outer(), [window.outer()])

    building.add_surface(Surface.create(
        'facade', wall, construction, front_boundary=None, back_boundary=AnotherZone(space.index)
    ))
    if window is not None:
        building.add_fenestration(Fenestration.create(
            'window', window, construction, front_boundary=None, back_boundary=AnotherZone(space.index)
        ))

    if options.lighting_power != 0.0:
        building.add_luminaire(
            Luminaire.create('luminaire', space.index, Q_(options.lighting_power, 'W')),
            state_header
        )
    if options.heating_power != 0.0:
        building.add_hvac(
            ElectricHeater.create('heater', space.index, Q_(options.heating_power, 'W')),
            state_header
        )
    return building


@dataclass
class SingleZoneTestModel:
    """
    Closed-form model of a zone with massless walls and constant gains.

    Attributes
    ----------
    zone_volume:
        Volume of the zone (m3).
    surface_area:
        Area of the facade, windows included (m2).
    facade_r:
        Thermal resistance of the facade from outdoor air to zone air,
        surface resistances included (m2.K/W).
    infiltration_rate:
        Volume flow rate of outdoor air (m3/s).
    heating_power, lighting_power:
        Heat gains (W).
    temp_out:
        Outdoor temperature (degC).
    temp_start:
        Zone air temperature at t = 0 (degC).
    """
    zone_volume: float = 0.0
    surface_area: float = 0.0
    facade_r: float = 1.0
    infiltration_rate: float = 0.0
    heating_power: float = 0.0
    lighting_power: float = 0.0
    temp_out: float = 0.0
    temp_start: float = 0.0

    def get_closed_solution(self, air: Gas | None = None, T_air: float = 22.0) -> Callable[[float], float]:
        """Returns the zone air temperature (degC) as a function of time (s).
        The properties of air are taken at `T_air` (degC).
        """
        air = air if air is not None else Gas.air()
        rho = air.density(T_air + T_ABS_ZERO)
        cp = air.heat_capacity(T_air + T_ABS_ZERO)
        u = 1.0 / self.facade_r
        c = self.zone_volume * rho * cp
        a = (
            self.heating_power
            + self.lighting_power
            + self.temp_out * u * self.surface_area
            + self.infiltration_rate * rho * cp * self.temp_out
        ) / c
        b = (u * self.surface_area + self.infiltration_rate * rho * cp) / c
        k1 = self.temp_start - a / b

        def f(t: float) -> float:
            return a / b + k1 * math.exp(-b * t)

        return f

    def get_reference_solution(self, t_end: float, air: Gas | None = None) -> Callable[[float], float]:
        """Returns the zone air temperature (degC) as a function of time (s),
        for 0 <= t <= `t_end`, with the heat capacity of the zone air and of
        the infiltration air depending on their temperature, as in the
        thermal model. The lumped equation is then integrated numerically.
        """
        air = air if air is not None else Gas.air()
        u = 1.0 / self.facade_r
        T_inf_abs = self.temp_out + T_ABS_ZERO
        inf = self.infiltration_rate * air.density(T_inf_abs) * air.heat_capacity(T_inf_abs)
        gains = self.heating_power + self.lighting_power

        def dT_dt(t: float, T: np.ndarray) -> np.ndarray:
            T_abs = T[0] + T_ABS_ZERO
            c = self.zone_volume * air.density(T_abs) * air.heat_capacity(T_abs)
            q = gains + (u * self.surface_area + inf) * (self.temp_out - T[0])
            return np.array([q / c])

        sol = solve_ivp(
            dT_dt, (0.0, t_end), [self.temp_start],
            dense_output=True, rtol=1e-9, atol=1e-9
        )

        def f(t: float) -> float:
            return float(sol.sol(t)[0])

        return f
