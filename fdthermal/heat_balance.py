"""
Heat balance of the zone air.

The air of each zone `i` is a single, well-mixed node:

    C_i * dT_i / dt = A_i - B_i * T_i

where `A_i` collects the heat gains and the terms that drive the zone towards
the temperature of its surroundings, `B_i` the conductances to those
surroundings and `C_i` the heat capacity of the air. Over a substep in which
`A`, `B` and `C` are constant, the equation has a closed-form solution.
"""
from __future__ import annotations
from typing import Sequence
import numpy as np
from .building.boundary import AnotherZone
from .building.building import Building
from .constants import T_ABS_ZERO
from .exceptions import InvariantViolationError, OutOfBoundsError
from .simulation_state import SimulationState
from .surface import ThermalSurface
from .zone import ThermalZone

# below this value of B, a zone is isolated from its surroundings
B_TOLERANCE = 1e-9


def _add_air_flow(
    zone: ThermalZone,
    volume: float | None,
    temperature: float | None,
    what: str,
    a: np.ndarray,
    b: np.ndarray,
    i: int
) -> None:
    if volume is None and temperature is None:
        return
    if volume is None or temperature is None:
        raise InvariantViolationError(
            f"zone '{zone.ID}' has a {what} "
            f"{'temperature' if volume is None else 'volume'} but no "
            f"{what} {'volume' if volume is None else 'temperature'}"
        )
    T_abs = temperature + T_ABS_ZERO
    rho_V_c = zone.air.density(T_abs) * volume * zone.air.heat_capacity(T_abs)
    a[i] += rho_V_c * temperature
    b[i] += rho_V_c


def calculate_zones_abc(
    zones: Sequence[ThermalZone],
    surfaces: Sequence[ThermalSurface],
    fenestrations: Sequence[ThermalSurface],
    building: Building,
    state: SimulationState
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Builds the coefficients A, B and C of the heat balance of every zone.

    Parameters
    ----------
    zones:
        The thermal zones, in the order of the spaces of `building`.
    surfaces, fenestrations:
        The thermal surfaces, already advanced to the end of the substep so
        that their face temperatures and convection coefficients in `state`
        are current.
    building:
        The building, for its spaces, HVAC units and luminaires.
    state:
        The simulation state.

    Returns
    -------
    Numpy 1D-arrays A (W), B (W/K) and C (J/K), one element per zone.
    """
    nz = len(zones)
    a = np.zeros(nz)
    b = np.zeros(nz)
    c = np.zeros(nz)

    def _check(space_index: int, what: str) -> int:
        if not 0 <= space_index < nz:
            raise OutOfBoundsError(f"{what} targets space {space_index}, but there are {nz} zones")
        return space_index

    # heating and cooling
    for hvac in building.hvacs:
        for space_index, power in hvac.heating_cooling(state):
            a[_check(space_index, f"HVAC '{hvac.ID}'")] += power

    # lighting
    for luminaire in building.luminaires:
        space_index = luminaire.target_space()
        if space_index is not None:
            a[_check(space_index, f"luminaire '{luminaire.ID}'")] += luminaire.power_consumption(state)

    for i, zone in enumerate(zones):
        space = building.spaces[zone.space_index]
        _add_air_flow(
            zone, space.infiltration_volume(state), space.infiltration_temperature(state),
            'infiltration', a, b, i
        )
        _add_air_flow(
            zone, space.ventilation_volume(state), space.ventilation_temperature(state),
            'ventilation', a, b, i
        )
        c[i] = zone.mcp(zone.temperature(state))

    # surfaces
    for ts in (*surfaces, *fenestrations):
        s = ts.surface
        if isinstance(ts.front_boundary, AnotherZone):
            i = ts.front_boundary.space_index
            hA = s.front_convection_coefficient(state) * ts.area
            a[i] += hA * s.front_temperature(state)
            b[i] += hA
        if isinstance(ts.back_boundary, AnotherZone):
            i = ts.back_boundary.space_index
            hA = s.back_convection_coefficient(state) * ts.area
            a[i] += hA * s.back_temperature(state)
            b[i] += hA

    # TODO: air mixing between zones, once spaces carry the mixing flows:
    #  rho * V_dot * c_p * T_j to A_i and rho * V_dot * c_p to B_i for each pair.
    return a, b, c


def zone_future_temperatures(
    t_current: np.ndarray,
    a: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    dt: float
) -> np.ndarray:
    """
    Returns the zone temperatures at the end of a substep `dt`:

        T' = A/B + (T - A/B) * exp(-B * dt / C)

    A zone with B = 0 exchanges no heat with its surroundings and keeps its
    temperature.
    """
    t_current = np.asarray(t_current, dtype=float)
    isolated = np.abs(b) <= B_TOLERANCE
    b_safe = np.where(isolated, 1.0, b)
    t_inf = a / b_safe
    t_future = t_inf + (t_current - t_inf) * np.exp(-b_safe * dt / c)
    return np.where(isolated, t_current, t_future)


def zone_mean_future_temperatures(
    t_current: np.ndarray,
    a: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    dt: float
) -> np.ndarray:
    """
    Returns the mean zone temperatures over a substep `dt`:

        mean T = A/B + C * (T - A/B) / (B * dt) * (1 - exp(-B * dt / C))
    """
    t_current = np.asarray(t_current, dtype=float)
    isolated = np.abs(b) <= B_TOLERANCE
    b_safe = np.where(isolated, 1.0, b)
    t_inf = a / b_safe
    k = c * (t_current - t_inf) / (b_safe * dt)
    t_mean = t_inf + k * (1.0 - np.exp(-b_safe * dt / c))
    return np.where(isolated, t_current, t_mean)
