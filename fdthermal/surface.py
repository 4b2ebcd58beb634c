"""TRANSIENT HEAT CONDUCTION THROUGH A SURFACE.
-------------------------------------------
One-dimensional heat conduction through the layers of an opaque surface or a
fenestration, discretized by `Discretization` into a chain of capacitive
nodes and conductances.

Per substep, the node equations

    C_i / dt * (T_i' - T_i) = theta * F_i(T') + (1 - theta) * F_i(T)

with `F_i` the net conductive heat flow into node `i`, are solved as one
tridiagonal system. Nodes without heat capacity are solved with theta = 1.
At the two faces, the heat exchange with the environment is added to the
node equation and treated implicitly:
- convection with the adjacent air, `h * (T_air - T_face)`,
- absorbed solar irradiance, `alpha * I_solar`,
- long-wave radiation, `eps * (E_ir - SIGMA * T_face ** 4)`, linearized
  around the face temperature at the start of the substep.
"""
from __future__ import annotations
from enum import Enum
import numpy as np
from scipy.linalg import solve_banded
from .building.boundary import Boundary, Outdoor
from .building.surface import Surface
from .constants import SIGMA, T_ABS_ZERO, DEFAULT_TEMPERATURE
from .convection import ConvectionModel, ConvectionParams, TarpConvection
from .discretization import Discretization
from .exceptions import SolverError
from .logging import ModuleLogger
from .simulation_state import SimulationState, SimulationStateHeader, StateElement

logger = ModuleLogger.get_logger(__name__)
logger.setLevel(ModuleLogger.ERROR)


# emissivity below which long-wave radiation is ignored
MIN_EMISSIVITY = 1e-3


class SurfaceKind(Enum):
    OPAQUE = 'opaque'
    FENESTRATION = 'fenestration'


class ThermalSurface:
    """
    The thermal model of a surface or fenestration of the building.

    Opaque surfaces and fenestrations are handled by the same algorithm; the
    `kind` only tells them apart.
    """

    def __init__(self):
        self.kind: SurfaceKind = SurfaceKind.OPAQUE
        self.surface: Surface | None = None
        self.discretization: Discretization | None = None
        self.convection: ConvectionModel = TarpConvection()
        self.area: float = 0.0
        self.perimeter: float = 0.0
        self.cos_tilt: float = 0.0
        self.azimuth: float = 0.0
        self.height: float = 1.0
        self.front_emissivity: float = 0.0
        self.back_emissivity: float = 0.0
        self.front_solar_absorptance: float = 0.0
        self.back_solar_absorptance: float = 0.0

    @classmethod
    def create(
        cls,
        state_header: SimulationStateHeader,
        surface: Surface,
        discretization: Discretization,
        convection: ConvectionModel | None = None,
        height: float = 1.0
    ) -> ThermalSurface:
        """
        Creates the thermal model of `surface` and reserves its slots in the
        simulation state.

        One slot is reserved per node (initial temperature 22 degC). The slots
        of the convection coefficients, convective heat flows, incident solar
        irradiance (initially 0) and long-wave irradiance (initially the
        black-body emission at 22 degC) are only reserved when the surface
        doesn't have them yet.

        Parameters
        ----------
        state_header:
            Header of the simulation state.
        surface:
            Surface or fenestration of the building.
        discretization:
            Discretization of the construction of the surface.
        convection: optional
            Model of the convection coefficients; `TarpConvection` by default.
        height:
            Height of the surface above the ground in m, used by the
            convection model.
        """
        ts = cls()
        ts.kind = SurfaceKind.FENESTRATION if surface.is_transparent else SurfaceKind.OPAQUE
        ts.surface = surface
        ts.discretization = discretization
        ts.convection = convection if convection is not None else TarpConvection()
        ts.area = surface.area()
        ts.perimeter = surface.vertices.outer().perimeter()
        ts.cos_tilt = surface.vertices.cos_tilt
        ts.azimuth = surface.vertices.azimuth
        ts.height = height

        front, back = surface.construction.front_material, surface.construction.back_material
        ts.front_emissivity = front.thermal_emissivity.to('frac').m
        ts.back_emissivity = back.thermal_emissivity.to('frac').m
        ts.front_solar_absorptance = front.solar_absorptance.to('frac').m
        ts.back_solar_absorptance = back.solar_absorptance.to('frac').m

        ts._reserve_state(state_header)
        logger.debug(
            f"{ts.kind.value} '{surface.ID}': {discretization.n_nodes} nodes, "
            f"A = {ts.area:.3f} m2"
        )
        return ts

    def _reserve_state(self, state_header: SimulationStateHeader) -> None:
        s = self.surface
        kinds = s.state_kinds
        first = None
        for node in range(self.discretization.n_nodes):
            i = state_header.push(
                StateElement(kinds.node_temperature, s.index, node),
                DEFAULT_TEMPERATURE
            )
            if first is None:
                first = i
        s.set_node_temperature_indices(first, self.discretization.n_nodes)

        ir_initial = SIGMA * (DEFAULT_TEMPERATURE + T_ABS_ZERO) ** 4
        slots = [
            ('front_convection_coefficient', 0.0),
            ('back_convection_coefficient', 0.0),
            ('front_convective_heat_flow', 0.0),
            ('back_convective_heat_flow', 0.0),
            ('front_solar_irradiance', 0.0),
            ('back_solar_irradiance', 0.0),
            ('front_ir_irradiance', ir_initial),
            ('back_ir_irradiance', ir_initial)
        ]
        for name, value in slots:
            attr = f"{name}_index"
            if getattr(s, attr) is None:
                i = state_header.push(StateElement(getattr(kinds, name), s.index), value)
                setattr(s, attr, i)

    @property
    def is_transparent(self) -> bool:
        return self.kind is SurfaceKind.FENESTRATION

    @property
    def front_boundary(self) -> Boundary:
        b = self.surface.front_boundary
        return Outdoor() if b is None else b

    @property
    def back_boundary(self) -> Boundary:
        b = self.surface.back_boundary
        return Outdoor() if b is None else b

    def front_temperature(self, state: SimulationState) -> float:
        return self.surface.front_temperature(state)

    def back_temperature(self, state: SimulationState) -> float:
        return self.surface.back_temperature(state)

    def _convection_coefficient(
        self,
        t_air: float,
        t_surf: float,
        wind_speed: float,
        wind_direction: float,
        front: bool
    ) -> float:
        boundary = self.front_boundary if front else self.back_boundary
        params = ConvectionParams(
            air_temperature=t_air,
            surface_temperature=t_surf,
            wind_speed=wind_speed,
            wind_direction=wind_direction,
            cos_tilt=self.cos_tilt if front else -self.cos_tilt,
            azimuth=self.azimuth if front else (self.azimuth + 180.0) % 360.0,
            area=self.area,
            perimeter=self.perimeter,
            height=self.height,
            outdoor=isinstance(boundary, Outdoor)
        )
        return self.convection.coefficient(params)

    @staticmethod
    def _radiation(emissivity: float, ir_irradiance: float, t_surf: float) -> tuple[float, float]:
        """Returns the radiative conductance `h_r` and the constant `q_0` of the
        long-wave heat flow into the face, linearized around `t_surf`:
        `q = q_0 - h_r * T`.
        """
        if emissivity < MIN_EMISSIVITY:
            return 0.0, 0.0
        T_abs = t_surf + T_ABS_ZERO
        h_r = 4.0 * emissivity * SIGMA * T_abs ** 3
        q_0 = emissivity * (ir_irradiance - SIGMA * T_abs ** 4) + h_r * t_surf
        return h_r, q_0

    def march(
        self,
        state: SimulationState,
        t_front: float,
        t_back: float,
        wind_speed: float,
        wind_direction: float,
        dt: float
    ) -> tuple[float, float]:
        """
        Advances the node temperatures of the surface by one substep.

        Parameters
        ----------
        state:
            Simulation state; node temperatures, convection coefficients and
            convective heat flows are written to it.
        t_front, t_back:
            Temperature (degC) of the air at the front and back face.
        wind_speed, wind_direction:
            Current wind at the meteorological station.
        dt:
            Substep in seconds.

        Returns
        -------
        The convective heat flows (W) at the front and the back face,
        `h_f * (t_front - T[0]) * A` and `h_b * (t_back - T[N-1]) * A`,
        positive when heat flows from the air into the surface.

        Raises
        ------
        SolverError
            If the node temperatures cannot be solved or are not finite.
        """
        s = self.surface
        disc = self.discretization
        dtype = state.dtype
        T = s.node_temperatures(state).astype(np.float64)
        N = len(T)

        h_f = self._convection_coefficient(t_front, T[0], wind_speed, wind_direction, front=True)
        h_b = self._convection_coefficient(t_back, T[-1], wind_speed, wind_direction, front=False)
        hr_f, qr_f = self._radiation(self.front_emissivity, s.front_ir_irradiance(state), T[0])
        hr_b, qr_b = self._radiation(self.back_emissivity, s.back_ir_irradiance(state), T[-1])
        solar_f = self.front_solar_absorptance * s.front_incident_solar_irradiance(state)
        solar_b = self.back_solar_absorptance * s.back_incident_solar_irradiance(state)

        # conductances to the left and right neighbour of each node
        g_left = np.concatenate(([0.0], disc.conductance))
        g_right = np.concatenate((disc.conductance, [0.0]))
        c = disc.node_capacitance / dt
        w = np.where(c > 0.0, disc.scheme.theta, 1.0)

        # exchange with the environment at the faces
        b = np.zeros(N)
        src = np.zeros(N)
        b[0] += h_f + hr_f
        src[0] += h_f * t_front + qr_f + solar_f
        b[-1] += h_b + hr_b
        src[-1] += h_b * t_back + qr_b + solar_b

        T_pad = np.concatenate(([0.0], T, [0.0]))
        F = g_left * (T_pad[:-2] - T) + g_right * (T_pad[2:] - T)

        ab = np.zeros((3, N))
        ab[0, 1:] = -w[:-1] * g_right[:-1]
        ab[1, :] = c + w * (g_left + g_right) + b
        ab[2, :-1] = -w[1:] * g_left[1:]
        rhs = c * T + (1.0 - w) * F + src

        try:
            T_new = solve_banded((1, 1), ab.astype(dtype), rhs.astype(dtype))
        except (np.linalg.LinAlgError, ValueError) as err:
            raise SolverError(f"cannot solve the node temperatures of '{s.ID}': {err}") from err
        if not np.all(np.isfinite(T_new)):
            raise SolverError(f"non-finite node temperature in '{s.ID}'")

        s.set_node_temperatures(state, T_new)
        q_front = h_f * (t_front - float(T_new[0])) * self.area
        q_back = h_b * (t_back - float(T_new[-1])) * self.area
        s.set_front_convective_heat_flow(state, q_front)
        s.set_back_convective_heat_flow(state, q_back)
        s.set_front_convection_coefficient(state, h_f)
        s.set_back_convection_coefficient(state, h_b)
        return q_front, q_back
