from __future__ import annotations
from dataclasses import dataclass
import numpy as np
from ..simulation_state import SimulationState, StateElementKind
from .boundary import Boundary
from .construction import Construction
from .geometry import Polygon3D

SEK = StateElementKind


@dataclass(frozen=True)
class SurfaceStateKinds:
    """The kinds of state elements owned by one type of surface."""
    node_temperature: StateElementKind
    front_convection_coefficient: StateElementKind
    back_convection_coefficient: StateElementKind
    front_convective_heat_flow: StateElementKind
    back_convective_heat_flow: StateElementKind
    front_solar_irradiance: StateElementKind
    back_solar_irradiance: StateElementKind
    front_ir_irradiance: StateElementKind
    back_ir_irradiance: StateElementKind


OPAQUE_KINDS = SurfaceStateKinds(
    node_temperature=SEK.SURFACE_NODE_TEMPERATURE,
    front_convection_coefficient=SEK.SURFACE_FRONT_CONVECTION_COEFFICIENT,
    back_convection_coefficient=SEK.SURFACE_BACK_CONVECTION_COEFFICIENT,
    front_convective_heat_flow=SEK.SURFACE_FRONT_CONVECTIVE_HEAT_FLOW,
    back_convective_heat_flow=SEK.SURFACE_BACK_CONVECTIVE_HEAT_FLOW,
    front_solar_irradiance=SEK.SURFACE_FRONT_SOLAR_IRRADIANCE,
    back_solar_irradiance=SEK.SURFACE_BACK_SOLAR_IRRADIANCE,
    front_ir_irradiance=SEK.SURFACE_FRONT_IR_IRRADIANCE,
    back_ir_irradiance=SEK.SURFACE_BACK_IR_IRRADIANCE
)

FENESTRATION_KINDS = SurfaceStateKinds(
    node_temperature=SEK.FENESTRATION_NODE_TEMPERATURE,
    front_convection_coefficient=SEK.FENESTRATION_FRONT_CONVECTION_COEFFICIENT,
    back_convection_coefficient=SEK.FENESTRATION_BACK_CONVECTION_COEFFICIENT,
    front_convective_heat_flow=SEK.FENESTRATION_FRONT_CONVECTIVE_HEAT_FLOW,
    back_convective_heat_flow=SEK.FENESTRATION_BACK_CONVECTIVE_HEAT_FLOW,
    front_solar_irradiance=SEK.FENESTRATION_FRONT_SOLAR_IRRADIANCE,
    back_solar_irradiance=SEK.FENESTRATION_BACK_SOLAR_IRRADIANCE,
    front_ir_irradiance=SEK.FENESTRATION_FRONT_IR_IRRADIANCE,
    back_ir_irradiance=SEK.FENESTRATION_BACK_IR_IRRADIANCE
)


class Surface:
    """
    An opaque, flat surface (wall, roof, floor) made of a `Construction`.

    The front face is the face the normal of the polygon points out of; the
    first layer of the construction lies at the front face. Each face borders
    the outdoor air (boundary `None` or `Outdoor`), a space (`AnotherZone`) or
    the ground (`Ground`).

    All the values that change during a simulation (node temperatures,
    convection coefficients, convective heat flows and irradiances) are kept in
    the simulation state; the surface only keeps their indices.
    """
    state_kinds: SurfaceStateKinds = OPAQUE_KINDS
    is_transparent: bool = False

    def __init__(self):
        self.ID: str = ''
        self.polygon: Polygon3D | None = None
        self.construction: Construction | None = None
        self.front_boundary: Boundary | None = None
        self.back_boundary: Boundary | None = None
        self.index: int = -1
        self.first_node_index: int | None = None
        self.n_nodes: int = 0
        self.front_convection_coefficient_index: int | None = None
        self.back_convection_coefficient_index: int | None = None
        self.front_convective_heat_flow_index: int | None = None
        self.back_convective_heat_flow_index: int | None = None
        self.front_solar_irradiance_index: int | None = None
        self.back_solar_irradiance_index: int | None = None
        self.front_ir_irradiance_index: int | None = None
        self.back_ir_irradiance_index: int | None = None

    @classmethod
    def create(
        cls,
        ID: str,
        polygon: Polygon3D,
        construction: Construction,
        front_boundary: Boundary | None = None,
        back_boundary: Boundary | None = None
    ):
        """
        Create a surface.

        Parameters
        ----------
        ID:
            Name to identify the surface.
        polygon:
            Geometry of the surface; its normal points out of the front face.
        construction:
            Layered construction of the surface, from front to back.
        front_boundary, back_boundary: optional
            What is on the front and on the back side of the surface. `None`
            means outdoors.
        """
        surface = cls()
        surface.ID = ID
        surface.polygon = polygon
        surface.construction = construction
        surface.front_boundary = front_boundary
        surface.back_boundary = back_boundary
        return surface

    def area(self) -> float:
        """Net area in m2."""
        return self.polygon.area

    @property
    def vertices(self) -> Polygon3D:
        return self.polygon

    def set_node_temperature_indices(self, first_index: int, n_nodes: int) -> None:
        self.first_node_index = first_index
        self.n_nodes = n_nodes

    def _require(self, index: int | None, what: str) -> int:
        if index is None:
            raise ValueError(f"{what} of '{self.ID}' has no slot in the simulation state")
        return index

    def node_temperatures(self, state: SimulationState) -> np.ndarray:
        i = self._require(self.first_node_index, 'node temperatures')
        return state.get_slice(i, i + self.n_nodes, self.state_kinds.node_temperature, self.index)

    def set_node_temperatures(self, state: SimulationState, values: np.ndarray) -> None:
        i = self._require(self.first_node_index, 'node temperatures')
        if len(values) != self.n_nodes:
            raise ValueError(f"'{self.ID}' has {self.n_nodes} nodes, got {len(values)} temperatures")
        state.set_slice(i, values, self.state_kinds.node_temperature, self.index)

    def front_temperature(self, state: SimulationState) -> float:
        i = self._require(self.first_node_index, 'front temperature')
        return state.get(i, self.state_kinds.node_temperature, self.index)

    def back_temperature(self, state: SimulationState) -> float:
        i = self._require(self.first_node_index, 'back temperature')
        return state.get(i + self.n_nodes - 1, self.state_kinds.node_temperature, self.index)

    def front_convection_coefficient(self, state: SimulationState) -> float:
        i = self._require(self.front_convection_coefficient_index, 'front convection coefficient')
        return state.get(i, self.state_kinds.front_convection_coefficient, self.index)

    def back_convection_coefficient(self, state: SimulationState) -> float:
        i = self._require(self.back_convection_coefficient_index, 'back convection coefficient')
        return state.get(i, self.state_kinds.back_convection_coefficient, self.index)

    def set_front_convection_coefficient(self, state: SimulationState, value: float) -> None:
        i = self._require(self.front_convection_coefficient_index, 'front convection coefficient')
        state.set(i, value, self.state_kinds.front_convection_coefficient, self.index)

    def set_back_convection_coefficient(self, state: SimulationState, value: float) -> None:
        i = self._require(self.back_convection_coefficient_index, 'back convection coefficient')
        state.set(i, value, self.state_kinds.back_convection_coefficient, self.index)

    def front_convective_heat_flow(self, state: SimulationState) -> float:
        i = self._require(self.front_convective_heat_flow_index, 'front convective heat flow')
        return state.get(i, self.state_kinds.front_convective_heat_flow, self.index)

    def back_convective_heat_flow(self, state: SimulationState) -> float:
        i = self._require(self.back_convective_heat_flow_index, 'back convective heat flow')
        return state.get(i, self.state_kinds.back_convective_heat_flow, self.index)

    def set_front_convective_heat_flow(self, state: SimulationState, value: float) -> None:
        i = self._require(self.front_convective_heat_flow_index, 'front convective heat flow')
        state.set(i, value, self.state_kinds.front_convective_heat_flow, self.index)

    def set_back_convective_heat_flow(self, state: SimulationState, value: float) -> None:
        i = self._require(self.back_convective_heat_flow_index, 'back convective heat flow')
        state.set(i, value, self.state_kinds.back_convective_heat_flow, self.index)

    def front_incident_solar_irradiance(self, state: SimulationState) -> float:
        i = self._require(self.front_solar_irradiance_index, 'front solar irradiance')
        return state.get(i, self.state_kinds.front_solar_irradiance, self.index)

    def back_incident_solar_irradiance(self, state: SimulationState) -> float:
        i = self._require(self.back_solar_irradiance_index, 'back solar irradiance')
        return state.get(i, self.state_kinds.back_solar_irradiance, self.index)

    def set_front_incident_solar_irradiance(self, state: SimulationState, value: float) -> None:
        i = self._require(self.front_solar_irradiance_index, 'front solar irradiance')
        state.set(i, value, self.state_kinds.front_solar_irradiance, self.index)

    def set_back_incident_solar_irradiance(self, state: SimulationState, value: float) -> None:
        i = self._require(self.back_solar_irradiance_index, 'back solar irradiance')
        state.set(i, value, self.state_kinds.back_solar_irradiance, self.index)

    def front_ir_irradiance(self, state: SimulationState) -> float:
        i = self._require(self.front_ir_irradiance_index, 'front IR irradiance')
        return state.get(i, self.state_kinds.front_ir_irradiance, self.index)

    def back_ir_irradiance(self, state: SimulationState) -> float:
        i = self._require(self.back_ir_irradiance_index, 'back IR irradiance')
        return state.get(i, self.state_kinds.back_ir_irradiance, self.index)

    def set_front_ir_irradiance(self, state: SimulationState, value: float) -> None:
        i = self._require(self.front_ir_irradiance_index, 'front IR irradiance')
        state.set(i, value, self.state_kinds.front_ir_irradiance, self.index)

    def set_back_ir_irradiance(self, state: SimulationState, value: float) -> None:
        i = self._require(self.back_ir_irradiance_index, 'back IR irradiance')
        state.set(i, value, self.state_kinds.back_ir_irradiance, self.index)


class Fenestration(Surface):
    """A transparent surface (window, glazed door). Heat conduction through
    it is calculated like for an opaque surface; the flag `is_transparent`
    tells solar collaborators to treat it as a window.
    """
    state_kinds = FENESTRATION_KINDS
    is_transparent = True
