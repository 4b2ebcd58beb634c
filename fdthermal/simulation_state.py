"""
The simulation state: one flat vector of floats shared by the thermal engine
and the building data model.

Every slot of the vector is described by a `StateElement` in the
`SimulationStateHeader`, which tells what kind of value is stored in the slot
and to which object (space, surface, fenestration, HVAC unit or luminaire) the
value belongs. Objects only keep the integer index of their slots; the values
themselves live in the `SimulationState` that is created from the header once
the building and the thermal model have reserved all the slots they need.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
import numpy as np
from .exceptions import InvariantViolationError, OutOfBoundsError


class StateElementKind(Enum):
    # spaces
    SPACE_DRY_BULB_TEMPERATURE = auto()
    SPACE_INFILTRATION_VOLUME = auto()
    SPACE_INFILTRATION_TEMPERATURE = auto()
    SPACE_VENTILATION_VOLUME = auto()
    SPACE_VENTILATION_TEMPERATURE = auto()
    # opaque surfaces
    SURFACE_NODE_TEMPERATURE = auto()
    SURFACE_FRONT_CONVECTION_COEFFICIENT = auto()
    SURFACE_BACK_CONVECTION_COEFFICIENT = auto()
    SURFACE_FRONT_CONVECTIVE_HEAT_FLOW = auto()
    SURFACE_BACK_CONVECTIVE_HEAT_FLOW = auto()
    SURFACE_FRONT_SOLAR_IRRADIANCE = auto()
    SURFACE_BACK_SOLAR_IRRADIANCE = auto()
    SURFACE_FRONT_IR_IRRADIANCE = auto()
    SURFACE_BACK_IR_IRRADIANCE = auto()
    # fenestrations
    FENESTRATION_NODE_TEMPERATURE = auto()
    FENESTRATION_FRONT_CONVECTION_COEFFICIENT = auto()
    FENESTRATION_BACK_CONVECTION_COEFFICIENT = auto()
    FENESTRATION_FRONT_CONVECTIVE_HEAT_FLOW = auto()
    FENESTRATION_BACK_CONVECTIVE_HEAT_FLOW = auto()
    FENESTRATION_FRONT_SOLAR_IRRADIANCE = auto()
    FENESTRATION_BACK_SOLAR_IRRADIANCE = auto()
    FENESTRATION_FRONT_IR_IRRADIANCE = auto()
    FENESTRATION_BACK_IR_IRRADIANCE = auto()
    # equipment
    HVAC_HEATING_COOLING_CONSUMPTION = auto()
    LUMINAIRE_POWER_CONSUMPTION = auto()


@dataclass(frozen=True)
class StateElement:
    """
    Describes one slot of the simulation state.

    Attributes
    ----------
    kind:
        What is stored in the slot.
    owner:
        Index of the object the value belongs to, in the array of its kind of
        objects in the building (e.g. the index of the space).
    node:
        Index of the node inside a surface or fenestration, only for node
        temperatures.
    """
    kind: StateElementKind
    owner: int
    node: int | None = None


class SimulationStateHeader:
    """Collects the slots of the simulation state while a building and its
    thermal model are being set up.
    """

    def __init__(self) -> None:
        self.elements: list[StateElement] = []
        self._initial_values: list[float] = []

    def push(self, element: StateElement, value: float) -> int:
        """Reserves a new slot for `element` with initial `value` and returns
        the index of the slot.
        """
        self.elements.append(element)
        self._initial_values.append(float(value))
        return len(self.elements) - 1

    def __len__(self) -> int:
        return len(self.elements)

    def take_values(self, dtype: type = np.float64) -> SimulationState:
        """Creates the `SimulationState` with the initial values of all the
        reserved slots.

        Parameters
        ----------
        dtype: default numpy.float64
            Floating point type of the state vector (`numpy.float64` or
            `numpy.float32`). The thermal engine does its arithmetic in the
            same type.
        """
        values = np.array(self._initial_values, dtype=dtype)
        return SimulationState(list(self.elements), values)


class SimulationState:
    """The values of the simulation state, together with the description of
    each slot that is used to check that readers and writers address the slot
    they think they address.
    """

    def __init__(self, elements: list[StateElement], values: np.ndarray) -> None:
        if len(elements) != len(values):
            raise ValueError(
                f"got {len(values)} values for {len(elements)} state elements"
            )
        self.elements = elements
        self.values = values
        self._kinds = np.array([e.kind.value for e in elements], dtype=int)
        self._owners = np.array([e.owner for e in elements], dtype=int)

    def __len__(self) -> int:
        return len(self.values)

    @property
    def dtype(self) -> np.dtype:
        return self.values.dtype

    def _check(self, start: int, stop: int, kind: StateElementKind, owner: int | None) -> None:
        if start < 0 or stop > len(self.values) or start >= stop:
            raise OutOfBoundsError(
                f"state slots [{start}, {stop}) do not exist "
                f"(state has {len(self.values)} slots)"
            )
        if not np.all(self._kinds[start:stop] == kind.value):
            found = {self.elements[i].kind.name for i in range(start, stop)}
            raise InvariantViolationError(
                f"expected {kind.name} in state slots [{start}, {stop}), "
                f"found {', '.join(sorted(found))}"
            )
        if owner is not None and not np.all(self._owners[start:stop] == owner):
            raise InvariantViolationError(
                f"state slots [{start}, {stop}) of kind {kind.name} do not "
                f"belong to object {owner}"
            )

    def get(self, index: int, kind: StateElementKind, owner: int | None = None) -> float:
        """Returns the value in slot `index`, after checking that the slot
        holds an element of `kind` (and of `owner`, if given).

        Raises
        ------
        InvariantViolationError
            If the slot holds another kind of element.
        OutOfBoundsError
            If the slot does not exist.
        """
        self._check(index, index + 1, kind, owner)
        return float(self.values[index])

    def set(self, index: int, value: float, kind: StateElementKind, owner: int | None = None) -> None:
        """Writes `value` in slot `index` (see `get`)."""
        self._check(index, index + 1, kind, owner)
        self.values[index] = value

    def get_slice(self, start: int, stop: int, kind: StateElementKind, owner: int | None = None) -> np.ndarray:
        """Returns a copy of the values in the slots `start` up to `stop`
        (exclusive), which must all hold elements of `kind`.
        """
        self._check(start, stop, kind, owner)
        return self.values[start:stop].copy()

    def set_slice(self, start: int, values: np.ndarray, kind: StateElementKind, owner: int | None = None) -> None:
        """Writes `values` in the consecutive slots that begin at `start`."""
        stop = start + len(values)
        self._check(start, stop, kind, owner)
        self.values[start:stop] = values
