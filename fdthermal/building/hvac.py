from __future__ import annotations
from abc import ABC, abstractmethod
from .. import Quantity
from ..simulation_state import (
    SimulationState,
    SimulationStateHeader,
    StateElement,
    StateElementKind
)

Q_ = Quantity

SEK = StateElementKind


class HVAC(ABC):
    """
    Base class of the heating and cooling equipment in a building.

    The power of the equipment in the current timestep is kept in the
    simulation state, where a controller writes it. The slot is reserved
    when the equipment is added to a `Building`.
    """

    def __init__(self):
        self.ID: str = ''
        self.index: int = -1
        self.consumption_index: int | None = None
        self._initial_power: float = 0.0

    def reserve_state(self, state_header: SimulationStateHeader) -> None:
        self.consumption_index = state_header.push(
            StateElement(SEK.HVAC_HEATING_COOLING_CONSUMPTION, self.index),
            self._initial_power
        )

    def power_consumption(self, state: SimulationState) -> float:
        """Current power in W."""
        return state.get(self.consumption_index, SEK.HVAC_HEATING_COOLING_CONSUMPTION, self.index)

    def set_power_consumption(self, state: SimulationState, value: float) -> None:
        state.set(self.consumption_index, value, SEK.HVAC_HEATING_COOLING_CONSUMPTION, self.index)

    @abstractmethod
    def heating_cooling(self, state: SimulationState) -> list[tuple[int, float]]:
        """Returns the heat (W) delivered to the air of each of the spaces
        served by the equipment, as (space index, power) pairs. Heating is
        positive, cooling negative.
        """
        ...


class ElectricHeater(HVAC):
    """A heater that converts all of its electrical power into heat in the
    air of one space.
    """

    def __init__(self):
        super().__init__()
        self.target_space: int = -1

    @classmethod
    def create(cls, ID: str, target_space: int, power: Quantity = Q_(0.0, 'W')) -> ElectricHeater:
        """
        Create `ElectricHeater` object.

        Parameters
        ----------
        ID:
            Name to identify the heater.
        target_space:
            Index of the space that is heated.
        power: default 0 W
            Initial electrical power.
        """
        heater = cls()
        heater.ID = ID
        heater.target_space = target_space
        heater._initial_power = power.to('W').m
        return heater

    def heating_cooling(self, state: SimulationState) -> list[tuple[int, float]]:
        # a heater cannot cool
        return [(self.target_space, max(self.power_consumption(state), 0.0))]


class IdealHeaterCooler(HVAC):
    """Equipment that delivers exactly the (signed) thermal power written in
    the simulation state to the air of one space.
    """

    def __init__(self):
        super().__init__()
        self.target_space: int = -1

    @classmethod
    def create(cls, ID: str, target_space: int, power: Quantity = Q_(0.0, 'W')) -> IdealHeaterCooler:
        unit = cls()
        unit.ID = ID
        unit.target_space = target_space
        unit._initial_power = power.to('W').m
        return unit

    def heating_cooling(self, state: SimulationState) -> list[tuple[int, float]]:
        return [(self.target_space, self.power_consumption(state))]
