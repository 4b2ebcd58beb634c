from __future__ import annotations
import math
from .building.space import Space
from .constants import T_ABS_ZERO, DEFAULT_TEMPERATURE
from .exceptions import SolverError
from .fluids import Gas
from .simulation_state import (
    SimulationState,
    SimulationStateHeader,
    StateElement,
    StateElementKind
)


class ThermalZone:
    """The well-mixed air volume of a space."""

    def __init__(self):
        self.ID: str = ''
        self.space_index: int = -1
        self.volume: float = 0.0
        self.temperature_index: int = -1
        self.air: Gas | None = None

    @classmethod
    def from_space(
        cls,
        space: Space,
        state_header: SimulationStateHeader,
        air: Gas | None = None
    ) -> ThermalZone:
        """
        Creates the thermal zone of `space`, reserves the slot of its dry-bulb
        temperature in the simulation state (initially 22 degC) and hands the
        index of the slot to the space.

        Parameters
        ----------
        space:
            Space of the building, with a positive volume.
        state_header:
            Header of the simulation state.
        air: optional
            Properties of the zone air; dry air by default.
        """
        volume = space.volume()
        if not volume > 0.0:
            raise ValueError(f"space '{space.ID}' must have a positive volume")
        zone = cls()
        zone.ID = space.ID
        zone.space_index = space.index
        zone.volume = volume
        zone.air = air if air is not None else Gas.air()
        zone.temperature_index = state_header.push(
            StateElement(StateElementKind.SPACE_DRY_BULB_TEMPERATURE, space.index),
            DEFAULT_TEMPERATURE
        )
        space.dry_bulb_temperature_index = zone.temperature_index
        return zone

    def temperature(self, state: SimulationState) -> float:
        """Dry-bulb temperature of the zone air (degC)."""
        return state.get(
            self.temperature_index,
            StateElementKind.SPACE_DRY_BULB_TEMPERATURE,
            self.space_index
        )

    def set_temperature(self, state: SimulationState, T: float) -> None:
        if not math.isfinite(T):
            raise SolverError(f"non-finite temperature for zone '{self.ID}'")
        state.set(
            self.temperature_index,
            T,
            StateElementKind.SPACE_DRY_BULB_TEMPERATURE,
            self.space_index
        )

    def mcp(self, T: float) -> float:
        """Heat capacity (J/K) of the zone air at temperature `T` (degC)."""
        T_abs = T + T_ABS_ZERO
        return self.volume * self.air.density(T_abs) * self.air.heat_capacity(T_abs)
