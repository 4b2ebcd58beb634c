from __future__ import annotations
from .. import Quantity
from ..simulation_state import (
    SimulationState,
    SimulationStateHeader,
    StateElement,
    StateElementKind
)

Q_ = Quantity

SEK = StateElementKind


class Space:
    """
    An enclosed volume of air in a building.

    The dry-bulb temperature of the space is kept in the simulation state. Its
    slot is reserved by the thermal model that takes care of the space.
    Infiltration and ventilation flows are optional: when a space has them,
    the volume flow rate (m3/s) and the temperature (degC) of the air that
    enters the space are read from the simulation state, where other
    collaborators (e.g. an airflow or a ventilation model) write them.
    """

    def __init__(self):
        self.ID: str = ''
        self._volume: Quantity = Q_(0.0, 'm ** 3')
        self.index: int = -1
        self.dry_bulb_temperature_index: int | None = None
        self.infiltration_volume_index: int | None = None
        self.infiltration_temperature_index: int | None = None
        self.ventilation_volume_index: int | None = None
        self.ventilation_temperature_index: int | None = None

        self.infiltration: tuple[Quantity, Quantity] | None = None
        self.ventilation: tuple[Quantity, Quantity] | None = None

    @classmethod
    def create(
        cls,
        ID: str,
        volume: Quantity,
        infiltration: tuple[Quantity, Quantity] | None = None,
        ventilation: tuple[Quantity, Quantity] | None = None
    ) -> Space:
        """
        Create `Space` object.

        Parameters
        ----------
        ID:
            Name to identify the space.
        volume:
            Air volume of the space.
        infiltration: optional
            Initial volume flow rate and temperature of the outdoor air that
            leaks into the space.
        ventilation: optional
            Initial volume flow rate and temperature of the ventilation air
            supplied to the space.

        Notes
        -----
        The slots for infiltration and ventilation are reserved when the space
        is added to a `Building`, as only then the index of the space is known.
        """
        space = cls()
        space.ID = ID
        space._volume = volume
        space.infiltration = infiltration
        space.ventilation = ventilation
        return space

    def reserve_state(self, state_header: SimulationStateHeader) -> None:
        """Reserves the slots of the infiltration and ventilation flows, if
        the space has them.
        """
        infiltration, ventilation = self.infiltration, self.ventilation
        if infiltration is not None:
            V_dot, T = infiltration
            self.infiltration_volume_index = state_header.push(
                StateElement(SEK.SPACE_INFILTRATION_VOLUME, self.index),
                V_dot.to('m ** 3 / s').m
            )
            self.infiltration_temperature_index = state_header.push(
                StateElement(SEK.SPACE_INFILTRATION_TEMPERATURE, self.index),
                T.to('degC').m
            )
        if ventilation is not None:
            V_dot, T = ventilation
            self.ventilation_volume_index = state_header.push(
                StateElement(SEK.SPACE_VENTILATION_VOLUME, self.index),
                V_dot.to('m ** 3 / s').m
            )
            self.ventilation_temperature_index = state_header.push(
                StateElement(SEK.SPACE_VENTILATION_TEMPERATURE, self.index),
                T.to('degC').m
            )

    def volume(self) -> float:
        """Air volume in m3."""
        return self._volume.to('m ** 3').m

    def dry_bulb_temperature(self, state: SimulationState) -> float | None:
        if self.dry_bulb_temperature_index is None:
            return None
        return state.get(self.dry_bulb_temperature_index, SEK.SPACE_DRY_BULB_TEMPERATURE, self.index)

    def set_dry_bulb_temperature(self, state: SimulationState, value: float) -> None:
        if self.dry_bulb_temperature_index is None:
            raise ValueError(f"space '{self.ID}' has no dry-bulb temperature slot")
        state.set(self.dry_bulb_temperature_index, value, SEK.SPACE_DRY_BULB_TEMPERATURE, self.index)

    def _get_optional(self, state: SimulationState, index: int | None, kind: StateElementKind) -> float | None:
        if index is None:
            return None
        return state.get(index, kind, self.index)

    def infiltration_volume(self, state: SimulationState) -> float | None:
        return self._get_optional(state, self.infiltration_volume_index, SEK.SPACE_INFILTRATION_VOLUME)

    def infiltration_temperature(self, state: SimulationState) -> float | None:
        return self._get_optional(state, self.infiltration_temperature_index, SEK.SPACE_INFILTRATION_TEMPERATURE)

    def ventilation_volume(self, state: SimulationState) -> float | None:
        return self._get_optional(state, self.ventilation_volume_index, SEK.SPACE_VENTILATION_VOLUME)

    def ventilation_temperature(self, state: SimulationState) -> float | None:
        return self._get_optional(state, self.ventilation_temperature_index, SEK.SPACE_VENTILATION_TEMPERATURE)

    def set_infiltration(self, state: SimulationState, volume: float, temperature: float) -> None:
        """Writes the infiltration volume flow rate (m3/s) and temperature
        (degC) of the current timestep."""
        if self.infiltration_volume_index is None:
            raise ValueError(f"space '{self.ID}' has no infiltration")
        state.set(self.infiltration_volume_index, volume, SEK.SPACE_INFILTRATION_VOLUME, self.index)
        state.set(self.infiltration_temperature_index, temperature, SEK.SPACE_INFILTRATION_TEMPERATURE, self.index)

    def set_ventilation(self, state: SimulationState, volume: float, temperature: float) -> None:
        """Writes the ventilation volume flow rate (m3/s) and supply
        temperature (degC) of the current timestep."""
        if self.ventilation_volume_index is None:
            raise ValueError(f"space '{self.ID}' has no ventilation")
        state.set(self.ventilation_volume_index, volume, SEK.SPACE_VENTILATION_VOLUME, self.index)
        state.set(self.ventilation_temperature_index, temperature, SEK.SPACE_VENTILATION_TEMPERATURE, self.index)
