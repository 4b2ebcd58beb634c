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


class Luminaire:
    """Lighting in a space. All of its electrical power ends up as a
    convective heat gain to the air of the space.
    """

    def __init__(self):
        self.ID: str = ''
        self.index: int = -1
        self._target_space: int | None = None
        self.consumption_index: int | None = None
        self._initial_power: float = 0.0

    @classmethod
    def create(cls, ID: str, target_space: int | None, power: Quantity = Q_(0.0, 'W')) -> Luminaire:
        """
        Create `Luminaire` object.

        Parameters
        ----------
        ID:
            Name to identify the luminaire.
        target_space:
            Index of the space that is lit. A luminaire without target space
            does not take part in the heat balance.
        power: default 0 W
            Initial electrical power.
        """
        luminaire = cls()
        luminaire.ID = ID
        luminaire._target_space = target_space
        luminaire._initial_power = power.to('W').m
        return luminaire

    def reserve_state(self, state_header: SimulationStateHeader) -> None:
        self.consumption_index = state_header.push(
            StateElement(SEK.LUMINAIRE_POWER_CONSUMPTION, self.index),
            self._initial_power
        )

    def target_space(self) -> int | None:
        return self._target_space

    def power_consumption(self, state: SimulationState) -> float:
        return state.get(self.consumption_index, SEK.LUMINAIRE_POWER_CONSUMPTION, self.index)

    def set_power_consumption(self, state: SimulationState, value: float) -> None:
        state.set(self.consumption_index, value, SEK.LUMINAIRE_POWER_CONSUMPTION, self.index)
