from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime as DateTime
from typing import Any
from .building.building import Building
from .simulation_state import SimulationState, SimulationStateHeader
from .weather import Weather


class SimulationModel(ABC):
    """
    A model that takes part in the simulation of a building: it is built
    once from the building, reserving the state slots it needs, and is then
    marched one main timestep at a time.
    """

    @classmethod
    @abstractmethod
    def create(
        cls,
        meta_options: Any,
        options: Any,
        building: Building,
        state_header: SimulationStateHeader,
        steps_per_hour: int
    ) -> SimulationModel:
        ...

    @abstractmethod
    def march(
        self,
        date: DateTime,
        weather: Weather,
        building: Building,
        state: SimulationState
    ) -> DateTime:
        """Advances the model by one main timestep from `date` and returns the
        date and time at the end of it.
        """
        ...
