from __future__ import annotations
from ..exceptions import OutOfBoundsError
from ..simulation_state import SimulationStateHeader
from .boundary import AnotherZone
from .construction import Construction
from .hvac import HVAC
from .luminaire import Luminaire
from .space import Space
from .surface import Surface, Fenestration


class Building:
    """
    Container of the objects that make up a building. Every object gets its
    index in the array of its kind when it is added; the state elements of
    the object refer to that index.
    """

    def __init__(self, ID: str = ''):
        self.ID = ID
        self.spaces: list[Space] = []
        self.constructions: list[Construction] = []
        self.surfaces: list[Surface] = []
        self.fenestrations: list[Fenestration] = []
        self.hvacs: list[HVAC] = []
        self.luminaires: list[Luminaire] = []

    def add_space(self, space: Space, state_header: SimulationStateHeader | None = None) -> int:
        space.index = len(self.spaces)
        if space.infiltration is not None or space.ventilation is not None:
            if state_header is None:
                raise ValueError(
                    f"space '{space.ID}' has infiltration or ventilation: "
                    f"a state header is needed to add it"
                )
            space.reserve_state(state_header)
        self.spaces.append(space)
        return space.index

    def add_construction(self, construction: Construction) -> int:
        if any(c.ID == construction.ID for c in self.constructions):
            raise ValueError(f"construction '{construction.ID}' already exists")
        self.constructions.append(construction)
        return len(self.constructions) - 1

    def _check_surface(self, surface: Surface) -> None:
        for boundary in (surface.front_boundary, surface.back_boundary):
            if isinstance(boundary, AnotherZone) and not 0 <= boundary.space_index < len(self.spaces):
                raise OutOfBoundsError(
                    f"surface '{surface.ID}' borders space {boundary.space_index}, "
                    f"but the building has {len(self.spaces)} spaces"
                )
        if all(c is not surface.construction for c in self.constructions):
            self.add_construction(surface.construction)

    def add_surface(self, surface: Surface) -> int:
        self._check_surface(surface)
        surface.index = len(self.surfaces)
        self.surfaces.append(surface)
        return surface.index

    def add_fenestration(self, fenestration: Fenestration) -> int:
        self._check_surface(fenestration)
        fenestration.index = len(self.fenestrations)
        self.fenestrations.append(fenestration)
        return fenestration.index

    def add_hvac(self, hvac: HVAC, state_header: SimulationStateHeader) -> int:
        hvac.index = len(self.hvacs)
        hvac.reserve_state(state_header)
        self.hvacs.append(hvac)
        return hvac.index

    def add_luminaire(self, luminaire: Luminaire, state_header: SimulationStateHeader) -> int:
        luminaire.index = len(self.luminaires)
        luminaire.reserve_state(state_header)
        self.luminaires.append(luminaire)
        return luminaire.index
