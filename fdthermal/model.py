"""
The thermal model of a building: it advances the temperatures of the zone
air and of the nodes inside the surfaces and fenestrations of a building, one
main timestep at a time.

Each main timestep is divided into a fixed number of substeps, the largest
number any of the constructions needs for a stable and accurate conduction
solution. In each substep:
1. the weather is read at the end of the substep,
2. the surfaces, then the fenestrations, are advanced with the zone air
   temperatures at the start of the substep,
3. the heat balance of every zone is solved analytically with the new
   surface temperatures and convection coefficients.

Example
-------
```
header = SimulationStateHeader()
building = ...  # spaces, constructions, surfaces, ...
model = ThermalModel.create(MetaOptions(), ThermalOptions(), building, header, 4)
state = header.take_values()
date = DateTime(2023, 1, 1)
for _ in range(96):
    date = model.march(date, weather, building, state)
```
"""
from __future__ import annotations
import warnings
from dataclasses import dataclass, field
from datetime import datetime as DateTime
from datetime import timedelta as TimeDelta
import numpy as np
from . import Quantity
from .building.boundary import Boundary, Outdoor, AnotherZone, Ground
from .building.building import Building
from .building.construction import Construction
from .convection import ConvectionModel, TarpConvection
from .discretization import Discretization, Scheme
from .exceptions import (
    MissingWeatherError,
    OutOfBoundsError,
    SolverError,
    TimestepWarning,
    UnsupportedBoundaryError
)
from .fluids import Gas
from .heat_balance import calculate_zones_abc, zone_future_temperatures
from .logging import ModuleLogger
from .simulation_model import SimulationModel
from .simulation_state import SimulationState, SimulationStateHeader
from .surface import ThermalSurface
from .weather import Weather
from .zone import ThermalZone

logger = ModuleLogger.get_logger(__name__)
logger.setLevel(ModuleLogger.ERROR)

Q_ = Quantity


@dataclass
class MetaOptions:
    """Options about the site of the building, shared by all the models of
    a simulation. The thermal model passes them on unused.
    """
    latitude: Quantity = Q_(0.0, 'deg')
    longitude: Quantity = Q_(0.0, 'deg')
    standard_meridian: Quantity = Q_(0.0, 'deg')


@dataclass
class ThermalOptions:
    """
    Options of the thermal model.

    Attributes
    ----------
    scheme:
        Conduction scheme of the surfaces.
    max_dx:
        Maximum thickness of the elements a layer is divided into.
    min_dt:
        Preferred minimum substep.
    max_fourier: optional
        Bound on the Fourier number of massive layers, overriding the bound
        of `scheme`.
    safety_multiplier:
        The number of substeps required by the constructions is multiplied
        by this factor.
    convection:
        Model of the convection coefficients at the faces of the surfaces.
    surface_height:
        Height above the ground assumed for all surfaces by the convection
        model.
    """
    scheme: Scheme = Scheme.IMPLICIT
    max_dx: Quantity = Q_(4.0, 'cm')
    min_dt: Quantity = Q_(60.0, 's')
    max_fourier: float | None = None
    safety_multiplier: int = 1
    convection: ConvectionModel = field(default_factory=TarpConvection)
    surface_height: Quantity = Q_(1.0, 'm')


class ThermalModel(SimulationModel):

    def __init__(self):
        self.zones: list[ThermalZone] = []
        self.surfaces: list[ThermalSurface] = []
        self.fenestrations: list[ThermalSurface] = []
        self.discretizations: dict[str, Discretization] = {}
        self.meta_options: MetaOptions | None = None
        self.options: ThermalOptions | None = None
        self.main_dt: float = 3600.0
        self.dt_subdivisions: int = 1
        self.dt: float = 3600.0

    @classmethod
    def create(
        cls,
        meta_options: MetaOptions | None,
        options: ThermalOptions | None,
        building: Building,
        state_header: SimulationStateHeader,
        steps_per_hour: int
    ) -> ThermalModel:
        """
        Builds the thermal model of `building`.

        Parameters
        ----------
        meta_options: optional
            Site of the building.
        options: optional
            Options of the thermal model; `ThermalOptions()` by default.
        building:
            The building: spaces, constructions, surfaces, fenestrations, HVAC
            units and luminaires.
        state_header:
            Header of the simulation state, in which the slots of the zone
            air temperatures and the surface nodes are reserved.
        steps_per_hour:
            Number of main timesteps per hour.

        Raises
        ------
        DiscretizationError
            If a construction cannot be discretized.
        ValueError
            If `steps_per_hour` or the safety multiplier is less than 1, or a
            space has no positive volume.
        """
        if steps_per_hour < 1:
            raise ValueError('`steps_per_hour` must be at least 1')
        options = options if options is not None else ThermalOptions()
        if options.safety_multiplier < 1:
            raise ValueError('the safety multiplier must be at least 1')

        model = cls()
        model.meta_options = meta_options if meta_options is not None else MetaOptions()
        model.options = options
        model.main_dt = 3600.0 / steps_per_hour

        air = Gas.air()
        model.zones = [
            ThermalZone.from_space(space, state_header, air)
            for space in building.spaces
        ]

        subdivisions = 1
        for construction in building.constructions:
            disc = model._discretize(construction)
            subdivisions = max(subdivisions, disc.tstep_subdivision)
        for surface in (*building.surfaces, *building.fenestrations):
            disc = model._discretize(surface.construction)
            subdivisions = max(subdivisions, disc.tstep_subdivision)
        model.dt_subdivisions = subdivisions * options.safety_multiplier
        model.dt = model.main_dt / model.dt_subdivisions
        if steps_per_hour * model.dt_subdivisions < 6:
            warnings.warn(
                f"the thermal model takes only {steps_per_hour * model.dt_subdivisions} "
                f"substeps per hour; consider more steps per hour",
                category=TimestepWarning
            )

        height = options.surface_height.to('m').m
        model.surfaces = [
            ThermalSurface.create(
                state_header, surface, model.discretizations[surface.construction.ID],
                options.convection, height
            )
            for surface in building.surfaces
        ]
        model.fenestrations = [
            ThermalSurface.create(
                state_header, fenestration, model.discretizations[fenestration.construction.ID],
                options.convection, height
            )
            for fenestration in building.fenestrations
        ]
        logger.debug(
            f"thermal model of '{building.ID}': {len(model.zones)} zones, "
            f"{len(model.surfaces)} surfaces, {len(model.fenestrations)} fenestrations, "
            f"dt_subdivisions = {model.dt_subdivisions}, dt = {model.dt:.2f} s"
        )
        return model

    def _discretize(self, construction: Construction) -> Discretization:
        disc = self.discretizations.get(construction.ID)
        if disc is None:
            disc = Discretization.create(
                construction,
                self.main_dt,
                max_dx=self.options.max_dx.to('m').m,
                min_dt=self.options.min_dt.to('s').m,
                scheme=self.options.scheme,
                max_fourier=self.options.max_fourier
            )
            self.discretizations[construction.ID] = disc
        return disc

    def get_thermal_zone(self, index: int) -> ThermalZone:
        if not 0 <= index < len(self.zones):
            raise OutOfBoundsError(f"thermal zone {index} does not exist ({len(self.zones)} zones)")
        return self.zones[index]

    def get_thermal_surface(self, index: int) -> ThermalSurface:
        if not 0 <= index < len(self.surfaces):
            raise OutOfBoundsError(f"thermal surface {index} does not exist ({len(self.surfaces)} surfaces)")
        return self.surfaces[index]

    def get_thermal_fenestration(self, index: int) -> ThermalSurface:
        if not 0 <= index < len(self.fenestrations):
            raise OutOfBoundsError(
                f"thermal fenestration {index} does not exist ({len(self.fenestrations)} fenestrations)"
            )
        return self.fenestrations[index]

    def zone_temperatures(self, state: SimulationState) -> np.ndarray:
        return np.array([zone.temperature(state) for zone in self.zones])

    @staticmethod
    def _boundary_temperature(boundary: Boundary, t_current: np.ndarray, t_out: float, ID: str) -> float:
        match boundary:
            case Outdoor():
                return t_out
            case AnotherZone(space_index=i):
                return float(t_current[i])
            case Ground():
                raise UnsupportedBoundaryError(
                    f"'{ID}' borders the ground; heat transfer to the ground "
                    f"is not calculated"
                )

    def _march_surfaces(
        self,
        surfaces: list[ThermalSurface],
        state: SimulationState,
        t_current: np.ndarray,
        t_out: float,
        wind_speed: float,
        wind_direction: float
    ) -> None:
        for ts in surfaces:
            ID = ts.surface.ID
            t_front = self._boundary_temperature(ts.front_boundary, t_current, t_out, ID)
            t_back = self._boundary_temperature(ts.back_boundary, t_current, t_out, ID)
            ts.march(state, t_front, t_back, wind_speed, wind_direction, self.dt)

    def march(
        self,
        date: DateTime,
        weather: Weather,
        building: Building,
        state: SimulationState
    ) -> DateTime:
        """
        Advances the building by one main timestep.

        Parameters
        ----------
        date:
            Date and time at the start of the main timestep.
        weather:
            Provider of the outdoor conditions. The dry-bulb temperature is
            required; missing wind speed and direction are taken as 0.
        building:
            The building the model was created with.
        state:
            The simulation state, created from the header the model was
            created with.

        Returns
        -------
        The date and time at the end of the main timestep.

        Raises
        ------
        MissingWeatherError
            If the weather has no dry-bulb temperature at a substep.
        UnsupportedBoundaryError
            If a surface borders the ground.
        SolverError
            If a temperature becomes non-finite.

        Notes
        -----
        When an error is raised, the substeps before the failing one have
        already been written to `state`: the state must then be considered
        undefined.
        """
        start = date
        for k in range(self.dt_subdivisions):
            date = start + TimeDelta(seconds=(k + 1) * self.dt)

            current_weather = weather.get_weather_data(date)
            t_out = current_weather.dry_bulb_temperature
            if t_out is None:
                raise MissingWeatherError(f"no dry-bulb temperature at {date}")
            wind_speed = current_weather.wind_speed or 0.0
            wind_direction = current_weather.wind_direction or 0.0

            t_current = self.zone_temperatures(state)

            self._march_surfaces(self.surfaces, state, t_current, t_out, wind_speed, wind_direction)
            self._march_surfaces(self.fenestrations, state, t_current, t_out, wind_speed, wind_direction)

            a, b, c = calculate_zones_abc(self.zones, self.surfaces, self.fenestrations, building, state)
            t_future = zone_future_temperatures(t_current, a, b, c, self.dt)
            if not np.all(np.isfinite(t_future)):
                raise SolverError(f"non-finite zone temperature at {date}")
            for zone, T in zip(self.zones, t_future):
                zone.set_temperature(state, float(T))
        return date
