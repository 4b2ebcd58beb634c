"""
Convection coefficients between a surface face and the adjacent air.

The default model combines the natural convection correlations of Walton
(TARP), which depend on the tilt of the face and on the direction of the heat
flow, with a forced convection term from the wind on faces that border the
outdoor air.

References
----------
Walton, G. N. (1983). Thermal Analysis Research Program Reference Manual.
National Bureau of Standards.
EnergyPlus Engineering Reference, "Outside Surface Heat Balance".
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
import numpy as np


@dataclass
class ConvectionParams:
    """
    The conditions at one face of a surface.

    Attributes
    ----------
    air_temperature:
        Temperature of the adjacent air (degC).
    surface_temperature:
        Temperature of the face (degC).
    wind_speed:
        Wind speed at the meteorological station (m/s); only used on faces
        that border the outdoor air.
    wind_direction:
        Direction the wind blows from (degrees clockwise from north).
    cos_tilt:
        Cosine of the angle between the outward normal of the face and the
        zenith: 1 for a face looking up, -1 for a face looking down.
    azimuth:
        Compass direction of the outward normal of the face (degrees).
    area:
        Area of the face (m2).
    perimeter:
        Perimeter of the face (m).
    height:
        Height of the face above the ground (m).
    outdoor:
        Whether the face borders the outdoor air.
    """
    air_temperature: float
    surface_temperature: float
    wind_speed: float = 0.0
    wind_direction: float = 0.0
    cos_tilt: float = 0.0
    azimuth: float = 0.0
    area: float = 1.0
    perimeter: float = 4.0
    height: float = 1.0
    outdoor: bool = False


class ConvectionModel(ABC):

    @abstractmethod
    def coefficient(self, params: ConvectionParams) -> float:
        """Returns the convection coefficient in W/(m2.K)."""
        ...


class FixedConvection(ConvectionModel):
    """The same convection coefficient on every face, whatever the
    conditions.
    """

    def __init__(self, h: float) -> None:
        if h < 0.0:
            raise ValueError('a convection coefficient cannot be negative')
        self.h = h

    def coefficient(self, params: ConvectionParams) -> float:
        return self.h


class Roughness(Enum):
    """Surface roughness and its multiplier for forced convection."""
    VERY_ROUGH = 2.17
    ROUGH = 1.67
    MEDIUM_ROUGH = 1.52
    MEDIUM_SMOOTH = 1.13
    SMOOTH = 1.11
    VERY_SMOOTH = 1.00


def natural_convection(delta_T: float, cos_tilt: float) -> float:
    """
    Natural convection coefficient according to Walton.

    Parameters
    ----------
    delta_T:
        Temperature of the face minus temperature of the air (K).
    cos_tilt:
        Cosine of the tilt of the outward normal of the face (1 = facing up).
    """
    dT = abs(delta_T)
    if dT == 0.0:
        return 0.0
    if abs(cos_tilt) < 1e-6:
        # vertical face
        return 1.31 * dT ** (1 / 3)
    if delta_T * cos_tilt < 0.0:
        # a cold face looking up or a warm face looking down: stable layer
        return 1.810 * dT ** (1 / 3) / (1.382 + abs(cos_tilt))
    return 9.482 * dT ** (1 / 3) / (7.238 - abs(cos_tilt))


def wind_speed_at_height(
    wind_speed: float,
    height: float,
    boundary_layer_thickness: float = 370.0,
    exponent: float = 0.22
) -> float:
    """
    Converts the wind speed measured at a meteorological station (10 m above
    open terrain) to the wind speed at `height` above the site. The default
    boundary layer parameters are those of suburban terrain.
    """
    met_delta, met_alpha, met_height = 270.0, 0.14, 10.0
    return (
        wind_speed
        * (met_delta / met_height) ** met_alpha
        * (max(height, 0.0) / boundary_layer_thickness) ** exponent
    )


def is_windward(cos_tilt: float, azimuth: float, wind_direction: float) -> bool:
    """A face is windward when the wind blows onto it, i.e. when the wind
    comes from a direction within 90 degrees of the outward normal.
    Horizontal faces count as windward.
    """
    if abs(cos_tilt) > 0.98:
        return True
    diff = abs((wind_direction - azimuth + 180.0) % 360.0 - 180.0)
    return diff <= 90.0


class TarpConvection(ConvectionModel):
    """
    Natural convection (Walton) on all faces, plus forced convection on
    faces that border the outdoor air:

        h_f = 2.537 * W_f * R_f * (P * V_z / A) ** 0.5

    with `W_f` 1 on windward faces and 0.5 on leeward faces, `R_f` the
    roughness multiplier, `P` the perimeter, `A` the area and `V_z` the wind
    speed at the height of the face.
    """

    def __init__(
        self,
        roughness: Roughness = Roughness.MEDIUM_ROUGH,
        h_min: float = 0.1
    ) -> None:
        """
        Parameters
        ----------
        roughness:
            Roughness of the outside faces.
        h_min:
            Lower bound of the convection coefficient (W/(m2.K)), which keeps
            faces coupled to the air when the temperature difference vanishes.
        """
        self.roughness = roughness
        self.h_min = h_min

    def forced_convection(self, params: ConvectionParams) -> float:
        if params.area <= 0.0 or params.wind_speed <= 0.0:
            return 0.0
        V_z = wind_speed_at_height(params.wind_speed, params.height)
        W_f = 1.0 if is_windward(params.cos_tilt, params.azimuth, params.wind_direction) else 0.5
        R_f = self.roughness.value
        return 2.537 * W_f * R_f * np.sqrt(params.perimeter * V_z / params.area)

    def coefficient(self, params: ConvectionParams) -> float:
        delta_T = params.surface_temperature - params.air_temperature
        h = natural_convection(delta_T, params.cos_tilt)
        if params.outdoor:
            h += self.forced_convection(params)
        return float(max(h, self.h_min))
