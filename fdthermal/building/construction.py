from __future__ import annotations
from dataclasses import dataclass
from .. import Quantity


Q_ = Quantity


@dataclass
class Material:
    """
    Dataclass that groups material properties.

    Attributes
    ----------
    k: Quantity
        Conductivity
    rho: Quantity
        Mass density. A zero density (or zero specific heat) makes the
        material massless: layers of it only add thermal resistance.
    c: Quantity
        Specific heat capacity
    solar_absorptance: Quantity
        Fraction of the incident solar irradiance that is absorbed by a
        surface of this material.
    thermal_emissivity: Quantity
        Long-wave emissivity of a surface of this material.
    """
    k: Quantity = Q_(0.0, 'W / (m * K)')
    rho: Quantity = Q_(0.0, 'kg / m ** 3')
    c: Quantity = Q_(0.0, 'J / (kg * K)')
    solar_absorptance: Quantity = Q_(0.7, 'frac')
    thermal_emissivity: Quantity = Q_(0.9, 'frac')


class ConstructionLayer:
    """A homogeneous layer of a construction."""

    def __init__(self):
        self.ID: str = ''
        self.material: Material = Material()
        self.t: Quantity = Q_(0.0, 'm')

    @classmethod
    def create(cls, ID: str, material: Material, t: Quantity) -> ConstructionLayer:
        """
        Create `ConstructionLayer` object.

        Parameters
        ----------
        ID:
            Name to identify the layer.
        material:
            Material of the layer.
        t:
            Thickness of the layer.
        """
        layer = cls()
        layer.ID = ID
        layer.material = material
        layer.t = t
        return layer

    @property
    def R(self) -> Quantity:
        """Get thermal resistance of the layer per unit area."""
        return (self.t / self.material.k).to('m ** 2 * K / W')

    @property
    def C(self) -> Quantity:
        """Get heat capacity of the layer per unit area."""
        m = self.material
        return (m.rho * m.c * self.t).to('J / (m ** 2 * K)')

    def __str__(self):
        l1 = f"Layer '{self.ID}'\n"
        l2 = f"\tt: {self.t.to('m'):~P.3f}\n"
        l3 = f"\tR: {self.R:~P.2f}\n"
        l4 = f"\tC: {self.C:~P.2f}\n"
        return l1 + l2 + l3 + l4


class Construction:
    """
    A flat construction composed of homogeneous layers, arranged from the
    front face to the back face of the surfaces that are made of it.
    """

    def __init__(self):
        self.ID: str = ''
        self.layers: list[ConstructionLayer] = []

    @classmethod
    def create(cls, ID: str, layers: list[ConstructionLayer]) -> Construction:
        """
        Create `Construction` object.

        Parameters
        ----------
        ID: str
            Name to identify the construction. Constructions in the same
            building must have different names.
        layers: list of `ConstructionLayer` objects
            The layers, ordered from the front to the back face.
        """
        construction = cls()
        construction.ID = ID
        construction.layers = list(layers)
        return construction

    @property
    def R(self) -> Quantity:
        """Get thermal resistance of the construction per unit area, without
        surface resistances.
        """
        R = sum((layer.R for layer in self.layers), Q_(0.0, 'm ** 2 * K / W'))
        return R

    @property
    def U(self) -> Quantity:
        """Get thermal transmittance of the construction per unit area, without
        surface resistances.
        """
        return 1 / self.R

    @property
    def thickness(self) -> Quantity:
        """Get the thickness of the construction."""
        return sum((layer.t for layer in self.layers), Q_(0.0, 'm'))

    @property
    def front_material(self) -> Material | None:
        if self.layers:
            return self.layers[0].material
        return None

    @property
    def back_material(self) -> Material | None:
        if self.layers:
            return self.layers[-1].material
        return None

    def __str__(self):
        _str = f'Construction: {self.ID}\n'
        _str += '-' * len(_str[:-1]) + '\n'
        for layer_str in (str(layer) for layer in self.layers):
            _str += layer_str
        return _str
