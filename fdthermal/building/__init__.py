from .boundary import Boundary, Outdoor, AnotherZone, Ground
from .construction import Material, ConstructionLayer, Construction
from .geometry import Loop3D, Polygon3D
from .space import Space
from .surface import Surface, Fenestration
from .hvac import HVAC, ElectricHeater, IdealHeaterCooler
from .luminaire import Luminaire
from .building import Building
