from .pint_setup import UNITS, Quantity
from .logging import ModuleLogger
from .constants import SIGMA
