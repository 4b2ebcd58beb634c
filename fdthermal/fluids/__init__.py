from .gas import Gas
from .exceptions import CoolPropError
