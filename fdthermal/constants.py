from . import Quantity

Q_ = Quantity

# Stefan-Boltzmann constant
SIGMA = 5.670374419e-8  # W / (m ** 2 * K ** 4)

# offset between degrees Celsius and kelvin
T_ABS_ZERO = 273.15

STANDARD_PRESSURE = Q_(101_325.0, 'Pa')

# initial temperature of zone air and surface nodes
DEFAULT_TEMPERATURE = 22.0  # degC
