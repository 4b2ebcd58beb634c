"""
The unit registry of the package. All physical quantities passed to
`fdthermal` are created with `Quantity` from this registry.

Multiplying or dividing temperatures in degC automatically converts them to
K first, e.g. `Q_(20, 'degC') * Q_(1.2, 'kg / m ** 3')`.
"""
import pint

UNITS = pint.UnitRegistry(autoconvert_offset_to_baseunit=True)
Quantity = UNITS.Quantity

# dimensionless surface properties (emissivity, absorptance)
unit_definitions = [
    'fraction = [] = frac',
    'percent = 1e-2 frac = % = pct'
]
for ud in unit_definitions:
    UNITS.define(ud)

pint.set_application_registry(UNITS)
