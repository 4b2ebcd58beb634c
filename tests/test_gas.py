import pytest
from fdthermal.fluids import CoolPropError


def test_air_density_at_22_degC(air):
    assert air.density(22.0 + 273.15) == pytest.approx(1.196, abs=0.003)


def test_air_heat_capacity_at_22_degC(air):
    assert air.heat_capacity(22.0 + 273.15) == pytest.approx(1006.0, abs=3.0)


def test_air_density_decreases_with_temperature(air):
    assert air.density(273.15) > air.density(293.15) > air.density(313.15)


def test_invalid_temperature_raises(air):
    with pytest.raises(CoolPropError):
        air.density(-10.0)
