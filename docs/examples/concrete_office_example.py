"""
EXAMPLE
-------
FREE-FLOATING TEMPERATURE OF AN OFFICE WITH A CONCRETE FACADE
A single office of 600 m3 with a 60 m2 concrete facade facing south and a
window of 6 m2. The outdoor temperature follows a daily sine wave. A luminaire
of 500 W is on during office hours. The zone air temperature and the
temperatures of the facade faces are printed hourly for three days.

Uses the thermal model in module `fdthermal.model`.
"""
from datetime import datetime as DateTime
import numpy as np
import pandas as pd

from fdthermal import Quantity
from fdthermal.building import Luminaire
from fdthermal.building.reference import SingleZoneOptions, single_zone_building
from fdthermal.model import ThermalModel, ThermalOptions
from fdthermal.simulation_state import SimulationStateHeader
from fdthermal.weather import ScheduleConstant, SyntheticWeather


Q_ = Quantity


def T_outdoor(date: DateTime) -> float:
    # coldest at 3 a.m., warmest at 3 p.m.
    hour = date.hour + date.minute / 60 + date.second / 3600
    return 18.0 + 6.0 * np.sin(2 * np.pi * (hour - 9.0) / 24)


def main():
    header = SimulationStateHeader()
    building = single_zone_building(
        SingleZoneOptions(
            zone_volume=600.0,
            surface_area=60.0,
            window_area=6.0,
            material_is_massive=True,
            emissivity=0.9,
            solar_absorptance=0.7
        ),
        header
    )
    building.add_luminaire(Luminaire.create('office lighting', 0, Q_(0.0, 'W')), header)

    steps_per_hour = 6
    model = ThermalModel.create(None, ThermalOptions(), building, header, steps_per_hour)
    state = header.take_values()

    weather = SyntheticWeather(
        dry_bulb_temperature=T_outdoor,
        wind_speed=ScheduleConstant(3.5),
        wind_direction=ScheduleConstant(225.0)
    )

    facade = building.surfaces[0]
    lighting = building.luminaires[0]
    date = DateTime(2023, 4, 3)
    rows = []
    for step in range(3 * 24 * steps_per_hour):
        on = 8 <= date.hour < 18 and date.weekday() < 5
        lighting.set_power_consumption(state, 500.0 if on else 0.0)
        date = model.march(date, weather, building, state)
        if (step + 1) % steps_per_hour == 0:
            rows.append({
                'date': date,
                'T_out': T_outdoor(date),
                'T_zone': model.zone_temperatures(state)[0],
                'T_facade_out': facade.front_temperature(state),
                'T_facade_in': facade.back_temperature(state),
                'h_out': facade.front_convection_coefficient(state)
            })

    df = pd.DataFrame(rows).set_index('date')
    with pd.option_context('display.max_rows', None, 'display.precision', 2):
        print(df)


if __name__ == '__main__':
    main()
