from __future__ import annotations
from abc import ABC, abstractmethod
import calendar
from dataclasses import dataclass
from datetime import datetime as DateTime
from pathlib import Path
from typing import Callable
import numpy as np
import pandas as pd


SECONDS_PER_YEAR = 365 * 24 * 3600


@dataclass
class CurrentWeather:
    """
    The weather at one moment. Fields that the provider does not know are
    `None`.

    Attributes
    ----------
    dry_bulb_temperature:
        Outdoor air temperature (degC).
    wind_speed:
        Wind speed at the meteorological station (m/s).
    wind_direction:
        Direction the wind blows from, in degrees clockwise from north.
    """
    dry_bulb_temperature: float | None = None
    wind_speed: float | None = None
    wind_direction: float | None = None


class Weather(ABC):

    @abstractmethod
    def get_weather_data(self, date: DateTime) -> CurrentWeather:
        ...


Schedule = Callable[[DateTime], float]


class ScheduleConstant:
    """A schedule that has the same value at any moment."""

    def __init__(self, value: float) -> None:
        self.value = value

    def __call__(self, date: DateTime) -> float:
        return self.value


class SyntheticWeather(Weather):
    """Weather composed of schedules: callables that return the value of a
    weather variable at a given date.
    """

    def __init__(
        self,
        dry_bulb_temperature: Schedule | None = None,
        wind_speed: Schedule | None = None,
        wind_direction: Schedule | None = None
    ) -> None:
        self.dry_bulb_temperature = dry_bulb_temperature
        self.wind_speed = wind_speed
        self.wind_direction = wind_direction

    def get_weather_data(self, date: DateTime) -> CurrentWeather:
        def _value(schedule: Schedule | None) -> float | None:
            return None if schedule is None else schedule(date)

        return CurrentWeather(
            dry_bulb_temperature=_value(self.dry_bulb_temperature),
            wind_speed=_value(self.wind_speed),
            wind_direction=_value(self.wind_direction)
        )


def _seconds_in_year(date: DateTime | pd.Timestamp) -> float:
    # position of `date` in a year of 365 days; 29 February falls on 28 February
    day_of_year = date.timetuple().tm_yday
    if calendar.isleap(date.year) and day_of_year >= 60:
        day_of_year -= 1
    seconds = date.hour * 3600 + date.minute * 60 + date.second
    return (day_of_year - 1) * 86400 + seconds


class WeatherFile(Weather):
    """
    Weather read from a csv-file, e.g. a typical meteorological year or the
    output of another simulation program.

    Values between two records are interpolated linearly. The wind direction
    is interpolated through its sine and cosine, so that it turns along the
    shortest arc between two records. Dates are matched on their position in
    a year of 365 days, so a file of a typical year can be used for any
    simulation year, and the last record of the year is interpolated with the
    first. In leap years 29 February is read as 28 February.
    """

    fields = ('dry_bulb_temperature', 'wind_speed', 'wind_direction')

    def __init__(self, dataframe: pd.DataFrame) -> None:
        """
        Creates a `WeatherFile` from a DataFrame with a date-time index and a
        column for each of the weather fields in `WeatherFile.fields` that is
        known. Use `from_csv` to read the DataFrame from a csv-file.
        """
        self.dataframe = dataframe.sort_index()
        t = np.array([_seconds_in_year(ts) for ts in self.dataframe.index], dtype=float)
        self._t, unique = np.unique(t, return_index=True)
        self._columns = {
            name: self.dataframe[name].to_numpy(dtype=float)[unique]
            for name in self.fields if name in self.dataframe.columns
        }
        wind_direction = self._columns.pop('wind_direction', None)
        self._wind_components = None
        if wind_direction is not None:
            rad = np.radians(wind_direction)
            self._wind_components = (np.sin(rad), np.cos(rad))

    @classmethod
    def from_csv(
        cls,
        file_path: str | Path,
        columns: dict[str, str] | None = None,
        dt_fmt: str | None = None
    ) -> WeatherFile:
        """
        Reads the csv-file pointed to by `file_path` into a Pandas DataFrame.
        The first column of the file must hold the date and time of each
        record.

        Parameters
        ----------
        file_path:
            The path to the csv-file.
        columns: optional
            Maps the names of the weather fields ('dry_bulb_temperature',
            'wind_speed', 'wind_direction') to the names of the columns in the
            csv-file. Columns that already have the name of a field don't need
            to be mapped.
        dt_fmt: optional
            The format in which date-times are written in the csv-file. If
            None, Pandas infers the format.
        """
        df = pd.read_csv(file_path)
        df[df.columns[0]] = pd.to_datetime(df[df.columns[0]], format=dt_fmt)
        df = df.set_index(df.columns[0])
        if columns is not None:
            df = df.rename(columns={v: k for k, v in columns.items()})
        return cls(df)

    def get_weather_data(self, date: DateTime) -> CurrentWeather:
        t = _seconds_in_year(date)
        values = {
            name: float(np.interp(t, self._t, fp, period=SECONDS_PER_YEAR))
            for name, fp in self._columns.items()
        }
        if self._wind_components is not None:
            s, c = (
                np.interp(t, self._t, fp, period=SECONDS_PER_YEAR)
                for fp in self._wind_components
            )
            values['wind_direction'] = float(np.degrees(np.arctan2(s, c)) % 360.0)
        return CurrentWeather(**values)
