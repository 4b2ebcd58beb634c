from datetime import datetime as DateTime
import pytest
from fdthermal.weather import (
    CurrentWeather,
    ScheduleConstant,
    SyntheticWeather,
    WeatherFile
)


def test_synthetic_weather():
    weather = SyntheticWeather(
        dry_bulb_temperature=ScheduleConstant(12.5),
        wind_speed=lambda date: float(date.hour)
    )
    data = weather.get_weather_data(DateTime(2023, 3, 1, 6))
    assert data == CurrentWeather(dry_bulb_temperature=12.5, wind_speed=6.0)
    assert data.wind_direction is None


def test_weather_without_schedules_is_empty():
    data = SyntheticWeather().get_weather_data(DateTime(2023, 1, 1))
    assert data == CurrentWeather()


@pytest.fixture
def weather_csv(tmp_path):
    file_path = tmp_path / 'weather.csv'
    file_path.write_text(
        'time,T_db,v_wind\n'
        '2005-01-01 00:00,0.0,2.0\n'
        '2005-01-01 01:00,4.0,4.0\n'
        '2005-01-01 02:00,6.0,3.0\n'
        '2005-12-31 23:00,-2.0,1.0\n'
    )
    return file_path


@pytest.fixture
def weather_file(weather_csv):
    return WeatherFile.from_csv(
        weather_csv,
        columns={'dry_bulb_temperature': 'T_db', 'wind_speed': 'v_wind'},
        dt_fmt='%Y-%m-%d %H:%M'
    )


def test_records_are_read(weather_file):
    data = weather_file.get_weather_data(DateTime(2023, 1, 1, 1))
    assert data.dry_bulb_temperature == pytest.approx(4.0)
    assert data.wind_speed == pytest.approx(4.0)
    assert data.wind_direction is None


def test_values_are_interpolated(weather_file):
    data = weather_file.get_weather_data(DateTime(2023, 1, 1, 0, 30))
    assert data.dry_bulb_temperature == pytest.approx(2.0)
    assert data.wind_speed == pytest.approx(3.0)


def test_end_of_year_wraps_to_start(weather_file):
    data = weather_file.get_weather_data(DateTime(2023, 12, 31, 23, 30))
    assert data.dry_bulb_temperature == pytest.approx(-1.0)


def _wind_file(tmp_path, *records):
    file_path = tmp_path / 'wind.csv'
    file_path.write_text('time,wind_direction\n' + ''.join(f'{t},{d}\n' for t, d in records))
    return WeatherFile.from_csv(file_path, dt_fmt='%Y-%m-%d %H:%M')


def test_wind_direction_turns_through_north(tmp_path):
    weather = _wind_file(tmp_path, ('2023-01-01 00:00', 350.0), ('2023-01-01 01:00', 10.0))
    found = weather.get_weather_data(DateTime(2023, 1, 1, 0, 30)).wind_direction
    assert 0.0 <= found <= 360.0
    assert min(found, 360.0 - found) == pytest.approx(0.0, abs=1e-6)


def test_wind_direction_between_east_and_south(tmp_path):
    weather = _wind_file(tmp_path, ('2023-01-01 00:00', 90.0), ('2023-01-01 01:00', 180.0))
    assert weather.get_weather_data(DateTime(2023, 1, 1)).wind_direction == pytest.approx(90.0)
    assert weather.get_weather_data(DateTime(2023, 1, 1, 0, 30)).wind_direction == pytest.approx(135.0)


@pytest.fixture
def daily_weather_file(tmp_path):
    file_path = tmp_path / 'daily.csv'
    file_path.write_text(
        'time,dry_bulb_temperature\n'
        '2023-01-01 00:00,1.0\n'
        '2023-03-02 00:00,2.0\n'
        '2023-03-03 00:00,3.0\n'
        '2023-12-30 00:00,30.0\n'
        '2023-12-31 00:00,31.0\n'
    )
    return WeatherFile.from_csv(file_path, dt_fmt='%Y-%m-%d %H:%M')


@pytest.mark.parametrize('date, expected', [
    (DateTime(2024, 3, 2), 2.0),
    (DateTime(2024, 3, 3), 3.0),
    (DateTime(2024, 12, 30), 30.0),
    (DateTime(2024, 12, 31), 31.0),
    (DateTime(2023, 12, 30), 30.0)
])
def test_leap_year_dates_match_calendar_day(daily_weather_file, date, expected):
    data = daily_weather_file.get_weather_data(date)
    assert data.dry_bulb_temperature == pytest.approx(expected)
