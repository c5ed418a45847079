"""
Tests for the weather service, cache and lookup helpers.

The HTTP session is mocked; no network access is needed.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from src.weather import (
    WeatherCache,
    WeatherData,
    WeatherService,
    celsius_to_fahrenheit,
    degrees_to_compass,
    parse_weather,
    wmo_code_to_label,
)

SAMPLE_BODY = json.dumps({
    "latitude": 33.75,
    "longitude": -84.39,
    "current": {
        "time": "2025-06-01T14:00",
        "temperature_2m": 27.4,
        "weather_code": 2,
        "wind_speed_10m": 14.2,
        "wind_direction_10m": 225,
    },
})


def make_service(body=SAMPLE_BODY, error=None):
    session = MagicMock()
    response = MagicMock()
    response.json.side_effect = lambda: json.loads(body)
    if error is not None:
        response.raise_for_status.side_effect = error
    session.get.return_value = response
    return WeatherService(session=session), session


class TestParse:

    def test_valid_body(self):
        data = parse_weather(json.loads(SAMPLE_BODY))
        assert data == WeatherData(
            temperature_celsius=27.4,
            weather_code=2,
            wind_speed_kmh=14.2,
            wind_direction_degrees=225,
        )

    @pytest.mark.parametrize("payload", [
        None,
        [],
        "not json",
        {},
        {"current": {}},
        {"current": None},
        {"current": {"temperature_2m": "warm", "weather_code": 0,
                     "wind_speed_10m": 1, "wind_direction_10m": 0}},
    ])
    def test_malformed_returns_none(self, payload):
        assert parse_weather(payload) is None


class TestWeatherService:

    def test_fetch_success(self):
        service, session = make_service()
        data = service.fetch_weather(33.749, -84.388)
        assert data.wind_direction_degrees == 225

        args, kwargs = session.get.call_args
        assert args[0] == "https://api.open-meteo.com/v1/forecast"
        assert kwargs["params"]["latitude"] == 33.749
        assert kwargs["params"]["longitude"] == -84.388
        assert "wind_direction_10m" in kwargs["params"]["current"]
        assert kwargs["timeout"] == (5.0, 10.0)

    def test_connection_error_returns_none(self):
        service, session = make_service()
        session.get.side_effect = requests.exceptions.ConnectionError("offline")
        assert service.fetch_weather(33.749, -84.388) is None

    def test_timeout_returns_none(self):
        service, session = make_service()
        session.get.side_effect = requests.exceptions.Timeout("slow")
        assert service.fetch_weather(33.749, -84.388) is None

    def test_http_error_returns_none(self):
        service, _ = make_service(error=requests.exceptions.HTTPError("503"))
        assert service.fetch_weather(33.749, -84.388) is None

    @pytest.mark.parametrize("body", ["", "<html>", "{}", '{"current": null}'])
    def test_bad_bodies_return_none(self, body):
        service, _ = make_service(body=body)
        assert service.fetch_weather(33.749, -84.388) is None

    def test_body_decoded_by_response(self):
        service, session = make_service()
        response = session.get.return_value
        service.fetch_weather(33.749, -84.388)
        response.json.assert_called_once_with()

    def test_custom_timeouts(self):
        service = WeatherService(session=MagicMock(), connect_timeout=1,
                                 read_timeout=2)
        assert service.timeout == (1, 2)


class TestWeatherCache:

    DATA = WeatherData(20.0, 0, 5.0, 90)

    def test_empty(self):
        assert WeatherCache(clock=lambda: 0).get() is None

    def test_fresh_and_expired(self):
        now = [1_000_000]
        cache = WeatherCache(clock=lambda: now[0])
        cache.put(self.DATA)

        now[0] += 59 * 60 * 1000
        assert cache.get() == self.DATA

        now[0] += 60 * 1000
        assert cache.get() is None

    def test_clear(self):
        cache = WeatherCache(clock=lambda: 0)
        cache.put(self.DATA)
        cache.clear()
        assert cache.get() is None


class TestHelpers:

    @pytest.mark.parametrize("degrees,label", [
        (0, "N"), (22, "N"), (23, "NE"), (90, "E"), (180, "S"),
        (225, "SW"), (270, "W"), (337, "NW"), (338, "N"), (360, "N"),
    ])
    def test_compass(self, degrees, label):
        assert degrees_to_compass(degrees) == label

    @pytest.mark.parametrize("degrees", [-1, 361])
    def test_compass_out_of_range(self, degrees):
        with pytest.raises(ValueError):
            degrees_to_compass(degrees)

    @pytest.mark.parametrize("code,label", [
        (0, "Clear sky"), (3, "Overcast"), (63, "Moderate rain"),
        (95, "Thunderstorm"), (-1, "Unknown"), (42, "Unknown"),
    ])
    def test_wmo_labels(self, code, label):
        assert wmo_code_to_label(code) == label

    @pytest.mark.parametrize("c,f", [(0, 32), (100, 212), (-40, -40), (21, 69.8)])
    def test_celsius_to_fahrenheit(self, c, f):
        assert celsius_to_fahrenheit(c) == pytest.approx(f)
