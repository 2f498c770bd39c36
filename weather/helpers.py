import logging

import requests

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

CURRENT_FIELDS = "temperature_2m,apparent_temperature,is_day,weather_code,wind_speed_10m,wind_direction_10m"
DAILY_FIELDS = "weather_code,temperature_2m_max,temperature_2m_min,sunrise,sunset"

# WMO weather interpretation codes -> (label, icon)
WEATHER_CODES = {
    0: ("Clear sky", "clear"),
    1: ("Mainly clear", "partly"),
    2: ("Partly cloudy", "partly"),
    3: ("Overcast", "cloudy"),
    45: ("Fog", "fog"),
    48: ("Depositing rime fog", "fog"),
    51: ("Light drizzle", "rain"),
    53: ("Moderate drizzle", "rain"),
    55: ("Dense drizzle", "rain"),
    56: ("Light freezing drizzle", "rain"),
    57: ("Dense freezing drizzle", "rain"),
    61: ("Slight rain", "rain"),
    63: ("Moderate rain", "rain"),
    65: ("Heavy rain", "rain"),
    66: ("Light freezing rain", "rain"),
    67: ("Heavy freezing rain", "rain"),
    71: ("Slight snow", "snow"),
    73: ("Moderate snow", "snow"),
    75: ("Heavy snow", "snow"),
    77: ("Snow grains", "snow"),
    80: ("Rain showers", "rain"),
    81: ("Rain showers", "rain"),
    82: ("Violent rain showers", "storm"),
    85: ("Snow showers", "snow"),
    86: ("Heavy snow showers", "snow"),
    95: ("Thunderstorm", "storm"),
    96: ("Thunderstorm with hail", "storm"),
    99: ("Thunderstorm with hail", "storm"),
}


class UpstreamError(Exception):
    def __init__(self, message, status):
        super().__init__(message)
        self.status = status


def get_compass_direction(degrees):
    directions = ["N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
                  "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"]
    index = round(degrees / 22.5) % 16
    return directions[index]


def get_weather_condition(weather_code, fallback):
    label, icon = WEATHER_CODES.get(weather_code, (fallback, "partly"))
    return label, icon


def geocode_city(city: str):
    from config import REQUEST_TIMEOUT
    params = {"name": city, "count": 5, "language": "en", "format": "json"}

    try:
        resp = requests.get(GEOCODING_URL, params=params, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        logger.warning("Open-Meteo geocoding failed for %r: %s", city, e)
        return None
    if not resp.ok:
        return None

    results = resp.json().get("results") or []
    return results[0] if results else None


def fetch_open_meteo(lat: float, lon: float, forecast_days: int = 5):
    from config import REQUEST_TIMEOUT
    params = {
        "latitude": lat,
        "longitude": lon,
        "current": CURRENT_FIELDS,
        "daily": DAILY_FIELDS,
        "timezone": "auto",
        "forecast_days": forecast_days,
    }

    resp = requests.get(FORECAST_URL, params=params, timeout=REQUEST_TIMEOUT)
    if not resp.ok:
        raise UpstreamError("Failed weather request", resp.status_code)
    return resp.json()


def shape_current(current):
    code = current.get("weather_code")
    summary, icon = get_weather_condition(code, "Current conditions")
    shaped = dict(current, summary=summary, icon=icon)
    if current.get("wind_direction_10m") is not None:
        shaped["compass"] = get_compass_direction(current["wind_direction_10m"])
    return shaped


def shape_daily(daily):
    def at(field, i):
        values = daily.get(field) or []
        return values[i] if i < len(values) else None

    days = []
    for i, time in enumerate(daily.get("time") or []):
        code = at("weather_code", i)
        summary, icon = get_weather_condition(code, "Forecast")
        days.append({
            "time": time,
            "weatherCode": code,
            "summary": summary,
            "icon": icon,
            "tempMax": at("temperature_2m_max", i),
            "tempMin": at("temperature_2m_min", i),
            "sunrise": at("sunrise", i),
            "sunset": at("sunset", i),
        })
    return days


def get_weather(location):
    data = fetch_open_meteo(location["latitude"], location["longitude"])
    return {
        "location": {
            "name": location.get("name"),
            "admin1": location.get("admin1"),
            "country": location.get("country"),
            "latitude": location.get("latitude"),
            "longitude": location.get("longitude"),
        },
        "current": shape_current(data.get("current") or {}),
        "daily": shape_daily(data.get("daily") or {}),
    }
