import math

import requests
import yfinance as yf

FINNHUB_API_URL = "https://finnhub.io/api/v1"

# Dashboard chart range -> yfinance history period
CHART_RANGES = {
    "7d": "5d",
    "30d": "1mo",
    "90d": "3mo",
}
DEFAULT_CHART_PERIOD = "1mo"


def finnhub_get(endpoint, **params):
    from config import FINNHUB_API_KEY, REQUEST_TIMEOUT
    params["token"] = FINNHUB_API_KEY
    resp = requests.get(f"{FINNHUB_API_URL}/{endpoint}", params=params, timeout=REQUEST_TIMEOUT)
    if not resp.ok:
        raise Exception(f"Finnhub error: HTTP {resp.status_code}")
    return resp.json()


def get_quote(symbol):
    return finnhub_get("quote", symbol=symbol)


def search_symbols(query):
    return finnhub_get("search", q=query)


def _price(value):
    if value is None:
        return None
    value = float(value)
    return None if math.isnan(value) else round(value, 4)


def get_candles(symbol, chart_range):
    period = CHART_RANGES.get(chart_range, DEFAULT_CHART_PERIOD)

    try:
        hist = yf.Ticker(symbol).history(period=period, interval="1d")
    except Exception as e:
        raise Exception(f"Error fetching chart data for {symbol} with range {chart_range}: {e}")

    data = {"c": [], "h": [], "l": [], "o": [], "t": [], "s": "ok"}
    for index, row in hist.iterrows():
        data["c"].append(_price(row.get("Close")))
        data["h"].append(_price(row.get("High")))
        data["l"].append(_price(row.get("Low")))
        data["o"].append(_price(row.get("Open")))
        data["t"].append(int(index.timestamp()))

    if not data["t"]:
        raise Exception(f"No chart data for {symbol}")
    return data
