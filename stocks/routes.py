import logging

from flask import jsonify, request

from config import app, STOCKS_CACHE_SECONDS
from helpers import TTLCache, error_response
import stocks.helpers

logger = logging.getLogger(__name__)

stocks_cache = TTLCache(STOCKS_CACHE_SECONDS)


@app.route("/api/stocks", methods=["GET"])
def getstocks():
    from config import FINNHUB_API_KEY
    symbol = request.args.get("symbol")
    request_type = request.args.get("type") or "quote"
    chart_range = request.args.get("range") or "7d"

    if not symbol:
        return error_response("Symbol is required", 400)
    if not FINNHUB_API_KEY:
        return error_response("Finnhub API key not configured", 500)

    cache_key = f"{request_type}:{symbol}:{chart_range}"
    cached = stocks_cache.get(cache_key)
    if cached is not None:
        return jsonify(cached)

    try:
        match request_type:
            case "candle":
                data = stocks.helpers.get_candles(symbol, chart_range)
            case "search":
                data = stocks.helpers.search_symbols(symbol)
            case _:
                data = stocks.helpers.get_quote(symbol)
    except Exception as e:
        logger.error("Error fetching stock data for %s: %s", symbol, e)
        return error_response("Failed to fetch data", 500)

    stocks_cache.set(cache_key, data)
    return jsonify(data)
