import logging

from flask import jsonify, request

from config import app
from helpers import error_response
import weather.helpers

logger = logging.getLogger(__name__)


@app.route("/api/weather", methods=["GET"])
def getweather():
    city = (request.args.get("city") or "Toronto").strip()

    try:
        location = weather.helpers.geocode_city(city)
        if location is None:
            return error_response("City not found", 404)

        return jsonify(weather.helpers.get_weather(location))
    except weather.helpers.UpstreamError as e:
        logger.warning("Open-Meteo forecast failed for %r: HTTP %s", city, e.status)
        return error_response(str(e), e.status)
    except Exception as e:
        logger.error("Unable to load weather for %r: %s", city, e)
        return error_response("Unable to load weather", 500)
