import logging

from config import app, HOST, PORT, LOG_LEVEL
from config import NEWS_ENABLED, STOCKS_ENABLED, WEATHER_ENABLED, YOUTUBE_ENABLED, USERCONFIG_ENABLED

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

if NEWS_ENABLED: from news.routes import *
if STOCKS_ENABLED: from stocks.routes import *
if WEATHER_ENABLED: from weather.routes import *
if YOUTUBE_ENABLED: from youtube.routes import *
if USERCONFIG_ENABLED: from userconfig.routes import *

if __name__ == "__main__":
    app.run(host=HOST, port=PORT, debug=False, threaded=True)
