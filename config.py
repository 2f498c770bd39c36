import os
from flask import Flask

app = Flask(__name__)


def _flag(name, default="1"):
    return os.environ.get(name, default).lower() in ("1", "true", "yes", "on")


HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "6571"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

NEWS_ENABLED = _flag("NEWS_ENABLED")
STOCKS_ENABLED = _flag("STOCKS_ENABLED")
WEATHER_ENABLED = _flag("WEATHER_ENABLED")
YOUTUBE_ENABLED = _flag("YOUTUBE_ENABLED")
USERCONFIG_ENABLED = _flag("USERCONFIG_ENABLED")

# Upstream requests
REQUEST_TIMEOUT = 10 # in seconds

# News configuration
NEWS_CACHE_SECONDS = 600
NEWS_ITEMS_PER_FEED = 8

# Stocks configuration
FINNHUB_API_KEY = os.environ.get("FINNHUB_API_KEY", "")
STOCKS_CACHE_SECONDS = 300

# YouTube configuration
YOUTUBE_API_KEY = os.environ.get("YOUTUBE_API_KEY", "")
YOUTUBE_CACHE_SECONDS = 300

# Firebase Realtime Database holding the per-PIN dashboards
FIREBASE_DATABASE_URL = os.environ.get(
    "FIREBASE_DATABASE_URL", "https://schemaflow-4a0c5-default-rtdb.firebaseio.com"
).rstrip("/")

# Optional: Enable proxy support if behind a reverse proxy
# from werkzeug.middleware.proxy_fix import ProxyFix
# app.wsgi_app = ProxyFix(
#     app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1
# )
