import logging

from flask import jsonify, request

from config import app, NEWS_CACHE_SECONDS
from helpers import TTLCache, error_response
import news.helpers

logger = logging.getLogger(__name__)

news_cache = TTLCache(NEWS_CACHE_SECONDS)


@app.route("/api/news", methods=["GET"])
def getnews():
    category = request.args.get("category", "")

    if not category or category not in news.helpers.FEEDS:
        return error_response("Invalid or missing category", 400)

    try:
        items = news_cache.get(category)
        if items is None:
            items = news.helpers.get_news(category)
            news_cache.set(category, items)
    except Exception as e:
        logger.error("Error fetching RSS feeds: %s", e)
        return error_response("Failed to fetch feeds", 500)

    response = jsonify(items)
    response.headers["Cache-Control"] = f"s-maxage={NEWS_CACHE_SECONDS}, stale-while-revalidate"
    return response


@app.route("/api/news/categories", methods=["GET"])
def newscategories():
    return jsonify(list(news.helpers.FEEDS))
