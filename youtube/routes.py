import logging

from flask import jsonify, request

from config import app, YOUTUBE_CACHE_SECONDS
from helpers import TTLCache, error_response
import youtube.helpers

logger = logging.getLogger(__name__)

youtube_cache = TTLCache(YOUTUBE_CACHE_SECONDS)


@app.route("/api/youtube", methods=["GET"])
def getyoutube():
    from config import YOUTUBE_API_KEY
    request_type = request.args.get("type") or "popular"
    region = request.args.get("region") or "CA"
    q = request.args.get("q") or ""
    max_results = request.args.get("maxResults") or "12"

    if not YOUTUBE_API_KEY:
        return error_response("YouTube API key not configured", 500)

    cache_key = f"{request_type}:{region}:{q}:{max_results}"
    items = youtube_cache.get(cache_key)

    if items is None:
        try:
            if request_type == "search" and q:
                items = youtube.helpers.search_videos(q, region, int(max_results))
            else:
                items = youtube.helpers.popular_videos(region, int(max_results))
        except Exception as e:
            logger.error("YouTube fetch error: %s", e)
            return error_response("Failed to fetch YouTube data", 500)
        youtube_cache.set(cache_key, items)

    response = jsonify(items)
    response.headers["Cache-Control"] = f"s-maxage={YOUTUBE_CACHE_SECONDS}, stale-while-revalidate"
    return response
