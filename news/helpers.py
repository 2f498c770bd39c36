import concurrent.futures
import html
import logging
import re
from datetime import datetime, timezone

import feedparser
import requests

from helpers import format_datetime, utcnow

logger = logging.getLogger(__name__)

FEEDS = {
    "World": [
        "http://feeds.bbci.co.uk/news/world/rss.xml",
        "https://rss.nytimes.com/services/xml/rss/nyt/World.xml",
        "https://www.aljazeera.com/xml/rss/all.xml",
    ],
    "Canada": [
        "https://www.cbc.ca/webfeed/rss/rss-canada",
        "https://www.ctvnews.ca/rss/ctvnews-ca-top-stories-public-rss-1.822009",
        "https://globalnews.ca/feed/",
    ],
    "Tech": [
        "https://www.theverge.com/rss/index.xml",
        "https://techcrunch.com/feed/",
        "https://www.wired.com/feed/rss",
        "https://feeds.arstechnica.com/arstechnica/index",
    ],
    "Finance": [
        "https://business.financialpost.com/feed/",
        "https://www.cnbc.com/id/10000664/device/rss/rss.html",
        "https://finance.yahoo.com/news/rssindex",
    ],
}

FEED_HEADERS = {
    "User-Agent": "LYFE-Dashboard/1.0 (Personal Dashboard)",
    "Accept": "application/rss+xml, application/xml, text/xml, */*",
}

SUMMARY_LENGTH = 200

IMG_SRC_RE = re.compile(r'<img[^>]+src=["\']([^"\']+)["\']')
TAG_RE = re.compile(r"<[^>]+>")


def strip_html(value):
    text = TAG_RE.sub(" ", value or "")
    return " ".join(html.unescape(text).split())


def extract_image(entry):
    """Best image URL for a feed entry, or None."""
    for media in entry.get("media_content") or []:
        if media.get("url"):
            return media["url"]
    for thumb in entry.get("media_thumbnail") or []:
        if thumb.get("url"):
            return thumb["url"]

    enclosures = [e for e in entry.get("enclosures") or [] if e.get("href")]
    for enclosure in enclosures:
        if (enclosure.get("type") or "").startswith("image"):
            return enclosure["href"]
    if enclosures:
        return enclosures[0]["href"]

    contents = [c.get("value", "") for c in entry.get("content") or []]
    contents.append(entry.get("summary") or "")
    for content in contents:
        match = IMG_SRC_RE.search(content)
        if match:
            return match.group(1)
    return None


def published_time(entry):
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if parsed:
        return format_datetime(datetime(*parsed[:6], tzinfo=timezone.utc))
    return format_datetime(utcnow())


def summary_snippet(entry):
    text = strip_html(entry.get("summary"))
    if not text:
        contents = entry.get("content") or []
        if contents:
            text = strip_html(contents[0].get("value"))
    return text[:SUMMARY_LENGTH] or None


def shape_entry(entry, source):
    return {
        "title": entry.get("title"),
        "source": source,
        "publishedTime": published_time(entry),
        "summary": summary_snippet(entry),
        "link": entry.get("link"),
        "image": extract_image(entry),
    }


def download_feed(url):
    from config import REQUEST_TIMEOUT
    resp = requests.get(url, headers=FEED_HEADERS, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    parsed = feedparser.parse(resp.content)
    if parsed.bozo and not parsed.entries:
        raise ValueError(f"Unparseable feed: {parsed.get('bozo_exception')}")
    return parsed


def fetch_feed_items(url):
    from config import NEWS_ITEMS_PER_FEED
    try:
        parsed = download_feed(url)
        source = parsed.feed.get("title") or "Unknown Source"
        return [shape_entry(entry, source) for entry in parsed.entries[:NEWS_ITEMS_PER_FEED]]
    except Exception as e:
        logger.error("Failed to parse feed %s: %s", url, e)
        return []


def get_news(category):
    urls = FEEDS[category]
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(urls)) as executor:
        results = list(executor.map(fetch_feed_items, urls))

    items = [item for feed_items in results for item in feed_items]
    # publishedTime is always UTC with a fixed width, so string order is time order
    items.sort(key=lambda item: item["publishedTime"], reverse=True)
    return items
