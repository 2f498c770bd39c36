import copy
import logging
import random
import re
import string
import time
import uuid
from datetime import datetime

import userconfig.firebase

logger = logging.getLogger(__name__)

PIN_RE = re.compile(r"^[0-9]{4}$")

NEWS_CATEGORIES = ("World", "Canada", "Tech", "Finance")
YOUTUBE_REGIONS = ("CA", "US", "GB", "AU")
EVENT_COLORS = ["#3b82f6", "#8b5cf6", "#f59e0b", "#ef4444", "#10b981", "#ec4899"]

DEFAULT_STREAMS = [
    {"name": "CBC News Network", "url": "https://cbcrclinear-tor.akamaized.net/hls/live/2042769/geo_allow_ca/CBCRCLINEAR_TOR_15/master5.m3u8"},
    {"name": "BBC World", "url": "https://dash2.antik.sk/live/test_bbc_world/playlist.m3u8"},
]

# Substring of a legacy stream URL -> channel name
LEGACY_STREAM_NAMES = {"cbcrclinear": "CBC News Network", "bbc_world": "BBC World"}

DEFAULT_CONFIG = {
    "widgets": ["stocks", "news", "streams", "youtube", "calendar", "socials", "weather"],
    "stocks": ["AAPL", "MSFT", "GOOGL", "AMZN"],
    "newsCategory": "Tech",
    "streams": DEFAULT_STREAMS,
    "activeStreamIndex": 0,
    "youtubeRegion": "CA",
    "youtubeKeyword": "technology",
    "watchLater": [],
    "events": [],
    "reminders": [],
    "weatherCity": "Toronto",
}

# Widgets older documents may be missing
REQUIRED_WIDGETS = ["calendar", "socials", "weather"]

WIDGET_IDS = ("stocks", "news", "streams", "youtube", "calendar", "socials", "weather")

STRING_FIELDS = ("youtubeKeyword", "weatherCity")

# List field -> keys each element must carry as strings; empty for a list of strings
LIST_FIELDS = {
    "widgets": (),
    "stocks": (),
    "streams": ("name", "url"),
    "watchLater": ("videoId",),
    "events": ("id", "title", "date", "time"),
    "reminders": ("id", "title", "remindAt"),
}


class StoreError(Exception):
    pass


def default_config():
    return copy.deepcopy(DEFAULT_CONFIG)


def is_valid_pin(code) -> bool:
    return isinstance(code, str) and bool(PIN_RE.match(code))


def firebase_path(code: str) -> str:
    return f"users/pin-{code}"


def legacy_stream(url):
    name = next((n for key, n in LEGACY_STREAM_NAMES.items() if key in url), "Channel")
    return {"name": name, "url": url}


def migrate_config(raw: dict) -> dict:
    """Bring a stored document up to the current UserConfig shape."""
    config = {**default_config(), **raw}

    streams = config.get("streams") or []
    if streams and isinstance(streams[0], str):
        config["streams"] = [legacy_stream(url) for url in streams]

    index = config.get("activeStreamIndex")
    if not isinstance(index, int) or isinstance(index, bool):
        config["activeStreamIndex"] = 0
    for field in ("youtubeRegion", "youtubeKeyword", "watchLater", "events", "reminders", "weatherCity"):
        if not config.get(field):
            config[field] = copy.deepcopy(DEFAULT_CONFIG[field])

    widgets = list(config.get("widgets") or [])
    for widget in REQUIRED_WIDGETS:
        if widget not in widgets:
            widgets.append(widget)
    config["widgets"] = widgets

    return config


def login_with_code(code):
    if not is_valid_pin(code):
        return None
    remote = userconfig.firebase.fetch_data(firebase_path(code))
    if not remote:
        return None
    return migrate_config(remote)


def create_new_code(code):
    if not is_valid_pin(code):
        return None
    try:
        existing = userconfig.firebase.read_data(firebase_path(code))
    except userconfig.firebase.FirebaseError as e:
        raise StoreError(f"Could not check dashboard {code}: {e}") from e
    if existing:
        return None
    config = default_config()
    if userconfig.firebase.update_data(firebase_path(code), config) is None:
        raise StoreError(f"Could not create dashboard {code}")
    logger.info("Created dashboard for code %s", code)
    return config


def _valid_list(items, keys):
    if not isinstance(items, list):
        return False
    if not keys:
        return all(isinstance(item, str) for item in items)
    return all(
        isinstance(item, dict) and all(isinstance(item.get(key), str) for key in keys)
        for item in items
    )


def validate_updates(updates):
    if not isinstance(updates, dict):
        raise ValueError("Config update must be a JSON object")
    if "newsCategory" in updates and updates["newsCategory"] not in NEWS_CATEGORIES:
        raise ValueError(f"Unknown news category: {updates['newsCategory']}")
    if "youtubeRegion" in updates and updates["youtubeRegion"] not in YOUTUBE_REGIONS:
        raise ValueError(f"Unknown YouTube region: {updates['youtubeRegion']}")
    for field in STRING_FIELDS:
        if field in updates and not isinstance(updates[field], str):
            raise ValueError(f"{field} must be a string")
    index = updates.get("activeStreamIndex", 0)
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValueError("activeStreamIndex must be an integer")
    for field, keys in LIST_FIELDS.items():
        if field in updates and not _valid_list(updates[field], keys):
            if keys:
                raise ValueError(f"{field} must be a list of objects with {', '.join(keys)}")
            raise ValueError(f"{field} must be a list of strings")
    return updates


def update_config(code, updates: dict):
    """Merge updates over the stored config and write the whole document back.

    Last writer wins: two devices on the same code can overwrite each
    other's edits.
    """
    config = login_with_code(code)
    if config is None:
        return None
    new_config = {**config, **updates}
    if userconfig.firebase.update_data(firebase_path(code), new_config) is None:
        raise StoreError(f"Could not save dashboard {code}")
    return new_config


# Config edits. Each takes the current config and returns the updates to merge.

def _required(value, name):
    value = value.strip() if isinstance(value, str) else value
    if not value:
        raise ValueError(f"{name} is required")
    return value


def move_item(items, from_idx, to_idx):
    if not (0 <= from_idx < len(items)) or not (0 <= to_idx < len(items)):
        raise ValueError("Index out of range")
    items = list(items)
    item = items.pop(from_idx)
    items.insert(to_idx, item)
    return items


def toggle_stock(config, symbol):
    symbol = _required(symbol, "Symbol")
    stocks = config.get("stocks") or []
    if symbol in stocks:
        return {"stocks": [s for s in stocks if s != symbol]}
    return {"stocks": stocks + [symbol]}


def move_stock(config, from_idx, to_idx):
    return {"stocks": move_item(config.get("stocks") or [], from_idx, to_idx)}


def move_widget(config, from_idx, to_idx):
    return {"widgets": move_item(config.get("widgets") or [], from_idx, to_idx)}


def remove_widget(config, widget):
    return {"widgets": [w for w in config.get("widgets") or [] if w != widget]}


def toggle_widget(config, widget):
    if widget not in WIDGET_IDS:
        raise ValueError(f"Unknown widget: {widget}")
    widgets = config.get("widgets") or []
    if widget in widgets:
        return {"widgets": [w for w in widgets if w != widget]}
    return {"widgets": widgets + [widget]}


def add_stream(config, name, url):
    channel = {"name": _required(name, "Name"), "url": _required(url, "URL")}
    return {"streams": (config.get("streams") or []) + [channel]}


def remove_stream(config, index):
    streams = config.get("streams") or []
    if not 0 <= index < len(streams):
        raise ValueError("Index out of range")
    updated = [s for i, s in enumerate(streams) if i != index]
    active = config.get("activeStreamIndex", 0)
    if active >= len(updated):
        active = max(0, len(updated) - 1)
    return {"streams": updated, "activeStreamIndex": active}


def select_stream(config, index):
    if not 0 <= index < len(config.get("streams") or []):
        raise ValueError("Index out of range")
    return {"activeStreamIndex": index}


def new_event_id():
    stamp = int(time.time() * 1000)
    digits = string.digits + string.ascii_lowercase
    encoded = ""
    while stamp:
        stamp, rem = divmod(stamp, 36)
        encoded = digits[rem] + encoded
    return encoded + "".join(random.choices(digits, k=4))


def event_datetime(event):
    return datetime.strptime(f"{event['date']}T{event['time']}", "%Y-%m-%dT%H:%M")


def add_event(config, title, date, time_of_day, color=None):
    events = config.get("events") or []
    event = {
        "id": new_event_id(),
        "title": _required(title, "Title"),
        "date": _required(date, "Date"),
        "time": _required(time_of_day, "Time"),
        "color": color or EVENT_COLORS[len(events) % len(EVENT_COLORS)],
    }
    try:
        event_datetime(event)
    except ValueError:
        raise ValueError("Date must be YYYY-MM-DD and time HH:MM") from None
    return {"events": events + [event]}


def delete_event(config, event_id):
    return {"events": [e for e in config.get("events") or [] if e.get("id") != event_id]}


def upcoming_events(events, now=None, limit=5):
    now = now or datetime.now()
    upcoming = []
    for event in events:
        try:
            when = event_datetime(event)
        except (KeyError, ValueError):
            continue
        if when >= now:
            upcoming.append((when, event))
    upcoming.sort(key=lambda pair: pair[0])
    return [event for _, event in upcoming[:limit]]


def events_on(events, date):
    return sorted((e for e in events if e.get("date") == date), key=lambda e: e.get("time", ""))


def add_reminder(config, title, remind_at):
    reminder = {
        "id": str(uuid.uuid4()),
        "title": _required(title, "Title"),
        "remindAt": _required(remind_at, "Reminder time"),
        "done": False,
    }
    return {"reminders": (config.get("reminders") or []) + [reminder]}


def toggle_reminder(config, reminder_id):
    return {"reminders": [
        dict(r, done=not r.get("done")) if r.get("id") == reminder_id else r
        for r in config.get("reminders") or []
    ]}


def delete_reminder(config, reminder_id):
    return {"reminders": [r for r in config.get("reminders") or [] if r.get("id") != reminder_id]}


def sorted_reminders(reminders):
    return sorted(reminders, key=lambda r: r.get("remindAt", ""))


def add_watch_later(config, video):
    video_id = _required(video.get("videoId"), "videoId")
    watch_later = config.get("watchLater") or []
    if any(v.get("videoId") == video_id for v in watch_later):
        return {"watchLater": watch_later}
    return {"watchLater": watch_later + [video]}


def remove_watch_later(config, video_id):
    return {"watchLater": [v for v in config.get("watchLater") or [] if v.get("videoId") != video_id]}
