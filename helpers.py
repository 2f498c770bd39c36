import re
import threading
import time
from datetime import datetime, timezone

from flask import jsonify


class TTLCache:
    """In-process response cache keyed by request parameters.

    Entries are never evicted; a stale entry is simply overwritten on the
    next miss for the same key.
    """

    def __init__(self, ttl):
        self.ttl = ttl
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        data, timestamp = entry
        if time.time() - timestamp < self.ttl:
            return data
        return None

    def set(self, key, data):
        with self._lock:
            self._entries[key] = (data, time.time())

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        return len(self._entries)


def error_response(message, status):
    return jsonify({"error": message}), status


def format_datetime(value):
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'


def utcnow():
    return datetime.now(timezone.utc)


def iso8601_to_seconds(value):
    total_seconds = 0

    match = re.match(r'P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?', value)

    if not match:
        raise ValueError("Invalid ISO 8601 duration string format.")

    days, hours, minutes, seconds = match.groups()

    if days:
        total_seconds += int(days) * 24 * 60 * 60
    if hours:
        total_seconds += int(hours) * 60 * 60
    if minutes:
        total_seconds += int(minutes) * 60
    if seconds:
        total_seconds += int(seconds)

    return total_seconds
