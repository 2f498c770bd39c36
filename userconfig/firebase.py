"""
Firebase Realtime Database REST bindings.

Every node is addressable as ``<database url>/<path>.json``: GET reads it
(JSON ``null`` when absent) and PATCH merges the body's top-level keys
into it. ``read_data`` raises ``FirebaseError`` when a read fails so callers
can tell a missing node from an unreachable database; the other helpers log
failures and report them as ``None``.
"""
import logging

import requests

logger = logging.getLogger(__name__)


class FirebaseError(Exception):
    pass


def node_url(path: str) -> str:
    from config import FIREBASE_DATABASE_URL
    return f"{FIREBASE_DATABASE_URL}/{path}.json"


def read_data(path: str):
    from config import REQUEST_TIMEOUT
    try:
        resp = requests.get(node_url(path), timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        raise FirebaseError(f"Firebase fetch error for {path}: {e}") from e


def fetch_data(path: str):
    try:
        return read_data(path)
    except FirebaseError as e:
        logger.error("%s", e)
        return None


def update_data(path: str, data: dict):
    from config import REQUEST_TIMEOUT
    try:
        resp = requests.patch(node_url(path), json=data, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error("Firebase update error for %s: %s", path, e)
        return None
