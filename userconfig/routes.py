import logging

from flask import jsonify, request

from config import app
from helpers import error_response
import userconfig.helpers as uc

logger = logging.getLogger(__name__)


def _body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _index(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError("Index must be an integer") from None


def load_config(code):
    if not uc.is_valid_pin(code):
        return None, error_response("Code must be 4 digits", 400)
    config = uc.login_with_code(code)
    if config is None:
        return None, error_response("Code not found", 404)
    return config, None


def apply_edit(code, edit):
    """Load the dashboard for code, run edit(config) and save the updates it returns."""
    config, error = load_config(code)
    if error:
        return error

    try:
        updates = edit(config)
    except ValueError as e:
        return error_response(str(e), 400)

    try:
        new_config = uc.update_config(code, updates)
    except uc.StoreError as e:
        logger.error("%s", e)
        return error_response("Failed to save config", 502)
    if new_config is None:
        return error_response("Code not found", 404)
    return jsonify(new_config)


@app.route("/api/config/<code>", methods=["GET"])
def getconfig(code):
    config, error = load_config(code)
    if error:
        return error
    return jsonify(config)


@app.route("/api/config/<code>", methods=["POST"])
def createconfig(code):
    if not uc.is_valid_pin(code):
        return error_response("Code must be 4 digits", 400)
    try:
        config = uc.create_new_code(code)
    except uc.StoreError as e:
        logger.error("%s", e)
        return error_response("Failed to save config", 502)
    if config is None:
        return error_response("Code already taken", 409)
    return jsonify(config), 201


@app.route("/api/config/<code>", methods=["PATCH"])
def updateconfig(code):
    updates = request.get_json(silent=True)
    return apply_edit(code, lambda config: uc.validate_updates(updates))


@app.route("/api/config/<code>/stocks/toggle", methods=["POST"])
def toggle_stock(code):
    symbol = _body().get("symbol")
    return apply_edit(code, lambda config: uc.toggle_stock(config, symbol))


@app.route("/api/config/<code>/stocks/move", methods=["POST"])
def move_stock(code):
    body = _body()
    return apply_edit(code, lambda config: uc.move_stock(config, _index(body.get("from")), _index(body.get("to"))))


@app.route("/api/config/<code>/widgets/move", methods=["POST"])
def move_widget(code):
    body = _body()
    return apply_edit(code, lambda config: uc.move_widget(config, _index(body.get("from")), _index(body.get("to"))))


@app.route("/api/config/<code>/widgets/remove", methods=["POST"])
def remove_widget(code):
    widget = _body().get("widget")
    return apply_edit(code, lambda config: uc.remove_widget(config, widget))


@app.route("/api/config/<code>/widgets/toggle", methods=["POST"])
def toggle_widget(code):
    widget = _body().get("widget")
    return apply_edit(code, lambda config: uc.toggle_widget(config, widget))


@app.route("/api/config/<code>/streams", methods=["POST"])
def add_stream(code):
    body = _body()
    return apply_edit(code, lambda config: uc.add_stream(config, body.get("name"), body.get("url")))


@app.route("/api/config/<code>/streams/<int:index>", methods=["DELETE"])
def remove_stream(code, index):
    return apply_edit(code, lambda config: uc.remove_stream(config, index))


@app.route("/api/config/<code>/streams/active", methods=["PUT"])
def select_stream(code):
    index = _body().get("index")
    return apply_edit(code, lambda config: uc.select_stream(config, _index(index)))


@app.route("/api/config/<code>/events", methods=["POST"])
def add_event(code):
    body = _body()
    return apply_edit(code, lambda config: uc.add_event(
        config, body.get("title"), body.get("date"), body.get("time"), body.get("color")))


@app.route("/api/config/<code>/events/<event_id>", methods=["DELETE"])
def delete_event(code, event_id):
    return apply_edit(code, lambda config: uc.delete_event(config, event_id))


@app.route("/api/config/<code>/events/upcoming", methods=["GET"])
def upcoming_events(code):
    config, error = load_config(code)
    if error:
        return error
    limit = request.args.get("limit", 5, type=int)
    return jsonify(uc.upcoming_events(config["events"], limit=limit))


@app.route("/api/config/<code>/reminders", methods=["POST"])
def add_reminder(code):
    body = _body()
    return apply_edit(code, lambda config: uc.add_reminder(config, body.get("title"), body.get("remindAt")))


@app.route("/api/config/<code>/reminders/<reminder_id>/toggle", methods=["PUT"])
def toggle_reminder(code, reminder_id):
    return apply_edit(code, lambda config: uc.toggle_reminder(config, reminder_id))


@app.route("/api/config/<code>/reminders/<reminder_id>", methods=["DELETE"])
def delete_reminder(code, reminder_id):
    return apply_edit(code, lambda config: uc.delete_reminder(config, reminder_id))


@app.route("/api/config/<code>/watchlater", methods=["POST"])
def add_watch_later(code):
    video = _body()
    return apply_edit(code, lambda config: uc.add_watch_later(config, video))


@app.route("/api/config/<code>/watchlater/<video_id>", methods=["DELETE"])
def remove_watch_later(code, video_id):
    return apply_edit(code, lambda config: uc.remove_watch_later(config, video_id))


@app.route("/api/config/<code>/events", methods=["GET"])
def events_on(code):
    config, error = load_config(code)
    if error:
        return error
    date = request.args.get("date")
    if not date:
        return error_response("date is required", 400)
    return jsonify(uc.events_on(config["events"], date))


@app.route("/api/config/<code>/reminders", methods=["GET"])
def reminders(code):
    config, error = load_config(code)
    if error:
        return error
    return jsonify(uc.sorted_reminders(config["reminders"]))
