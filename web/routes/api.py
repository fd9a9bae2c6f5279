"""REST API v1: read-only JSON view of certificate state."""

import logging

from flask import Blueprint, current_app, jsonify

from tracker.errors import StorageError
from web.services import get_state_store, get_status_reporter

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)


def _error(message, status=400):
    return jsonify({"error": message}), status


def _storage_error(e):
    logger.error("Failed to read certificate state: %s", e)
    return jsonify(e.to_dict()), 500


def _reporter():
    store = get_state_store(current_app.config["STATE_DB_PATH"], create=False)
    return get_status_reporter(store)


@bp.route("/certificates")
def list_certificates():
    try:
        rows = _reporter().report()
    except StorageError as e:
        return _storage_error(e)
    return jsonify([row.to_dict() for row in rows])


@bp.route("/certificates/<name>")
def get_certificate(name):
    try:
        row = _reporter().get(name)
    except StorageError as e:
        return _storage_error(e)
    if row is None:
        return _error(f"Certificate '{name}' not found", 404)
    return jsonify(row.to_dict())
