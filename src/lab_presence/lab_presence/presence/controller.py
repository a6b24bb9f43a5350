from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_timestamp
from ..common.validators import require_bounded_int
from ..core.exceptions import InvalidUserError, StorageFault, ValidationError
from ..container import Container
from .model import InsideRow, PresenceRecord

logger = logging.getLogger(__name__)

MAX_WINDOW_HOURS = 24 * 31


def record_to_json(r: PresenceRecord) -> dict:
    return {
        "sequenceId": r.sequence_id,
        "identityId": r.identity_id,
        "name": r.name,
        "role": r.role,
        "action": r.action.value,
        "status": r.status.value,
        "timestamp": format_timestamp(r.timestamp),
    }


def inside_to_json(r: InsideRow) -> dict:
    return {
        "identityId": r.identity_id,
        "name": r.name,
        "role": r.role,
        "timestamp": format_timestamp(r.timestamp),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/log", methods=["POST"], endpoint="submit_scan")
    def submit_scan():
        """Toggle Inside/Outside for the scanned identifier. Always answers JSON."""
        try:
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                data = {}
            result = container.toggle_engine.record_scan(data.get("id"))
            return jsonify({
                "success": True,
                "action": result.action.value,
                "status": result.status.value,
            }), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except InvalidUserError:
            return jsonify({"success": False, "message": "Invalid user"}), 200
        except StorageFault:
            logger.exception("Scan not recorded: storage fault")
            return jsonify({"success": False, "message": "Scan not recorded, please try again"}), 503
        except Exception:
            logger.exception("Scan not recorded: unexpected error")
            return jsonify({"success": False, "message": "Internal error while recording scan"}), 500

    @app.route("/api/logs", methods=["GET"], endpoint="recent_history")
    def recent_history():
        try:
            limit = request.args.get("limit")
            rows = container.presence_views.recent_history(None if limit is None else limit)
            return jsonify([record_to_json(r) for r in rows]), 200
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StorageFault:
            logger.exception("History unavailable")
            return jsonify({"error": "Storage unavailable"}), 503

    @app.route("/api/active", methods=["GET"], endpoint="currently_inside")
    def currently_inside():
        try:
            hours = request.args.get("hours")
            window = None
            if hours is not None:
                window = timedelta(hours=require_bounded_int(hours, "hours", minimum=1, maximum=MAX_WINDOW_HOURS))
            rows = container.presence_views.currently_inside(window)
            return jsonify([inside_to_json(r) for r in rows]), 200
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StorageFault:
            logger.exception("Active list unavailable")
            return jsonify({"error": "Storage unavailable"}), 503

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        try:
            records = container.presence_views.count_records()
            return jsonify({"ok": True, "records": records}), 200
        except StorageFault:
            return jsonify({"ok": False}), 503
