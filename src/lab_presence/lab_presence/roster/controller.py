from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..core.exceptions import NotFoundError, StorageFault, ValidationError
from ..container import Container
from .model import Identity

logger = logging.getLogger(__name__)


def identity_to_json(i: Identity) -> dict:
    return {
        "id": i.identity_id,
        "name": i.name,
        "role": i.role,
        "accessLevel": i.access_level,
        "authorized": i.authorized,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    def list_users():
        try:
            return jsonify([identity_to_json(i) for i in container.roster_service.list_authorized()]), 200
        except StorageFault:
            logger.exception("Roster unavailable")
            return jsonify({"error": "Storage unavailable"}), 503

    @app.route("/api/users/<identity_id>", methods=["GET"], endpoint="get_user")
    def get_user(identity_id: str):
        try:
            return jsonify(identity_to_json(container.roster_service.get_user(identity_id))), 200
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except NotFoundError as e:
            return jsonify({"error": str(e)}), 404
        except StorageFault:
            logger.exception("Roster unavailable")
            return jsonify({"error": "Storage unavailable"}), 503
