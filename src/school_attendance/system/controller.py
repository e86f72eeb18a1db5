from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_actor, json_body
from ..container import Container

CLEAR_DATA_CONFIRMATION = "yes-delete-all-data"


def register(app: Flask, container: Container) -> None:
    settings = container.settings_service

    @app.route("/api/system-settings", methods=["GET"], endpoint="api_system_settings")
    @admin_required
    def get_settings():
        return jsonify(settings.current().to_dict())

    @app.route("/api/system-settings", methods=["PUT"], endpoint="api_system_settings_update")
    @admin_required
    def update_settings():
        updated = settings.update(current_role=current_actor().role, changes=json_body())
        return jsonify(updated.to_dict())

    @app.route("/api/system/clear-data", methods=["POST"], endpoint="api_clear_data")
    @admin_required
    def clear_data():
        if json_body().get("confirm") != CLEAR_DATA_CONFIRMATION:
            return (
                jsonify(
                    {
                        "success": False,
                        "message": f"Please confirm data deletion by setting 'confirm' to '{CLEAR_DATA_CONFIRMATION}'",
                    }
                ),
                400,
            )
        settings.clear_all_data(current_role=current_actor().role)
        return jsonify({"success": True, "message": "All data cleared. Admin passwords were reset."})
