from __future__ import annotations

from flask import Flask, jsonify, request

from ..admins.guards import admin_required, current_admin_id
from ..common.responses import handle_errors, read_json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    events = container.event_service

    @app.route("/api/admin/events", methods=["GET"], endpoint="list_events")
    @admin_required
    @handle_errors
    def list_events():
        status = (request.args.get("status") or "").strip() or None
        return jsonify({"events": [e.to_dict() for e in events.list_events(status=status)]})

    @app.route("/api/admin/events", methods=["POST"], endpoint="create_event")
    @admin_required
    @handle_errors
    def create_event():
        event = events.create_event(read_json_body(), created_by=current_admin_id())
        return jsonify({"event": event.to_dict()}), 201

    @app.route("/api/admin/events/<int:event_id>", methods=["GET"], endpoint="get_event")
    @admin_required
    @handle_errors
    def get_event(event_id: int):
        return jsonify({"event": events.get_event(event_id).to_dict()})

    @app.route("/api/admin/events/<int:event_id>", methods=["PUT"], endpoint="update_event")
    @admin_required
    @handle_errors
    def update_event(event_id: int):
        return jsonify({"event": events.update_event(event_id, read_json_body()).to_dict()})

    @app.route("/api/admin/events/<int:event_id>", methods=["DELETE"], endpoint="delete_event")
    @admin_required
    @handle_errors
    def delete_event(event_id: int):
        events.delete(event_id)
        return jsonify({"success": True})

    @app.route("/api/admin/events/<int:event_id>/activate", methods=["POST"], endpoint="activate_event")
    @admin_required
    @handle_errors
    def activate_event(event_id: int):
        return jsonify({"event": events.activate(event_id).to_dict()})

    @app.route("/api/admin/events/<int:event_id>/end", methods=["POST"], endpoint="end_event")
    @admin_required
    @handle_errors
    def end_event(event_id: int):
        return jsonify({"event": events.end(event_id).to_dict()})
