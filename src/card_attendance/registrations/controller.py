from __future__ import annotations

from flask import Flask, jsonify, request

from ..admins.guards import admin_required
from ..common.responses import handle_errors
from ..container import Container
from ..core.exceptions import ValidationError
from ..devices.auth import device_required


def _form_event_id() -> int:
    raw = (request.form.get("eventId") or "").strip()
    if not raw:
        raise ValidationError("No event selected")
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("Invalid event ID")


def register(app: Flask, container: Container) -> None:
    device_only = device_required(container.device_authenticator)
    registrations = container.registration_service

    @app.route("/api/admin/registrations/bulk-import", methods=["POST"], endpoint="import_registrations")
    @admin_required
    @handle_errors
    def import_registrations():
        upload = request.files.get("file")
        if upload is None:
            raise ValidationError("No file provided")
        event_id = _form_event_id()

        report = registrations.import_csv(upload.read(), event_id)
        return jsonify(report.to_dict()), (200 if report.ok else 400)

    @app.route("/api/events/<int:event_id>/registrations", methods=["GET"], endpoint="device_event_registrations")
    @device_only
    @handle_errors
    def device_event_registrations(event_id: int):
        return jsonify(registrations.roster_for_device(event_id).to_dict())
