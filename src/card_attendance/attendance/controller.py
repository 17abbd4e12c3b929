from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..admins.guards import admin_required
from ..common.responses import handle_errors, read_json_body
from ..container import Container
from ..core.exceptions import ValidationError
from ..devices.auth import device_required
from .model import AttendanceReport


def _optional_event_id(payload: dict) -> int | None:
    raw = payload.get("eventId")
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid event ID")


def register(app: Flask, container: Container) -> None:
    device_only = device_required(container.device_authenticator)
    attendance = container.attendance_service

    def _write_attendance_csv(report: AttendanceReport):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=["student_id", "name", "email", "checked_in_at"])
        writer.writeheader()
        for a in report.attendees:
            writer.writerow(
                {
                    "student_id": a.student_number,
                    "name": a.name,
                    "email": a.email or "",
                    "checked_in_at": a.checked_in_at.isoformat(sep=" "),
                }
            )

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_event_{report.event.id}.csv"},
        )

    @app.route("/api/check-in", methods=["POST"], endpoint="check_in")
    @device_only
    @handle_errors
    def check_in():
        payload = read_json_body()
        card_uid = payload.get("cardUid") or payload.get("uid")
        result = attendance.check_in(card_uid, event_id=_optional_event_id(payload))
        return jsonify(result.to_dict())

    @app.route("/api/events/active", methods=["GET"], endpoint="active_event")
    @device_only
    @handle_errors
    def active_event():
        summary = attendance.active_event_summary()
        return jsonify({"event": summary.to_dict() if summary else None})

    @app.route("/api/admin/events/<int:event_id>/attendance", methods=["GET"], endpoint="event_attendance")
    @admin_required
    @handle_errors
    def event_attendance(event_id: int):
        report = attendance.attendance_report(event_id)
        if (request.args.get("format") or "").lower() == "csv":
            return _write_attendance_csv(report)
        return jsonify(report.to_dict())
