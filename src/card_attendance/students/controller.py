from __future__ import annotations

from flask import Flask, jsonify, request

from ..admins.guards import admin_required
from ..common.responses import handle_errors
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/students/bulk-import", methods=["POST"], endpoint="import_students")
    @admin_required
    @handle_errors
    def import_students():
        upload = request.files.get("file")
        if upload is None:
            raise ValidationError("No file uploaded")

        report = container.student_import_service.import_roster(upload.read())
        return jsonify(report.to_dict())
