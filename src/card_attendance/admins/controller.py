from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.responses import handle_errors, read_json_body
from ..container import Container
from .guards import admin_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/login", methods=["POST"], endpoint="admin_login")
    @handle_errors
    def admin_login():
        payload = read_json_body()
        s_admin = container.admin_auth_service.authenticate(
            str(payload.get("adminId") or ""),
            str(payload.get("password") or ""),
        )

        session.clear()
        session.permanent = True
        session["admin_id"] = s_admin.admin_id
        session["admin_name"] = s_admin.name

        return jsonify({"success": True, "admin": s_admin.to_dict()})

    @app.route("/api/admin/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/admin/session", methods=["GET"], endpoint="admin_session")
    @admin_required
    def admin_session():
        return jsonify({"admin": {"adminId": session.get("admin_id"), "name": session.get("admin_name")}})
