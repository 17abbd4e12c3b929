from __future__ import annotations

from flask import Flask, jsonify

from ..admins.guards import admin_required
from ..common.responses import handle_errors, read_json_body
from ..container import Container
from ..core.enums import DetectionStatus
from ..devices.auth import device_required


def register(app: Flask, container: Container) -> None:
    device_only = device_required(container.device_authenticator)
    cards = container.card_service

    @app.route("/api/cards/detected", methods=["POST"], endpoint="detect_card")
    @device_only
    @handle_errors
    def detect_card():
        payload = read_json_body()
        result = cards.report_detection(payload.get("uid"), payload.get("deviceId"))

        if result.status == DetectionStatus.DUPLICATE:
            return jsonify({"error": "Card already activated", **result.to_dict()}), 409

        return jsonify(
            {
                "success": True,
                "message": "Card detected, waiting for activation",
                "cardUid": result.uid,
                "pollingId": result.uid,
            }
        )

    @app.route("/api/cards/batch", methods=["POST"], endpoint="detect_cards_batch")
    @device_only
    @handle_errors
    def detect_cards_batch():
        payload = read_json_body()
        report = cards.report_batch(payload.get("cards"), payload.get("deviceId"))
        return jsonify(report.to_dict())

    @app.route("/api/cards/status/<uid>", methods=["GET"], endpoint="card_status")
    @device_only
    @handle_errors
    def card_status(uid: str):
        return jsonify(cards.resolve_status(uid).to_dict())

    @app.route("/api/cards/pending", methods=["GET"], endpoint="pending_cards")
    @admin_required
    @handle_errors
    def pending_cards():
        pending = cards.list_pending()
        return jsonify({"cards": [p.to_dict() for p in pending], "count": len(pending)})

    @app.route("/api/cards/register", methods=["POST"], endpoint="activate_card")
    @admin_required
    @handle_errors
    def activate_card():
        payload = read_json_body()
        result = cards.activate(student_number=payload.get("studentId"), card_uid=payload.get("cardUid"))
        return jsonify(result.to_dict())

    @app.route("/api/cards/cleanup", methods=["POST"], endpoint="cleanup_cards")
    @admin_required
    @handle_errors
    def cleanup_cards():
        return jsonify({"success": True, "deletedCount": cards.cleanup_expired()})
