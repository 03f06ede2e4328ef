from __future__ import annotations

import io
import logging
from functools import wraps

import qrcode
from flask import Flask, jsonify, request, send_file, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_float, optional_int, optional_text, parse_method
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    ErrorCode,
    EvidenceError,
    NotFoundError,
    StateError,
    ValidationError,
)
from ..container import Container
from .model import CheckInEvidence

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthorizationError, 403),
    (EvidenceError, 422),
    (ConflictError, 409),
    (StateError, 409),
    (NotFoundError, 404),
    (ValidationError, 400),
)


def _error_response(e: DomainError):
    status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(e, kind)), 400)
    return jsonify({"success": False, "code": e.code.value, "message": e.message}), status


def register(app: Flask, container: Container) -> None:
    service = container.checkin_service

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "code": ErrorCode.NOT_AUTHORIZED.value, "message": "Login required"}), 401
            return view(*args, **kwargs)

        return wrapper

    def domain_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return _error_response(e)
            except Exception:
                logger.exception("Unhandled error in %s", request.path)
                return jsonify({"success": False, "message": "Internal error"}), 500

        return wrapper

    def _current_user_id() -> int:
        return int(session["user_id"])

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/events/<int:event_id>/check-in", methods=["POST"], endpoint="api_check_in")
    @login_required
    @domain_errors
    def api_check_in(event_id: int):
        data = _body()
        method = parse_method(data.get("method"))
        actor = service.actor_for(_current_user_id(), event_id)
        requested = optional_int(data.get("user_id"), "user_id")
        target_user_id = actor.user_id if requested is None else requested

        evidence = CheckInEvidence(
            token=optional_text(data.get("token")),
            latitude=optional_float(data.get("latitude"), "latitude"),
            longitude=optional_float(data.get("longitude"), "longitude"),
            accuracy_meters=optional_float(data.get("accuracy_meters"), "accuracy_meters"),
            device_fingerprint=optional_text(data.get("device_fingerprint")),
            note=optional_text(data.get("note")),
        )
        record = service.check_in(actor, event_id, target_user_id, method, evidence)
        return jsonify({"success": True, "record": record.to_dict()}), 201

    @app.route("/api/events/<int:event_id>/check-out", methods=["POST"], endpoint="api_check_out")
    @login_required
    @domain_errors
    def api_check_out(event_id: int):
        data = _body()
        actor = service.actor_for(_current_user_id(), event_id)
        requested = optional_int(data.get("user_id"), "user_id")
        target_user_id = actor.user_id if requested is None else requested

        record = service.check_out(actor, event_id, target_user_id)
        return jsonify({"success": True, "record": record.to_dict()}), 200

    @app.route("/api/events/<int:event_id>/check-in-token", methods=["POST"], endpoint="api_check_in_token")
    @login_required
    @domain_errors
    def api_check_in_token(event_id: int):
        actor = service.actor_for(_current_user_id(), event_id)
        issued = service.issue_check_in_token(event_id, actor)
        return jsonify({"success": True, "token": issued.token, "expires_at": issued.expires_at.isoformat()}), 201

    @app.route("/api/events/<int:event_id>/check-in-token.png", methods=["POST"], endpoint="api_check_in_token_png")
    @login_required
    @domain_errors
    def api_check_in_token_png(event_id: int):
        """Issue a token and render it as a scannable QR code image."""
        actor = service.actor_for(_current_user_id(), event_id)
        issued = service.issue_check_in_token(event_id, actor)

        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=2,
        )
        qr.add_data(issued.token)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)

        response = send_file(buf, mimetype="image/png")
        response.headers["X-Token-Expires-At"] = issued.expires_at.isoformat()
        return response

    @app.route("/api/events/<int:event_id>/attendance", methods=["GET"], endpoint="api_event_attendance")
    @login_required
    @domain_errors
    def api_event_attendance(event_id: int):
        raw_status = optional_text(request.args.get("status"))
        try:
            status = AttendanceStatus(raw_status) if raw_status else None
        except ValueError:
            raise ValidationError(message="status must be checked_in or checked_out")

        actor = service.actor_for(_current_user_id(), event_id)
        rows = service.list_attendance(actor, event_id, status)
        return jsonify({"success": True, "records": [r.to_dict() for r in rows]}), 200

    @app.route("/api/events/<int:event_id>/attendance/me", methods=["GET"], endpoint="api_my_event_attendance")
    @login_required
    @domain_errors
    def api_my_event_attendance(event_id: int):
        actor = service.actor_for(_current_user_id(), event_id)
        record = service.attendance_status(actor, event_id)
        return jsonify({"success": True, "record": record.to_dict() if record else None}), 200

    @app.route("/api/me/attendance", methods=["GET"], endpoint="api_my_attendance")
    @login_required
    @domain_errors
    def api_my_attendance():
        try:
            start = parse_iso_date(request.args["start"]) if request.args.get("start") else None
            end = parse_iso_date(request.args["end"]) if request.args.get("end") else None
        except ValueError:
            raise ValidationError(message="start/end must be YYYY-MM-DD")

        rows = service.history(_current_user_id(), start, end)
        return jsonify({"success": True, "records": [r.to_dict() for r in rows]}), 200

    @app.route(
        "/api/events/<int:event_id>/attendance/<int:record_id>",
        methods=["DELETE"],
        endpoint="api_delete_attendance",
    )
    @login_required
    @domain_errors
    def api_delete_attendance(event_id: int, record_id: int):
        actor = service.actor_for(_current_user_id(), event_id)
        reason = optional_text(_body().get("reason"))
        record = service.delete_record(actor, event_id, record_id, reason=reason)
        return jsonify({"success": True, "record": record.to_dict()}), 200

    @app.route("/api/events/<int:event_id>/audit", methods=["GET"], endpoint="api_event_audit")
    @login_required
    @domain_errors
    def api_event_audit(event_id: int):
        actor = service.actor_for(_current_user_id(), event_id)
        trail = service.audit_trail(actor, event_id)
        return jsonify(
            {
                "success": True,
                "records": [
                    {
                        "record": item.record.to_dict(),
                        "entries": [
                            {
                                "entry_id": e.entry_id,
                                "action": e.action.value,
                                "actor_id": e.actor_id,
                                "timestamp": e.timestamp.isoformat(),
                                "resulting_status": e.resulting_status.value,
                                "is_deleted": e.is_deleted,
                                "detail": e.detail,
                            }
                            for e in item.entries
                        ],
                    }
                    for item in trail
                ],
            }
        ), 200
