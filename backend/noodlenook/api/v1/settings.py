from flask import g, request, jsonify
from flask_jwt_extended import jwt_required

from noodlenook.domain.exceptions import DomainError, ValidationError
from noodlenook.domain.roles import ADMIN
from noodlenook.normalizers.setting import normalize_setting
from noodlenook.services.notifications import (
    SmtpSettings,
    ping_webhook,
    validate_headers,
    verify_smtp,
)
from noodlenook.services.settings import settings_service
from noodlenook.utils.decorators import roles_required
from . import v1_bp


def _channel_failure(exc):
    return jsonify({
        "success": False,
        "error": exc.kind,
        "message": exc.message,
    }), 400


# ------------------------
# Public
# ------------------------

@v1_bp.route("/settings/public/<key>", methods=["GET"])
def get_public_setting(key):
    value = settings_service.get_public(key)

    return jsonify({"key": key, "value": value}), 200


# ------------------------
# Admin
# ------------------------

@v1_bp.route("/settings", methods=["GET"])
@jwt_required()
@roles_required(ADMIN)
def list_settings():
    settings = settings_service.list_all()

    return jsonify([
        normalize_setting(setting, settings_service.value_of(setting))
        for setting in settings
    ]), 200


@v1_bp.route("/settings/<key>", methods=["GET"])
@jwt_required()
@roles_required(ADMIN)
def get_setting(key):
    setting = settings_service.get(key)

    return jsonify(normalize_setting(setting, settings_service.value_of(setting))), 200


@v1_bp.route("/settings/<key>", methods=["PUT"])
@jwt_required()
@roles_required(ADMIN)
def put_setting(key):
    data = request.get_json(silent=True) or {}

    if "value" not in data:
        raise ValidationError("value is required")

    encrypted = data.get("encrypted", False)
    if not isinstance(encrypted, bool):
        raise ValidationError("encrypted must be a boolean")

    setting = settings_service.upsert(
        key,
        data["value"],
        encrypted=encrypted,
        actor_id=g.current_user.id,
    )

    return jsonify(normalize_setting(setting, settings_service.value_of(setting))), 200


@v1_bp.route("/settings/<key>", methods=["DELETE"])
@jwt_required()
@roles_required(ADMIN)
def delete_setting(key):
    settings_service.delete(key)

    return jsonify({"message": "Setting deleted"}), 200


# ------------------------
# Channel checks
# ------------------------

@v1_bp.route("/settings/test-smtp", methods=["POST"])
@jwt_required()
@roles_required(ADMIN)
def check_smtp():
    data = request.get_json(silent=True) or {}

    # Unsaved form values override what is stored
    merged = settings_service.smtp_config()
    merged.update({k: v for k, v in data.items() if v not in (None, "")})

    try:
        verify_smtp(SmtpSettings.from_mapping(merged))
    except DomainError as exc:
        return _channel_failure(exc)

    return jsonify({"success": True, "message": "SMTP connection successful"}), 200


@v1_bp.route("/settings/test-webhook", methods=["POST"])
@jwt_required()
@roles_required(ADMIN)
def check_webhook():
    data = request.get_json(silent=True) or {}
    stored = settings_service.webhook_config()

    url = data.get("url") or stored["url"]
    headers = data.get("headers")
    if headers is None:
        headers = stored["headers"]

    try:
        if not url:
            raise ValidationError("Webhook URL is required")
        status = ping_webhook(url, validate_headers(headers))
    except DomainError as exc:
        return _channel_failure(exc)

    return jsonify({
        "success": True,
        "status": status,
        "message": "Webhook test successful",
    }), 200
