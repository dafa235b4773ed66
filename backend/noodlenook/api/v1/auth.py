from flask import request, jsonify, g
from flask_jwt_extended import create_access_token, jwt_required

from noodlenook.application.users.authenticate import authenticate
from noodlenook.application.users.register_user import register_user
from noodlenook.normalizers.user import normalize_user
from noodlenook.utils.decorators import login_required
from . import v1_bp


def _session_payload(user):
    token = create_access_token(identity=user.id)
    return {
        "token": token,
        "access_token": token,
        "user": normalize_user(user),
    }


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}

    user = authenticate(
        login=data.get("username") or data.get("email"),
        password=data.get("password"),
    )

    return jsonify(_session_payload(user)), 200


@v1_bp.route("/auth/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}

    user = register_user(
        username=data.get("username"),
        email=data.get("email"),
        password=data.get("password"),
        token=data.get("token"),
    )

    return jsonify(_session_payload(user)), 201


@v1_bp.route("/auth/me", methods=["GET"])
@jwt_required()
@login_required
def me():
    return jsonify(normalize_user(g.current_user)), 200
