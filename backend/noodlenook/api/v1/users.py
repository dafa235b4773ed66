from flask import g, jsonify, request
from flask_jwt_extended import jwt_required

from noodlenook.models.user import User
from noodlenook.domain.roles import ADMIN
from noodlenook.application.users.create_user import create_user
from noodlenook.application.users.change_role import change_role
from noodlenook.normalizers.user import normalize_user
from noodlenook.utils.decorators import roles_required
from . import v1_bp


@v1_bp.route("/users", methods=["GET"])
@jwt_required()
@roles_required(ADMIN)
def list_users():
    users = User.query.order_by(User.created_at.asc()).all()

    return jsonify([normalize_user(user) for user in users]), 200


@v1_bp.route("/users", methods=["POST"])
@jwt_required()
@roles_required(ADMIN)
def create_user_route():
    data = request.get_json(silent=True) or {}

    user = create_user(
        actor=g.current_user,
        username=data.get("username"),
        email=data.get("email"),
        password=data.get("password"),
        role=data.get("role"),
    )

    return jsonify(normalize_user(user)), 201


@v1_bp.route("/users/<user_id>/role", methods=["PUT"])
@jwt_required()
@roles_required(ADMIN)
def update_user_role(user_id):
    data = request.get_json(silent=True) or {}

    user = change_role(
        actor=g.current_user,
        user_id=user_id,
        role=data.get("role"),
    )

    return jsonify(normalize_user(user)), 200
