from flask import current_app, g, request, jsonify
from flask_jwt_extended import jwt_required

from noodlenook.domain.roles import ADMIN
from noodlenook.application.invitations.create_invitation import create_invitation
from noodlenook.application.invitations.list_invitations import list_invitations
from noodlenook.application.invitations.revoke_invitation import revoke_invitation
from noodlenook.application.invitations.validate_invitation import validate_invitation
from noodlenook.normalizers.invitation import normalize_invitation, normalize_invitation_result
from noodlenook.utils.decorators import roles_required
from . import v1_bp


@v1_bp.route("/invitations", methods=["GET"])
@jwt_required()
@roles_required(ADMIN)
def list_invitations_route():
    invitations = list_invitations()

    return jsonify([normalize_invitation(inv) for inv in invitations]), 200


@v1_bp.route("/invitations", methods=["POST"])
@jwt_required()
@roles_required(ADMIN)
def create_invitation_route():
    data = request.get_json(silent=True) or {}

    result = create_invitation(
        actor=g.current_user,
        email=data.get("email"),
        role=data.get("role"),
        method=data.get("method") or "link",
        base_url=current_app.config.get("BASE_URL") or request.host_url,
    )

    return jsonify(normalize_invitation_result(result)), 201


@v1_bp.route("/invitations/validate/<token>", methods=["GET"])
def validate_invitation_route(token):
    return jsonify(validate_invitation(token=token)), 200


@v1_bp.route("/invitations/<invitation_id>", methods=["DELETE"])
@jwt_required()
@roles_required(ADMIN)
def revoke_invitation_route(invitation_id):
    revoke_invitation(actor=g.current_user, invitation_id=invitation_id)

    return jsonify({"message": "Invitation deleted"}), 200
