from flask import g, request, jsonify
from flask_jwt_extended import jwt_required

from noodlenook.domain.roles import ADMIN, WRITER_ROLES
from noodlenook.application.cms.list_pending_edits import get_pending_edit, list_pending_edits
from noodlenook.application.cms.approve_pending_edit import approve_pending_edit
from noodlenook.application.cms.reject_pending_edit import reject_pending_edit
from noodlenook.application.cms.delete_pending_edit import delete_pending_edit
from noodlenook.normalizers.pending_edit import normalize_pending_edit
from noodlenook.utils.decorators import roles_required
from . import v1_bp


@v1_bp.route("/pending-edits", methods=["GET"])
@jwt_required()
@roles_required(*WRITER_ROLES)
def list_pending_edits_route():
    edits = list_pending_edits(actor=g.current_user)

    return jsonify([normalize_pending_edit(edit) for edit in edits]), 200


@v1_bp.route("/pending-edits/<edit_id>", methods=["GET"])
@jwt_required()
@roles_required(*WRITER_ROLES)
def get_pending_edit_route(edit_id):
    edit = get_pending_edit(actor=g.current_user, edit_id=edit_id)

    return jsonify(normalize_pending_edit(edit, include_current=True)), 200


@v1_bp.route("/pending-edits/<edit_id>", methods=["DELETE"])
@jwt_required()
@roles_required(*WRITER_ROLES)
def delete_pending_edit_route(edit_id):
    delete_pending_edit(actor=g.current_user, edit_id=edit_id)

    return jsonify({"message": "Pending edit deleted"}), 200


@v1_bp.route("/pending-edits/<edit_id>/approve", methods=["POST"])
@jwt_required()
@roles_required(ADMIN)
def approve_pending_edit_route(edit_id):
    edit = approve_pending_edit(actor=g.current_user, edit_id=edit_id)

    return jsonify({
        "message": "Edit approved and applied",
        "pending_edit": normalize_pending_edit(edit),
    }), 200


@v1_bp.route("/pending-edits/<edit_id>/reject", methods=["POST"])
@jwt_required()
@roles_required(ADMIN)
def reject_pending_edit_route(edit_id):
    data = request.get_json(silent=True) or {}

    edit = reject_pending_edit(
        actor=g.current_user,
        edit_id=edit_id,
        reason=data.get("reason"),
    )

    return jsonify({
        "message": "Edit rejected",
        "pending_edit": normalize_pending_edit(edit),
    }), 200
