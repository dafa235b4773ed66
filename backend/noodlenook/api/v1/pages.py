from flask import g, request, jsonify
from flask_jwt_extended import jwt_required

from noodlenook.models.page import Page
from noodlenook.domain.roles import ADMIN, WRITER_ROLES, is_admin
from noodlenook.domain.visibility import get_visible_page, list_visible_pages
from noodlenook.application.cms.create_page import create_page
from noodlenook.application.cms.update_page import update_page
from noodlenook.application.cms.delete_page import delete_page
from noodlenook.application.cms.reorder_page import reorder_page
from noodlenook.application.cms.publish_page import publish_page
from noodlenook.application.cms.reject_page import reject_page
from noodlenook.application.cms.list_revisions import list_revisions
from noodlenook.normalizers.page import normalize_page, normalize_revision
from noodlenook.normalizers.pending_edit import normalize_pending_edit
from noodlenook.services.settings import settings_service
from noodlenook.utils.decorators import roles_required
from noodlenook.utils.optimistic_lock import enforce_optimistic_lock
from . import v1_bp


# ------------------------
# Reads (anonymous allowed)
# ------------------------

@v1_bp.route("/pages", methods=["GET"])
def list_pages():
    sort = request.args.get("sort") or settings_service.default_sort_order()

    pages = list_visible_pages(g.current_user, sort=sort)

    return jsonify([normalize_page(page) for page in pages]), 200


@v1_bp.route("/pages/<slug>", methods=["GET"])
def get_page(slug):
    page = get_visible_page(slug, g.current_user)

    return jsonify(normalize_page(page)), 200


@v1_bp.route("/pages/<slug>/revisions", methods=["GET"])
def get_page_revisions(slug):
    revisions = list_revisions(user=g.current_user, slug=slug)

    return jsonify([normalize_revision(revision) for revision in revisions]), 200


# ------------------------
# Writes
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@roles_required(*WRITER_ROLES)
def create_page_route():
    data = request.get_json(silent=True) or {}

    page, gated = create_page(actor=g.current_user, data=data)

    body = normalize_page(page)
    body["requires_approval"] = gated
    body["message"] = (
        "Page submitted for approval" if gated else "Page created successfully"
    )

    return jsonify(body), 201


@v1_bp.route("/pages/<slug>", methods=["PUT"])
@jwt_required()
@roles_required(*WRITER_ROLES)
def update_page_route(slug):
    data = request.get_json(silent=True) or {}

    enforce_optimistic_lock(get_visible_page(slug, g.current_user))

    result = update_page(actor=g.current_user, slug=slug, data=data)

    if result.requires_approval:
        return jsonify({
            "requires_approval": True,
            "pending_edit": normalize_pending_edit(result.pending_edit),
            "message": "Edit submitted for approval",
        }), 200

    body = normalize_page(result.page)
    body["requires_approval"] = False
    body["message"] = "Page updated successfully"

    return jsonify(body), 200


@v1_bp.route("/pages/<slug>", methods=["DELETE"])
@jwt_required()
@roles_required(ADMIN)
def delete_page_route(slug):
    delete_page(actor=g.current_user, slug=slug)

    return jsonify({"message": "Page deleted successfully"}), 200


@v1_bp.route("/pages/order/<slug>", methods=["PUT"])
@jwt_required()
@roles_required(ADMIN)
def reorder_page_route(slug):
    data = request.get_json(silent=True) or {}

    page = reorder_page(
        actor=g.current_user,
        slug=slug,
        display_order=data.get("display_order"),
    )

    return jsonify(normalize_page(page, include_content=False)), 200


# ------------------------
# Approval of new pages
# ------------------------

@v1_bp.route("/pages/unpublished/list", methods=["GET"])
@jwt_required()
@roles_required(*WRITER_ROLES)
def list_unpublished_pages():
    user = g.current_user
    query = Page.query.filter(Page.is_published.is_(False))

    # Editors only track their own submissions
    if not is_admin(user):
        query = query.filter(Page.author_id == user.id)

    pages = query.order_by(Page.created_at.desc()).all()

    return jsonify([normalize_page(page) for page in pages]), 200


@v1_bp.route("/pages/<slug>/publish", methods=["POST"])
@jwt_required()
@roles_required(ADMIN)
def publish_page_route(slug):
    page = publish_page(actor=g.current_user, slug=slug)

    return jsonify({
        "message": "Page published successfully",
        "page": normalize_page(page),
    }), 200


@v1_bp.route("/pages/<slug>/reject", methods=["POST"])
@jwt_required()
@roles_required(ADMIN)
def reject_page_route(slug):
    data = request.get_json(silent=True) or {}

    reject_page(actor=g.current_user, slug=slug, reason=data.get("reason"))

    return jsonify({"message": "Page rejected and removed"}), 200
