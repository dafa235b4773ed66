from flask import g, request, jsonify

from noodlenook.application.cms.search_pages import search_pages
from noodlenook.normalizers.page import normalize_page
from . import v1_bp


@v1_bp.route("/search", methods=["GET"])
def search():
    pages = search_pages(user=g.current_user, q=request.args.get("q"))

    return jsonify([normalize_page(page, include_content=False) for page in pages]), 200
