import logging

from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from noodlenook.extensions import db
from noodlenook.models.user import User

logger = logging.getLogger(__name__)


def identity_middleware(app):
    @app.before_request
    def load_current_user():
        """
        Resolve the bearer token, if any, to g.current_user.

        Anything short of a valid token for an existing user leaves the
        request anonymous; endpoints that need a user enforce it with
        @jwt_required() and the role decorators.
        """
        g.current_user = None

        try:
            verify_jwt_in_request(optional=True)
            identity = get_jwt_identity()
        except (JWTExtendedException, PyJWTError) as exc:
            logger.debug("Ignoring unusable bearer token: %s", exc)
            return None

        if identity is not None:
            g.current_user = db.session.get(User, identity)
        return None
