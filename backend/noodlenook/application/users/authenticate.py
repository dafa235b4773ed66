from sqlalchemy import func, or_

from noodlenook.models.user import User
from noodlenook.domain.exceptions import AuthenticationError, ValidationError


def authenticate(*, login, password) -> User:
    """Resolve a username-or-email plus password to a user."""
    if not login or not password:
        raise ValidationError("Username and password required")

    user = User.query.filter(
        or_(User.username == login, func.lower(User.email) == str(login).lower())
    ).first()

    if not user or not user.check_password(password):
        raise AuthenticationError("Invalid credentials")

    return user
