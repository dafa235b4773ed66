from .page import _iso


def normalize_user(user):
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "created_at": _iso(user.created_at),
        "updated_at": _iso(user.updated_at),
    }
