VIEWER = "viewer"
EDITOR = "editor"
ADMIN = "admin"

ROLES = (VIEWER, EDITOR, ADMIN)

# Roles allowed to author pages
WRITER_ROLES = (EDITOR, ADMIN)


def is_admin(user) -> bool:
    return user is not None and user.role == ADMIN
