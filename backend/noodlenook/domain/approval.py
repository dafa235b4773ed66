from noodlenook.domain.roles import is_admin


def requires_approval(actor, *, gating_active: bool) -> bool:
    """Admins always bypass the approval workflow."""
    return gating_active and not is_admin(actor)
