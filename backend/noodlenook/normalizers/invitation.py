from .page import _iso


def normalize_invitation(invitation, include_token=False):
    data = {
        "id": invitation.id,
        "email": invitation.email,
        "role": invitation.role,
        "invited_by": invitation.invited_by,
        "invited_by_name": invitation.invited_by_name,
        "used": invitation.used,
        "created_at": _iso(invitation.created_at),
        "expires_at": _iso(invitation.expires_at),
    }

    if include_token:
        data["token"] = invitation.token

    return data


def normalize_invitation_result(result):
    data = normalize_invitation(result.invitation, include_token=True)
    data.update({
        "invitation_link": result.link,
        "method": result.method,
        "notification_sent": result.notification.sent,
        "notification_error": result.notification.error,
        "message": "Invitation created successfully",
    })
    return data
