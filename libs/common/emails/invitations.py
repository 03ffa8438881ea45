"""Alumni invitation email content."""

from typing import Optional


def build_invitation_email(
    *,
    name: str,
    invite_link: str,
    inviter_name: Optional[str] = None,
    college_name: Optional[str] = None,
    expiry_days: int = 7,
) -> tuple[str, str, str]:
    """Return ``(subject, text_body, html_body)`` for an invitation."""
    network = college_name or "our alumni network"
    invited_by = f"{inviter_name} has invited you" if inviter_name else "You have been invited"

    subject = f"You're invited to join {network}"
    text_body = (
        f"Hi {name},\n\n"
        f"{invited_by} to join {network}.\n\n"
        f"Complete your registration here: {invite_link}\n\n"
        f"This invitation expires in {expiry_days} days."
    )
    html_body = (
        f"<p>Hi {name},</p>"
        f"<p>{invited_by} to join <strong>{network}</strong>.</p>"
        f'<p><a href="{invite_link}">Accept your invitation</a></p>'
        f"<p>This invitation expires in {expiry_days} days.</p>"
    )
    return subject, text_body, html_body
