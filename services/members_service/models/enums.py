"""Enums for the Members Service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class InvitationStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"
    OPENED = "opened"
    ACCEPTED = "accepted"
    EXPIRED = "expired"


# Invitations in these states still block a new invitation to the same email
LIVE_INVITATION_STATUSES = (
    InvitationStatus.PENDING,
    InvitationStatus.SENT,
    InvitationStatus.OPENED,
)
