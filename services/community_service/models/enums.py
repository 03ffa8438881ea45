"""Enums for the Community Service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class SharePlatform(str, enum.Enum):
    INTERNAL = "internal"
    FACEBOOK = "facebook"
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    COPY_LINK = "copy_link"
    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"
