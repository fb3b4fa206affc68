"""Pydantic models for samhook messages."""

from samhook.models.message import (
    DANGER,
    GOOD,
    WARNING,
    Attachment,
    AttachmentField,
    Message,
)

__all__ = [
    "Message",
    "Attachment",
    "AttachmentField",
    "GOOD",
    "WARNING",
    "DANGER",
]
