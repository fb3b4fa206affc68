"""Pydantic models for Slack-style webhook messages.

Field names follow Slack's incoming-webhook JSON. Empty values are left out
of the payload.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

# Attachment colors
GOOD = "#00FF00"
WARNING = "#FFBB00"
DANGER = "#FF0000"


class _PayloadModel(BaseModel):
    model_config = {"extra": "forbid", "validate_assignment": True}

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON-ready dict, omitting unset and empty fields."""
        return self.model_dump(exclude_defaults=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_defaults=True)


class AttachmentField(_PayloadModel):
    """A title/value pair rendered inside an attachment."""

    title: str = ""
    value: str = ""
    short: bool = False


class Attachment(_PayloadModel):
    """Secondary block of content attached to a message."""

    fallback: str = ""
    color: str = ""
    pretext: str = ""
    author_name: str = ""
    author_link: str = ""
    author_icon: str = ""
    title: str = ""
    title_link: str = ""
    text: str = ""
    fields: List[AttachmentField] = []
    image_url: str = ""
    thumb_url: str = ""
    footer: str = ""
    footer_icon: str = ""
    ts: Optional[int] = None


class Message(_PayloadModel):
    """Top-level webhook message."""

    text: str = ""
    username: str = ""
    icon_url: str = ""
    icon_emoji: str = ""
    channel: str = ""
    attachments: List[Attachment] = []

    def add_attachment(self, attachment: Attachment) -> "Message":
        """Append one attachment and return the message for chaining."""
        self.attachments = [*self.attachments, attachment]
        return self

    def add_attachments(self, attachments: List[Attachment]) -> "Message":
        """Append several attachments and return the message for chaining."""
        self.attachments = [*self.attachments, *attachments]
        return self
