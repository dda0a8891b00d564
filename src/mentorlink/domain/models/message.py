"""
Session Message Domain Model

One unit of conversation content inside a mentor session.

PRIVACY: Content is flagged encrypted and is never deleted; it forms
the audit trail for escalations. Never log message content.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from mentorlink.domain.enums import MessageType, SenderType
from mentorlink.domain.models.base import iso, new_id, utc_now


@dataclass
class Attachment:
    type: str
    url: str
    name: str
    size: Optional[int] = None

    def to_dict(self) -> dict:
        data = {"type": self.type, "url": self.url, "name": self.name}
        if self.size is not None:
            data["size"] = self.size
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Attachment":
        return cls(
            type=data["type"],
            url=data["url"],
            name=data["name"],
            size=data.get("size"),
        )


@dataclass
class Message:
    """
    Persisted message.

    Attributes:
        session_id: Owning session
        sender_id: Profile id resolved by the access gate
        sender_type: Role resolved by the access gate (never client input)
        read_at: Set once, by the other participant's fetch
    """

    session_id: str
    sender_id: str
    sender_type: SenderType
    id: str = field(default_factory=new_id)
    message_type: MessageType = MessageType.TEXT
    content: Optional[str] = None
    attachments: list[Attachment] = field(default_factory=list)
    is_encrypted: bool = True
    read_at: Optional[datetime] = None
    sent_at: datetime = field(default_factory=utc_now)

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def to_dict(self, sender_name: Optional[str] = None) -> dict:
        data = {
            "id": self.id,
            "sessionId": self.session_id,
            "senderId": self.sender_id,
            "senderType": self.sender_type.value,
            "messageType": self.message_type.value,
            "content": self.content,
            "attachments": [a.to_dict() for a in self.attachments],
            "isEncrypted": self.is_encrypted,
            "readAt": iso(self.read_at),
            "sentAt": iso(self.sent_at),
        }
        if sender_name is not None:
            data["senderName"] = sender_name
        return data
