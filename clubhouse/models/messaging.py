"""Dataclasses for in-app notifications and team chat."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Any

from ..utils import utcnow, to_iso, parse_iso


class NotificationType(Enum):
    """Kinds of in-app notification."""
    GAME_INVITE = "game_invite"
    GAME_REMINDER = "game_reminder"
    PAYMENT_REMINDER = "payment_reminder"
    CHAT_MESSAGE = "chat_message"
    EVENT_INVITE = "event_invite"
    PRACTICE_INVITE = "practice_invite"


class MentionType(Enum):
    """Whether a chat message mentions everyone or specific players."""
    ALL = "all"
    SPECIFIC = "specific"


@dataclass
class Notification:
    """A notification addressed to exactly one player."""

    id: str
    type: NotificationType
    title: str
    message: str
    to_player_id: str
    game_id: Optional[str] = None
    event_id: Optional[str] = None
    from_player_id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    read: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "toPlayerId": self.to_player_id,
            "gameId": self.game_id,
            "eventId": self.event_id,
            "fromPlayerId": self.from_player_id,
            "createdAt": to_iso(self.created_at),
            "read": self.read,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Notification':
        return cls(
            id=data["id"],
            type=NotificationType(data["type"]),
            title=data.get("title", ""),
            message=data.get("message", ""),
            to_player_id=data["toPlayerId"],
            game_id=data.get("gameId"),
            event_id=data.get("eventId"),
            from_player_id=data.get("fromPlayerId"),
            created_at=parse_iso(data.get("createdAt")) or utcnow(),
            read=data.get("read", False),
        )


@dataclass
class ChatMessage:
    """A message in the team-wide chat. Text, image and GIF are all optional."""

    id: str
    sender_id: str
    message: str = ""
    image_url: Optional[str] = None
    gif_url: Optional[str] = None
    gif_width: Optional[int] = None
    gif_height: Optional[int] = None
    mentioned_player_ids: List[str] = field(default_factory=list)
    mention_type: Optional[MentionType] = None
    created_at: datetime = field(default_factory=utcnow)

    def mentions(self, player_id: str) -> bool:
        """Whether the message mentions a player, directly or via @all."""
        if self.mention_type == MentionType.ALL:
            return True
        return player_id in self.mentioned_player_ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "senderId": self.sender_id,
            "message": self.message,
            "imageUrl": self.image_url,
            "gifUrl": self.gif_url,
            "gifWidth": self.gif_width,
            "gifHeight": self.gif_height,
            "mentionedPlayerIds": list(self.mentioned_player_ids),
            "mentionType": self.mention_type.value if self.mention_type else None,
            "createdAt": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatMessage':
        mention_type = data.get("mentionType")
        return cls(
            id=data["id"],
            sender_id=data["senderId"],
            message=data.get("message", ""),
            image_url=data.get("imageUrl"),
            gif_url=data.get("gifUrl"),
            gif_width=data.get("gifWidth"),
            gif_height=data.get("gifHeight"),
            mentioned_player_ids=list(data.get("mentionedPlayerIds") or []),
            mention_type=MentionType(mention_type) if mention_type else None,
            created_at=parse_iso(data.get("createdAt")) or utcnow(),
        )
