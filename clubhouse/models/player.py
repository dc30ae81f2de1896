"""
Player model for the Clubhouse team manager.

This module contains the Player dataclass which represents a team member,
their contact identifiers and credential, their roles on the team, and their
sport statistics and game log history.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Any
from enum import Enum

from ..utils import (
    to_iso, parse_iso, parse_day, digits_only, normalize_email,
    REASON_UNAVAILABLE, REASON_INJURED, REASON_SUSPENDED,
)


class PlayerRole(Enum):
    """Team roles. Roles coexist freely; no role means an ordinary member."""
    ADMIN = "admin"
    CAPTAIN = "captain"
    COACH = "coach"
    PARENT = "parent"


class PlayerStatus(Enum):
    """Roster status, independent of roles."""
    ACTIVE = "active"
    RESERVE = "reserve"


@dataclass
class NotificationPreferences:
    """Which notifications a player wants, plus their delivery token."""
    game_invites: bool = True
    game_reminder_day_before: bool = True
    game_reminder_hours_before: bool = True
    chat_messages: bool = True
    chat_mentions: bool = True
    payment_reminders: bool = True
    push_token: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "gameInvites": self.game_invites,
            "gameReminderDayBefore": self.game_reminder_day_before,
            "gameReminderHoursBefore": self.game_reminder_hours_before,
            "chatMessages": self.chat_messages,
            "chatMentions": self.chat_mentions,
            "paymentReminders": self.payment_reminders,
            "pushToken": self.push_token,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'NotificationPreferences':
        """Create from dictionary for JSON deserialization."""
        if not data:
            return cls()
        return cls(
            game_invites=data.get("gameInvites", True),
            game_reminder_day_before=data.get("gameReminderDayBefore", True),
            game_reminder_hours_before=data.get("gameReminderHoursBefore", True),
            chat_messages=data.get("chatMessages", True),
            chat_mentions=data.get("chatMentions", True),
            payment_reminders=data.get("paymentReminders", True),
            push_token=data.get("pushToken"),
        )


@dataclass
class GameLogEntry:
    """Statistics recorded for a single game. Logs are append-only history."""
    id: str
    date: datetime
    stat_type: str  # skater, goalie, batter, pitcher, lacrosse, lacrosse_goalie
    stats: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "date": to_iso(self.date),
            "statType": self.stat_type,
            "stats": dict(self.stats),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameLogEntry':
        """Create from dictionary for JSON deserialization."""
        return cls(
            id=data["id"],
            date=parse_iso(data["date"]),
            stat_type=data.get("statType", "skater"),
            stats=dict(data.get("stats") or {}),
        )


@dataclass
class Player:
    """
    Represents a team member.

    A player with no credential has been invited by an admin but has not
    registered yet. Registration stores a salted hash of the secret; the
    secret itself is never kept.

    Attributes:
        id: Unique player id
        first_name: Given name
        last_name: Family name
        email: Email address (login identifier)
        phone: Phone number (login identifier)
        credential_hash: Salted one-way hash of the login secret
        security_question: Question used for credential recovery
        security_answer_hash: Hash of the lower-cased answer
        number: Jersey number
        positions: Positions the player can play, primary first
        avatar: Opaque media reference
        roles: Set of team roles
        status: active or reserve
        is_injured: Player is injured
        is_suspended: Player is suspended
        status_end_date: Last day of the injury or suspension
        unavailable_dates: Days the player cannot attend
        notification_preferences: Notification settings and delivery token
        stats: Season statistics for the team's sport
        game_logs: Per-game statistics history
    """
    id: str
    first_name: str
    last_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    credential_hash: Optional[str] = None
    security_question: Optional[str] = None
    security_answer_hash: Optional[str] = None
    number: str = ""
    positions: List[str] = field(default_factory=list)
    avatar: Optional[str] = None
    roles: List[PlayerRole] = field(default_factory=list)
    status: PlayerStatus = PlayerStatus.ACTIVE
    is_injured: bool = False
    is_suspended: bool = False
    status_end_date: Optional[date] = None
    unavailable_dates: List[str] = field(default_factory=list)
    notification_preferences: NotificationPreferences = field(default_factory=NotificationPreferences)
    stats: Dict[str, float] = field(default_factory=dict)
    game_logs: List[GameLogEntry] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        """First and last name joined with a space."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        """Upper-case initials used when there is no avatar."""
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()

    @property
    def primary_position(self) -> Optional[str]:
        """First listed position, if any."""
        return self.positions[0] if self.positions else None

    @property
    def is_registered(self) -> bool:
        """Whether the player has set a credential."""
        return bool(self.credential_hash)

    def has_role(self, role: PlayerRole) -> bool:
        """Check whether the player holds a role."""
        return role in self.roles

    def add_role(self, role: PlayerRole) -> None:
        """Grant a role (no-op if already held)."""
        if role not in self.roles:
            self.roles.append(role)

    def remove_role(self, role: PlayerRole) -> None:
        """Revoke a role (no-op if not held)."""
        self.roles = [r for r in self.roles if r != role]

    def matches_email(self, email: Optional[str]) -> bool:
        """Case-insensitive email comparison; empty values never match."""
        wanted = normalize_email(email)
        return bool(wanted) and normalize_email(self.email) == wanted

    def matches_phone(self, phone: Optional[str]) -> bool:
        """Digits-only phone comparison; empty values never match."""
        wanted = digits_only(phone)
        return bool(wanted) and digits_only(self.phone) == wanted

    def unavailable_reason(self, day: str) -> Optional[str]:
        """
        Explain why the player cannot play on a given day.

        Injury or suspension applies on every day up to and including the
        status end date; the availability calendar applies to listed days.

        Args:
            day: Day string in YYYY-MM-DD form

        Returns:
            "Injured", "Suspended", "Unavailable", or None when available
        """
        if (self.is_injured or self.is_suspended) and self.status_end_date:
            if parse_day(day) <= self.status_end_date:
                return REASON_INJURED if self.is_injured else REASON_SUSPENDED
        if day[:10] in self.unavailable_dates:
            return REASON_UNAVAILABLE
        return None

    def is_injured_on(self, day: str) -> bool:
        """Whether an injury covers the given YYYY-MM-DD day."""
        return bool(
            self.is_injured and self.status_end_date
            and parse_day(day) <= self.status_end_date
        )

    def add_game_log(self, entry: GameLogEntry) -> None:
        """Append a game log entry."""
        self.game_logs.append(entry)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert player to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the player
        """
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "credentialHash": self.credential_hash,
            "securityQuestion": self.security_question,
            "securityAnswerHash": self.security_answer_hash,
            "number": self.number,
            "position": self.primary_position,
            "positions": list(self.positions),
            "avatar": self.avatar,
            "roles": [r.value for r in self.roles],
            "status": self.status.value,
            "isInjured": self.is_injured,
            "isSuspended": self.is_suspended,
            "statusEndDate": self.status_end_date.isoformat() if self.status_end_date else None,
            "unavailableDates": list(self.unavailable_dates),
            "notificationPreferences": self.notification_preferences.to_dict(),
            "stats": dict(self.stats),
            "gameLogs": [g.to_dict() for g in self.game_logs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        """
        Create player from dictionary for JSON deserialization.

        Older documents carry a single "position" instead of "positions";
        unknown role strings are dropped.

        Args:
            data: Dictionary representation of player

        Returns:
            Player instance
        """
        positions = list(data.get("positions") or [])
        if not positions and data.get("position"):
            positions = [data["position"]]

        roles = []
        for value in data.get("roles") or []:
            try:
                roles.append(PlayerRole(value))
            except ValueError:
                pass  # Role no longer supported, skip

        status_end_date = None
        if data.get("statusEndDate"):
            try:
                status_end_date = parse_day(data["statusEndDate"])
            except ValueError:
                pass  # Invalid date format, skip

        game_logs = []
        for log_data in data.get("gameLogs") or []:
            try:
                game_logs.append(GameLogEntry.from_dict(log_data))
            except (ValueError, KeyError, TypeError):
                pass  # Invalid log entry, skip

        return cls(
            id=data["id"],
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email"),
            phone=data.get("phone"),
            credential_hash=data.get("credentialHash"),
            security_question=data.get("securityQuestion"),
            security_answer_hash=data.get("securityAnswerHash"),
            number=data.get("number", ""),
            positions=positions,
            avatar=data.get("avatar"),
            roles=roles,
            status=PlayerStatus(data.get("status", PlayerStatus.ACTIVE.value)),
            is_injured=data.get("isInjured", False),
            is_suspended=data.get("isSuspended", False),
            status_end_date=status_end_date,
            unavailable_dates=list(data.get("unavailableDates") or []),
            notification_preferences=NotificationPreferences.from_dict(
                data.get("notificationPreferences")
            ),
            stats=dict(data.get("stats") or {}),
            game_logs=game_logs,
        )
