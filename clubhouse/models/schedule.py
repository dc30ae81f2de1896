"""
Schedule models for the Clubhouse team manager.

Games and events share the invite-release configuration: who is invited,
whether the invitation goes out now, at a scheduled time, or not at all, and
whether it has already been sent.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Any

from ..utils import to_iso, parse_iso, day_of


class InviteReleaseOption(Enum):
    """When invitations for a game or event become visible."""
    NOW = "now"
    SCHEDULED = "scheduled"
    NONE = "none"


class InviteState(Enum):
    """Derived invite lifecycle state of a game or event."""
    DRAFT = "draft"
    INVITED = "invited"
    RELEASE_SCHEDULED = "release_scheduled"
    RELEASED = "released"


class EventType(Enum):
    """Kinds of non-game team events."""
    PRACTICE = "practice"
    MEETING = "meeting"
    SOCIAL = "social"
    OTHER = "other"


def _release_option(value: Optional[str]) -> Optional[InviteReleaseOption]:
    return InviteReleaseOption(value) if value else None


@dataclass
class InviteRelease:
    """Invite-release configuration shared by games and events."""
    invited_players: List[str] = field(default_factory=list)
    invite_release_option: Optional[InviteReleaseOption] = None
    invite_release_date: Optional[datetime] = None
    invites_sent: bool = False

    @property
    def invite_state(self) -> InviteState:
        """
        Derive the lifecycle state from the release fields.

        Returns:
            RELEASED once invites are sent, RELEASE_SCHEDULED when a release
            date is configured, INVITED when players are on the list, and
            DRAFT otherwise
        """
        if self.invites_sent:
            return InviteState.RELEASED
        if (self.invite_release_option == InviteReleaseOption.SCHEDULED
                and self.invite_release_date is not None):
            return InviteState.RELEASE_SCHEDULED
        if self.invited_players:
            return InviteState.INVITED
        return InviteState.DRAFT

    def is_release_due(self, now: datetime) -> bool:
        """Whether a scheduled release should fire at the given time."""
        return (
            self.invite_state == InviteState.RELEASE_SCHEDULED
            and self.invite_release_date <= now
        )

    def _release_to_dict(self) -> Dict[str, Any]:
        return {
            "invitedPlayers": list(self.invited_players),
            "inviteReleaseOption": (
                self.invite_release_option.value if self.invite_release_option else None
            ),
            "inviteReleaseDate": to_iso(self.invite_release_date),
            "invitesSent": self.invites_sent,
        }


@dataclass
class Game(InviteRelease):
    """
    A scheduled game against an opponent.

    Attributes:
        id: Unique game id
        opponent: Opposing team name
        date: Start time of the game
        time: Display time (e.g. "7:30 PM")
        location: Venue name
        address: Venue address
        jersey_color: Jersey colour name the team wears
        notes: Free-form notes
        checked_in_players: Player ids who said they are IN
        checked_out_players: Player ids who said they are OUT
        checkout_notes: Reason per OUT player
        show_beer_duty: Whether refreshment duty is shown
        beer_duty_player_id: Player bringing refreshments
    """
    id: str = ""
    opponent: str = ""
    date: Optional[datetime] = None
    time: str = ""
    location: str = ""
    address: str = ""
    jersey_color: str = ""
    notes: Optional[str] = None
    checked_in_players: List[str] = field(default_factory=list)
    checked_out_players: List[str] = field(default_factory=list)
    checkout_notes: Dict[str, str] = field(default_factory=dict)
    photos: List[str] = field(default_factory=list)
    show_beer_duty: bool = False
    beer_duty_player_id: Optional[str] = None

    @property
    def day(self) -> str:
        """Calendar day (YYYY-MM-DD) of the game."""
        return day_of(self.date) if self.date else ""

    def check_in(self, player_id: str) -> None:
        """Mark a player IN, clearing any OUT response."""
        if player_id not in self.checked_in_players:
            self.checked_in_players.append(player_id)
        self.checked_out_players = [p for p in self.checked_out_players if p != player_id]

    def check_out(self, player_id: str, note: Optional[str] = None) -> None:
        """Mark a player OUT with an optional reason."""
        self.checked_in_players = [p for p in self.checked_in_players if p != player_id]
        if player_id not in self.checked_out_players:
            self.checked_out_players.append(player_id)
        if note:
            self.checkout_notes[player_id] = note

    def clear_response(self, player_id: str) -> None:
        """Forget a player's IN/OUT response."""
        self.checked_in_players = [p for p in self.checked_in_players if p != player_id]
        self.checked_out_players = [p for p in self.checked_out_players if p != player_id]

    def to_dict(self) -> Dict[str, Any]:
        """Convert game to dictionary for JSON serialization."""
        data = {
            "id": self.id,
            "opponent": self.opponent,
            "date": to_iso(self.date),
            "time": self.time,
            "location": self.location,
            "address": self.address,
            "jerseyColor": self.jersey_color,
            "notes": self.notes,
            "checkedInPlayers": list(self.checked_in_players),
            "checkedOutPlayers": list(self.checked_out_players),
            "checkoutNotes": dict(self.checkout_notes),
            "photos": list(self.photos),
            "showBeerDuty": self.show_beer_duty,
            "beerDutyPlayerId": self.beer_duty_player_id,
        }
        data.update(self._release_to_dict())
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Game':
        """Create game from dictionary for JSON deserialization."""
        return cls(
            id=data["id"],
            opponent=data.get("opponent", ""),
            date=parse_iso(data.get("date")),
            time=data.get("time", ""),
            location=data.get("location", ""),
            address=data.get("address", ""),
            jersey_color=data.get("jerseyColor", ""),
            notes=data.get("notes"),
            checked_in_players=list(data.get("checkedInPlayers") or []),
            checked_out_players=list(data.get("checkedOutPlayers") or []),
            checkout_notes=dict(data.get("checkoutNotes") or {}),
            photos=list(data.get("photos") or []),
            show_beer_duty=data.get("showBeerDuty", False),
            beer_duty_player_id=data.get("beerDutyPlayerId"),
            invited_players=list(data.get("invitedPlayers") or []),
            invite_release_option=_release_option(data.get("inviteReleaseOption")),
            invite_release_date=parse_iso(data.get("inviteReleaseDate")),
            invites_sent=data.get("invitesSent", False),
        )


@dataclass
class Event(InviteRelease):
    """
    A practice, meeting, or social event.

    Responses are confirm/decline rather than IN/OUT.
    """
    id: str = ""
    title: str = ""
    event_type: EventType = EventType.PRACTICE
    date: Optional[datetime] = None
    time: str = ""
    location: str = ""
    address: Optional[str] = None
    notes: Optional[str] = None
    confirmed_players: List[str] = field(default_factory=list)
    declined_players: List[str] = field(default_factory=list)
    declined_notes: Dict[str, str] = field(default_factory=dict)

    @property
    def day(self) -> str:
        """Calendar day (YYYY-MM-DD) of the event."""
        return day_of(self.date) if self.date else ""

    def confirm(self, player_id: str) -> None:
        """Confirm attendance, clearing any decline."""
        if player_id not in self.confirmed_players:
            self.confirmed_players.append(player_id)
        self.declined_players = [p for p in self.declined_players if p != player_id]

    def decline(self, player_id: str, note: Optional[str] = None) -> None:
        """Decline attendance with an optional reason."""
        self.confirmed_players = [p for p in self.confirmed_players if p != player_id]
        if player_id not in self.declined_players:
            self.declined_players.append(player_id)
        if note:
            self.declined_notes[player_id] = note

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for JSON serialization."""
        data = {
            "id": self.id,
            "title": self.title,
            "type": self.event_type.value,
            "date": to_iso(self.date),
            "time": self.time,
            "location": self.location,
            "address": self.address,
            "notes": self.notes,
            "confirmedPlayers": list(self.confirmed_players),
            "declinedPlayers": list(self.declined_players),
            "declinedNotes": dict(self.declined_notes),
        }
        data.update(self._release_to_dict())
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Event':
        """Create event from dictionary for JSON deserialization."""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            event_type=EventType(data.get("type", EventType.PRACTICE.value)),
            date=parse_iso(data.get("date")),
            time=data.get("time", ""),
            location=data.get("location", ""),
            address=data.get("address"),
            notes=data.get("notes"),
            confirmed_players=list(data.get("confirmedPlayers") or []),
            declined_players=list(data.get("declinedPlayers") or []),
            declined_notes=dict(data.get("declinedNotes") or {}),
            invited_players=list(data.get("invitedPlayers") or []),
            invite_release_option=_release_option(data.get("inviteReleaseOption")),
            invite_release_date=parse_iso(data.get("inviteReleaseDate")),
            invites_sent=data.get("invitesSent", False),
        )
