"""
Team model for the Clubhouse team manager.

This module contains the Team dataclass, which owns every record belonging to
one team, plus the team settings and the helper that carries player
positions across a change of sport.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Any

from .player import Player, PlayerRole
from .schedule import Game, Event
from .payment import PaymentPeriod
from .messaging import Notification, ChatMessage
from .poll import Poll
from ..utils import utcnow, to_iso, parse_iso, DEFAULT_SPORT, DEFAULT_JERSEY_COLORS, SPORT_POSITIONS
from ..utils.constants import POSITION_GROUPS, POSITION_TO_GROUP, DIAMOND_SPORTS


def map_position(position: Optional[str], from_sport: str, to_sport: str) -> str:
    """
    Map a position from one sport to the closest position in another.

    Args:
        position: Position code in the old sport
        from_sport: Sport the position belongs to
        to_sport: Sport to map into

    Returns:
        Equivalent position code, or the new sport's first position when
        no equivalent is known

    Example:
        >>> map_position("G", "hockey", "soccer")
        'GK'
    """
    if from_sport == to_sport and position:
        return position
    if from_sport in DIAMOND_SPORTS and to_sport in DIAMOND_SPORTS:
        if position in SPORT_POSITIONS[to_sport]:
            return position
        return "CF"  # softball's extra fielder plays centre in baseball
    group = POSITION_TO_GROUP.get(from_sport, {}).get(position or "")
    if group is None:
        return SPORT_POSITIONS[to_sport][0]
    return POSITION_GROUPS[group][to_sport]


@dataclass
class JerseyColor:
    """A named jersey colour."""
    name: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JerseyColor':
        return cls(name=data["name"], color=data["color"])


@dataclass
class PaymentMethod:
    """A payment app account players can pay into."""
    app: str  # venmo, paypal, zelle, cashapp, applepay
    username: str
    display_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"app": self.app, "username": self.username, "displayName": self.display_name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PaymentMethod':
        return cls(
            app=data["app"],
            username=data.get("username", ""),
            display_name=data.get("displayName", ""),
        )


@dataclass
class TeamRecord:
    """Season win/loss record."""
    wins: int = 0
    losses: int = 0
    ties: Optional[int] = None
    ot_losses: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"wins": self.wins, "losses": self.losses, "ties": self.ties, "otLosses": self.ot_losses}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['TeamRecord']:
        if not data:
            return None
        return cls(
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            ties=data.get("ties"),
            ot_losses=data.get("otLosses"),
        )


@dataclass
class TeamSettings:
    """
    Team-wide settings.

    Attributes:
        sport: Sport the team plays
        jersey_colors: Jersey colours the team owns
        payment_methods: Where players send money
        team_logo: Opaque media reference for the logo
        record: Season record
        show_*: Feature toggles for the optional tabs and features
        allow_player_self_stats: Players may log their own game stats
        refreshment_duty_is_21_plus: Refreshment duty is a beer run
    """
    sport: str = DEFAULT_SPORT
    jersey_colors: List[JerseyColor] = field(
        default_factory=lambda: [JerseyColor.from_dict(c) for c in DEFAULT_JERSEY_COLORS]
    )
    payment_methods: List[PaymentMethod] = field(default_factory=list)
    team_logo: Optional[str] = None
    record: Optional[TeamRecord] = None
    show_team_stats: bool = True
    allow_player_self_stats: bool = False
    show_payments: bool = True
    show_team_chat: bool = True
    show_photos: bool = True
    show_refreshment_duty: bool = True
    refreshment_duty_is_21_plus: bool = True
    show_lineups: bool = True

    def __post_init__(self) -> None:
        if self.sport not in SPORT_POSITIONS:
            raise ValueError(f"Unsupported sport: {self.sport}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "sport": self.sport,
            "jerseyColors": [c.to_dict() for c in self.jersey_colors],
            "paymentMethods": [m.to_dict() for m in self.payment_methods],
            "teamLogo": self.team_logo,
            "record": self.record.to_dict() if self.record else None,
            "showTeamStats": self.show_team_stats,
            "allowPlayerSelfStats": self.allow_player_self_stats,
            "showPayments": self.show_payments,
            "showTeamChat": self.show_team_chat,
            "showPhotos": self.show_photos,
            "showRefreshmentDuty": self.show_refreshment_duty,
            "refreshmentDutyIs21Plus": self.refreshment_duty_is_21_plus,
            "showLineups": self.show_lineups,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'TeamSettings':
        """Create from dictionary for JSON deserialization."""
        if not data:
            return cls()
        defaults = cls()
        return cls(
            sport=data.get("sport", DEFAULT_SPORT),
            jersey_colors=(
                [JerseyColor.from_dict(c) for c in data["jerseyColors"]]
                if data.get("jerseyColors") else defaults.jersey_colors
            ),
            payment_methods=[PaymentMethod.from_dict(m) for m in data.get("paymentMethods") or []],
            team_logo=data.get("teamLogo"),
            record=TeamRecord.from_dict(data.get("record")),
            show_team_stats=data.get("showTeamStats", True),
            allow_player_self_stats=data.get("allowPlayerSelfStats", False),
            show_payments=data.get("showPayments", True),
            show_team_chat=data.get("showTeamChat", True),
            show_photos=data.get("showPhotos", True),
            show_refreshment_duty=data.get("showRefreshmentDuty", True),
            refreshment_duty_is_21_plus=data.get("refreshmentDutyIs21Plus", True),
            show_lineups=data.get("showLineups", True),
        )


@dataclass
class Photo:
    """A photo attached to a game. The uri is an opaque media reference."""
    id: str
    game_id: str
    uri: str
    uploaded_by: str
    uploaded_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "gameId": self.game_id,
            "uri": self.uri,
            "uploadedBy": self.uploaded_by,
            "uploadedAt": to_iso(self.uploaded_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Photo':
        return cls(
            id=data["id"],
            game_id=data.get("gameId", ""),
            uri=data.get("uri", ""),
            uploaded_by=data.get("uploadedBy", ""),
            uploaded_at=parse_iso(data.get("uploadedAt")) or utcnow(),
        )


@dataclass
class TeamLink:
    """A shared link pinned to the team, such as a league site or a sign-up sheet."""
    id: str
    title: str
    url: str
    created_by: str = ""
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "createdBy": self.created_by,
            "createdAt": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TeamLink':
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            url=data.get("url", ""),
            created_by=data.get("createdBy", ""),
            created_at=parse_iso(data.get("createdAt")) or utcnow(),
        )


@dataclass
class Team:
    """
    A team with every record that belongs to it.

    Attributes:
        id: Unique team id
        team_name: Display name
        settings: Team settings
        players: Roster
        games: Scheduled games
        events: Practices, meetings and socials
        photos: Game photos
        notifications: In-app notifications, newest first
        chat_messages: Team chat, oldest first
        chat_last_read_at: When each player last read the chat
        payment_periods: Payment periods in display order
        polls: Poll questions
        team_links: Shared links
    """
    id: str
    team_name: str
    settings: TeamSettings = field(default_factory=TeamSettings)
    players: List[Player] = field(default_factory=list)
    games: List[Game] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    photos: List[Photo] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    chat_messages: List[ChatMessage] = field(default_factory=list)
    chat_last_read_at: Dict[str, datetime] = field(default_factory=dict)
    payment_periods: List[PaymentPeriod] = field(default_factory=list)
    polls: List[Poll] = field(default_factory=list)
    team_links: List[TeamLink] = field(default_factory=list)

    def find_player(self, player_id: Optional[str]) -> Optional[Player]:
        """Find a player by id."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def find_game(self, game_id: str) -> Optional[Game]:
        """Find a game by id."""
        for game in self.games:
            if game.id == game_id:
                return game
        return None

    def find_event(self, event_id: str) -> Optional[Event]:
        """Find an event by id."""
        for event in self.events:
            if event.id == event_id:
                return event
        return None

    def find_payment_period(self, period_id: str) -> Optional[PaymentPeriod]:
        """Find a payment period by id."""
        for period in self.payment_periods:
            if period.id == period_id:
                return period
        return None

    def find_poll(self, poll_id: str) -> Optional[Poll]:
        """Find a poll by id."""
        for poll in self.polls:
            if poll.id == poll_id:
                return poll
        return None

    def find_team_link(self, link_id: str) -> Optional[TeamLink]:
        """Find a team link by id."""
        for link in self.team_links:
            if link.id == link_id:
                return link
        return None

    def find_member(self, email: Optional[str] = None, phone: Optional[str] = None) -> Optional[Player]:
        """Find the player whose email or phone matches the given identity."""
        for player in self.players:
            if player.matches_email(email) or player.matches_phone(phone):
                return player
        return None

    def has_admin(self) -> bool:
        """Whether any player on the roster is an admin."""
        return any(p.has_role(PlayerRole.ADMIN) for p in self.players)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert team to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the team
        """
        return {
            "id": self.id,
            "teamName": self.team_name,
            "teamSettings": self.settings.to_dict(),
            "players": [p.to_dict() for p in self.players],
            "games": [g.to_dict() for g in self.games],
            "events": [e.to_dict() for e in self.events],
            "photos": [p.to_dict() for p in self.photos],
            "notifications": [n.to_dict() for n in self.notifications],
            "chatMessages": [m.to_dict() for m in self.chat_messages],
            "chatLastReadAt": {k: to_iso(v) for k, v in self.chat_last_read_at.items()},
            "paymentPeriods": [p.to_dict() for p in self.payment_periods],
            "polls": [p.to_dict() for p in self.polls],
            "teamLinks": [link.to_dict() for link in self.team_links],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Team':
        """
        Create team from dictionary for JSON deserialization.

        Args:
            data: Dictionary representation of team

        Returns:
            Team instance
        """
        return cls(
            id=data["id"],
            team_name=data.get("teamName", ""),
            settings=TeamSettings.from_dict(data.get("teamSettings")),
            players=[Player.from_dict(p) for p in data.get("players") or []],
            games=[Game.from_dict(g) for g in data.get("games") or []],
            events=[Event.from_dict(e) for e in data.get("events") or []],
            photos=[Photo.from_dict(p) for p in data.get("photos") or []],
            notifications=[Notification.from_dict(n) for n in data.get("notifications") or []],
            chat_messages=[ChatMessage.from_dict(m) for m in data.get("chatMessages") or []],
            chat_last_read_at={
                k: parse_iso(v) for k, v in (data.get("chatLastReadAt") or {}).items() if v
            },
            payment_periods=[PaymentPeriod.from_dict(p) for p in data.get("paymentPeriods") or []],
            polls=[Poll.from_dict(p) for p in data.get("polls") or []],
            team_links=[TeamLink.from_dict(link) for link in data.get("teamLinks") or []],
        )
