"""
Models package for the Clubhouse team manager.

This package contains the core data models used throughout the application.
"""
from .player import Player, PlayerRole, PlayerStatus, NotificationPreferences, GameLogEntry
from .schedule import Game, Event, EventType, InviteReleaseOption, InviteState
from .payment import PaymentEntry, PlayerPayment, PaymentPeriod, PaymentPeriodType, PaymentStatus, payment_status
from .messaging import Notification, NotificationType, ChatMessage, MentionType
from .team import Team, TeamSettings, TeamRecord, JerseyColor, PaymentMethod, Photo, TeamLink, map_position
from .poll import Poll, PollOption
from .app_state import AppState, PendingTeamSelection
from .results import ErrorKind, LoginResult, RegistrationResult, ReleaseResult, SyncResult

__all__ = [
    "Player", "PlayerRole", "PlayerStatus", "NotificationPreferences", "GameLogEntry",
    "Game", "Event", "EventType", "InviteReleaseOption", "InviteState",
    "PaymentEntry", "PlayerPayment", "PaymentPeriod", "PaymentPeriodType", "PaymentStatus",
    "payment_status",
    "Notification", "NotificationType", "ChatMessage", "MentionType",
    "Team", "TeamSettings", "TeamRecord", "JerseyColor", "PaymentMethod", "Photo", "TeamLink",
    "map_position", "Poll", "PollOption",
    "AppState", "PendingTeamSelection",
    "ErrorKind", "LoginResult", "RegistrationResult", "ReleaseResult", "SyncResult",
]
