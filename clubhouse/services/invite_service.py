"""
Invite lifecycle engine.

Games and events move DRAFT -> INVITED -> RELEASE_SCHEDULED -> RELEASED.
Releasing sets invites_sent and emits one notification per invited player.
Scheduled releases fire only when a caller runs sweep(); the invites_sent
guard makes repeated sweeps harmless.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Union

from ..models import (
    Game, Event, EventType, InviteReleaseOption, InviteState,
    Notification, NotificationType, ErrorKind, ReleaseResult,
)
from ..utils import utcnow, fmt_short_date
from .team_store import TeamStore

logger = logging.getLogger(__name__)

GAME = "game"
EVENT = "event"

Schedulable = Union[Game, Event]


def _notification_time_tag(now: datetime) -> int:
    return int(now.timestamp() * 1000)


class InviteLifecycleService:
    """
    Drives invitations and responses for the active team's games and events.

    Attributes:
        store: Entity store holding the active team
    """

    def __init__(self, store: TeamStore):
        self.store = store

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def _find(self, kind: str, item_id: str) -> Optional[Schedulable]:
        team = self.store.active_team
        if team is None:
            return None
        if kind == GAME:
            return team.find_game(item_id)
        if kind == EVENT:
            return team.find_event(item_id)
        raise ValueError(f"Unknown schedule kind: {kind}")

    @staticmethod
    def invite_state(item: Schedulable) -> InviteState:
        """Current lifecycle state of a game or event."""
        return item.invite_state

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def add_invitees(self, kind: str, item_id: str, player_ids: Iterable[str]) -> List[Notification]:
        """
        Add players to the invite list of a game or event.

        The list only grows. If the invitations were already released, only
        the newly added players are notified.

        Args:
            kind: "game" or "event"
            item_id: Game or event id
            player_ids: Players to invite

        Returns:
            Notifications emitted for late invitees (usually empty)
        """
        item = self._find(kind, item_id)
        if item is None:
            return []
        added = [pid for pid in player_ids if pid not in item.invited_players]
        item.invited_players.extend(added)
        emitted: List[Notification] = []
        if added and item.invites_sent:
            emitted = self._notify(item, added, utcnow())
        if added:
            self.store.commit()
        return emitted

    def set_release_option(
        self,
        kind: str,
        item_id: str,
        option: InviteReleaseOption,
        release_date: Optional[datetime] = None,
    ) -> ReleaseResult:
        """
        Choose when invitations for a game or event go out.

        NOW releases immediately and notifies every invited player.
        SCHEDULED stores the release date for a later sweep. NONE keeps the
        invitations unreleased.

        Args:
            kind: "game" or "event"
            item_id: Game or event id
            option: Release option
            release_date: Required for SCHEDULED

        Returns:
            ReleaseResult with the notifications emitted
        """
        item = self._find(kind, item_id)
        if item is None:
            return ReleaseResult(success=False, error=ErrorKind.NOT_FOUND)
        if item.invites_sent:
            return ReleaseResult(success=False, error=ErrorKind.ALREADY_RELEASED)
        if option == InviteReleaseOption.SCHEDULED and release_date is None:
            return ReleaseResult(success=False, error=ErrorKind.INVALID_INPUT)

        item.invite_release_option = option
        item.invite_release_date = release_date if option == InviteReleaseOption.SCHEDULED else None

        emitted: List[Notification] = []
        if option == InviteReleaseOption.NOW:
            emitted = self._release(item, utcnow())
        self.store.commit()
        return ReleaseResult(success=True, notifications=emitted)

    def sweep(self, now: Optional[datetime] = None) -> List[Schedulable]:
        """
        Release every scheduled game and event whose release time has passed.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            Games and events released by this call
        """
        team = self.store.active_team
        if team is None:
            return []
        now = now or utcnow()
        due = [item for item in [*team.games, *team.events] if item.is_release_due(now)]
        for item in due:
            self._release(item, now)
        if due:
            logger.info("Released invites for %d scheduled item(s)", len(due))
            self.store.commit()
        return due

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------
    def _respond(self, kind: str, item_id: str, action) -> bool:
        item = self._find(kind, item_id)
        if item is None:
            return False
        action(item)
        self.store.commit()
        return True

    def check_in(self, game_id: str, player_id: str) -> bool:
        """Mark a player IN for a game."""
        return self._respond(GAME, game_id, lambda g: g.check_in(player_id))

    def check_out(self, game_id: str, player_id: str, note: Optional[str] = None) -> bool:
        """Mark a player OUT for a game."""
        return self._respond(GAME, game_id, lambda g: g.check_out(player_id, note))

    def clear_response(self, game_id: str, player_id: str) -> bool:
        """Clear a player's IN/OUT response for a game."""
        return self._respond(GAME, game_id, lambda g: g.clear_response(player_id))

    def confirm(self, event_id: str, player_id: str) -> bool:
        """Confirm a player's attendance at an event."""
        return self._respond(EVENT, event_id, lambda e: e.confirm(player_id))

    def decline(self, event_id: str, player_id: str, note: Optional[str] = None) -> bool:
        """Decline an event for a player."""
        return self._respond(EVENT, event_id, lambda e: e.decline(player_id, note))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _release(self, item: Schedulable, now: datetime) -> List[Notification]:
        item.invites_sent = True
        return self._notify(item, item.invited_players, now)

    def _notify(self, item: Schedulable, player_ids: Iterable[str], now: datetime) -> List[Notification]:
        team = self.store.active_team
        tag = _notification_time_tag(now)
        notifications = [self._build_notification(item, pid, now, tag) for pid in player_ids]
        # Newest first
        for notification in notifications:
            team.notifications.insert(0, notification)
        return notifications

    @staticmethod
    def _build_notification(item: Schedulable, player_id: str, now: datetime, tag: int) -> Notification:
        when = fmt_short_date(item.date) if item.date else "TBD"
        if isinstance(item, Game):
            return Notification(
                id=f"game-invite-{item.id}-{player_id}-{tag}",
                type=NotificationType.GAME_INVITE,
                title="New Game Added!",
                message=f"You've been invited to play vs {item.opponent} on {when} at {item.time}",
                to_player_id=player_id,
                game_id=item.id,
                created_at=now,
            )
        is_practice = item.event_type == EventType.PRACTICE
        return Notification(
            id=f"event-invite-{item.id}-{player_id}-{tag}",
            type=NotificationType.PRACTICE_INVITE if is_practice else NotificationType.EVENT_INVITE,
            title="New Practice Scheduled!" if is_practice else "New Event Added!",
            message=f'You\'ve been invited to "{item.title}" on {when} at {item.time}',
            to_player_id=player_id,
            event_id=item.id,
            created_at=now,
        )
