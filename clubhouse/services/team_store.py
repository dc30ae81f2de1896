"""
Entity store for the Clubhouse team manager.

TeamStore owns the session's AppState and exposes the create/update/remove
operations for every record of the active team. It is constructed
explicitly and handed to the services that need it.

Operations that name a record which does not exist, or that run while no
team is active, do nothing and return False. Every successful mutation is
followed by a commit, which notifies the registered listeners (normally the
persistence write-back).
"""
import logging
from dataclasses import fields
from datetime import date, datetime
from enum import Enum
from typing import Callable, Iterable, List, Optional, Union, get_args, get_origin, get_type_hints

from ..models import (
    AppState, Team, Player, PlayerRole, Game, Event, Photo, GameLogEntry, Poll, TeamLink, map_position,
)
from ..utils import REASON_UNAVAILABLE, REASON_INJURED, REASON_SUSPENDED, parse_iso, parse_day

logger = logging.getLogger(__name__)

CommitListener = Callable[[AppState], None]

# Player fields whose change can make the player unavailable for scheduled dates
_AVAILABILITY_FIELDS = {"is_injured", "is_suspended", "status_end_date"}

# Owned by the invite lifecycle; invites_sent must only ever go false -> true
RELEASE_FIELDS = frozenset({"invites_sent", "invite_release_option", "invite_release_date"})


def _field_type(record, name: str):
    """Declared type of a dataclass field with Optional[...] unwrapped."""
    hint = get_type_hints(type(record)).get(name)
    if get_origin(hint) is Union:
        args = [a for a in get_args(hint) if a is not type(None)]
        hint = args[0] if len(args) == 1 else None
    return hint if isinstance(hint, type) else None


def _coerce(record, name: str, value):
    """Convert JSON-style values (enum values, ISO strings) to the field's type."""
    target = _field_type(record, name)
    if value is None or target is None or isinstance(value, target):
        return value
    if issubclass(target, Enum):
        return target(value)
    if target is datetime and isinstance(value, str):
        return parse_iso(value)
    if target is date and isinstance(value, str):
        return parse_day(value)
    return value


def apply_changes(record, changes: dict, protected: Iterable[str] = ()) -> None:
    """
    Set dataclass attributes from keyword changes.

    Values are converted to the declared field types and the record must
    still serialize afterwards; otherwise the record is left as it was.

    Args:
        record: Dataclass instance with a to_dict() method
        changes: Attribute names and new values
        protected: Attribute names that may not be set this way

    Raises:
        ValueError: If a name is unknown or protected, or a value is invalid
    """
    name = type(record).__name__
    unknown = set(changes) - {f.name for f in fields(record)}
    if unknown:
        raise ValueError(f"Unknown {name} fields: {', '.join(sorted(unknown))}")
    locked = set(changes) & set(protected)
    if locked:
        raise ValueError(f"{name} fields cannot be set directly: {', '.join(sorted(locked))}")

    previous = {field: getattr(record, field) for field in changes}
    try:
        for field, value in changes.items():
            setattr(record, field, _coerce(record, field, value))
        record.to_dict()
        if hasattr(record, "__post_init__"):
            record.__post_init__()
    except (AttributeError, TypeError, ValueError) as e:
        for field, value in previous.items():
            setattr(record, field, value)
        raise ValueError(f"Invalid {name} update: {e}") from e


class TeamStore:
    """
    In-memory store of every team plus the session that is using them.

    Attributes:
        state: The AppState being managed
    """

    def __init__(self, state: Optional[AppState] = None):
        """
        Initialize TeamStore.

        Args:
            state: Existing state to manage (a fresh AppState by default)
        """
        self.state = state or AppState()
        self._listeners: List[CommitListener] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def add_commit_listener(self, listener: CommitListener) -> None:
        """Register a callback run after every successful mutation."""
        self._listeners.append(listener)

    def commit(self) -> None:
        """Notify listeners that the state changed."""
        for listener in self._listeners:
            listener(self.state)

    def replace_state(self, state: AppState) -> None:
        """Swap in a whole new state, e.g. one loaded from disk."""
        self.state = state
        self.commit()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def active_team(self) -> Optional[Team]:
        """The team currently loaded, if any."""
        return self.state.active_team

    @property
    def current_player(self) -> Optional[Player]:
        """The signed-in player, if any."""
        return self.state.current_player

    def _require_team(self, operation: str) -> Optional[Team]:
        team = self.active_team
        if team is None:
            logger.debug("%s ignored: no active team", operation)
        return team

    def find_player(self, player_id: str) -> Optional[Player]:
        """Find a player of the active team by id."""
        team = self.active_team
        return team.find_player(player_id) if team else None

    def is_admin(self) -> bool:
        """Whether the signed-in player is an admin."""
        player = self.current_player
        return bool(player and player.has_role(PlayerRole.ADMIN))

    def can_manage_team(self) -> bool:
        """Whether the signed-in player is an admin or a captain."""
        player = self.current_player
        return bool(player and (
            player.has_role(PlayerRole.ADMIN) or player.has_role(PlayerRole.CAPTAIN)
        ))

    # ------------------------------------------------------------------
    # Team
    # ------------------------------------------------------------------
    def set_team_name(self, name: str) -> bool:
        """Rename the active team."""
        team = self._require_team("set_team_name")
        if team is None:
            return False
        team.team_name = name
        self.commit()
        return True

    def update_team_settings(self, **changes) -> bool:
        """
        Update settings of the active team.

        Changing the sport moves every player to the equivalent position in
        the new sport and clears their season statistics.

        Args:
            **changes: TeamSettings attributes to set

        Returns:
            True if the settings were updated

        Raises:
            ValueError: If an unknown setting or sport is given
        """
        team = self._require_team("update_team_settings")
        if team is None:
            return False
        old_sport = team.settings.sport
        new_sport = changes.get("sport", old_sport)
        apply_changes(team.settings, changes)

        if new_sport != old_sport:
            for player in team.players:
                player.positions = [map_position(player.primary_position, old_sport, new_sport)]
                player.stats = {}
            logger.info("Team %s switched sport %s -> %s", team.id, old_sport, new_sport)

        self.commit()
        return True

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------
    def add_player(self, player: Player) -> bool:
        """Add a player to the active team's roster."""
        team = self._require_team("add_player")
        if team is None:
            return False
        team.players.append(player)
        self.commit()
        return True

    def update_player(self, player_id: str, **changes) -> bool:
        """
        Update a player of the active team.

        When the injury or suspension fields change, the player's responses
        to upcoming games and events are re-evaluated.

        Args:
            player_id: Player to update
            **changes: Player attributes to set

        Returns:
            True if the player was found and updated

        Raises:
            ValueError: If an unknown attribute is given
        """
        team = self._require_team("update_player")
        player = team.find_player(player_id) if team else None
        if player is None:
            return False
        apply_changes(player, changes)
        if _AVAILABILITY_FIELDS & set(changes):
            self._reapply_player_status(team, player)
        self.commit()
        return True

    def remove_player(self, player_id: str) -> bool:
        """Remove a player from the active team's roster."""
        team = self._require_team("remove_player")
        if team is None or team.find_player(player_id) is None:
            return False
        team.players = [p for p in team.players if p.id != player_id]
        self.commit()
        return True

    def add_role(self, player_id: str, role: PlayerRole) -> bool:
        """Grant a role to a player of the active team."""
        player = self.find_player(player_id)
        if player is None:
            return False
        player.add_role(role)
        self.commit()
        return True

    def remove_role(self, player_id: str, role: PlayerRole) -> bool:
        """Revoke a role from a player of the active team."""
        player = self.find_player(player_id)
        if player is None:
            return False
        player.remove_role(role)
        self.commit()
        return True

    def add_unavailable_date(self, player_id: str, day: str) -> bool:
        """
        Mark a player unavailable on a day.

        The player is marked OUT for games and declined for events on that
        day that they were invited to.

        Args:
            player_id: Player who is unavailable
            day: Day in YYYY-MM-DD form
        """
        team = self._require_team("add_unavailable_date")
        player = team.find_player(player_id) if team else None
        if player is None:
            return False
        if day not in player.unavailable_dates:
            player.unavailable_dates.append(day)

        for game in team.games:
            if game.day == day and player_id in game.invited_players:
                game.check_out(player_id, REASON_UNAVAILABLE)
        for event in team.events:
            if event.day == day and player_id in event.invited_players:
                event.decline(player_id, REASON_UNAVAILABLE)

        self.commit()
        return True

    def remove_unavailable_date(self, player_id: str, day: str) -> bool:
        """Clear a day from a player's availability calendar."""
        player = self.find_player(player_id)
        if player is None:
            return False
        player.unavailable_dates = [d for d in player.unavailable_dates if d != day]
        self.commit()
        return True

    def add_game_log(self, player_id: str, entry: GameLogEntry) -> bool:
        """Append a game log entry to a player's history."""
        player = self.find_player(player_id)
        if player is None:
            return False
        player.add_game_log(entry)
        self.commit()
        return True

    def remove_game_log(self, player_id: str, entry_id: str) -> bool:
        """Delete a game log entry."""
        player = self.find_player(player_id)
        if player is None:
            return False
        player.game_logs = [g for g in player.game_logs if g.id != entry_id]
        self.commit()
        return True

    # ------------------------------------------------------------------
    # Games and events
    # ------------------------------------------------------------------
    def add_game(self, game: Game) -> bool:
        """
        Add a game to the active team's schedule.

        Invited players who are unavailable, injured or suspended on the
        game day are marked OUT with the reason.
        """
        team = self._require_team("add_game")
        if team is None:
            return False
        for player in team.players:
            if player.id not in game.invited_players:
                continue
            reason = player.unavailable_reason(game.day) if game.date else None
            if reason and player.id not in game.checked_out_players:
                game.checked_out_players.append(player.id)
            if reason:
                game.checkout_notes.setdefault(player.id, reason)
        team.games.append(game)
        self.commit()
        return True

    def update_game(self, game_id: str, **changes) -> bool:
        """Update fields of a game."""
        team = self._require_team("update_game")
        game = team.find_game(game_id) if team else None
        if game is None:
            return False
        apply_changes(game, changes, protected=RELEASE_FIELDS)
        self.commit()
        return True

    def remove_game(self, game_id: str) -> bool:
        """Delete a game."""
        team = self._require_team("remove_game")
        if team is None or team.find_game(game_id) is None:
            return False
        team.games = [g for g in team.games if g.id != game_id]
        self.commit()
        return True

    def add_event(self, event: Event) -> bool:
        """
        Add an event to the active team's schedule.

        Invited players who are unavailable or injured on the event day are
        marked declined. Suspensions only apply to games.
        """
        team = self._require_team("add_event")
        if team is None:
            return False
        day = event.day
        for player in team.players:
            if player.id not in event.invited_players or not day:
                continue
            if day in player.unavailable_dates:
                reason = REASON_UNAVAILABLE
            elif player.is_injured_on(day):
                reason = REASON_INJURED
            else:
                continue
            if player.id not in event.declined_players:
                event.declined_players.append(player.id)
            event.declined_notes.setdefault(player.id, reason)
        team.events.append(event)
        self.commit()
        return True

    def update_event(self, event_id: str, **changes) -> bool:
        """Update fields of an event."""
        team = self._require_team("update_event")
        event = team.find_event(event_id) if team else None
        if event is None:
            return False
        apply_changes(event, changes, protected=RELEASE_FIELDS)
        self.commit()
        return True

    def remove_event(self, event_id: str) -> bool:
        """Delete an event."""
        team = self._require_team("remove_event")
        if team is None or team.find_event(event_id) is None:
            return False
        team.events = [e for e in team.events if e.id != event_id]
        self.commit()
        return True

    # ------------------------------------------------------------------
    # Photos
    # ------------------------------------------------------------------
    def add_photo(self, photo: Photo) -> bool:
        """Attach a photo to the active team."""
        team = self._require_team("add_photo")
        if team is None:
            return False
        team.photos.append(photo)
        self.commit()
        return True

    def remove_photo(self, photo_id: str) -> bool:
        """Delete a photo."""
        team = self._require_team("remove_photo")
        if team is None or not any(p.id == photo_id for p in team.photos):
            return False
        team.photos = [p for p in team.photos if p.id != photo_id]
        self.commit()
        return True

    # ------------------------------------------------------------------
    # Polls and team links
    # ------------------------------------------------------------------
    def add_poll(self, poll: Poll) -> bool:
        """Add a poll question to the active team."""
        team = self._require_team("add_poll")
        if team is None:
            return False
        team.polls.append(poll)
        self.commit()
        return True

    def update_poll(self, poll_id: str, **changes) -> bool:
        """Update fields of a poll. Votes change through vote_poll and unvote_poll."""
        team = self._require_team("update_poll")
        poll = team.find_poll(poll_id) if team else None
        if poll is None:
            return False
        apply_changes(poll, changes)
        self.commit()
        return True

    def remove_poll(self, poll_id: str) -> bool:
        """Delete a poll."""
        team = self._require_team("remove_poll")
        if team is None or team.find_poll(poll_id) is None:
            return False
        team.polls = [p for p in team.polls if p.id != poll_id]
        self.commit()
        return True

    def vote_poll(self, poll_id: str, option_id: str, player_id: str) -> bool:
        """
        Record a vote on a poll.

        Returns:
            False if the poll or option is unknown, the poll is closed or
            the player is not on the roster
        """
        team = self._require_team("vote_poll")
        poll = team.find_poll(poll_id) if team else None
        if poll is None or not poll.is_active or team.find_player(player_id) is None:
            return False
        if not poll.vote(option_id, player_id):
            return False
        self.commit()
        return True

    def unvote_poll(self, poll_id: str, option_id: str, player_id: str) -> bool:
        """Withdraw a vote from a poll option."""
        team = self._require_team("unvote_poll")
        poll = team.find_poll(poll_id) if team else None
        if poll is None or not poll.unvote(option_id, player_id):
            return False
        self.commit()
        return True

    def add_team_link(self, link: TeamLink) -> bool:
        """Pin a link to the active team."""
        team = self._require_team("add_team_link")
        if team is None:
            return False
        team.team_links.append(link)
        self.commit()
        return True

    def update_team_link(self, link_id: str, **changes) -> bool:
        """Update the title or url of a team link."""
        team = self._require_team("update_team_link")
        link = team.find_team_link(link_id) if team else None
        if link is None:
            return False
        apply_changes(link, changes)
        self.commit()
        return True

    def remove_team_link(self, link_id: str) -> bool:
        """Delete a team link."""
        team = self._require_team("remove_team_link")
        if team is None or team.find_team_link(link_id) is None:
            return False
        team.team_links = [link for link in team.team_links if link.id != link_id]
        self.commit()
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _reapply_player_status(self, team: Team, player: Player) -> None:
        """Bring game and event responses in line with an injury or suspension."""
        for game in team.games:
            if player.id not in game.invited_players or not game.date:
                continue
            reason = player.unavailable_reason(game.day)
            if reason:
                if player.id not in game.checked_out_players:
                    game.check_out(player.id, reason)
            elif game.checkout_notes.get(player.id) in (REASON_INJURED, REASON_SUSPENDED):
                game.checked_out_players = [p for p in game.checked_out_players if p != player.id]
                del game.checkout_notes[player.id]

        for event in team.events:
            if player.id not in event.invited_players or not event.date:
                continue
            if player.is_injured_on(event.day):
                if player.id not in event.declined_players:
                    event.decline(player.id, REASON_INJURED)
            elif event.declined_notes.get(player.id) == REASON_INJURED:
                event.declined_players = [p for p in event.declined_players if p != player.id]
                del event.declined_notes[player.id]
