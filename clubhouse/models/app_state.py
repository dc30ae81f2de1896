"""
AppState model for the Clubhouse team manager.

This module contains the AppState dataclass which represents the complete
in-memory state of one session: every team the device knows about, which of
them is active, and who is signed in.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .player import Player
from .team import Team


@dataclass
class PendingTeamSelection:
    """
    A login that matched several teams and is waiting for the user to pick one.

    Attributes:
        identifier: Normalized email or phone the user signed in with
        team_ids: Candidate team ids, in team-collection order
    """
    identifier: str
    team_ids: List[str] = field(default_factory=list)


@dataclass
class AppState:
    """
    Represents the complete state of a session.

    The active team is an index into the team collection rather than a
    separate copy, so there is only ever one version of each team's data.

    Attributes:
        teams: Every team stored on this device
        active_team_id: Id of the team currently loaded (None before login)
        current_player_id: Signed-in player within the active team
        is_logged_in: Whether a user is signed in
        user_email: Normalized email the user is known by across teams
        user_phone: Digits-only phone the user is known by across teams
        pending_selection: Team choice awaiting the user after login
        unscoped_players: Roster from documents written before teams existed
    """
    teams: List[Team] = field(default_factory=list)
    active_team_id: Optional[str] = None
    current_player_id: Optional[str] = None
    is_logged_in: bool = False
    user_email: Optional[str] = None
    user_phone: Optional[str] = None
    pending_selection: Optional[PendingTeamSelection] = None
    unscoped_players: List[Player] = field(default_factory=list)

    @property
    def active_team(self) -> Optional[Team]:
        """The team currently loaded, if any."""
        return self.find_team(self.active_team_id)

    def find_team(self, team_id: Optional[str]) -> Optional[Team]:
        """Find a team by id."""
        if team_id is None:
            return None
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    @property
    def current_player(self) -> Optional[Player]:
        """The signed-in player, looked up in the active team."""
        team = self.active_team
        if team is not None:
            return team.find_player(self.current_player_id)
        for player in self.unscoped_players:
            if player.id == self.current_player_id:
                return player
        return None

    def is_session_user(self, player: Player) -> bool:
        """Whether a player record belongs to the signed-in user's identity."""
        return player.matches_email(self.user_email) or player.matches_phone(self.user_phone)

    def teams_for_session(self) -> List[Team]:
        """Teams with a player record belonging to the signed-in user."""
        if not self.user_email and not self.user_phone:
            return []
        return [t for t in self.teams if any(self.is_session_user(p) for p in t.players)]

    def clear_session(self) -> None:
        """Forget who is signed in while keeping every team."""
        self.is_logged_in = False
        self.current_player_id = None
        self.user_email = None
        self.user_phone = None
        self.pending_selection = None
