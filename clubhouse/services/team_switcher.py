"""
Team switching for users who belong to several teams.

The active team is only an id into the team collection, so switching never
copies team data around. The signed-in user's player record in the newly
active team is found by matching the session email or phone.
"""
import logging
from typing import Iterable, List, Optional

from ..models import AppState, PendingTeamSelection, Player, Team, TeamSettings
from ..utils import new_id
from .persistence_service import PersistenceService
from .team_store import TeamStore

logger = logging.getLogger(__name__)


class TeamSwitcher:
    """Create, join, switch between and delete teams."""

    def __init__(self, store: TeamStore, persistence: Optional[PersistenceService] = None):
        """
        Initialize TeamSwitcher.

        Args:
            store: Entity store to operate on
            persistence: Used by reset_all_data() to remove the snapshot file
        """
        self.store = store
        self.persistence = persistence

    @property
    def state(self) -> AppState:
        return self.store.state

    def activate(self, team: Team, player: Optional[Player]) -> None:
        """
        Make a team active with a given player signed in.

        Clears any pending team selection. Does not commit.
        """
        state = self.state
        state.active_team_id = team.id
        state.current_player_id = player.id if player else None
        state.pending_selection = None
        if player is None:
            logger.warning("No player for the signed-in user in team %s", team.id)

    def switch_team(self, team_id: str) -> bool:
        """
        Make another stored team the active one.

        Args:
            team_id: Team to activate

        Returns:
            False when no team has that id
        """
        team = self.state.find_team(team_id)
        if team is None:
            logger.debug("switch_team ignored: unknown team %s", team_id)
            return False
        player = next((p for p in team.players if self.state.is_session_user(p)), None)
        self.activate(team, player)
        self.store.commit()
        return True

    def teams_for_user(self) -> List[Team]:
        """Teams the signed-in user has a player record in."""
        return self.state.teams_for_session()

    def user_team_count(self) -> int:
        """Number of teams the signed-in user belongs to."""
        return len(self.teams_for_user())

    # ------------------------------------------------------------------
    # Pending selection
    # ------------------------------------------------------------------
    def set_pending_team_selection(self, team_ids: Iterable[str], identifier: Optional[str] = None) -> None:
        """Record that the user must choose between several teams."""
        identifier = identifier or self.state.user_email or self.state.user_phone or ""
        self.state.pending_selection = PendingTeamSelection(identifier=identifier, team_ids=list(team_ids))
        self.store.commit()

    def clear_pending_team_selection(self) -> None:
        """Forget a pending team choice."""
        self.state.pending_selection = None
        self.store.commit()

    def select_pending_team(self, team_id: str) -> bool:
        """
        Complete a multi-team login by choosing one of the candidate teams.

        Args:
            team_id: Chosen team, which must be one of the pending candidates

        Returns:
            True if the team was activated and the user is now signed in
        """
        pending = self.state.pending_selection
        if pending is None or team_id not in pending.team_ids:
            logger.debug("select_pending_team ignored: %s is not a pending choice", team_id)
            return False
        if not self.switch_team(team_id):
            return False
        self.state.is_logged_in = True
        self.store.commit()
        return True

    # ------------------------------------------------------------------
    # Creating, joining and deleting
    # ------------------------------------------------------------------
    def create_new_team(self, team_name: str, sport: str, admin_player: Player) -> str:
        """
        Create a team seeded with one admin player and sign that player in.

        Args:
            team_name: Display name of the team
            sport: Sport the team plays
            admin_player: First player; becomes the signed-in user

        Returns:
            Id of the new team

        Raises:
            ValueError: If the sport is not supported
        """
        team = Team(
            id=new_id("team-"),
            team_name=team_name,
            settings=TeamSettings(sport=sport),
            players=[admin_player],
        )
        state = self.state
        state.teams.append(team)
        state.is_logged_in = True
        state.user_email = admin_player.email or None
        state.user_phone = admin_player.phone or None
        self.activate(team, admin_player)
        logger.info("Created team %s (%s)", team.id, sport)
        self.store.commit()
        return team.id

    def import_team(self, team: Team) -> None:
        """
        Store a team downloaded from elsewhere, replacing any stored copy.

        The active team is left unchanged.
        """
        teams = self.state.teams
        for index, existing in enumerate(teams):
            if existing.id == team.id:
                teams[index] = team
                break
        else:
            teams.append(team)
        self.store.commit()

    def import_snapshot(self, snapshot: dict, team_id: str) -> bool:
        """
        Store one team out of a downloaded snapshot document.

        Returns:
            False when the document does not contain the team
        """
        team = PersistenceService.team_from_snapshot(snapshot, team_id)
        if team is None:
            logger.warning("Downloaded snapshot has no team %s", team_id)
            return False
        self.import_team(team)
        return True

    def delete_current_team(self) -> bool:
        """
        Delete the active team.

        The user moves to another team they belong to; if they belong to
        several, the choice is left pending. With no other team the user is
        signed out.

        Returns:
            False when no team is active
        """
        state = self.state
        active_id = state.active_team_id
        if active_id is None:
            return False
        state.teams = [t for t in state.teams if t.id != active_id]
        remaining = self.teams_for_user()

        if remaining:
            self.switch_team(remaining[0].id)
            if len(remaining) > 1:
                state.pending_selection = PendingTeamSelection(
                    identifier=state.user_email or state.user_phone or "",
                    team_ids=[t.id for t in remaining],
                )
        else:
            state.active_team_id = None
            state.is_logged_in = False
            state.current_player_id = None
            state.pending_selection = None
        logger.info("Deleted team %s", active_id)
        self.store.commit()
        return True

    def reset_all_data(self) -> None:
        """Wipe every team, sign everyone out and remove the snapshot file."""
        self.store.state = AppState()
        if self.persistence is not None:
            self.persistence.delete_snapshot()
        logger.info("All data reset")
