"""
Startup hydration and recovery.

Hydration loads the persisted snapshot into a TeamStore. Repairs of broken
invariants are separate, explicit operations that callers run deliberately
after hydrating.
"""
import json
import logging
from typing import Optional

from ..models import AppState, PlayerRole
from .persistence_service import PersistenceService
from .team_store import TeamStore

logger = logging.getLogger(__name__)


class HydrationService:
    """Load persisted state and repair it."""

    def __init__(self, persistence: PersistenceService):
        """
        Initialize HydrationService.

        Args:
            persistence: Service that reads the snapshot file
        """
        self.persistence = persistence

    def hydrate(self, path: Optional[str] = None, store: Optional[TeamStore] = None) -> TeamStore:
        """
        Load the snapshot into a store.

        A missing file gives a fresh state. An unreadable or malformed file
        is logged and also gives a fresh state; the file is left on disk
        until the next write replaces it.

        Args:
            path: Snapshot path (defaults to the persistence data file)
            store: Store to load into (a new one by default)

        Returns:
            The hydrated store
        """
        path = path or self.persistence.data_file
        try:
            state = self.persistence.load_snapshot(path)
            logger.info("Hydrated %d team(s) from %s", len(state.teams), path)
        except FileNotFoundError:
            logger.info("No snapshot at %s; starting fresh", path)
            state = AppState()
        except (OSError, json.JSONDecodeError, ValueError, KeyError, TypeError):
            logger.exception("Could not read snapshot at %s; starting fresh", path)
            state = AppState()

        if store is None:
            return TeamStore(state)
        store.state = state
        return store

    @staticmethod
    def repair_missing_admin(store: TeamStore) -> bool:
        """
        Promote the signed-in player to admin when the active team has none.

        Only runs when someone is signed in and the team has players. Safe
        to call repeatedly.

        Args:
            store: Store to repair

        Returns:
            True if a player was promoted
        """
        state = store.state
        team = state.active_team
        if team is None or not state.is_logged_in or not team.players or team.has_admin():
            return False
        player = state.current_player
        if player is None:
            logger.warning("Team %s has no admin and no signed-in player to promote", team.id)
            return False
        player.add_role(PlayerRole.ADMIN)
        logger.warning("Team %s had no admin; promoted player %s", team.id, player.id)
        store.commit()
        return True
