"""
Persistence service for the Clubhouse team manager.

This module handles saving and loading the session state to/from a JSON
snapshot document. The document keeps the active team's data at the top
level for older readers as well as the full team collection; both are
written from the same Team object so they never disagree.
"""
import json
import logging
import os
from typing import Any, Dict, Optional

from ..models import AppState, PendingTeamSelection, Player, Team
from ..utils import SNAPSHOT_VERSION, DEFAULT_TEAM_NAME, DEFAULT_DATA_FILE

logger = logging.getLogger(__name__)

# Top-level keys that mirror the active team's record
ACTIVE_TEAM_KEYS = (
    "teamName", "teamSettings", "players", "games", "events", "photos",
    "notifications", "chatMessages", "chatLastReadAt", "paymentPeriods",
    "polls", "teamLinks",
)


class PersistenceService:
    """
    Service for persisting session state to JSON files.

    Attributes:
        data_file: Snapshot path used by write_back()
    """

    def __init__(self, data_file: str = DEFAULT_DATA_FILE):
        """
        Initialize PersistenceService.

        Args:
            data_file: Path of the snapshot document
        """
        self.data_file = data_file

    # ------------------------------------------------------------------
    # Snapshot document
    # ------------------------------------------------------------------
    @staticmethod
    def build_snapshot(state: AppState) -> Dict[str, Any]:
        """
        Build the versioned snapshot document for a state.

        Args:
            state: State to serialize

        Returns:
            Dictionary suitable for JSON serialization
        """
        active = state.active_team
        if active is not None:
            active_fields = active.to_dict()
            del active_fields["id"]
        else:
            active_fields = Team(id="", team_name=DEFAULT_TEAM_NAME).to_dict()
            del active_fields["id"]
            active_fields["players"] = [p.to_dict() for p in state.unscoped_players]

        snapshot: Dict[str, Any] = {"version": SNAPSHOT_VERSION}
        snapshot.update(active_fields)
        snapshot.update({
            "currentPlayerId": state.current_player_id,
            "isLoggedIn": state.is_logged_in,
            "teams": [t.to_dict() for t in state.teams],
            "activeTeamId": state.active_team_id,
            "userEmail": state.user_email,
            "userPhone": state.user_phone,
            "pendingTeamIds": (
                list(state.pending_selection.team_ids) if state.pending_selection else None
            ),
        })
        return snapshot

    @staticmethod
    def state_from_snapshot(data: Dict[str, Any]) -> AppState:
        """
        Rebuild state from a snapshot document.

        Documents written before the active team was stored by reference can
        hold newer active-team data at the top level than in the team
        collection; those top-level fields are folded into the matching team.
        Documents with no active team keep their top-level roster as the
        unscoped player list.

        Args:
            data: Parsed snapshot document

        Returns:
            AppState instance

        Raises:
            ValueError: If the document is not a snapshot
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot document must be a JSON object")
        if data.get("version", SNAPSHOT_VERSION) != SNAPSHOT_VERSION:
            logger.warning("Loading snapshot version %s as version %s",
                           data.get("version"), SNAPSHOT_VERSION)

        teams = [Team.from_dict(t) for t in data.get("teams") or []]
        active_team_id = data.get("activeTeamId")
        unscoped_players = []

        if active_team_id:
            top_level = {key: data[key] for key in ACTIVE_TEAM_KEYS if key in data}
            index = next((i for i, t in enumerate(teams) if t.id == active_team_id), None)
            if index is None:
                logger.warning("Active team %s missing from team list; rebuilding it", active_team_id)
                teams.append(Team.from_dict({"id": active_team_id, **top_level}))
            elif top_level:
                merged = teams[index].to_dict()
                merged.update(top_level)
                teams[index] = Team.from_dict(merged)
        else:
            unscoped_players = [Player.from_dict(p) for p in data.get("players") or []]

        user_email = data.get("userEmail")
        user_phone = data.get("userPhone")
        pending = None
        if data.get("pendingTeamIds"):
            pending = PendingTeamSelection(
                identifier=user_email or user_phone or "",
                team_ids=list(data["pendingTeamIds"]),
            )

        return AppState(
            teams=teams,
            active_team_id=active_team_id,
            current_player_id=data.get("currentPlayerId"),
            is_logged_in=data.get("isLoggedIn", False),
            user_email=user_email,
            user_phone=user_phone,
            pending_selection=pending,
            unscoped_players=unscoped_players,
        )

    @staticmethod
    def team_from_snapshot(data: Dict[str, Any], team_id: str) -> Optional[Team]:
        """
        Extract one team from a snapshot document, e.g. one downloaded from
        the sync service.

        Args:
            data: Snapshot document
            team_id: Team to extract

        Returns:
            The team, or None when the document does not contain it
        """
        for team_data in data.get("teams") or []:
            if team_data.get("id") == team_id:
                return Team.from_dict(team_data)
        if data.get("activeTeamId") == team_id:
            top_level = {key: data[key] for key in ACTIVE_TEAM_KEYS if key in data}
            return Team.from_dict({"id": team_id, **top_level})
        return None

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------
    def save_snapshot(self, state: AppState, file_path: Optional[str] = None) -> None:
        """
        Save state to a JSON file.

        Args:
            state: The state to save
            file_path: Path where to save the file (defaults to data_file)

        Raises:
            OSError: If the file cannot be written
        """
        file_path = file_path or self.data_file
        snapshot = self.build_snapshot(state)

        directory = os.path.dirname(file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

        # Write to a sibling file first so a crash never leaves half a document
        tmp_path = f"{file_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, indent=2)
        os.replace(tmp_path, file_path)

    def load_snapshot(self, file_path: Optional[str] = None) -> AppState:
        """
        Load state from a JSON file.

        Args:
            file_path: Path to the JSON file (defaults to data_file)

        Returns:
            AppState loaded from the file

        Raises:
            FileNotFoundError: If the file doesn't exist
            json.JSONDecodeError: If the file contains invalid JSON
            ValueError: If the JSON structure is invalid
        """
        file_path = file_path or self.data_file
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Snapshot file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return self.state_from_snapshot(data)

    def write_back(self, state: AppState) -> Optional[str]:
        """
        Persist state after a mutation without letting failures escape.

        Any error, from the filesystem or from serializing a record, is
        logged and swallowed.

        Args:
            state: State to save

        Returns:
            Path of the written file, or None if the save failed
        """
        try:
            self.save_snapshot(state)
            return self.data_file
        except Exception:
            # In-memory state stays authoritative when a write fails
            logger.exception("Failed to write snapshot to %s", self.data_file)
            return None

    def delete_snapshot(self, file_path: Optional[str] = None) -> bool:
        """Remove the snapshot file; returns False when there was none."""
        file_path = file_path or self.data_file
        try:
            os.remove(file_path)
            return True
        except FileNotFoundError:
            return False
