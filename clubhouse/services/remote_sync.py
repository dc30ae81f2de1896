"""
Client for the remote team sync service.

The sync service stores whole snapshot documents per team so a player on
another device can download the team they were invited to. Conflicts are
not resolved here: a push replaces the remote copy.
"""
import logging
from typing import Any, Dict, Optional

import requests

from ..models import ErrorKind, SyncResult
from ..utils import DEFAULT_SYNC_TIMEOUT_S

logger = logging.getLogger(__name__)


class RemoteSyncClient:
    """
    HTTP JSON client for pushing and downloading team snapshots.

    Attributes:
        base_url: Root URL of the sync service
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_SYNC_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _team_url(self, team_id: str) -> str:
        return f"{self.base_url}/teams/{team_id}"

    def push(self, snapshot: Dict[str, Any]) -> SyncResult:
        """
        Upload a snapshot for its active team.

        Args:
            snapshot: Snapshot document with an activeTeamId

        Returns:
            SyncResult; network and HTTP errors become failed results
        """
        team_id = snapshot.get("activeTeamId")
        if not team_id:
            return SyncResult(success=False, error=ErrorKind.INVALID_INPUT,
                              detail="Snapshot has no active team")
        try:
            response = self.session.put(self._team_url(team_id), json=snapshot, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Push of team %s failed: %s", team_id, e)
            return SyncResult(success=False, error=ErrorKind.SYNC_FAILED, detail=str(e), team_id=team_id)
        logger.info("Pushed team %s", team_id)
        return SyncResult(success=True, team_id=team_id)

    def download(self, team_id: str) -> SyncResult:
        """
        Fetch the latest snapshot stored for a team.

        Args:
            team_id: Team to download

        Returns:
            SyncResult with the snapshot on success, NOT_FOUND when the
            service has no such team
        """
        try:
            response = self.session.get(self._team_url(team_id), timeout=self.timeout)
            if response.status_code == 404:
                return SyncResult(success=False, error=ErrorKind.NOT_FOUND, team_id=team_id)
            response.raise_for_status()
            snapshot = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Download of team %s failed: %s", team_id, e)
            return SyncResult(success=False, error=ErrorKind.SYNC_FAILED, detail=str(e), team_id=team_id)
        if not isinstance(snapshot, dict):
            return SyncResult(success=False, error=ErrorKind.SYNC_FAILED,
                              detail="Response is not a snapshot document", team_id=team_id)
        return SyncResult(success=True, team_id=team_id, snapshot=snapshot)
