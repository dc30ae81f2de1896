"""
Unit tests for PersistenceService.

Tests the snapshot document layout, file round trips and the handling of
documents written by older versions.
"""
import json
import os
import tempfile
import unittest
from unittest.mock import patch

from clubhouse.models import AppState, Game, PendingTeamSelection, PlayerRole, Poll, PollOption, TeamLink
from clubhouse.services import PersistenceService, TeamStore
from clubhouse.utils import SNAPSHOT_VERSION

from builders import at, make_player, make_store, make_team


class TestSnapshotDocument(unittest.TestCase):
    """Test cases for building and reading the snapshot document."""

    def setUp(self) -> None:
        self.team = make_team("t1", make_player("p1", email="jane@example.com",
                                                roles=[PlayerRole.ADMIN]))
        self.other = make_team("t2", make_player("q1"))
        self.store = make_store(self.team, self.other, player_id="p1", email="jane@example.com")

    def test_top_level_mirrors_active_team(self) -> None:
        self.store.add_player(make_player("p2"))
        snapshot = PersistenceService.build_snapshot(self.store.state)

        self.assertEqual(snapshot["version"], SNAPSHOT_VERSION)
        self.assertEqual(snapshot["activeTeamId"], "t1")
        entry = next(t for t in snapshot["teams"] if t["id"] == "t1")
        self.assertEqual(entry["players"], snapshot["players"])
        self.assertEqual([p["id"] for p in snapshot["players"]], ["p1", "p2"])
        self.assertEqual(snapshot["teamName"], self.team.team_name)

    def test_state_round_trip(self) -> None:
        self.team.games.append(Game(id="g1", opponent="Hawks", date=at(2025, 3, 14, 19)))
        self.store.state.pending_selection = PendingTeamSelection("jane@example.com", ["t1", "t2"])
        snapshot = PersistenceService.build_snapshot(self.store.state)
        restored = PersistenceService.state_from_snapshot(json.loads(json.dumps(snapshot)))
        self.assertEqual(restored, self.store.state)

    def test_legacy_top_level_fields_fold_into_active_team(self) -> None:
        snapshot = PersistenceService.build_snapshot(self.store.state)
        snapshot["players"].append(make_player("p2").to_dict())
        snapshot["teamName"] = "Renamed"

        state = PersistenceService.state_from_snapshot(snapshot)

        team = state.find_team("t1")
        self.assertEqual([p.id for p in team.players], ["p1", "p2"])
        self.assertEqual(team.team_name, "Renamed")
        self.assertEqual(len(state.find_team("t2").players), 1)

    def test_missing_active_team_is_rebuilt(self) -> None:
        snapshot = PersistenceService.build_snapshot(self.store.state)
        snapshot["teams"] = [t for t in snapshot["teams"] if t["id"] != "t1"]
        state = PersistenceService.state_from_snapshot(snapshot)
        self.assertEqual(state.active_team.players[0].id, "p1")

    def test_document_without_active_team_keeps_unscoped_roster(self) -> None:
        legacy = {
            "players": [make_player("old", email="old@example.com", secret="x").to_dict()],
            "currentPlayerId": "old",
            "isLoggedIn": True,
        }
        state = PersistenceService.state_from_snapshot(legacy)
        self.assertEqual(state.teams, [])
        self.assertEqual([p.id for p in state.unscoped_players], ["old"])
        self.assertEqual(state.current_player.id, "old")

        snapshot = PersistenceService.build_snapshot(state)
        self.assertEqual([p["id"] for p in snapshot["players"]], ["old"])

    def test_non_object_document_rejected(self) -> None:
        with self.assertRaises(ValueError):
            PersistenceService.state_from_snapshot(["not", "a", "snapshot"])

    def test_team_from_snapshot(self) -> None:
        snapshot = PersistenceService.build_snapshot(self.store.state)
        self.assertEqual(PersistenceService.team_from_snapshot(snapshot, "t2").id, "t2")
        self.assertIsNone(PersistenceService.team_from_snapshot(snapshot, "t9"))

    def test_polls_and_links_mirror_active_team(self) -> None:
        self.store.add_poll(Poll(id="q1", question="Jersey colour?",
                                 options=[PollOption(id="a", text="Red", votes=["p1"])]))
        self.store.add_team_link(TeamLink(id="l1", title="League", url="https://league.example.com"))
        snapshot = json.loads(json.dumps(PersistenceService.build_snapshot(self.store.state)))
        self.assertEqual(snapshot["polls"][0]["id"], "q1")
        self.assertEqual(snapshot["teamLinks"][0]["title"], "League")

        snapshot["teamLinks"].append({"id": "l2", "title": "Rink", "url": "https://rink.example.com"})
        team = PersistenceService.state_from_snapshot(snapshot).find_team("t1")
        self.assertEqual([link.id for link in team.team_links], ["l1", "l2"])
        self.assertEqual(team.find_poll("q1").find_option("a").votes, ["p1"])


class TestSnapshotFiles(unittest.TestCase):
    """Test cases for reading and writing snapshot files."""

    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "data", "team-storage.json")
        self.persistence = PersistenceService(self.path)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_save_and_load(self) -> None:
        store = make_store(make_team("t1", make_player("p1")), player_id="p1")
        self.persistence.save_snapshot(store.state)
        self.assertFalse(os.path.exists(f"{self.path}.tmp"))
        self.assertEqual(self.persistence.load_snapshot(), store.state)

    def test_load_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            self.persistence.load_snapshot()

    def test_write_back_on_commit(self) -> None:
        store = TeamStore(AppState(teams=[make_team("t1")], active_team_id="t1"))
        store.add_commit_listener(self.persistence.write_back)
        store.set_team_name("Otters")
        self.assertEqual(self.persistence.load_snapshot().active_team.team_name, "Otters")

    def test_write_back_failure_is_logged_not_raised(self) -> None:
        with patch.object(self.persistence, "save_snapshot", side_effect=OSError("disk full")):
            with self.assertLogs("clubhouse.services.persistence_service", level="ERROR"):
                self.assertIsNone(self.persistence.write_back(AppState()))

    def test_write_back_survives_unserializable_record(self) -> None:
        store = TeamStore(AppState(teams=[make_team("t1")], active_team_id="t1"))
        store.add_commit_listener(self.persistence.write_back)
        store.active_team.settings.sport = object()
        with self.assertLogs("clubhouse.services.persistence_service", level="ERROR"):
            store.set_team_name("Otters")
        self.assertEqual(store.active_team.team_name, "Otters")

    def test_delete_snapshot(self) -> None:
        self.persistence.save_snapshot(AppState())
        self.assertTrue(self.persistence.delete_snapshot())
        self.assertFalse(self.persistence.delete_snapshot())
