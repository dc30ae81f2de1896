"""
Unit tests for TeamSwitcher.
"""
import os
import tempfile
import unittest

from clubhouse.models import PlayerRole
from clubhouse.services import PersistenceService, TeamSwitcher

from builders import make_player, make_store, make_team

EMAIL = "jane@example.com"


class TestTeamSwitcher(unittest.TestCase):
    """Test cases for switching, creating and deleting teams."""

    def setUp(self) -> None:
        self.team_a = make_team("t1", make_player("a1", email=EMAIL), make_player("a2"))
        self.team_b = make_team("t2", make_player("b1", email=EMAIL))
        self.team_c = make_team("t3", make_player("c1", email="other@example.com"))
        self.store = make_store(self.team_a, self.team_b, self.team_c,
                                player_id="a1", email=EMAIL)
        self.commits = []
        self.store.add_commit_listener(self.commits.append)
        self.switcher = TeamSwitcher(self.store)

    def test_switch_team_follows_identity(self) -> None:
        self.assertTrue(self.switcher.switch_team("t2"))
        self.assertEqual(self.store.state.active_team_id, "t2")
        self.assertEqual(self.store.state.current_player_id, "b1")
        self.assertEqual(len(self.commits), 1)

    def test_switch_to_unknown_team_is_noop(self) -> None:
        self.assertFalse(self.switcher.switch_team("nope"))
        self.assertEqual(self.store.state.active_team_id, "t1")
        self.assertEqual(self.commits, [])

    def test_teams_for_user(self) -> None:
        self.assertEqual([t.id for t in self.switcher.teams_for_user()], ["t1", "t2"])
        self.assertEqual(self.switcher.user_team_count(), 2)

    def test_select_pending_team_must_be_a_candidate(self) -> None:
        self.switcher.set_pending_team_selection(["t1", "t2"])
        self.assertEqual(self.store.state.pending_selection.identifier, EMAIL)
        self.assertFalse(self.switcher.select_pending_team("t3"))
        self.assertTrue(self.switcher.select_pending_team("t2"))
        self.assertIsNone(self.store.state.pending_selection)

    def test_clear_pending(self) -> None:
        self.switcher.set_pending_team_selection(["t1", "t2"])
        self.switcher.clear_pending_team_selection()
        self.assertIsNone(self.store.state.pending_selection)

    def test_create_new_team(self) -> None:
        admin = make_player("n1", email="new@example.com", roles=[PlayerRole.ADMIN])
        team_id = self.switcher.create_new_team("Otters", "soccer", admin)
        self.assertTrue(team_id.startswith("team-"))
        self.assertEqual(self.store.state.active_team_id, team_id)
        self.assertEqual(self.store.active_team.settings.sport, "soccer")
        self.assertEqual(self.store.state.user_email, "new@example.com")
        self.assertIs(self.store.current_player, admin)

    def test_delete_team_with_several_left_asks_again(self) -> None:
        self.team_c.players.append(make_player("c2", email=EMAIL))
        self.assertTrue(self.switcher.delete_current_team())
        self.assertIsNone(self.store.state.find_team("t1"))
        self.assertEqual(self.store.state.active_team_id, "t2")
        self.assertEqual(self.store.state.pending_selection.team_ids, ["t2", "t3"])

    def test_delete_team_moves_to_remaining_team(self) -> None:
        self.switcher.delete_current_team()
        self.assertEqual(self.store.state.active_team_id, "t2")
        self.assertEqual(self.store.state.current_player_id, "b1")
        self.assertIsNone(self.store.state.pending_selection)

    def test_delete_last_team_signs_out(self) -> None:
        self.switcher.delete_current_team()
        self.switcher.delete_current_team()
        self.assertIsNone(self.store.state.active_team_id)
        self.assertFalse(self.store.state.is_logged_in)
        self.assertEqual([t.id for t in self.store.state.teams], ["t3"])

    def test_import_snapshot_replaces_stored_copy(self) -> None:
        downloaded = make_team("t2", make_player("b1", email=EMAIL), make_player("b2"),
                               name="Renamed")
        snapshot = {"teams": [downloaded.to_dict()], "activeTeamId": "t2"}
        self.assertTrue(self.switcher.import_snapshot(snapshot, "t2"))
        stored = self.store.state.find_team("t2")
        self.assertEqual(stored.team_name, "Renamed")
        self.assertEqual(len(stored.players), 2)
        self.assertEqual(len(self.store.state.teams), 3)
        self.assertEqual(self.store.state.active_team_id, "t1")
        self.assertFalse(self.switcher.import_snapshot(snapshot, "t9"))


class TestResetAllData(unittest.TestCase):

    def test_reset_removes_snapshot(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "team-storage.json")
            persistence = PersistenceService(path)
            store = make_store(make_team("t1", make_player("p1")), player_id="p1")
            persistence.save_snapshot(store.state)
            switcher = TeamSwitcher(store, persistence)

            switcher.reset_all_data()

            self.assertEqual(store.state.teams, [])
            self.assertFalse(store.state.is_logged_in)
            self.assertFalse(os.path.exists(path))
