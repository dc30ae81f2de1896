"""
Unit tests for HydrationService.
"""
import os
import tempfile
import unittest

from clubhouse.models import AppState, PlayerRole
from clubhouse.services import HydrationService, PersistenceService, ServiceFactory, TeamStore
from clubhouse.utils import AppConfig

from builders import make_player, make_store, make_team


class TestHydrate(unittest.TestCase):
    """Test cases for loading state at startup."""

    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "team-storage.json")
        self.persistence = PersistenceService(self.path)
        self.hydration = HydrationService(self.persistence)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_missing_file_gives_fresh_state(self) -> None:
        store = self.hydration.hydrate()
        self.assertEqual(store.state, AppState())

    def test_corrupt_file_gives_fresh_state_and_is_kept(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertLogs("clubhouse.services.hydration_service", level="ERROR"):
            store = self.hydration.hydrate()
        self.assertEqual(store.state.teams, [])
        self.assertTrue(os.path.exists(self.path))

    def test_loads_saved_state_into_given_store(self) -> None:
        saved = make_store(make_team("t1", make_player("p1")), player_id="p1")
        self.persistence.save_snapshot(saved.state)
        commits = []
        store = TeamStore()
        store.add_commit_listener(commits.append)

        result = self.hydration.hydrate(store=store)

        self.assertIs(result, store)
        self.assertEqual(store.state, saved.state)
        self.assertEqual(commits, [])


class TestRepairMissingAdmin(unittest.TestCase):

    def test_promotes_signed_in_player(self) -> None:
        store = make_store(make_team("t1", make_player("p1"), make_player("p2")), player_id="p2")
        self.assertTrue(HydrationService.repair_missing_admin(store))
        self.assertTrue(store.find_player("p2").has_role(PlayerRole.ADMIN))
        self.assertFalse(store.find_player("p1").has_role(PlayerRole.ADMIN))
        self.assertFalse(HydrationService.repair_missing_admin(store))

    def test_team_with_admin_untouched(self) -> None:
        store = make_store(make_team("t1", make_player("p1", roles=[PlayerRole.ADMIN]),
                                     make_player("p2")), player_id="p2")
        self.assertFalse(HydrationService.repair_missing_admin(store))
        self.assertEqual(store.find_player("p2").roles, [])

    def test_requires_signed_in_user(self) -> None:
        store = make_store(make_team("t1", make_player("p1")), player_id="p1", logged_in=False)
        self.assertFalse(HydrationService.repair_missing_admin(store))


def test_factory_repairs_missing_admin_on_startup(tmp_path):
    path = str(tmp_path / "team-storage.json")
    saved = make_store(make_team("t1", make_player("p1"), make_player("p2")), player_id="p1")
    PersistenceService(path).save_snapshot(saved.state)

    factory = ServiceFactory(AppConfig(data_file=path))
    store = factory.get_store()

    assert store.current_player.has_role(PlayerRole.ADMIN)
    assert not store.active_team.find_player("p2").has_role(PlayerRole.ADMIN)
    on_disk = PersistenceService(path).load_snapshot()
    assert on_disk.active_team.find_player("p1").has_role(PlayerRole.ADMIN)
    assert factory.get_store() is store


def test_factory_startup_keeps_existing_admin(tmp_path):
    path = str(tmp_path / "team-storage.json")
    admin = make_player("p1", roles=[PlayerRole.ADMIN])
    saved = make_store(make_team("t1", admin, make_player("p2")), player_id="p2")
    PersistenceService(path).save_snapshot(saved.state)

    store = ServiceFactory(AppConfig(data_file=path)).get_store()

    assert not store.current_player.has_role(PlayerRole.ADMIN)
