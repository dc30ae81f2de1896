"""
Unit tests for TeamStore.

Covers record CRUD, commit notifications, silent no-ops on misuse and the
automatic availability handling for games and events.
"""
import unittest
from datetime import date

from clubhouse.models import (
    Game, Event, PlayerRole, Photo, GameLogEntry, AppState, Poll, PollOption, Team, TeamLink,
)
from clubhouse.services import TeamStore

from builders import at, make_player, make_store, make_team


class TestTeamStoreBasics(unittest.TestCase):
    """Test cases for store mutations on the active team."""

    def setUp(self) -> None:
        self.admin = make_player("p1", email="admin@example.com", roles=[PlayerRole.ADMIN])
        self.team = make_team("t1", self.admin)
        self.store = make_store(self.team, player_id="p1")
        self.commits = []
        self.store.add_commit_listener(self.commits.append)

    def test_add_player_commits(self) -> None:
        self.assertTrue(self.store.add_player(make_player("p2")))
        self.assertEqual([p.id for p in self.team.players], ["p1", "p2"])
        self.assertEqual(len(self.commits), 1)
        self.assertIs(self.commits[0], self.store.state)

    def test_update_unknown_player_is_noop(self) -> None:
        self.assertFalse(self.store.update_player("missing", number="9"))
        self.assertEqual(self.commits, [])

    def test_update_player_rejects_unknown_field(self) -> None:
        with self.assertRaises(ValueError):
            self.store.update_player("p1", nickname="Ace")

    def test_remove_player(self) -> None:
        self.assertTrue(self.store.remove_player("p1"))
        self.assertEqual(self.team.players, [])
        self.assertFalse(self.store.remove_player("p1"))

    def test_no_active_team_is_noop(self) -> None:
        store = TeamStore(AppState())
        self.assertIsNone(store.active_team)
        self.assertFalse(store.set_team_name("Hawks"))
        self.assertFalse(store.add_game(Game(id="g1")))

    def test_roles_and_permission_checks(self) -> None:
        self.store.add_player(make_player("p2"))
        self.assertTrue(self.store.is_admin())
        self.store.state.current_player_id = "p2"
        self.assertFalse(self.store.can_manage_team())
        self.store.add_role("p2", PlayerRole.CAPTAIN)
        self.assertTrue(self.store.can_manage_team())
        self.assertFalse(self.store.is_admin())
        self.store.remove_role("p2", PlayerRole.CAPTAIN)
        self.assertFalse(self.store.can_manage_team())

    def test_game_crud(self) -> None:
        self.store.add_game(Game(id="g1", opponent="Hawks"))
        self.assertTrue(self.store.update_game("g1", location="Rink 2"))
        self.assertEqual(self.team.find_game("g1").location, "Rink 2")
        self.assertTrue(self.store.remove_game("g1"))
        self.assertFalse(self.store.remove_game("g1"))

    def test_photos_and_game_logs(self) -> None:
        self.store.add_photo(Photo(id="ph1", game_id="g1", uri="media://1", uploaded_by="p1"))
        self.assertTrue(self.store.remove_photo("ph1"))
        self.assertFalse(self.store.remove_photo("ph1"))

        entry = GameLogEntry(id="log1", date=at(2025, 3, 1), stat_type="skater", stats={"goals": 2})
        self.assertTrue(self.store.add_game_log("p1", entry))
        self.assertEqual(self.admin.game_logs, [entry])
        self.assertTrue(self.store.remove_game_log("p1", "log1"))
        self.assertEqual(self.admin.game_logs, [])

    def test_sport_change_remaps_positions_and_clears_stats(self) -> None:
        self.admin.positions = ["G", "LD"]
        self.admin.stats = {"saves": 30}
        self.assertTrue(self.store.update_team_settings(sport="soccer"))
        self.assertEqual(self.admin.positions, ["GK"])
        self.assertEqual(self.admin.stats, {})

    def test_settings_without_sport_change_keep_stats(self) -> None:
        self.admin.stats = {"goals": 3}
        self.store.update_team_settings(show_payments=False)
        self.assertFalse(self.team.settings.show_payments)
        self.assertEqual(self.admin.stats, {"goals": 3})

    def test_unsupported_sport_raises(self) -> None:
        with self.assertRaises(ValueError):
            self.store.update_team_settings(sport="cricket")
        self.assertEqual(self.team.settings.sport, "hockey")

    def test_update_game_parses_iso_date(self) -> None:
        self.store.add_game(Game(id="g1", opponent="Hawks"))
        self.store.update_game("g1", date="2025-03-14T19:00:00Z")
        self.assertEqual(self.team.find_game("g1").date, at(2025, 3, 14, 19))
        self.assertEqual(self.team.to_dict()["games"][0]["date"], at(2025, 3, 14, 19).isoformat())

    def test_release_fields_are_not_directly_editable(self) -> None:
        self.store.add_game(Game(id="g1", opponent="Hawks", invites_sent=True))
        self.store.add_event(Event(id="e1", title="Practice"))
        with self.assertRaises(ValueError):
            self.store.update_game("g1", invites_sent=False)
        with self.assertRaises(ValueError):
            self.store.update_event("e1", invite_release_option="now")
        self.assertTrue(self.team.find_game("g1").invites_sent)
        self.assertIsNone(self.team.find_event("e1").invite_release_option)

    def test_invalid_value_leaves_record_serializable(self) -> None:
        self.store.add_game(Game(id="g1", opponent="Hawks"))
        with self.assertRaises(ValueError):
            self.store.update_game("g1", date="next tuesday")
        self.assertIsNone(self.team.find_game("g1").date)
        self.assertTrue(self.store.set_team_name("Falcons"))
        self.assertEqual(self.team.to_dict()["teamName"], "Falcons")


class TestAvailability(unittest.TestCase):
    """Automatic OUT / declined handling for unavailable players."""

    def setUp(self) -> None:
        self.player = make_player("p1")
        self.other = make_player("p2")
        self.team = make_team("t1", self.player, self.other)
        self.store = make_store(self.team, player_id="p1")

    def test_unavailable_date_marks_out(self) -> None:
        self.store.add_game(Game(id="g1", date=at(2025, 3, 14, 19), invited_players=["p1", "p2"]))
        self.store.add_event(Event(id="e1", date=at(2025, 3, 14, 9), invited_players=["p1"]))
        self.store.add_unavailable_date("p1", "2025-03-14")

        game = self.team.find_game("g1")
        self.assertEqual(game.checked_out_players, ["p1"])
        self.assertEqual(game.checkout_notes["p1"], "Unavailable")
        self.assertEqual(self.team.find_event("e1").declined_notes["p1"], "Unavailable")
        self.assertEqual(self.player.unavailable_dates, ["2025-03-14"])

    def test_new_game_marks_injured_invitee_out(self) -> None:
        self.player.is_injured = True
        self.player.status_end_date = date(2025, 3, 20)
        self.store.add_game(Game(id="g1", date=at(2025, 3, 14, 19), invited_players=["p1", "p2"]))
        game = self.team.find_game("g1")
        self.assertEqual(game.checked_out_players, ["p1"])
        self.assertEqual(game.checkout_notes, {"p1": "Injured"})

    def test_suspension_does_not_decline_events(self) -> None:
        self.player.is_suspended = True
        self.player.status_end_date = date(2025, 3, 20)
        self.store.add_event(Event(id="e1", date=at(2025, 3, 14), invited_players=["p1"]))
        self.assertEqual(self.team.find_event("e1").declined_players, [])

    def test_injury_update_reevaluates_and_recovery_clears(self) -> None:
        self.store.add_game(Game(id="g1", date=at(2025, 3, 14, 19), invited_players=["p1"]))
        self.store.add_event(Event(id="e1", date=at(2025, 3, 15), invited_players=["p1"]))

        self.store.update_player("p1", is_injured=True, status_end_date=date(2025, 3, 31))
        self.assertEqual(self.team.find_game("g1").checkout_notes, {"p1": "Injured"})
        self.assertEqual(self.team.find_event("e1").declined_notes, {"p1": "Injured"})

        self.store.update_player("p1", is_injured=False)
        self.assertEqual(self.team.find_game("g1").checked_out_players, [])
        self.assertEqual(self.team.find_event("e1").declined_players, [])

    def test_recovery_keeps_personal_out_reason(self) -> None:
        game = Game(id="g1", date=at(2025, 3, 14, 19), invited_players=["p1"])
        game.check_out("p1", "Out of town")
        self.store.add_game(game)
        self.store.update_player("p1", is_injured=False)
        self.assertEqual(game.checked_out_players, ["p1"])
        self.assertEqual(game.checkout_notes["p1"], "Out of town")


class TestPollsAndLinks(unittest.TestCase):
    """Test cases for team polls and shared links."""

    def setUp(self) -> None:
        self.team = make_team("t1", make_player("p1"), make_player("p2"))
        self.store = make_store(self.team, player_id="p1")
        self.commits = []
        self.store.add_commit_listener(self.commits.append)
        self.store.add_poll(Poll(
            id="q1", question="Team dinner?", created_by="p1",
            options=[PollOption(id="yes", text="Yes"), PollOption(id="no", text="No")],
        ))

    def test_single_choice_vote_moves_between_options(self) -> None:
        self.assertTrue(self.store.vote_poll("q1", "yes", "p2"))
        self.assertTrue(self.store.vote_poll("q1", "no", "p2"))
        poll = self.team.find_poll("q1")
        self.assertEqual(poll.find_option("yes").votes, [])
        self.assertEqual(poll.find_option("no").votes, ["p2"])

    def test_multiple_choice_keeps_votes(self) -> None:
        self.store.update_poll("q1", allow_multiple_votes=True)
        self.store.vote_poll("q1", "yes", "p2")
        self.store.vote_poll("q1", "no", "p2")
        self.store.vote_poll("q1", "no", "p2")
        poll = self.team.find_poll("q1")
        self.assertEqual([o.votes for o in poll.options], [["p2"], ["p2"]])
        self.assertTrue(self.store.unvote_poll("q1", "yes", "p2"))
        self.assertEqual(poll.voters(), ["p2"])

    def test_rejected_votes(self) -> None:
        self.assertFalse(self.store.vote_poll("q1", "maybe", "p2"))
        self.assertFalse(self.store.vote_poll("q1", "yes", "stranger"))
        self.store.update_poll("q1", is_active=False)
        self.assertFalse(self.store.vote_poll("q1", "yes", "p2"))
        self.assertFalse(self.store.vote_poll("missing", "yes", "p2"))
        self.assertEqual(self.team.find_poll("q1").voters(), [])

    def test_update_and_remove_poll(self) -> None:
        self.store.update_poll("q1", expires_at="2025-03-20T00:00:00Z", group_name="Social")
        poll = self.team.find_poll("q1")
        self.assertEqual(poll.expires_at, at(2025, 3, 20, 0))
        with self.assertRaises(ValueError):
            self.store.update_poll("q1", votes=["p1"])
        self.assertTrue(self.store.remove_poll("q1"))
        self.assertFalse(self.store.remove_poll("q1"))
        self.assertEqual(self.team.polls, [])

    def test_team_link_crud(self) -> None:
        link = TeamLink(id="l1", title="League", url="https://league.example.com", created_by="p1")
        self.assertTrue(self.store.add_team_link(link))
        self.assertTrue(self.store.update_team_link("l1", title="League site"))
        self.assertEqual(self.team.find_team_link("l1").title, "League site")
        self.assertFalse(self.store.update_team_link("missing", title="x"))
        self.assertTrue(self.store.remove_team_link("l1"))
        self.assertFalse(self.store.remove_team_link("l1"))

    def test_polls_and_links_serialize_with_team(self) -> None:
        self.store.vote_poll("q1", "yes", "p2")
        self.store.add_team_link(TeamLink(id="l1", title="League", url="https://league.example.com"))
        data = self.team.to_dict()
        self.assertEqual(data["polls"][0]["options"][0]["votes"], ["p2"])
        self.assertEqual(data["teamLinks"][0]["url"], "https://league.example.com")
        restored = Team.from_dict(data)
        self.assertEqual(restored.find_poll("q1").find_option("yes").votes, ["p2"])
        self.assertEqual(restored.find_team_link("l1").title, "League")
