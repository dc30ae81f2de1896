"""
Unit tests for MailboxService notifications and chat.
"""
import unittest
from datetime import timedelta

from clubhouse.models import ChatMessage, MentionType, Notification, NotificationType
from clubhouse.services import MailboxService

from builders import at, make_player, make_store, make_team


def notification(notification_id: str, to_player_id: str, **extra) -> Notification:
    return Notification(
        id=notification_id, type=NotificationType.GAME_REMINDER,
        title="Reminder", message="Game tonight", to_player_id=to_player_id, **extra,
    )


class TestNotifications(unittest.TestCase):
    """Test cases for the notification mailbox."""

    def setUp(self) -> None:
        self.team = make_team("t1", make_player("p1"), make_player("p2"))
        self.store = make_store(self.team, player_id="p1")
        self.mailbox = MailboxService(self.store)

    def test_newest_first(self) -> None:
        self.mailbox.add_notification(notification("n1", "p1"))
        self.mailbox.add_notification(notification("n2", "p1"))
        self.assertEqual([n.id for n in self.team.notifications], ["n2", "n1"])

    def test_unread_count_per_player(self) -> None:
        self.mailbox.add_notification(notification("n1", "p1"))
        self.mailbox.add_notification(notification("n2", "p1", read=True))
        self.mailbox.add_notification(notification("n3", "p2"))
        self.assertEqual(self.mailbox.unread_count(), 1)
        self.assertEqual(self.mailbox.unread_count("p2"), 1)

    def test_mark_read_and_mark_all(self) -> None:
        self.mailbox.add_notification(notification("n1", "p1"))
        self.mailbox.add_notification(notification("n2", "p1"))
        self.mailbox.add_notification(notification("n3", "p2"))
        self.assertTrue(self.mailbox.mark_notification_read("n1"))
        self.assertFalse(self.mailbox.mark_notification_read("missing"))
        self.assertEqual(self.mailbox.mark_all_read("p1"), 1)
        self.assertEqual(self.mailbox.unread_count("p1"), 0)
        self.assertEqual(self.mailbox.unread_count("p2"), 1)

    def test_remove_and_clear(self) -> None:
        self.mailbox.add_notification(notification("n1", "p1"))
        self.mailbox.add_notification(notification("n2", "p2"))
        self.assertTrue(self.mailbox.remove_notification("n1"))
        self.assertFalse(self.mailbox.remove_notification("n1"))
        self.mailbox.clear_notifications("p2")
        self.assertEqual(self.team.notifications, [])

    def test_push_token_and_preferences(self) -> None:
        self.assertTrue(self.mailbox.set_push_token("p1", "device-token"))
        self.mailbox.update_notification_preferences("p1", chat_messages=False)
        prefs = self.mailbox.notification_preferences("p1")
        self.assertEqual(prefs.push_token, "device-token")
        self.assertFalse(prefs.chat_messages)
        with self.assertRaises(ValueError):
            self.mailbox.update_notification_preferences("p1", carrier_pigeon=True)
        self.assertIsNone(self.mailbox.notification_preferences("missing"))


class TestChat(unittest.TestCase):
    """Test cases for chat read markers and unread counts."""

    def setUp(self) -> None:
        self.team = make_team("t1", make_player("p1"), make_player("p2"))
        self.store = make_store(self.team, player_id="p1")
        self.mailbox = MailboxService(self.store)
        self.read_at = at(2025, 3, 1, 12)

    def _message(self, message_id: str, sender_id: str, offset_minutes: int, **extra) -> ChatMessage:
        return ChatMessage(id=message_id, sender_id=sender_id, message="hey",
                           created_at=self.read_at + timedelta(minutes=offset_minutes), **extra)

    def test_unread_counts_only_newer_messages_from_others(self) -> None:
        self.mailbox.mark_chat_read("p1", self.read_at)
        self.mailbox.add_chat_message(self._message("m1", "p2", -1))
        self.mailbox.add_chat_message(self._message("m2", "p2", 1))
        self.mailbox.add_chat_message(self._message("m3", "p2", 2))
        self.mailbox.add_chat_message(self._message("m4", "p1", 3))
        self.assertEqual(self.mailbox.unread_chat_count("p1"), 2)

    def test_never_read_counts_all_from_others(self) -> None:
        self.mailbox.add_chat_message(self._message("m1", "p2", -10))
        self.mailbox.add_chat_message(self._message("m2", "p1", -5))
        self.assertEqual(self.mailbox.unread_chat_count("p1"), 1)

    def test_read_marker_only_moves_forward(self) -> None:
        self.assertTrue(self.mailbox.mark_chat_read("p1", self.read_at))
        self.assertFalse(self.mailbox.mark_chat_read("p1", self.read_at - timedelta(hours=1)))
        self.assertEqual(self.team.chat_last_read_at["p1"], self.read_at)

    def test_delete_and_mentions(self) -> None:
        self.mailbox.add_chat_message(self._message("m1", "p2", 1, mention_type=MentionType.ALL))
        self.mailbox.add_chat_message(self._message(
            "m2", "p2", 2, mentioned_player_ids=["p2"], mention_type=MentionType.SPECIFIC))
        self.assertEqual([m.id for m in self.mailbox.messages_mentioning("p1")], ["m1"])
        self.assertTrue(self.mailbox.delete_chat_message("m1"))
        self.assertFalse(self.mailbox.delete_chat_message("m1"))
        self.assertEqual(self.mailbox.messages_mentioning("p1"), [])
