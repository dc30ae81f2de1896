"""
Notification and chat mailboxes for the active team.

Notifications are kept newest first and each one targets exactly one
player. Chat messages are kept oldest first; each player has a read marker
that only ever moves forward.
"""
import logging
from datetime import datetime
from typing import List, Optional

from ..models import Notification, ChatMessage, NotificationPreferences
from ..utils import utcnow
from .team_store import TeamStore, apply_changes

logger = logging.getLogger(__name__)


class MailboxService:
    """Operations on the active team's notifications and chat."""

    def __init__(self, store: TeamStore):
        """
        Initialize MailboxService.

        Args:
            store: Entity store holding the active team
        """
        self.store = store

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def add_notification(self, notification: Notification) -> bool:
        """Prepend a notification to the active team's list."""
        team = self.store.active_team
        if team is None:
            return False
        team.notifications.insert(0, notification)
        self.store.commit()
        return True

    def mark_notification_read(self, notification_id: str) -> bool:
        """Mark one notification as read."""
        team = self.store.active_team
        if team is None:
            return False
        for notification in team.notifications:
            if notification.id == notification_id:
                notification.read = True
                self.store.commit()
                return True
        return False

    def mark_all_read(self, player_id: Optional[str] = None) -> int:
        """
        Mark every notification addressed to a player as read.

        Args:
            player_id: Recipient (defaults to the signed-in player)

        Returns:
            Number of notifications that changed
        """
        team = self.store.active_team
        player_id = player_id or self.store.state.current_player_id
        if team is None or player_id is None:
            return 0
        changed = 0
        for notification in team.notifications:
            if notification.to_player_id == player_id and not notification.read:
                notification.read = True
                changed += 1
        if changed:
            self.store.commit()
        return changed

    def remove_notification(self, notification_id: str) -> bool:
        """Delete a notification."""
        team = self.store.active_team
        if team is None or not any(n.id == notification_id for n in team.notifications):
            return False
        team.notifications = [n for n in team.notifications if n.id != notification_id]
        self.store.commit()
        return True

    def clear_notifications(self, player_id: Optional[str] = None) -> bool:
        """Delete every notification for a player, or all of them when no player is given."""
        team = self.store.active_team
        if team is None:
            return False
        if player_id is None:
            team.notifications = []
        else:
            team.notifications = [n for n in team.notifications if n.to_player_id != player_id]
        self.store.commit()
        return True

    def notifications_for(self, player_id: str) -> List[Notification]:
        """Notifications addressed to a player, newest first."""
        team = self.store.active_team
        if team is None:
            return []
        return [n for n in team.notifications if n.to_player_id == player_id]

    def unread_count(self, player_id: Optional[str] = None) -> int:
        """Count unread notifications for a player (defaults to the signed-in player)."""
        player_id = player_id or self.store.state.current_player_id
        if player_id is None:
            return 0
        return sum(1 for n in self.notifications_for(player_id) if not n.read)

    # ------------------------------------------------------------------
    # Delivery preferences
    # ------------------------------------------------------------------
    def set_push_token(self, player_id: str, token: Optional[str]) -> bool:
        """Store the device token notifications for a player are delivered to."""
        player = self.store.find_player(player_id)
        if player is None:
            return False
        player.notification_preferences.push_token = token
        self.store.commit()
        return True

    def notification_preferences(self, player_id: str) -> Optional[NotificationPreferences]:
        """A player's notification settings."""
        player = self.store.find_player(player_id)
        return player.notification_preferences if player else None

    def update_notification_preferences(self, player_id: str, **changes) -> bool:
        """
        Change a player's notification settings.

        Raises:
            ValueError: If an unknown preference or invalid value is given
        """
        player = self.store.find_player(player_id)
        if player is None:
            return False
        apply_changes(player.notification_preferences, changes)
        self.store.commit()
        return True

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------
    def add_chat_message(self, message: ChatMessage) -> bool:
        """Append a message to the team chat."""
        team = self.store.active_team
        if team is None:
            return False
        team.chat_messages.append(message)
        self.store.commit()
        return True

    def delete_chat_message(self, message_id: str) -> bool:
        """Remove a chat message."""
        team = self.store.active_team
        if team is None or not any(m.id == message_id for m in team.chat_messages):
            return False
        team.chat_messages = [m for m in team.chat_messages if m.id != message_id]
        self.store.commit()
        return True

    def mark_chat_read(self, player_id: str, at: Optional[datetime] = None) -> bool:
        """
        Record that a player has read the chat up to a point in time.

        The marker never moves backwards; an earlier time is ignored.

        Args:
            player_id: Reader
            at: Read time (defaults to now)

        Returns:
            True if the marker moved
        """
        team = self.store.active_team
        if team is None:
            return False
        at = at or utcnow()
        previous = team.chat_last_read_at.get(player_id)
        if previous is not None and at <= previous:
            logger.debug("Chat read marker for %s not moved back to %s", player_id, at)
            return False
        team.chat_last_read_at[player_id] = at
        self.store.commit()
        return True

    def unread_chat_count(self, player_id: str) -> int:
        """
        Count chat messages a player has not seen.

        Only messages from other senders count. Without a read marker every
        such message is unread.
        """
        team = self.store.active_team
        if team is None:
            return 0
        last_read = team.chat_last_read_at.get(player_id)
        return sum(
            1 for m in team.chat_messages
            if m.sender_id != player_id and (last_read is None or m.created_at > last_read)
        )

    def messages_mentioning(self, player_id: str) -> List[ChatMessage]:
        """Chat messages that mention a player directly or via @all."""
        team = self.store.active_team
        if team is None:
            return []
        return [m for m in team.chat_messages if m.mentions(player_id)]
