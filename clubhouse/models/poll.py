"""
Poll models for the Clubhouse team manager.

A poll is one question with a list of options; each option keeps the ids of
the players who voted for it. Several polls sharing a group id are shown as
one multi-question poll.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Any

from ..utils import utcnow, to_iso, parse_iso


@dataclass
class PollOption:
    """One answer to a poll question."""
    id: str
    text: str
    votes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "votes": list(self.votes)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PollOption':
        return cls(id=data["id"], text=data.get("text", ""), votes=list(data.get("votes") or []))


@dataclass
class Poll:
    """
    A team poll question.

    Attributes:
        id: Unique poll id
        question: Question text
        options: Answers in display order
        created_by: Player id of the author
        created_at: Creation time
        expires_at: Optional closing time
        is_active: Whether the poll still takes votes
        allow_multiple_votes: Whether a player may pick more than one option
        group_id: Groups several questions into one poll
        group_name: Display name of the group
        is_required: Whether answering is required
    """
    id: str
    question: str
    options: List[PollOption] = field(default_factory=list)
    created_by: str = ""
    created_at: datetime = field(default_factory=utcnow)
    expires_at: Optional[datetime] = None
    is_active: bool = True
    allow_multiple_votes: bool = False
    group_id: Optional[str] = None
    group_name: Optional[str] = None
    is_required: bool = False

    def find_option(self, option_id: str) -> Optional[PollOption]:
        """Find an option by id."""
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def vote(self, option_id: str, player_id: str) -> bool:
        """
        Record a player's vote for an option.

        Without multiple votes, the player's vote is removed from every other
        option first. Voting twice for the same option is a no-op.

        Returns:
            True if the option exists
        """
        target = self.find_option(option_id)
        if target is None:
            return False
        if not self.allow_multiple_votes:
            for option in self.options:
                if option is not target and player_id in option.votes:
                    option.votes.remove(player_id)
        if player_id not in target.votes:
            target.votes.append(player_id)
        return True

    def unvote(self, option_id: str, player_id: str) -> bool:
        """Remove a player's vote from an option. Returns True if the option exists."""
        target = self.find_option(option_id)
        if target is None:
            return False
        target.votes = [v for v in target.votes if v != player_id]
        return True

    def voters(self) -> List[str]:
        """Ids of every player who voted, in first-vote order."""
        seen: List[str] = []
        for option in self.options:
            seen.extend(v for v in option.votes if v not in seen)
        return seen

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "question": self.question,
            "options": [o.to_dict() for o in self.options],
            "createdBy": self.created_by,
            "createdAt": to_iso(self.created_at),
            "isActive": self.is_active,
            "allowMultipleVotes": self.allow_multiple_votes,
            "isRequired": self.is_required,
        }
        if self.expires_at:
            data["expiresAt"] = to_iso(self.expires_at)
        if self.group_id:
            data["groupId"] = self.group_id
        if self.group_name:
            data["groupName"] = self.group_name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Poll':
        return cls(
            id=data["id"],
            question=data.get("question", ""),
            options=[PollOption.from_dict(o) for o in data.get("options") or []],
            created_by=data.get("createdBy", ""),
            created_at=parse_iso(data.get("createdAt")) or utcnow(),
            expires_at=parse_iso(data.get("expiresAt")),
            is_active=data.get("isActive", True),
            allow_multiple_votes=data.get("allowMultipleVotes", False),
            group_id=data.get("groupId"),
            group_name=data.get("groupName"),
            is_required=data.get("isRequired", False),
        )
