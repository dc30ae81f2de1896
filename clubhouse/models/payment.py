"""
Payment models for the Clubhouse team manager.

A payment period is a named due amount applied to a subset of players. Each
enrolled player settles it through individually recorded payment entries.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Any

from ..utils import utcnow, to_iso, parse_iso


class PaymentStatus(Enum):
    """Settlement status of one player's payment for a period."""
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class PaymentPeriodType(Enum):
    """What a payment period is collecting for."""
    LEAGUE_DUES = "league_dues"
    SUBSTITUTE = "substitute"
    FACILITY_RENTAL = "facility_rental"
    EQUIPMENT = "equipment"
    EVENT = "event"
    REFEREE = "referee"
    MISC = "misc"


def payment_status(paid: float, due: float) -> PaymentStatus:
    """
    Classify a paid total against a due amount.

    Args:
        paid: Total amount paid so far
        due: Amount owed for the period

    Returns:
        PAID when paid >= due, PARTIAL when something but not enough has
        been paid, UNPAID otherwise

    Example:
        >>> payment_status(50, 50).value
        'paid'
        >>> payment_status(49, 50).value
        'partial'
        >>> payment_status(0, 50).value
        'unpaid'
    """
    if paid >= due:
        return PaymentStatus.PAID
    if paid > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


@dataclass
class PaymentEntry:
    """A single recorded payment."""
    id: str
    amount: float
    date: str  # day the money changed hands, YYYY-MM-DD
    note: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "amount": self.amount,
            "date": self.date,
            "note": self.note,
            "createdAt": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PaymentEntry':
        """Create from dictionary for JSON deserialization."""
        return cls(
            id=data["id"],
            amount=data.get("amount", 0),
            date=data.get("date", ""),
            note=data.get("note"),
            created_at=parse_iso(data.get("createdAt")) or utcnow(),
        )


@dataclass
class PlayerPayment:
    """
    One player's payment record within a period.

    Attributes:
        player_id: Player the record belongs to
        status: Status as of the last entry change
        amount: Total paid, always the sum of the entry amounts
        notes: Admin notes
        paid_at: When the status last became paid
        entries: Individual payments in the order they were recorded
    """
    player_id: str
    status: PaymentStatus = PaymentStatus.UNPAID
    amount: float = 0
    notes: Optional[str] = None
    paid_at: Optional[datetime] = None
    entries: List[PaymentEntry] = field(default_factory=list)

    @property
    def entries_total(self) -> float:
        """Sum of all entry amounts."""
        return sum(e.amount for e in self.entries)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "playerId": self.player_id,
            "status": self.status.value,
            "amount": self.amount,
            "notes": self.notes,
            "paidAt": to_iso(self.paid_at),
            "entries": [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerPayment':
        """Create from dictionary for JSON deserialization."""
        return cls(
            player_id=data["playerId"],
            status=PaymentStatus(data.get("status", PaymentStatus.UNPAID.value)),
            amount=data.get("amount") or 0,
            notes=data.get("notes"),
            paid_at=parse_iso(data.get("paidAt")),
            entries=[PaymentEntry.from_dict(e) for e in data.get("entries") or []],
        )


@dataclass
class PaymentPeriod:
    """A named due amount applied to an enrolled subset of players."""
    id: str
    title: str
    amount: float
    period_type: PaymentPeriodType = PaymentPeriodType.LEAGUE_DUES
    due_date: Optional[str] = None
    player_payments: List[PlayerPayment] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    team_total_owed: Optional[float] = None

    def payment_for(self, player_id: str) -> Optional[PlayerPayment]:
        """Find a player's payment record, if one exists."""
        for payment in self.player_payments:
            if payment.player_id == player_id:
                return payment
        return None

    @property
    def enrolled_player_ids(self) -> List[str]:
        """Ids of the players this period applies to."""
        return [p.player_id for p in self.player_payments]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "amount": self.amount,
            "type": self.period_type.value,
            "dueDate": self.due_date,
            "playerPayments": [p.to_dict() for p in self.player_payments],
            "createdAt": to_iso(self.created_at),
            "teamTotalOwed": self.team_total_owed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PaymentPeriod':
        """Create from dictionary for JSON deserialization."""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            amount=data.get("amount", 0),
            period_type=PaymentPeriodType(data.get("type", PaymentPeriodType.LEAGUE_DUES.value)),
            due_date=data.get("dueDate"),
            player_payments=[PlayerPayment.from_dict(p) for p in data.get("playerPayments") or []],
            created_at=parse_iso(data.get("createdAt")) or utcnow(),
            team_total_owed=data.get("teamTotalOwed"),
        )
