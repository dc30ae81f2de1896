"""
Payment ledger for the active team.

Each player's paid total is the sum of their recorded entries, and their
status follows from that total and the period's due amount. Editing the due
amount never rewrites entries; readers that need the status against the
current due amount use effective_status().
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from ..models import (
    PaymentEntry, PaymentPeriod, PlayerPayment, PaymentStatus, payment_status,
)
from ..utils import utcnow
from .team_store import TeamStore, apply_changes

logger = logging.getLogger(__name__)

_PERIOD_FIELDS = {"title", "amount", "period_type", "due_date", "team_total_owed"}


@dataclass
class PeriodSummary:
    """Collection progress for one payment period."""
    period_id: str
    enrolled: int
    paid: int
    partial: int
    unpaid: int
    collected: float
    outstanding: float


class PaymentLedger:
    """Record payments against the active team's payment periods."""

    def __init__(self, store: TeamStore):
        """
        Initialize PaymentLedger.

        Args:
            store: Entity store holding the active team
        """
        self.store = store

    def _find_period(self, period_id: str) -> Optional[PaymentPeriod]:
        team = self.store.active_team
        if team is None:
            return None
        period = team.find_payment_period(period_id)
        if period is None:
            logger.debug("Payment period %s not found", period_id)
        return period

    # ------------------------------------------------------------------
    # Periods
    # ------------------------------------------------------------------
    def add_payment_period(self, period: PaymentPeriod) -> bool:
        """Add a payment period to the active team."""
        team = self.store.active_team
        if team is None:
            return False
        team.payment_periods.append(period)
        self.store.commit()
        return True

    def remove_payment_period(self, period_id: str) -> bool:
        """Delete a payment period and every payment recorded against it."""
        team = self.store.active_team
        if team is None or team.find_payment_period(period_id) is None:
            return False
        team.payment_periods = [p for p in team.payment_periods if p.id != period_id]
        self.store.commit()
        return True

    def update_payment_period(self, period_id: str, **changes) -> bool:
        """
        Edit a payment period's title, due amount, type or due date.

        Recorded entries and stored statuses are left untouched.

        Args:
            period_id: Period to edit
            **changes: Period attributes to set

        Returns:
            True if the period was found and updated

        Raises:
            ValueError: If an attribute other than the editable ones is given,
                or a value cannot be stored (e.g. an unknown period type)
        """
        unknown = set(changes) - _PERIOD_FIELDS
        if unknown:
            raise ValueError(f"Cannot update payment period fields: {', '.join(sorted(unknown))}")
        period = self._find_period(period_id)
        if period is None:
            return False
        apply_changes(period, changes)
        self.store.commit()
        return True

    def reorder_payment_periods(self, period_ids: List[str]) -> bool:
        """
        Put the payment periods in the given order.

        Args:
            period_ids: Every period id of the active team, in the new order

        Returns:
            False when the ids are not exactly the team's period ids
        """
        team = self.store.active_team
        if team is None:
            return False
        by_id = {p.id: p for p in team.payment_periods}
        if sorted(period_ids) != sorted(by_id):
            logger.warning("Ignoring reorder with mismatched period ids")
            return False
        team.payment_periods = [by_id[pid] for pid in period_ids]
        self.store.commit()
        return True

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------
    def add_payment_entry(self, period_id: str, player_id: str, entry: PaymentEntry) -> bool:
        """
        Record a payment from a player.

        The player's payment record is created on first use. The paid total
        and status are recomputed after the entry is appended.

        Args:
            period_id: Period being paid
            player_id: Paying player
            entry: Payment to record

        Returns:
            True if the period exists
        """
        period = self._find_period(period_id)
        if period is None:
            return False
        payment = period.payment_for(player_id)
        if payment is None:
            payment = PlayerPayment(player_id=player_id)
            period.player_payments.append(payment)
        payment.entries.append(entry)
        self._recompute(period, payment)
        self.store.commit()
        return True

    def remove_payment_entry(self, period_id: str, player_id: str, entry_id: str) -> bool:
        """Delete a recorded payment; the status may move back to partial or unpaid."""
        period = self._find_period(period_id)
        payment = period.payment_for(player_id) if period else None
        if payment is None or not any(e.id == entry_id for e in payment.entries):
            return False
        payment.entries = [e for e in payment.entries if e.id != entry_id]
        self._recompute(period, payment)
        self.store.commit()
        return True

    def update_player_payment(
        self,
        period_id: str,
        player_id: str,
        status: PaymentStatus,
        amount: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """
        Set a player's status by hand, e.g. to mark cash paid outside the app.

        Entries are not touched; the stored paid total is only replaced when
        an amount is given.
        """
        period = self._find_period(period_id)
        if period is None:
            return False
        payment = period.payment_for(player_id)
        if payment is None:
            payment = PlayerPayment(player_id=player_id)
            period.player_payments.append(payment)
        if amount is not None:
            payment.amount = amount
        if notes is not None:
            payment.notes = notes
        self._set_status(payment, status)
        self.store.commit()
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @staticmethod
    def effective_status(period: PaymentPeriod, payment: Optional[PlayerPayment]) -> PaymentStatus:
        """Status of a payment against the period's current due amount."""
        if payment is None:
            return PaymentStatus.UNPAID
        return payment_status(payment.amount, period.amount)

    @staticmethod
    def balance_due(period: PaymentPeriod, player_id: str) -> float:
        """Amount a player still owes for a period (never negative)."""
        payment = period.payment_for(player_id)
        paid = payment.amount if payment else 0
        return max(period.amount - paid, 0)

    def period_summary(self, period: PaymentPeriod) -> PeriodSummary:
        """Count enrolled players by effective status and total the money."""
        counts = {status: 0 for status in PaymentStatus}
        collected = 0.0
        outstanding = 0.0
        for payment in period.player_payments:
            counts[self.effective_status(period, payment)] += 1
            collected += payment.amount
            outstanding += self.balance_due(period, payment.player_id)
        return PeriodSummary(
            period_id=period.id,
            enrolled=len(period.player_payments),
            paid=counts[PaymentStatus.PAID],
            partial=counts[PaymentStatus.PARTIAL],
            unpaid=counts[PaymentStatus.UNPAID],
            collected=collected,
            outstanding=outstanding,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _recompute(self, period: PaymentPeriod, payment: PlayerPayment) -> None:
        payment.amount = payment.entries_total
        self._set_status(payment, payment_status(payment.amount, period.amount))

    @staticmethod
    def _set_status(payment: PlayerPayment, status: PaymentStatus) -> None:
        if status == PaymentStatus.PAID:
            if payment.status != PaymentStatus.PAID or payment.paid_at is None:
                payment.paid_at = utcnow()
        else:
            payment.paid_at = None
        payment.status = status
