"""
Services package for the Clubhouse team manager.

This package contains business logic services for the entity store,
authentication, team switching, invitations, payments, mailboxes,
persistence and remote sync.
"""
from .team_store import TeamStore
from .credential_service import CredentialService
from .mailbox_service import MailboxService
from .payment_ledger import PaymentLedger, PeriodSummary
from .invite_service import InviteLifecycleService, GAME, EVENT
from .persistence_service import PersistenceService
from .team_switcher import TeamSwitcher
from .auth_service import AuthService
from .hydration_service import HydrationService
from .remote_sync import RemoteSyncClient
from .service_factory import ServiceFactory

__all__ = [
    "TeamStore", "CredentialService", "MailboxService", "PaymentLedger", "PeriodSummary",
    "InviteLifecycleService", "GAME", "EVENT", "PersistenceService", "TeamSwitcher",
    "AuthService", "HydrationService", "RemoteSyncClient", "ServiceFactory",
]
