"""
Service Factory for dependency injection.

This module builds the entity store and every service around it, so the
store is constructed once at startup and handed to whatever needs it.
"""
import logging
from typing import Optional

from ..utils import AppConfig
from .auth_service import AuthService
from .credential_service import CredentialService
from .hydration_service import HydrationService
from .invite_service import InviteLifecycleService
from .mailbox_service import MailboxService
from .payment_ledger import PaymentLedger
from .persistence_service import PersistenceService
from .remote_sync import RemoteSyncClient
from .team_store import TeamStore
from .team_switcher import TeamSwitcher

logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory for creating service instances with their dependencies injected.

    The store and persistence service are created lazily and shared by every
    service the factory hands out.
    """

    def __init__(self, config: Optional[AppConfig] = None, store: Optional[TeamStore] = None):
        """
        Initialize factory.

        Args:
            config: Application settings (read from the environment by default)
            store: Existing store to wire services around instead of hydrating
        """
        self.config = config or AppConfig.from_env()
        self._store: Optional[TeamStore] = store
        self._persistence_service: Optional[PersistenceService] = None
        self._credential_service: Optional[CredentialService] = None
        self._write_back_attached = False

    def get_store(self) -> TeamStore:
        """
        Get the shared store, hydrating it from disk on first use.

        A freshly hydrated store is checked for a team without an admin and
        repaired. Mutations are written back to the configured data file.
        """
        hydrated = self._store is None
        if hydrated:
            self._store = self.create_hydration_service().hydrate()
        if not self._write_back_attached:
            self._store.add_commit_listener(self._get_persistence_service().write_back)
            self._write_back_attached = True
        if hydrated and HydrationService.repair_missing_admin(self._store):
            logger.warning("Repaired missing team admin after loading %s", self.config.data_file)
        return self._store

    def create_hydration_service(self) -> HydrationService:
        return HydrationService(self._get_persistence_service())

    def create_team_switcher(self) -> TeamSwitcher:
        return TeamSwitcher(self.get_store(), self._get_persistence_service())

    def create_auth_service(self) -> AuthService:
        """
        Create AuthService with injected dependencies.

        Returns:
            Configured AuthService instance
        """
        return AuthService(
            store=self.get_store(),
            switcher=self.create_team_switcher(),
            credentials=self._get_credential_service(),
        )

    def create_invite_service(self) -> InviteLifecycleService:
        return InviteLifecycleService(self.get_store())

    def create_payment_ledger(self) -> PaymentLedger:
        return PaymentLedger(self.get_store())

    def create_mailbox_service(self) -> MailboxService:
        return MailboxService(self.get_store())

    def create_remote_sync(self) -> Optional[RemoteSyncClient]:
        """
        Create the sync client.

        Returns:
            RemoteSyncClient, or None when no sync URL is configured
        """
        if not self.config.sync_url:
            return None
        return RemoteSyncClient(self.config.sync_url, timeout=self.config.sync_timeout)

    def create_complete_service_suite(self) -> dict:
        """
        Create a complete suite of services sharing one store.

        Returns:
            Dictionary containing all configured services
        """
        store = self.get_store()
        switcher = self.create_team_switcher()
        return {
            'store': store,
            'auth': AuthService(store, switcher, self._get_credential_service()),
            'switcher': switcher,
            'invites': self.create_invite_service(),
            'ledger': self.create_payment_ledger(),
            'mailbox': self.create_mailbox_service(),
            'hydration': self.create_hydration_service(),
            'persistence': self._get_persistence_service(),
            'sync': self.create_remote_sync(),
        }

    def _get_persistence_service(self) -> PersistenceService:
        """Get singleton persistence service."""
        if self._persistence_service is None:
            self._persistence_service = PersistenceService(self.config.data_file)
        return self._persistence_service

    def _get_credential_service(self) -> CredentialService:
        """Get singleton credential service."""
        if self._credential_service is None:
            self._credential_service = CredentialService()
        return self._credential_service
