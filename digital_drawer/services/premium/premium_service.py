"""
Premium (In-App Purchase) Service

DESIGN DECISION: The purchase SDK is wrapped in an explicitly constructed
service with a lifecycle, never a module-level singleton:

    service = PremiumService(client)
    status = await service.init()      # READY or UNAVAILABLE
    ...
    await service.teardown()

The service is injected wherever premium state is needed. An app without
a purchase client (tests, desktop preview) simply gets UNAVAILABLE and
non-premium behavior.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import structlog

from digital_drawer.audit import AuditLogger
from digital_drawer.config import get_settings


logger = structlog.get_logger(__name__)


class PremiumStatus(str, Enum):
    """Lifecycle state of the premium service."""
    NOT_INITIALIZED = "not_initialized"
    READY = "ready"
    UNAVAILABLE = "unavailable"
    CLOSED = "closed"


class PurchaseError(Exception):
    """Raised by purchase clients when the store cannot be reached."""
    pass


class PurchaseClientInterface(ABC):
    """Abstract interface for a platform purchase SDK."""

    @abstractmethod
    async def configure(self) -> None:
        """Connect to the purchase backend. Raises PurchaseError on failure."""
        pass

    @abstractmethod
    async def get_active_entitlements(self) -> set[str]:
        """Identifiers of the entitlements the user currently owns."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release SDK resources."""
        pass


class PremiumService:
    """
    Tracks whether the user owns the premium entitlement.
    """

    def __init__(
        self,
        client: Optional[PurchaseClientInterface] = None,
        entitlement_id: Optional[str] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._client = client
        self._audit_logger = audit_logger
        self._entitlement_id = entitlement_id or get_settings().premium.entitlement_id
        self._status = PremiumStatus.NOT_INITIALIZED
        self._is_premium = False

    @property
    def status(self) -> PremiumStatus:
        return self._status

    @property
    def is_premium(self) -> bool:
        return self._status == PremiumStatus.READY and self._is_premium

    async def _set_status(self, status: PremiumStatus) -> PremiumStatus:
        self._status = status
        if self._audit_logger:
            await self._audit_logger.log_premium_status(
                status=status.value,
                is_premium=self.is_premium,
            )
        return status

    async def init(self) -> PremiumStatus:
        """
        Configure the purchase client and load entitlements.

        Never raises: a missing or failing client leaves the service
        UNAVAILABLE.
        """
        if self._client is None:
            return await self._set_status(PremiumStatus.UNAVAILABLE)

        try:
            await self._client.configure()
            entitlements = await self._client.get_active_entitlements()
        except PurchaseError as e:
            logger.warning("premium_init_failed", error=str(e))
            self._is_premium = False
            return await self._set_status(PremiumStatus.UNAVAILABLE)

        self._is_premium = self._entitlement_id in entitlements
        return await self._set_status(PremiumStatus.READY)

    async def refresh(self) -> bool:
        """Reload entitlements (e.g. after a purchase or restore)."""
        if self._status != PremiumStatus.READY:
            return False
        try:
            entitlements = await self._client.get_active_entitlements()
        except PurchaseError as e:
            # Keep the last known state until the store is reachable again
            logger.warning("premium_refresh_failed", error=str(e))
            return self._is_premium
        self._is_premium = self._entitlement_id in entitlements
        return self._is_premium

    async def teardown(self) -> None:
        """Close the client. The service cannot be used afterwards."""
        if self._client is not None and self._status == PremiumStatus.READY:
            await self._client.close()
        self._is_premium = False
        await self._set_status(PremiumStatus.CLOSED)
