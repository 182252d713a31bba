"""Premium services package."""

from digital_drawer.services.premium.premium_service import (
    PremiumService,
    PremiumStatus,
    PurchaseClientInterface,
    PurchaseError,
)

__all__ = [
    "PremiumService",
    "PremiumStatus",
    "PurchaseClientInterface",
    "PurchaseError",
]
