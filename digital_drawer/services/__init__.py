"""Services package."""

from digital_drawer.services.files import (
    BackupFileError,
    BackupFileReadError,
    BackupFileService,
    FileTooLargeError,
    InvalidBackupJSONError,
)
from digital_drawer.services.premium import (
    PremiumService,
    PremiumStatus,
    PurchaseClientInterface,
    PurchaseError,
)
from digital_drawer.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # File services
    "BackupFileError",
    "BackupFileReadError",
    "BackupFileService",
    "FileTooLargeError",
    "InvalidBackupJSONError",
    # Premium services
    "PremiumService",
    "PremiumStatus",
    "PurchaseClientInterface",
    "PurchaseError",
    # Storage services
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
