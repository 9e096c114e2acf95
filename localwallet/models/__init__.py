from localwallet.models.brand import BrandAssets, BrandStyle
from localwallet.models.card import (
    IMMUTABLE_FIELDS,
    UPDATABLE_FIELDS,
    BarcodeFormat,
    Card,
    CardChanges,
    CardInput,
)
from localwallet.models.failure import (
    CardNotFoundError,
    FailureDetail,
    FailureKind,
    InvalidCardInputError,
    InvalidImportFormatError,
    KnownError,
    PersistenceError,
    describe_failure,
)

__all__ = [
    "BarcodeFormat",
    "BrandAssets",
    "BrandStyle",
    "Card",
    "CardChanges",
    "CardInput",
    "CardNotFoundError",
    "FailureDetail",
    "FailureKind",
    "IMMUTABLE_FIELDS",
    "InvalidCardInputError",
    "InvalidImportFormatError",
    "KnownError",
    "PersistenceError",
    "UPDATABLE_FIELDS",
    "describe_failure",
]
