"""
Card Models.

A Card is the only persisted entity in the wallet. Records are stored
and exported using camelCase attribute names, so the conversion helpers
here are the single place where Python names meet the document format.

INVARIANTS:
- id and created_at are assigned once at creation and never change
- All models are frozen (updates produce a new instance)
- Caller-supplied fields pass through CardChanges before they are stored
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class BarcodeFormat(str, Enum):
    """Closed set of barcode symbologies a card can be rendered with."""

    CODE128 = "CODE128"
    EAN13 = "EAN13"
    EAN8 = "EAN8"
    UPC = "UPC"
    CODE39 = "CODE39"
    QR = "QR"


def parse_format(value: object) -> BarcodeFormat | None:
    """
    Parse a format tag from untrusted input.

    Returns:
        The matching BarcodeFormat (case-insensitive), or None if the
        value is not a known tag.
    """
    if isinstance(value, BarcodeFormat):
        return value
    if not isinstance(value, str):
        return None
    try:
        return BarcodeFormat(value.strip().upper())
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class Card:
    """
    A loyalty or membership card stored in the wallet.

    Attributes:
        id: Opaque unique identifier generated at creation
        store_name: Display name of the store (not deduplicated)
        card_number: Raw value encoded in the barcode
        barcode_format: Symbology used to render card_number
        brand_color: Primary color token resolved from store_name at creation
        created_at: Creation time in epoch milliseconds
        logo_url: Resolved logo image, if any
        is_favorite: Favorites sort before everything else
        last_used_at: Last detail view in epoch milliseconds, None if never viewed
    """

    id: str
    store_name: str
    card_number: str
    barcode_format: BarcodeFormat
    brand_color: str
    created_at: int
    logo_url: str | None = None
    is_favorite: bool = False
    last_used_at: int | None = None

    def to_record(self) -> dict[str, Any]:
        """Convert to the persisted document shape."""
        return {
            "id": self.id,
            "storeName": self.store_name,
            "cardNumber": self.card_number,
            "logoUrl": self.logo_url,
            "brandColor": self.brand_color,
            "barcodeFormat": self.barcode_format.value,
            "isFavorite": self.is_favorite,
            "createdAt": self.created_at,
            "lastUsedAt": self.last_used_at,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Card":
        """
        Build a Card from a persisted record.

        Raises:
            KeyError: If a required attribute is missing
            ValueError: If barcodeFormat is not a known tag
        """
        last_used_at = record.get("lastUsedAt")
        return cls(
            id=str(record["id"]),
            store_name=record["storeName"],
            card_number=record["cardNumber"],
            barcode_format=BarcodeFormat(record["barcodeFormat"]),
            brand_color=record["brandColor"],
            created_at=int(record["createdAt"]),
            logo_url=record.get("logoUrl"),
            is_favorite=bool(record.get("isFavorite", False)),
            last_used_at=int(last_used_at) if last_used_at is not None else None,
        )


@dataclass(frozen=True, slots=True)
class CardInput:
    """
    User-supplied data for a new card.

    barcode_format is inferred from card_number when omitted.
    is_favorite lets an import restore the favorite flag of a backup.
    """

    store_name: str
    card_number: str
    barcode_format: BarcodeFormat | None = None
    is_favorite: bool = False


class CardChanges(BaseModel):
    """
    Type-checked card fields supplied by a caller.

    Validates the changes passed to CardStore.update() and the fields of a
    CardInput before anything is written. Only fields the caller actually
    set count; read them back with model_dump(exclude_unset=True).
    Types are strict, so "12345" is not an int and 1 is not a bool.
    """

    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)

    store_name: str = ""
    card_number: str = ""
    barcode_format: BarcodeFormat = BarcodeFormat.CODE128
    logo_url: str | None = None
    brand_color: str = ""
    is_favorite: bool = False
    last_used_at: int | None = None

    @field_validator("store_name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("barcode_format", mode="before")
    @classmethod
    def _known_format(cls, value: Any) -> BarcodeFormat:
        barcode_format = parse_format(value)
        if barcode_format is None:
            raise ValueError(f"unknown barcode format {value!r}")
        return barcode_format


# Fields callers may change through CardStore.update()
UPDATABLE_FIELDS = frozenset(CardChanges.model_fields)

# Fields fixed at creation
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
