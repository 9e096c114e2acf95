"""
Wallet backup export/import format.

Export format (JSON array, 2-space indent):
    [
      {
        "storeName": "IKEA",
        "cardNumber": "1234567890128",
        "barcodeFormat": "EAN13",
        "isFavorite": true
      }
    ]

Only user-meaningful fields are exported. Identifiers, timestamps, logos and
colors are re-derived on import.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from localwallet.models.card import BarcodeFormat, Card, CardInput, parse_format
from localwallet.models.failure import InvalidImportFormatError

logger = logging.getLogger(__name__)


class ExportedCard(BaseModel):
    """One record of an export document."""

    model_config = ConfigDict(populate_by_name=True)

    store_name: str = Field(..., alias="storeName")
    card_number: str = Field(..., alias="cardNumber")
    barcode_format: BarcodeFormat = Field(..., alias="barcodeFormat")
    is_favorite: bool = Field(default=False, alias="isFavorite")

    @classmethod
    def from_card(cls, card: Card) -> "ExportedCard":
        return cls(
            store_name=card.store_name,
            card_number=card.card_number,
            barcode_format=card.barcode_format,
            is_favorite=card.is_favorite,
        )


class ImportedCard(BaseModel):
    """
    One record of an import document.

    Lenient towards hand-edited backups: unknown fields are ignored,
    an unknown barcodeFormat counts as missing and a non-boolean
    isFavorite counts as False.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    store_name: str = Field(..., alias="storeName")
    card_number: str = Field(..., alias="cardNumber")
    barcode_format: BarcodeFormat | None = Field(default=None, alias="barcodeFormat")
    is_favorite: bool = Field(default=False, alias="isFavorite")

    @field_validator("store_name", "card_number")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("barcode_format", mode="before")
    @classmethod
    def _lenient_format(cls, value: Any) -> BarcodeFormat | None:
        return parse_format(value)

    @field_validator("is_favorite", mode="before")
    @classmethod
    def _strict_flag(cls, value: Any) -> bool:
        return value is True

    def to_input(self) -> CardInput:
        return CardInput(
            store_name=self.store_name,
            card_number=self.card_number,
            barcode_format=self.barcode_format,
            is_favorite=self.is_favorite,
        )


def export_cards(cards: list[Card]) -> str:
    """
    Serialize cards to the export document.

    Args:
        cards: Cards in the order they should appear (normally the sorted view)

    Returns:
        JSON text. "[]" for an empty wallet.
    """
    records = [
        ExportedCard.from_card(card).model_dump(mode="json", by_alias=True) for card in cards
    ]
    return json.dumps(records, indent=2, ensure_ascii=False)


def parse_import(text: str) -> list[CardInput]:
    """
    Parse an import document into card inputs.

    Args:
        text: Raw document text (usually file contents)

    Returns:
        One CardInput per usable record, in document order. Records
        missing a non-empty storeName or cardNumber are skipped.

    Raises:
        InvalidImportFormatError: If the text is not JSON or is not an array
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise InvalidImportFormatError(f"Not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise InvalidImportFormatError(f"Expected a JSON array, got {type(data).__name__}")

    inputs: list[CardInput] = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            logger.debug("Skipping import record %d: not an object", position)
            continue
        try:
            record = ImportedCard.model_validate(item)
        except ValidationError as e:
            logger.debug("Skipping import record %d: %s", position, e.errors()[0]["msg"])
            continue
        inputs.append(record.to_input())

    return inputs
