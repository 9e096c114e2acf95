"""
Card store service.

Exclusive owner of the durable card collection. Every write is a
read-modify-write of the whole collection in a single storage slot;
every read returns a freshly sorted view.

INVARIANTS:
- Card ids are unique across the collection
- id and created_at never change after creation
- A failed write leaves the stored collection untouched
- Caller-supplied fields are type-checked before anything is written
- Reads never raise: unreadable storage looks like an empty wallet

There is no locking. Within one process the snapshot for a write is
taken after the only suspension point (the logo lookup), so interleaved
calls don't lose updates. Separate writers sharing one slot are
last-writer-wins.
"""

import logging
import secrets
import string
import time
from collections.abc import Awaitable, Callable
from dataclasses import replace
from functools import lru_cache
from typing import Any

from pydantic import ValidationError

from localwallet.config import settings
from localwallet.models.card import (
    IMMUTABLE_FIELDS,
    UPDATABLE_FIELDS,
    Card,
    CardChanges,
    CardInput,
)
from localwallet.models.failure import (
    CardNotFoundError,
    InvalidCardInputError,
    PersistenceError,
)
from localwallet.parsers.card_document import (
    CorruptDocumentError,
    dump_collection,
    load_collection,
)
from localwallet.parsers.card_export import export_cards, parse_import
from localwallet.services.barcode_format import infer_format
from localwallet.services.brand_resolver import fetch_logo_url, resolve_brand
from localwallet.storage import (
    SqlStorageSlot,
    StorageError,
    StorageSlot,
    build_engine,
    build_session_factory,
    init_db,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], int]
IdFactory = Callable[[int], str]
LogoResolver = Callable[[str], Awaitable[str | None]]
Listener = Callable[[list[Card]], None]

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9


def now_millis() -> int:
    """Current time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def generate_card_id(now: int) -> str:
    """Timestamp plus a random base36 suffix, e.g. "1718000000000_k3j9x0a2b"."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"{now}_{suffix}"


def _sort_key(card: Card) -> tuple[bool, bool, int, int]:
    return (
        not card.is_favorite,
        card.last_used_at is None,
        -(card.last_used_at or 0),
        -card.created_at,
    )


def _check_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """
    Validate caller-supplied card fields.

    Returns:
        The fields that were supplied, with barcode_format parsed to a tag.

    Raises:
        InvalidCardInputError: On the first field with a wrong type or value
    """
    try:
        checked = CardChanges.model_validate(fields)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise InvalidCardInputError(
            f"Invalid {field.replace('_', ' ')}.", detail=error["msg"]
        ) from e
    return checked.model_dump(exclude_unset=True)


def sort_cards(cards: list[Card]) -> list[Card]:
    """
    Order cards for display.

    1. Favorites before non-favorites
    2. Within a tier, used cards before never-used ones, most recent first
    3. Never-used cards by creation time, newest first
    """
    return sorted(cards, key=_sort_key)


class CardStore:
    """
    CRUD, ordering, export and import for the wallet's cards.

    Args:
        slot: Durable slot holding the collection document
        clock: Returns the current time in epoch milliseconds
        id_factory: Builds a new card id from the current time
        logo_resolver: Async logo lookup. None disables logo lookup.
    """

    def __init__(
        self,
        slot: StorageSlot,
        *,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
        logo_resolver: LogoResolver | None = None,
    ) -> None:
        self.slot = slot
        self._clock = clock or now_millis
        self._id_factory = id_factory or generate_card_id
        self._logo_resolver = logo_resolver
        self._listeners: list[Listener] = []

    # --- Storage ---

    def _read_view(self) -> list[Card]:
        try:
            return load_collection(self.slot.read())
        except (StorageError, CorruptDocumentError) as e:
            logger.warning("Card storage unreadable, showing empty wallet: %s", e)
            return []

    def _load_for_write(self) -> list[Card]:
        # Refuse to write over data we could not read
        try:
            return load_collection(self.slot.read())
        except (StorageError, CorruptDocumentError) as e:
            raise PersistenceError(f"Existing cards could not be read: {e}") from e

    def _save(self, cards: list[Card]) -> None:
        try:
            self.slot.write(dump_collection(cards))
        except StorageError as e:
            logger.error("Failed to persist %d cards: %s", len(cards), e)
            raise PersistenceError(str(e)) from e
        self._notify(cards)

    def _notify(self, cards: list[Card]) -> None:
        if not self._listeners:
            return
        view = sort_cards(cards)
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("Card store listener %r failed", listener)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked with the sorted view after each successful write.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Reads ---

    def list_all(self) -> list[Card]:
        """All cards in display order. Empty list if storage is unreadable."""
        return sort_cards(self._read_view())

    def get_by_id(self, card_id: str) -> Card | None:
        """Get a single card, or None if no card has this id."""
        for card in self._read_view():
            if card.id == card_id:
                return card
        return None

    def count(self) -> int:
        """Number of stored cards."""
        return len(self._read_view())

    # --- Writes ---

    async def _lookup_logo(self, store_name: str) -> str | None:
        if self._logo_resolver is None:
            return None
        try:
            return await self._logo_resolver(store_name)
        except Exception as e:
            logger.debug("Logo lookup for %r failed: %s", store_name, e)
            return None

    def _new_id(self, now: int, cards: list[Card]) -> str:
        taken = {card.id for card in cards}
        card_id = self._id_factory(now)
        while card_id in taken:
            card_id = self._id_factory(now)
        return card_id

    async def create(self, card_input: CardInput) -> Card:
        """
        Add a new card.

        The barcode format is inferred when not supplied; brand color and
        logo are resolved from the store name. The card is written in a
        single append after the logo lookup finishes.

        Raises:
            InvalidCardInputError: If the store name is empty, a field has
                the wrong type or the barcode format is not a known tag
            PersistenceError: If the card could not be saved
        """
        fields: dict[str, Any] = {
            "store_name": card_input.store_name,
            "card_number": card_input.card_number,
            "is_favorite": card_input.is_favorite,
        }
        if card_input.barcode_format is not None:
            fields["barcode_format"] = card_input.barcode_format
        checked = _check_fields(fields)

        barcode_format = checked.get("barcode_format") or infer_format(card_input.card_number)
        style = resolve_brand(card_input.store_name)
        logo_url = await self._lookup_logo(card_input.store_name)

        cards = self._load_for_write()
        now = self._clock()
        card = Card(
            id=self._new_id(now, cards),
            store_name=card_input.store_name,
            card_number=card_input.card_number,
            barcode_format=barcode_format,
            brand_color=style.primary_color,
            created_at=now,
            logo_url=logo_url,
            is_favorite=card_input.is_favorite,
            last_used_at=None,
        )
        self._save([card, *cards])
        logger.debug("Created card %s for %r", card.id, card.store_name)
        return card

    def update(self, card_id: str, **changes: Any) -> Card | None:
        """
        Merge changes into a card.

        Barcode format and brand color are never re-derived, even when
        store_name or card_number change.

        Returns:
            The updated card, or None if no card has this id.

        Raises:
            InvalidCardInputError: If a change targets id, created_at or an
                unknown field, or carries an invalid value
            PersistenceError: If the change could not be saved
        """
        changes = self._validate_changes(changes)

        cards = self._load_for_write()
        for index, card in enumerate(cards):
            if card.id == card_id:
                updated = replace(card, **changes)
                cards[index] = updated
                self._save(cards)
                return updated
        return None

    @staticmethod
    def _validate_changes(changes: dict[str, Any]) -> dict[str, Any]:
        immutable = IMMUTABLE_FIELDS & changes.keys()
        if immutable:
            raise InvalidCardInputError(
                "This field cannot be changed.", detail=", ".join(sorted(immutable))
            )

        unknown = changes.keys() - UPDATABLE_FIELDS
        if unknown:
            raise InvalidCardInputError("Unknown card field.", detail=", ".join(sorted(unknown)))

        return _check_fields(changes)

    def delete(self, card_id: str) -> bool:
        """
        Delete a card permanently.

        Returns:
            True if deleted, False if not found.
        """
        cards = self._load_for_write()
        remaining = [card for card in cards if card.id != card_id]
        if len(remaining) == len(cards):
            return False

        self._save(remaining)
        return True

    def toggle_favorite(self, card_id: str) -> bool:
        """
        Flip a card's favorite flag.

        Returns:
            The new favorite state.

        Raises:
            CardNotFoundError: If no card has this id
        """
        cards = self._load_for_write()
        for index, card in enumerate(cards):
            if card.id == card_id:
                cards[index] = replace(card, is_favorite=not card.is_favorite)
                self._save(cards)
                return cards[index].is_favorite
        raise CardNotFoundError(card_id)

    def mark_used(self, card_id: str) -> None:
        """
        Record that a card was just shown.

        Raises:
            CardNotFoundError: If no card has this id
        """
        cards = self._load_for_write()
        for index, card in enumerate(cards):
            if card.id == card_id:
                cards[index] = replace(card, last_used_at=self._clock())
                self._save(cards)
                return
        raise CardNotFoundError(card_id)

    def wipe_all(self) -> None:
        """Remove every card. Irreversible."""
        try:
            self.slot.clear()
        except StorageError as e:
            raise PersistenceError(str(e)) from e
        logger.info("Wiped all cards")
        self._notify([])

    # --- Backup ---

    def export_all(self) -> str:
        """Export the sorted view as a backup document."""
        return export_cards(self.list_all())

    async def import_all(self, text: str) -> int:
        """
        Import cards from a backup document.

        Every usable record is created as a new card (new id, timestamps
        and brand color). Records without a storeName or cardNumber are
        skipped.

        Returns:
            Number of cards imported.

        Raises:
            InvalidImportFormatError: If the document is not a JSON array.
                Nothing is imported in that case.
            PersistenceError: If a card could not be saved. Cards imported
                before the failure are kept.
        """
        inputs = parse_import(text)

        imported = 0
        for card_input in inputs:
            await self.create(card_input)
            imported += 1

        logger.info("Imported %d cards", imported)
        return imported


@lru_cache(maxsize=1)
def get_card_store() -> CardStore:
    """
    Process-wide card store backed by the configured database.

    Cached after first call.
    """
    engine = build_engine()
    init_db(engine)
    slot = SqlStorageSlot(settings.storage_key, build_session_factory(engine))
    logo_resolver = fetch_logo_url if settings.logo_lookup_enabled else None
    return CardStore(slot, logo_resolver=logo_resolver)
