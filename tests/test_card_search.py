import pytest

from localwallet.models.card import BarcodeFormat, Card
from localwallet.services.card_search import search_cards


def _card(card_id: str, store_name: str) -> Card:
    return Card(
        id=card_id,
        store_name=store_name,
        card_number="1",
        barcode_format=BarcodeFormat.CODE128,
        brand_color="#6366F1",
        created_at=int(card_id),
    )


@pytest.fixture
def cards() -> list[Card]:
    return [
        _card("3", "IKEA Family"),
        _card("2", "Albert Heijn"),
        _card("1", "ikea"),
    ]


class TestSearchCards:
    def test_case_insensitive_substring(self, cards: list[Card]) -> None:
        result = search_cards(cards, "IKEA")

        assert [c.id for c in result] == ["3", "1"]

    def test_middle_of_name(self, cards: list[Card]) -> None:
        assert [c.id for c in search_cards(cards, "heij")] == ["2"]

    def test_query_trimmed(self, cards: list[Card]) -> None:
        assert [c.id for c in search_cards(cards, "  albert ")] == ["2"]

    def test_no_match(self, cards: list[Card]) -> None:
        assert search_cards(cards, "lidl") == []

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_returns_copy(self, cards: list[Card], query: str) -> None:
        result = search_cards(cards, query)

        assert result == cards
        assert result is not cards
