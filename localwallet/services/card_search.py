"""
Card search service.

Filters a wallet view by store name for the dashboard search box. The
result is a transient copy; nothing here touches storage.
"""

from localwallet.models.card import Card


def search_cards(cards: list[Card], query: str) -> list[Card]:
    """
    Cards whose store name contains the query, case-insensitively.

    Args:
        cards: A view from CardStore.list_all()
        query: Search text. Blank returns every card.

    Returns:
        Matching cards in their original order.
    """
    needle = query.strip().lower()
    if not needle:
        return list(cards)
    return [card for card in cards if needle in card.store_name.lower()]
