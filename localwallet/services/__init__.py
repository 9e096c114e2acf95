"""
LocalWallet services.

Business logic for card storage, barcode formats and brand styling.
"""

from localwallet.services.barcode_format import (
    FormatOption,
    all_formats,
    display_name,
    infer_format,
    normalize_card_number,
)
from localwallet.services.brand_resolver import (
    fetch_logo_url,
    get_initials,
    resolve_brand,
    resolve_brand_assets,
)
from localwallet.services.card_search import search_cards
from localwallet.services.card_store import (
    CardStore,
    generate_card_id,
    get_card_store,
    now_millis,
    sort_cards,
)
from localwallet.services.collaborators import (
    BarcodeRenderer,
    BarcodeScanner,
    capture_card_number,
    card_input_from_scan,
    render_card,
    render_format,
)

__all__ = [
    # Format classifier
    "FormatOption",
    "all_formats",
    "display_name",
    "infer_format",
    "normalize_card_number",
    # Brand resolver
    "fetch_logo_url",
    "get_initials",
    "resolve_brand",
    "resolve_brand_assets",
    # Card store
    "CardStore",
    "generate_card_id",
    "get_card_store",
    "now_millis",
    "sort_cards",
    "search_cards",
    # External collaborators
    "BarcodeRenderer",
    "BarcodeScanner",
    "capture_card_number",
    "card_input_from_scan",
    "render_card",
    "render_format",
]
