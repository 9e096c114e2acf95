"""
Brand resolution for store names.

Resolution happens in two phases:
1. resolve_brand(): synchronous and total. Known-brand table first, then a
   deterministic palette entry derived from a hash of the name.
2. fetch_logo_url(): asynchronous and best-effort. Probes a logo service
   for a few candidate domains. Any failure means "no logo".

Phase 1 never waits on phase 2.
"""

import logging
import re

import httpx

from localwallet.config import FAVICON_SERVICE_URL, LOGO_CANDIDATE_TLDS, settings
from localwallet.models.brand import BrandAssets, BrandStyle

logger = logging.getLogger(__name__)

# Known brands, keyed by normalized (lowercase) name.
# Table order is the tie-break for partial matches: keep it stable.
KNOWN_BRANDS: dict[str, BrandStyle] = {
    "ikea": BrandStyle("from-blue-600 to-yellow-500", "#0058A3"),
    "coop": BrandStyle("from-red-600 to-red-500", "#E2001A"),
    "leroy merlin": BrandStyle("from-green-600 to-green-500", "#78BE20"),
    "leroymerlin": BrandStyle("from-green-600 to-green-500", "#78BE20"),
    "target": BrandStyle("from-red-600 to-red-400", "#CC0000"),
    "starbucks": BrandStyle("from-green-800 to-green-600", "#00704A"),
    "costco": BrandStyle("from-red-700 to-blue-800", "#005DAA"),
    "walmart": BrandStyle("from-blue-600 to-blue-400", "#0071DC"),
    "amazon": BrandStyle("from-orange-500 to-yellow-400", "#FF9900"),
    "apple": BrandStyle("from-gray-800 to-gray-600", "#A3AAAE"),
    "nike": BrandStyle("from-orange-600 to-red-500", "#F56600"),
    "adidas": BrandStyle("from-gray-900 to-gray-700", "#000000"),
    "lidl": BrandStyle("from-blue-600 to-yellow-400", "#0050AA"),
    "aldi": BrandStyle("from-blue-800 to-orange-500", "#00467F"),
    "carrefour": BrandStyle("from-blue-700 to-red-500", "#004E9F"),
    "esselunga": BrandStyle("from-red-600 to-red-500", "#E4002B"),
    "conad": BrandStyle("from-red-700 to-orange-500", "#E4002B"),
    "decathlon": BrandStyle("from-blue-600 to-blue-400", "#0082C3"),
    "mediaworld": BrandStyle("from-red-600 to-red-500", "#E30613"),
    "unieuro": BrandStyle("from-orange-600 to-orange-500", "#FF6600"),
    "euronics": BrandStyle("from-blue-700 to-blue-500", "#003399"),
    "sephora": BrandStyle("from-gray-900 to-gray-800", "#000000"),
    "zara": BrandStyle("from-gray-900 to-gray-700", "#000000"),
    "hm": BrandStyle("from-red-600 to-red-500", "#E4002B"),
    "h&m": BrandStyle("from-red-600 to-red-500", "#E4002B"),
    "albert heijn": BrandStyle("from-sky-500 to-sky-400", "#00A0E2"),
    "jumbo": BrandStyle("from-yellow-400 to-yellow-300", "#FFD100"),
    "spar": BrandStyle("from-green-700 to-red-600", "#009639"),
    "mcdonalds": BrandStyle("from-red-600 to-yellow-400", "#FFC72C"),
    "home depot": BrandStyle("from-orange-600 to-orange-500", "#F96302"),
    "hornbach": BrandStyle("from-orange-500 to-orange-400", "#FF6600"),
    "primark": BrandStyle("from-blue-700 to-sky-500", "#0063B2"),
    "mediamarkt": BrandStyle("from-red-700 to-red-500", "#DF0000"),
    "coolblue": BrandStyle("from-sky-600 to-orange-400", "#0090E3"),
    "best buy": BrandStyle("from-blue-800 to-yellow-400", "#0046BE"),
    "hema": BrandStyle("from-red-700 to-red-500", "#CC0000"),
    "kruidvat": BrandStyle("from-red-600 to-red-500", "#E30613"),
    "plus": BrandStyle("from-red-600 to-red-500", "#E30613"),
    "gamma": BrandStyle("from-green-700 to-green-500", "#009639"),
    "praxis": BrandStyle("from-green-600 to-green-400", "#00A651"),
    "action": BrandStyle("from-green-600 to-blue-600", "#00A651"),
    "etos": BrandStyle("from-lime-600 to-lime-400", "#7AB800"),
}

# Fallback palette for unknown stores
DEFAULT_PALETTE: tuple[BrandStyle, ...] = (
    BrandStyle("from-indigo-600 to-indigo-400", "#6366F1"),
    BrandStyle("from-violet-600 to-violet-400", "#8B5CF6"),
    BrandStyle("from-pink-600 to-pink-400", "#EC4899"),
    BrandStyle("from-red-600 to-red-400", "#EF4444"),
    BrandStyle("from-amber-600 to-amber-400", "#F59E0B"),
    BrandStyle("from-green-600 to-green-400", "#22C55E"),
    BrandStyle("from-teal-600 to-teal-400", "#14B8A6"),
    BrandStyle("from-cyan-600 to-cyan-400", "#06B6D4"),
    BrandStyle("from-blue-600 to-blue-400", "#3B82F6"),
    BrandStyle("from-purple-600 to-purple-400", "#A855F7"),
)

# Characters dropped when turning a store name into a domain label
_DOMAIN_STRIP_PATTERN = re.compile(r"[^a-z0-9]")


def normalize_store_name(store_name: str) -> str:
    """Lowercase and trim a store name for table lookups."""
    return store_name.strip().lower()


def find_known_brand(store_name: str) -> BrandStyle | None:
    """
    Look up a store in the known-brand table.

    Exact match wins. Otherwise the first table entry where the name
    contains the key, or the key contains the name, is returned.
    """
    normalized = normalize_store_name(store_name)
    if not normalized:
        return None

    exact = KNOWN_BRANDS.get(normalized)
    if exact is not None:
        return exact

    for brand, style in KNOWN_BRANDS.items():
        if brand in normalized or normalized in brand:
            return style

    return None


def stable_name_hash(name: str) -> int:
    """
    32-bit string hash (h * 31 + c), stable across processes.

    Python's built-in hash() is salted per process, so it can't be used
    for colors that must survive a restart.
    """
    value = 0
    for char in name:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def fallback_style(store_name: str) -> BrandStyle:
    """Deterministic palette entry for a store name."""
    index = abs(stable_name_hash(normalize_store_name(store_name))) % len(DEFAULT_PALETTE)
    return DEFAULT_PALETTE[index]


def resolve_brand(store_name: str) -> BrandStyle:
    """
    Resolve the visual identity for a store name.

    Idempotent and free of side effects. Never fails.
    """
    return find_known_brand(store_name) or fallback_style(store_name)


def get_initials(store_name: str) -> str:
    """
    Two-letter avatar text for a store without a logo.

    "Albert Heijn" -> "AH", "Lidl" -> "LI".
    """
    words = store_name.split()
    if not words:
        return ""
    if len(words) == 1:
        return words[0][:2].upper()
    return (words[0][0] + words[1][0]).upper()


def logo_candidates(store_name: str) -> list[str]:
    """Logo URLs to probe for a store, in order."""
    label = _DOMAIN_STRIP_PATTERN.sub("", normalize_store_name(store_name))
    if not label:
        return []
    base_url = settings.logo_service_url.rstrip("/")
    return [f"{base_url}/{label}.{tld}" for tld in LOGO_CANDIDATE_TLDS]


def favicon_url(store_name: str) -> str | None:
    """Favicon service URL used when no logo probe succeeds."""
    label = _DOMAIN_STRIP_PATTERN.sub("", normalize_store_name(store_name))
    if not label:
        return None
    return f"{FAVICON_SERVICE_URL}?domain={label}.com&sz=128"


async def _probe(client: httpx.AsyncClient, url: str, timeout: float) -> bool:
    """HEAD a candidate URL. Any error counts as a miss."""
    try:
        response = await client.head(url, timeout=timeout, follow_redirects=True)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.debug("Logo probe failed for %s: %s", url, e)
        return False
    return response.is_success


async def fetch_logo_url(
    store_name: str,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> str | None:
    """
    Find a logo for a store.

    Each candidate domain is probed once with a bounded timeout. The
    first candidate answering 2xx wins.

    Args:
        store_name: Store name as entered by the user
        client: Optional httpx client for connection reuse
        timeout: Per-probe timeout in seconds (defaults to settings)

    Returns:
        Logo URL, the favicon URL if enabled, or None. Never raises on
        network errors.
    """
    candidates = logo_candidates(store_name)
    if not candidates:
        return None

    probe_timeout = settings.logo_probe_timeout if timeout is None else timeout

    if client is not None:
        found = await _first_reachable(client, candidates, probe_timeout)
    else:
        async with httpx.AsyncClient(timeout=probe_timeout) as own_client:
            found = await _first_reachable(own_client, candidates, probe_timeout)

    if found is not None:
        return found

    logger.debug("No logo found for %r", store_name)
    if settings.logo_favicon_fallback:
        return favicon_url(store_name)
    return None


async def _first_reachable(
    client: httpx.AsyncClient, candidates: list[str], timeout: float
) -> str | None:
    for url in candidates:
        if await _probe(client, url, timeout):
            return url
    return None


async def resolve_brand_assets(
    store_name: str,
    client: httpx.AsyncClient | None = None,
    lookup_logo: bool = True,
) -> BrandAssets:
    """
    Run both resolution phases for a store name.

    The style is always available; the logo is only looked up when
    lookup_logo is True.
    """
    style = resolve_brand(store_name)
    if not lookup_logo:
        return BrandAssets(style=style)

    logo_url = await fetch_logo_url(store_name, client=client)
    return BrandAssets(style=style, logo_url=logo_url)
