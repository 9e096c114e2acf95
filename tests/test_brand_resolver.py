"""Tests for brand style resolution and logo lookup."""

import httpx
import pytest
import respx

from localwallet.config import settings
from localwallet.services.brand_resolver import (
    DEFAULT_PALETTE,
    KNOWN_BRANDS,
    fallback_style,
    fetch_logo_url,
    find_known_brand,
    get_initials,
    logo_candidates,
    resolve_brand,
    resolve_brand_assets,
    stable_name_hash,
)

LOGO_BASE = "https://logo.clearbit.com"


class TestResolveBrand:
    def test_exact_match(self) -> None:
        assert resolve_brand("ikea").primary_color == "#0058A3"

    def test_match_ignores_case_and_whitespace(self) -> None:
        assert resolve_brand("  IKEA ") == KNOWN_BRANDS["ikea"]

    def test_name_contains_brand(self) -> None:
        """Store names containing a known brand use that brand."""
        assert resolve_brand("IKEA Family") == KNOWN_BRANDS["ikea"]
        assert resolve_brand("Lidl Plus") == KNOWN_BRANDS["lidl"]

    def test_brand_contains_name(self) -> None:
        """Abbreviated names match the brand that contains them."""
        assert resolve_brand("Starb") == KNOWN_BRANDS["starbucks"]

    def test_table_order_breaks_ties(self) -> None:
        """When several brands match, the first in table order wins."""
        # "coop" is listed before "target"
        assert resolve_brand("Target Coop") == KNOWN_BRANDS["coop"]

    @pytest.mark.parametrize(
        "store_name, color",
        [
            ("Plus", "#E30613"),
            ("Gamma", "#009639"),
            ("Praxis", "#00A651"),
            ("Action", "#00A651"),
            ("Etos", "#7AB800"),
        ],
    )
    def test_dutch_retailers(self, store_name: str, color: str) -> None:
        assert resolve_brand(store_name).primary_color == color

    def test_earlier_brand_still_wins(self) -> None:
        """Brands added at the end of the table don't steal existing matches."""
        assert resolve_brand("Lidl Plus") == KNOWN_BRANDS["lidl"]

    def test_unknown_store_uses_palette(self) -> None:
        style = resolve_brand("Unknown Shop Xyz")

        assert find_known_brand("Unknown Shop Xyz") is None
        assert style in DEFAULT_PALETTE

    def test_fallback_is_stable(self) -> None:
        """Same name, same palette entry, on every call."""
        first = resolve_brand("Unknown Shop Xyz")
        second = resolve_brand("Unknown Shop Xyz")

        assert first == second == fallback_style("unknown shop xyz")

    def test_empty_name_skips_partial_match(self) -> None:
        """An empty name would be contained in every key, so it falls back."""
        assert find_known_brand("") is None
        assert find_known_brand("   ") is None
        assert resolve_brand("") == DEFAULT_PALETTE[0]


class TestStableNameHash:
    def test_known_values(self) -> None:
        assert stable_name_hash("") == 0
        assert stable_name_hash("a") == 97
        assert stable_name_hash("ab") == 97 * 31 + 98

    def test_wraps_to_signed_32_bit(self) -> None:
        value = stable_name_hash("a much longer store name than usual")

        assert -(2**31) <= value < 2**31


class TestGetInitials:
    def test_two_words(self) -> None:
        assert get_initials("Albert Heijn") == "AH"

    def test_single_word(self) -> None:
        assert get_initials("lidl") == "LI"

    def test_extra_whitespace(self) -> None:
        assert get_initials("  corner   bakery shop ") == "CB"

    def test_empty(self) -> None:
        assert get_initials("") == ""


class TestLogoCandidates:
    def test_candidate_domains(self) -> None:
        assert logo_candidates("Leroy Merlin") == [
            f"{LOGO_BASE}/leroymerlin.com",
            f"{LOGO_BASE}/leroymerlin.nl",
            f"{LOGO_BASE}/leroymerlin.de",
            f"{LOGO_BASE}/leroymerlin.co.uk",
        ]

    def test_punctuation_removed(self) -> None:
        assert logo_candidates("McDonald's")[0] == f"{LOGO_BASE}/mcdonalds.com"

    def test_no_usable_characters(self) -> None:
        assert logo_candidates("!!!") == []


def _mock_candidates(name: str, statuses: list[int]) -> list[respx.Route]:
    return [
        respx.head(url).mock(return_value=httpx.Response(status))
        for url, status in zip(logo_candidates(name), statuses)
    ]


class TestFetchLogoUrl:
    @pytest.mark.asyncio
    @respx.mock
    async def test_first_reachable_candidate(self) -> None:
        """The first candidate answering 2xx wins."""
        _mock_candidates("Jumbo", [404, 200])

        assert await fetch_logo_url("Jumbo") == f"{LOGO_BASE}/jumbo.nl"

    @pytest.mark.asyncio
    async def test_stops_after_success(self) -> None:
        with respx.mock(assert_all_called=False) as respx_mock:
            routes = [
                respx_mock.head(url).mock(return_value=httpx.Response(200))
                for url in logo_candidates("Jumbo")
            ]

            await fetch_logo_url("Jumbo")

            assert routes[0].called
            assert not routes[1].called

    @pytest.mark.asyncio
    @respx.mock
    async def test_all_candidates_missing(self) -> None:
        _mock_candidates("Nowhere Shop", [404, 404, 500, 404])

        assert await fetch_logo_url("Nowhere Shop") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_errors_degrade_to_no_logo(self) -> None:
        """Connection failures and timeouts never raise."""
        candidates = logo_candidates("Hema")
        respx.head(candidates[0]).mock(side_effect=httpx.ConnectError("refused"))
        respx.head(candidates[1]).mock(side_effect=httpx.ConnectTimeout("slow"))
        respx.head(candidates[2]).mock(side_effect=httpx.ReadTimeout("slow"))
        respx.head(candidates[3]).mock(side_effect=httpx.ConnectError("refused"))

        assert await fetch_logo_url("Hema") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_then_success(self) -> None:
        candidates = logo_candidates("Hema")
        respx.head(candidates[0]).mock(side_effect=httpx.ConnectError("refused"))
        respx.head(candidates[1]).mock(return_value=httpx.Response(200))

        assert await fetch_logo_url("Hema") == candidates[1]

    @pytest.mark.asyncio
    @respx.mock
    async def test_uses_supplied_client(self) -> None:
        _mock_candidates("Jumbo", [200])

        async with httpx.AsyncClient() as client:
            assert await fetch_logo_url("Jumbo", client=client) == f"{LOGO_BASE}/jumbo.com"

    @pytest.mark.asyncio
    @respx.mock
    async def test_favicon_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """With the fallback enabled a miss returns the favicon service URL."""
        monkeypatch.setattr(settings, "logo_favicon_fallback", True)
        _mock_candidates("Jumbo", [404, 404, 404, 404])

        result = await fetch_logo_url("Jumbo")

        assert result == "https://www.google.com/s2/favicons?domain=jumbo.com&sz=128"

    @pytest.mark.asyncio
    async def test_unusable_name_skips_network(self) -> None:
        assert await fetch_logo_url("???") is None


class TestResolveBrandAssets:
    @pytest.mark.asyncio
    @respx.mock
    async def test_style_and_logo(self) -> None:
        _mock_candidates("IKEA", [200])

        assets = await resolve_brand_assets("IKEA")

        assert assets.style == KNOWN_BRANDS["ikea"]
        assert assets.logo_url == f"{LOGO_BASE}/ikea.com"

    @pytest.mark.asyncio
    async def test_without_logo_lookup(self) -> None:
        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.head(url__startswith=LOGO_BASE)

            assets = await resolve_brand_assets("IKEA", lookup_logo=False)

            assert assets.logo_url is None
            assert not route.called
