from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BrandStyle:
    """
    Visual identity derived from a store name.

    Attributes:
        gradient: Gradient token for card backgrounds (e.g., "from-blue-600 to-yellow-500")
        primary_color: Hex color stored as the card's brand_color
    """

    gradient: str
    primary_color: str


@dataclass(frozen=True, slots=True)
class BrandAssets:
    """Brand style plus the optional logo found by the remote lookup."""

    style: BrandStyle
    logo_url: str | None = None
