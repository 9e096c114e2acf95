"""
Contracts for the camera scanner and barcode renderer.

Both live outside the core. The scanner yields at most one decoded string
per session; the renderer draws a value in a given format. The core never
checks that a value is encodable in a format: that's the renderer's job.
"""

from typing import Any, Protocol

from localwallet.models.card import BarcodeFormat, Card, CardInput
from localwallet.services.barcode_format import infer_format

# Linear format used when a renderer can't draw 2D symbols
QR_SUBSTITUTE = BarcodeFormat.CODE128


class BarcodeScanner(Protocol):
    """Camera capture session."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    async def next_result(self) -> str | None:
        """Wait for a decoded value. None if the session ends without one."""
        ...


class BarcodeRenderer(Protocol):
    """Draws a barcode for a value."""

    def supports(self, barcode_format: BarcodeFormat) -> bool: ...

    def render(self, value: str, barcode_format: BarcodeFormat) -> Any: ...


async def capture_card_number(scanner: BarcodeScanner) -> str | None:
    """
    Run one scan session.

    The scanner is always stopped, even if the session is cancelled.

    Returns:
        The decoded value, or None if nothing was decoded.
    """
    scanner.start()
    try:
        decoded = await scanner.next_result()
    finally:
        scanner.stop()

    if decoded is None or not decoded.strip():
        return None
    return decoded


def card_input_from_scan(store_name: str, decoded: str) -> CardInput:
    """Build a card input from a scan, with the format inferred from the value."""
    return CardInput(
        store_name=store_name,
        card_number=decoded,
        barcode_format=infer_format(decoded),
    )


def render_format(barcode_format: BarcodeFormat, renderer: BarcodeRenderer) -> BarcodeFormat:
    """
    Format actually handed to the renderer.

    QR falls back to Code 128 when the renderer has no 2D support.
    """
    if barcode_format is BarcodeFormat.QR and not renderer.supports(BarcodeFormat.QR):
        return QR_SUBSTITUTE
    return barcode_format


def render_card(card: Card, renderer: BarcodeRenderer) -> Any:
    """
    Render a card's barcode.

    Renderer errors propagate unchanged.
    """
    return renderer.render(card.card_number, render_format(card.barcode_format, renderer))
