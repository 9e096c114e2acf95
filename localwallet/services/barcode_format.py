"""
Barcode format inference.

Guesses the symbology for a raw card number so a freshly scanned or typed
card renders without the user picking a format.

Rules are checked in order and the first match wins. Several rules can
match the same value (a 13-digit number is also a valid Code 39 payload),
so the order is part of the behavior.
"""

import re
from dataclasses import dataclass

from localwallet.models.card import BarcodeFormat

# Whitespace and hyphens are ignored when classifying
SEPARATOR_PATTERN = re.compile(r"[\s-]")

DIGITS_PATTERN = re.compile(r"[0-9]+")

# Code 39 alphabet: A-Z, 0-9 and space - . $ / + %
CODE39_PATTERN = re.compile(r"[A-Z0-9\-. $/+%]+")

CODE39_MAX_LENGTH = 20
QR_MIN_LENGTH = 31

_DIGIT_LENGTH_FORMATS: tuple[tuple[int, BarcodeFormat], ...] = (
    (13, BarcodeFormat.EAN13),
    (8, BarcodeFormat.EAN8),
    (12, BarcodeFormat.UPC),
)

_DISPLAY_NAMES: dict[BarcodeFormat, str] = {
    BarcodeFormat.CODE128: "Code 128",
    BarcodeFormat.EAN13: "EAN-13",
    BarcodeFormat.EAN8: "EAN-8",
    BarcodeFormat.UPC: "UPC-A",
    BarcodeFormat.CODE39: "Code 39",
    BarcodeFormat.QR: "QR Code",
}


@dataclass(frozen=True, slots=True)
class FormatOption:
    """One entry of the manual format picker."""

    value: BarcodeFormat
    label: str


_FORMAT_OPTIONS: tuple[FormatOption, ...] = (
    FormatOption(BarcodeFormat.CODE128, "Code 128 (Default)"),
    FormatOption(BarcodeFormat.EAN13, "EAN-13"),
    FormatOption(BarcodeFormat.EAN8, "EAN-8"),
    FormatOption(BarcodeFormat.UPC, "UPC-A"),
    FormatOption(BarcodeFormat.CODE39, "Code 39"),
    FormatOption(BarcodeFormat.QR, "QR Code"),
)


def normalize_card_number(raw_value: str) -> str:
    """Strip whitespace and hyphens. Used for classification only."""
    return SEPARATOR_PATTERN.sub("", raw_value)


def infer_format(raw_value: str) -> BarcodeFormat:
    """
    Infer the most likely barcode format for a card number.

    Args:
        raw_value: Card number as typed or scanned (may be empty,
            may contain spaces or hyphens)

    Returns:
        The inferred format. Never raises; CODE128 is the fallback.
    """
    cleaned = normalize_card_number(raw_value)

    if DIGITS_PATTERN.fullmatch(cleaned):
        for length, barcode_format in _DIGIT_LENGTH_FORMATS:
            if len(cleaned) == length:
                return barcode_format

    if CODE39_PATTERN.fullmatch(cleaned.upper()) and len(cleaned) <= CODE39_MAX_LENGTH:
        return BarcodeFormat.CODE39

    if len(cleaned) >= QR_MIN_LENGTH:
        return BarcodeFormat.QR

    return BarcodeFormat.CODE128


def display_name(barcode_format: BarcodeFormat) -> str:
    """Human-readable name for a format (e.g., "EAN-13")."""
    return _DISPLAY_NAMES[barcode_format]


def all_formats() -> list[FormatOption]:
    """All formats in picker order, Code 128 first as the default."""
    return list(_FORMAT_OPTIONS)
