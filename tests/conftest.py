import pytest

from localwallet.storage import InMemoryStorageSlot


@pytest.fixture
def slot() -> InMemoryStorageSlot:
    return InMemoryStorageSlot("LOCAL_WALLET_CARDS")


@pytest.fixture
def sample_export() -> str:
    """Sample backup document for import tests."""
    return """[
  {
    "storeName": "IKEA",
    "cardNumber": "1234567890128",
    "barcodeFormat": "EAN13",
    "isFavorite": true
  },
  {
    "storeName": "Corner Bakery",
    "cardNumber": "BAKE-0042",
    "barcodeFormat": "CODE39",
    "isFavorite": false
  }
]"""
