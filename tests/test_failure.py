"""
Tests for failure classification.

Every failure a wallet operation raises is a KnownError with a kind and a
user-facing message; anything else is described with a fixed message.
"""

import pytest

from localwallet.models.failure import (
    CardNotFoundError,
    FailureKind,
    InvalidCardInputError,
    InvalidImportFormatError,
    KnownError,
    PersistenceError,
    describe_failure,
)


class TestKnownErrors:
    """Each wallet error carries its kind and a user-facing message."""

    @pytest.mark.parametrize(
        "error, kind",
        [
            (CardNotFoundError("abc"), FailureKind.NOT_FOUND),
            (InvalidImportFormatError(), FailureKind.INVALID_FORMAT),
            (InvalidCardInputError("Store name is required."), FailureKind.INVALID_INPUT),
            (PersistenceError("quota exceeded"), FailureKind.PERSISTENCE_FAILED),
        ],
    )
    def test_kind(self, error: KnownError, kind: FailureKind) -> None:
        assert isinstance(error, KnownError)
        assert error.kind == kind
        assert error.message
        assert str(error) == error.message

    def test_not_found_keeps_id(self) -> None:
        error = CardNotFoundError("1718000000000_abc123xyz")

        assert error.card_id == "1718000000000_abc123xyz"
        assert "1718000000000_abc123xyz" in error.detail

    def test_import_message(self) -> None:
        assert InvalidImportFormatError().message.startswith("Invalid format")

    def test_to_detail(self) -> None:
        detail = PersistenceError("quota exceeded").to_detail()

        assert detail.kind == FailureKind.PERSISTENCE_FAILED
        assert detail.message == "Your cards could not be saved."
        assert detail.detail == "quota exceeded"
        assert detail.suggestion is not None


class TestDescribeFailure:
    def test_known_error_keeps_message(self) -> None:
        detail = describe_failure(CardNotFoundError("x"))

        assert detail.kind == FailureKind.NOT_FOUND
        assert detail.message == "This card no longer exists."

    def test_unexpected_error_hides_message(self) -> None:
        """Only the exception type leaks into the description."""
        detail = describe_failure(RuntimeError("disk path /secret"))

        assert detail.kind == FailureKind.UNKNOWN
        assert detail.message == "Something went wrong. Please try again."
        assert detail.detail == "RuntimeError"
        assert "/secret" not in detail.model_dump_json()

    def test_input_error_without_suggestion(self) -> None:
        detail = describe_failure(InvalidCardInputError("Invalid card number."))

        assert detail.kind == FailureKind.INVALID_INPUT
        assert detail.suggestion is None
