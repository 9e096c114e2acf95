"""
Failure Classification for wallet operations.

Every outcome the presentation layer can observe is either a value or one
of the KnownError subclasses below. None of them is a crash: callers catch
KnownError, show `message`, and carry on.

describe_failure() turns any exception into the FailureDetail a banner
renders. Unexpected exceptions get a fixed message so internals never
reach the user.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    INVALID_FORMAT = "invalid_format"

    # Resource failures
    NOT_FOUND = "not_found"

    # Storage failures
    PERSISTENCE_FAILED = "persistence_failed"

    # Unknown
    UNKNOWN = "unknown"


UNKNOWN_FAILURE_MESSAGE = "Something went wrong. Please try again."
UNKNOWN_FAILURE_SUGGESTION = "If this persists, export your cards and reinstall."


class FailureDetail(BaseModel):
    """
    What the user is told about a failed operation.

    Attributes:
        kind: Failure classification
        message: Short user-facing explanation
        detail: Technical detail for logs and bug reports
        suggestion: Next step the user can take
    """

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    message: str
    detail: str | None = None
    suggestion: str | None = None


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the wallet knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class CardNotFoundError(KnownError):
    """Raised when an operation addresses a card id that does not exist."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message="This card no longer exists.",
            detail=f"No card with id {card_id!r}",
            suggestion="Go back to your wallet and refresh the list.",
        )


class InvalidImportFormatError(KnownError):
    """
    Raised when an import document is not a JSON array of records.

    Nothing is written when this is raised.
    """

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.INVALID_FORMAT,
            message="Invalid format. The file is not a wallet backup.",
            detail=detail,
            suggestion="Choose a file created with Export.",
        )


class InvalidCardInputError(KnownError):
    """Raised when card data supplied by the caller is unusable."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=message,
            detail=detail,
        )


class PersistenceError(KnownError):
    """
    Raised when a write could not be persisted.

    The stored collection is left exactly as it was before the call.
    """

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.PERSISTENCE_FAILED,
            message="Your cards could not be saved.",
            detail=detail,
            suggestion="Free up some storage space and try again.",
        )


def describe_failure(error: Exception) -> FailureDetail:
    """
    Describe an exception raised by a wallet operation.

    KnownError keeps its own message. Anything else is reported with a
    fixed message and only its type name as detail.
    """
    if isinstance(error, KnownError):
        return error.to_detail()
    return FailureDetail(
        kind=FailureKind.UNKNOWN,
        message=UNKNOWN_FAILURE_MESSAGE,
        detail=type(error).__name__,
        suggestion=UNKNOWN_FAILURE_SUGGESTION,
    )
