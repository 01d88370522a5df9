"""Domain-layer error definitions."""

from enum import Enum

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


# ============================================================================
#                       Enrollment token errors
# ============================================================================


class InvalidTokenFieldError(DomainError):
    """Raised when an enrollment token field violates its invariant."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid enrollment token field '{field}': {reason}.")
        self.field = field
        self.reason = reason


class DecodeErrorKind(Enum):
    """Classification of enrollment token decoding failures."""

    NOT_TRANSPORT_ENCODING = "not_transport_encoding"
    NOT_STRUCTURED = "not_structured"
    MISSING_FIELD = "missing_field"
    INVALID_FIELD = "invalid_field"


_KIND_DESCRIPTIONS = {
    DecodeErrorKind.NOT_TRANSPORT_ENCODING: "value is not valid base64 text",
    DecodeErrorKind.NOT_STRUCTURED: "value does not contain a well-formed token record",
    DecodeErrorKind.MISSING_FIELD: "required field is missing",
    DecodeErrorKind.INVALID_FIELD: "field has an invalid value",
}


class DecodeError(DomainError):
    """Raised when a string cannot be decoded into an enrollment token.

    The error is a tagged variant: callers branch on ``kind`` (and ``field``
    for field-level kinds) rather than on the message text. Messages never
    include the raw token value.

    Attributes:
        kind: What went wrong.
        field: Name of the offending token field, for ``MISSING_FIELD`` and
            ``INVALID_FIELD``; otherwise ``None``.
        detail: Short, non-sensitive diagnostic, if any.
    """

    def __init__(
        self,
        kind: DecodeErrorKind,
        field: str | None = None,
        detail: str | None = None,
    ) -> None:
        message = _KIND_DESCRIPTIONS[kind]
        if field is not None:
            message = f"{message} ({field})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.kind = kind
        self.field = field
        self.detail = detail
