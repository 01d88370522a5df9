"""Canonical encoding and decoding of enrollment tokens.

An encoded token is the standard base64 (with padding) of a canonical JSON
object::

    {"adr": [...], "chk": "...", "fgr": "...", "key": "...", "ver": "..."}

``chk`` holds the first 16 hex characters of the SHA-256 of the canonical
JSON of the four record fields. Decoding accepts a string only if it is the
exact output of :func:`encode` for the token it describes, so any edit,
truncation or bit flip is rejected at decode time.

Both functions are pure: no I/O, no environment access.
"""

from __future__ import annotations

import base64
import hashlib
import json
from typing import Any

from nodejoin.domain.errors import DecodeError, DecodeErrorKind, InvalidTokenFieldError
from nodejoin.domain.value_objects import EnrollmentToken

CHECKSUM_KEY = "chk"
CHECKSUM_LENGTH = 16

# wire key -> token attribute, in the order missing fields are reported
FIELD_KEYS = {
    "key": "api_key",
    "fgr": "fingerprint",
    "ver": "version",
    "adr": "bound_addresses",
}


def _canonical_json(obj: dict[str, Any]) -> bytes:
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("ascii")


def _checksum(record: dict[str, Any]) -> str:
    return hashlib.sha256(_canonical_json(record)).hexdigest()[:CHECKSUM_LENGTH]


def _record(token: EnrollmentToken) -> dict[str, Any]:
    return {
        "key": token.api_key,
        "fgr": token.fingerprint,
        "ver": token.version,
        "adr": list(token.bound_addresses),
    }


def encode(token: EnrollmentToken) -> str:
    """Encode ``token`` into a transport-safe string.

    Args:
        token: A (necessarily valid) enrollment token.

    Returns:
        str: Printable ASCII without whitespace, safe to pass as a shell argument.
    """
    record = _record(token)
    envelope = {**record, CHECKSUM_KEY: _checksum(record)}
    return base64.b64encode(_canonical_json(envelope)).decode("ascii")


def decode(raw: str) -> EnrollmentToken:
    """Decode and validate an encoded enrollment token.

    Args:
        raw: The string produced by :func:`encode`, as supplied by the operator.

    Returns:
        EnrollmentToken: The decoded token.

    Raises:
        DecodeError: For any input that is not the encoding of a valid token.
            ``kind`` tells the transport, structure, missing-field and
            invalid-field cases apart.
    """
    envelope = _parse_envelope(_decode_transport(raw))

    for key, attribute in FIELD_KEYS.items():
        if key not in envelope:
            raise DecodeError(DecodeErrorKind.MISSING_FIELD, field=attribute)

    addresses = envelope["adr"]
    if not isinstance(addresses, list):
        raise DecodeError(DecodeErrorKind.INVALID_FIELD, field="bound_addresses")
    try:
        token = EnrollmentToken(
            api_key=envelope["key"],
            fingerprint=envelope["fgr"],
            version=envelope["ver"],
            bound_addresses=tuple(addresses),
        )
    except InvalidTokenFieldError as e:
        raise DecodeError(
            DecodeErrorKind.INVALID_FIELD, field=e.field, detail=e.reason
        ) from e

    unknown = set(envelope) - set(FIELD_KEYS) - {CHECKSUM_KEY}
    if unknown:
        raise DecodeError(
            DecodeErrorKind.NOT_STRUCTURED, detail="unexpected fields present"
        )
    if envelope.get(CHECKSUM_KEY) != _checksum(_record(token)):
        raise DecodeError(
            DecodeErrorKind.NOT_STRUCTURED, detail="integrity check failed"
        )
    if encode(token) != raw:
        raise DecodeError(DecodeErrorKind.NOT_STRUCTURED, detail="not in canonical form")

    return token


def _decode_transport(raw: object) -> bytes:
    if not isinstance(raw, str) or not raw:
        raise DecodeError(DecodeErrorKind.NOT_TRANSPORT_ENCODING)
    try:
        return base64.b64decode(raw, validate=True)
    except ValueError as e:  # binascii.Error, or non-ASCII input
        raise DecodeError(DecodeErrorKind.NOT_TRANSPORT_ENCODING) from e


def _parse_envelope(data: bytes) -> dict[str, Any]:
    try:
        envelope = json.loads(data.decode("utf-8"))
    except (ValueError, RecursionError) as e:
        raise DecodeError(DecodeErrorKind.NOT_STRUCTURED) from e
    if not isinstance(envelope, dict):
        raise DecodeError(DecodeErrorKind.NOT_STRUCTURED)
    return envelope
