"""Property-based tests for nodejoin.domain.token_codec.

Any token survives a round trip, and any corruption of an encoded token
(substitution, truncation, insertion) is rejected with a DecodeError.
"""

import base64

import pytest
from hypothesis import given
from hypothesis import strategies as st

from nodejoin.domain import token_codec
from nodejoin.domain.errors import DecodeError
from nodejoin.domain.value_objects import EnrollmentToken

pytestmark = [pytest.mark.property]

B64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/="

hosts = st.one_of(
    st.from_regex(r"[a-z0-9][a-z0-9.-]{0,30}", fullmatch=True),
    st.ip_addresses(v=4).map(str),
    st.ip_addresses(v=6).map(lambda ip: f"[{ip}]"),
)
addresses = st.builds(
    lambda host, port: f"{host}:{port}", hosts, st.integers(min_value=0, max_value=65535)
)
versions = st.builds(
    lambda major, minor, patch: f"{major}.{minor}.{patch}",
    st.integers(min_value=0, max_value=99),
    st.integers(min_value=0, max_value=99),
    st.integers(min_value=0, max_value=999),
)
tokens = st.builds(
    EnrollmentToken,
    api_key=st.text(min_size=1, max_size=64),
    fingerprint=st.text(alphabet="0123456789abcdef", min_size=64, max_size=64),
    version=versions,
    bound_addresses=st.lists(addresses, min_size=1, max_size=5).map(tuple),
)


@given(token=tokens)
def test_round_trip(token: EnrollmentToken) -> None:
    """decode(encode(t)) == t for every valid token."""
    assert token_codec.decode(token_codec.encode(token)) == token


@given(token=tokens, data=st.data())
def test_single_substitution_is_rejected(token: EnrollmentToken, data) -> None:
    """Replacing any one character of an encoded token makes it undecodable."""
    encoded = token_codec.encode(token)
    index = data.draw(st.integers(min_value=0, max_value=len(encoded) - 1))
    replacement = data.draw(
        st.sampled_from(B64_ALPHABET).filter(lambda c: c != encoded[index])
    )
    corrupted = encoded[:index] + replacement + encoded[index + 1 :]

    with pytest.raises(DecodeError):
        token_codec.decode(corrupted)


@given(token=tokens, data=st.data())
def test_truncation_is_rejected(token: EnrollmentToken, data) -> None:
    """Dropping any non-empty suffix makes an encoded token undecodable."""
    encoded = token_codec.encode(token)
    cut = data.draw(st.integers(min_value=0, max_value=len(encoded) - 1))

    with pytest.raises(DecodeError):
        token_codec.decode(encoded[:cut])


@given(token=tokens, data=st.data())
def test_insertion_is_rejected(token: EnrollmentToken, data) -> None:
    """Inserting a character anywhere makes an encoded token undecodable."""
    encoded = token_codec.encode(token)
    index = data.draw(st.integers(min_value=0, max_value=len(encoded)))
    extra = data.draw(st.sampled_from(B64_ALPHABET + " \n-_"))

    with pytest.raises(DecodeError):
        token_codec.decode(encoded[:index] + extra + encoded[index:])


@given(raw=st.text(max_size=200))
def test_arbitrary_text_only_raises_decode_error(raw: str) -> None:
    """Arbitrary input either decodes or fails with DecodeError, nothing else."""
    try:
        token_codec.decode(raw)
    except DecodeError:
        pass


@given(raw=st.binary(max_size=200))
def test_arbitrary_base64_only_raises_decode_error(raw: bytes) -> None:
    """Well-formed base64 of arbitrary bytes never escapes as another exception."""
    try:
        token_codec.decode(base64.b64encode(raw).decode())
    except DecodeError:
        pass
