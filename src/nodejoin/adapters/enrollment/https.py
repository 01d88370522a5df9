"""HTTPS enrollment adapter.

Contacts the addresses carried by an enrollment token, in order, and fetches
the node's bootstrap configuration from the first one that proves its
identity and accepts the credential.

Behavior
- The cluster's certificate is not checked against a CA bundle. Instead the
  SHA-256 of the presented certificate(s) must equal the token fingerprint;
  the credential is only sent after that check passes.
- ``POST /_security/enroll/node`` with ``Authorization: ApiKey <key>``.
- A 200 response with a JSON object body is handed to the node's
  configuration state (``apply``) and ends the attempt successfully.

Failure modes
- Connection errors, fingerprint mismatch, non-200 status and malformed
  bodies move on to the next address. When every address fails the result
  carries the last (redacted) reason.
- A token issued by an incompatible major version is refused before any
  network traffic when a local node version is configured.
"""

from __future__ import annotations

import hashlib
import http.client
import json
import logging
import ssl
from collections.abc import Callable
from typing import Any

from nodejoin.domain.value_objects import ADDRESS_PATTERN, EnrollmentToken, SemanticVersion
from nodejoin.interfaces.enrollment import EnrollmentAttempt, EnrollmentResult
from nodejoin.interfaces.node_state import ConfigurationStateProvider
from nodejoin.interfaces.redactor import Redactor

logger = logging.getLogger(__name__)

ENROLL_NODE_PATH = "/_security/enroll/node"
DEFAULT_TIMEOUT = 60.0

ConnectionFactory = Callable[[str, int, float], http.client.HTTPSConnection]


class EnrollmentRequestError(Exception):
    """Raised when a single cluster address cannot complete the enrollment request."""


def _pinning_context() -> ssl.SSLContext:
    # trust is established through the fingerprint, not a CA bundle
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def default_connection_factory(
    host: str, port: int, timeout: float
) -> http.client.HTTPSConnection:
    """Build an HTTPS connection that defers trust to fingerprint pinning."""
    return http.client.HTTPSConnection(
        host, port, timeout=timeout, context=_pinning_context()
    )


def split_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` address into its host and port.

    Raises:
        ValueError: If ``address`` is not of the form ``host:port``.
    """
    if not (match := ADDRESS_PATTERN.fullmatch(address)):
        raise ValueError(f"Not a host:port address: {address!r}")
    host, port = match.groups()
    return host.strip("[]"), int(port)


def presented_fingerprints(sock: Any) -> set[str]:
    """Return SHA-256 fingerprints of the certificates a TLS peer presented.

    Uses the full unverified chain where the interpreter exposes it, so a
    fingerprint of the issuing CA matches as well as one of the leaf.
    """
    certificates: list[bytes] = []
    if (get_chain := getattr(sock, "get_unverified_chain", None)) is not None:
        certificates.extend(get_chain() or [])
    if not certificates and (leaf := sock.getpeercert(binary_form=True)):
        certificates.append(leaf)
    return {hashlib.sha256(der).hexdigest() for der in certificates}


class HttpsEnrollmentAttempt(EnrollmentAttempt):
    """EnrollmentAttempt implementation speaking HTTPS to the cluster."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        node_state: ConfigurationStateProvider,
        redactor: Redactor,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        local_version: str | None = None,
        connection_factory: ConnectionFactory = default_connection_factory,
    ) -> None:
        self._node_state = node_state
        self._redactor = redactor
        self._timeout = timeout
        self._local_version = (
            SemanticVersion.parse(local_version) if local_version else None
        )
        self._connection_factory = connection_factory

    def enroll(self, token: EnrollmentToken) -> EnrollmentResult:
        if self._local_version is not None and not (
            token.semantic_version.is_compatible_with(self._local_version)
        ):
            return EnrollmentResult(
                success=False,
                message=(
                    f"Token was issued by version {token.version}, which is not "
                    f"compatible with this node's version {self._local_version}"
                ),
            )

        reason = "no address attempted"
        for address in token.bound_addresses:
            logger.info("Attempting enrollment via %s", address)
            try:
                bootstrap = self._request_bootstrap(address, token)
            except EnrollmentRequestError as e:
                reason = self._redactor.sanitize(f"{address}: {e}")
                logger.warning("Enrollment via %s failed: %s", address, reason)
                continue
            try:
                self._node_state.apply(bootstrap)
            except OSError as e:
                logger.error("Could not store bootstrap configuration: %s", e)
                return EnrollmentResult(
                    success=False,
                    message=f"Could not store bootstrap configuration: {e}",
                    address=address,
                )
            return EnrollmentResult(
                success=True, message=f"Enrolled via {address}", address=address
            )

        return EnrollmentResult(
            success=False,
            message=f"Unable to enroll with any cluster address (last error: {reason})",
        )

    def _request_bootstrap(
        self, address: str, token: EnrollmentToken
    ) -> dict[str, Any]:
        host, port = split_address(address)
        connection = self._connection_factory(host, port, self._timeout)
        try:
            connection.connect()
            if token.fingerprint not in presented_fingerprints(connection.sock):
                raise EnrollmentRequestError(
                    "certificate fingerprint does not match the enrollment token"
                )
            connection.request(
                "POST",
                ENROLL_NODE_PATH,
                headers={
                    "Authorization": f"ApiKey {token.api_key}",
                    "Accept": "application/json",
                },
            )
            response = connection.getresponse()
            status, body = response.status, response.read()
        except (OSError, http.client.HTTPException) as e:
            raise EnrollmentRequestError(str(e) or type(e).__name__) from e
        finally:
            connection.close()

        if status != 200:
            raise EnrollmentRequestError(f"cluster answered with HTTP {status}")
        try:
            bootstrap = json.loads(body)
        except ValueError as e:
            raise EnrollmentRequestError("cluster response is not valid JSON") from e
        if not isinstance(bootstrap, dict):
            raise EnrollmentRequestError("cluster response is not a JSON object")
        return bootstrap
