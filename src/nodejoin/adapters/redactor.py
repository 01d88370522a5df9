"""Regex rules that keep enrollment secrets out of logs and terminal output.

A :class:`Redactor` runs a fixed sequence of substitutions over a string:
URL credentials, HTTP authorization schemes, the ``--enrollment-token``
option of a command line, query parameters and loose ``key: value``
fragments. Strict mode adds identity keywords (user, username, uid) to the
rule set and masks usernames embedded in URLs.
"""

from __future__ import annotations

import re

from nodejoin.interfaces import redactor
from nodejoin.interfaces.redactor import RedactorMode

# pylint: disable=too-few-public-methods

PLACEHOLDER = "***"
VISIBLE_PREFIX_LENGTH = 4
MIN_LENGTH_FOR_PREFIX = 12

SECRET_KEYWORDS = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "enrollment_token",
    "api_key",
    "apikey",
    "access_token",
    "authorization",
    "signature",
)
IDENTITY_KEYWORDS = ("user", "username", "uid")

Rule = tuple[re.Pattern[str], str]


def _alternation(keywords: tuple[str, ...]) -> str:
    # api_key also matches api-key and apikey
    return "|".join(kw.replace("_", "[-_]?") for kw in keywords)


def _keyword_rules(keywords: tuple[str, ...]) -> list[Rule]:
    words = _alternation(keywords)
    return [
        (re.compile(rf"([?&](?:{words})=)[^&#\s;]*", re.IGNORECASE), rf"\1{PLACEHOLDER}"),
        (re.compile(rf"(\b(?:{words})\s*:\s*)\S+", re.IGNORECASE), rf"\1{PLACEHOLDER}"),
    ]


URL_PASSWORD = re.compile(r"(?<=://)([^:@/]+):([^@/]+)@")
URL_USER = re.compile(r"(?<=://)([^:@/]+)(?=:(?:\*\*\*|[^@/]*)@)")
AUTH_SCHEME = re.compile(r"\b(Bearer|ApiKey|Basic)\s+[0-9A-Za-z._~+/=-]+")
# covers both "--enrollment-token VALUE" and "--enrollment-token=VALUE"
TOKEN_OPTION = re.compile(r"(--enrollment-token(?:=|\s+))(?!-)\S+", re.IGNORECASE)

_LENIENT_RULES: list[Rule] = [
    (URL_PASSWORD, rf"\1:{PLACEHOLDER}@"),
    (AUTH_SCHEME, rf"\1 {PLACEHOLDER}"),
    (TOKEN_OPTION, rf"\1{PLACEHOLDER}"),
    *_keyword_rules(SECRET_KEYWORDS),
]
_STRICT_RULES: list[Rule] = [
    (URL_PASSWORD, rf"\1:{PLACEHOLDER}@"),
    (URL_USER, PLACEHOLDER),
    (AUTH_SCHEME, rf"\1 {PLACEHOLDER}"),
    (TOKEN_OPTION, rf"\1{PLACEHOLDER}"),
    *_keyword_rules(SECRET_KEYWORDS + IDENTITY_KEYWORDS),
]

RULES: dict[RedactorMode, list[Rule]] = {
    RedactorMode.LENIENT: _LENIENT_RULES,
    RedactorMode.STRICT: _STRICT_RULES,
}


class Redactor(redactor.Redactor):
    """Sanitize text by applying the rule list of the configured mode in order.

    Order matters: authorization schemes are masked before ``key: value``
    rules run, so ``Authorization: ApiKey abc`` ends up as
    ``Authorization: *** ***``.
    """

    def __init__(self, mode: RedactorMode = RedactorMode.LENIENT) -> None:
        self._mode = mode
        self._rules = RULES[mode]

    def mask(self, secret: str) -> str:
        if self._mode is RedactorMode.STRICT or len(secret) < MIN_LENGTH_FOR_PREFIX:
            return PLACEHOLDER
        return secret[:VISIBLE_PREFIX_LENGTH] + PLACEHOLDER

    def sanitize(self, text: str) -> str:
        result = str(text)
        for pattern, replacement in self._rules:
            result = pattern.sub(replacement, result)
        return result
