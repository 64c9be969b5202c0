"""
Authentication Errors
=====================
Closed error taxonomy for the IAM login flow, plus the classifier that
maps a failed HTTP call onto it.

The identity provider exposes no fine-grained error semantics over its
JSON API, so the mapping is deliberately coarse:

    - ``403``                      → ``CHALLENGE_ASKED`` (anti-automation block)
    - anything else / no response  → ``LOGIN_FAILED``
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import NoReturn, Optional

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Terminal failure reasons reported to the caller."""

    CHALLENGE_ASKED = "CHALLENGE_ASKED"
    LOGIN_FAILED = "LOGIN_FAILED"


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class ConnectorError(Exception):
    """Base class for every error raised by the connector."""


class TransportError(ConnectorError):
    """An HTTP call failed at the transport or status level.

    ``status_code`` is None when no response was received at all
    (DNS failure, refused connection, timeout, ...).
    """

    def __init__(self, message: str, status_code: Optional[int] = None, url: str = ""):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class AuthenticationError(ConnectorError):
    """Authentication could not be completed."""

    kind: ErrorKind = ErrorKind.LOGIN_FAILED

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)
        self.message = message or self.kind.value


class ChallengeAsked(AuthenticationError):
    """The provider detected automated access and is blocking the flow.

    Not retryable within the same run: a human has to log in once.
    """

    kind = ErrorKind.CHALLENGE_ASKED


class LoginFailed(AuthenticationError):
    """Any other failure: bad credentials, malformed response, connectivity."""

    kind = ErrorKind.LOGIN_FAILED


_EXCEPTIONS = {
    ErrorKind.CHALLENGE_ASKED: ChallengeAsked,
    ErrorKind.LOGIN_FAILED: LoginFailed,
}


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

def classify(err: TransportError) -> ErrorKind:
    """Map a transport failure to its ``ErrorKind``."""
    if err.status_code == 403:
        return ErrorKind.CHALLENGE_ASKED
    return ErrorKind.LOGIN_FAILED


def raise_classified(err: TransportError) -> NoReturn:
    """Re-raise *err* as the matching ``AuthenticationError``.

    Logged at DEBUG only: whether the failure is fatal is up to the caller.
    """
    logger.debug(f"[IAM] {err}")
    kind = classify(err)
    raise _EXCEPTIONS[kind](str(err)) from err
