"""
Authentication Module
=====================
Session manager for the Carrefour IAM identity provider.

Architecture:
    - ``CookieStore``               : flat cookie map, persisted by the caller
    - ``HttpClient``                : requests.Session carrying the store
    - ``classify``                  : maps a failed call to ``ErrorKind``
    - ``SessionProbe``              : resolves an identity from cookies only
    - ``LoginFlow``                 : six-step credential login
    - ``SessionFinalizer``          : profile / validateGoto / successURL
    - ``AuthenticationOrchestrator``: probe first, login as fallback

Usage::

    from connector.auth import AuthenticationOrchestrator, CookieStore, Credentials

    cookies = CookieStore()
    cookies.load("cookies.json")
    orchestrator = AuthenticationOrchestrator.from_config(cfg, cookies)
    outcome = orchestrator.ensure_authenticated(Credentials("me@x.fr", "..."))
    if outcome.authenticated:
        cookies.save("cookies.json")
"""

from .cookie_store import CookieStore
from .credentials import Credentials, resolve_credentials
from .endpoints import SESSION_COOKIE, IamEndpoints, build_goto_url
from .errors import (
    AuthenticationError,
    ChallengeAsked,
    ConnectorError,
    ErrorKind,
    LoginFailed,
    TransportError,
    classify,
)
from .http_client import HttpClient, Response
from .login_flow import AuthChallenge, LoginFlow
from .orchestrator import AuthenticationOrchestrator, AuthenticationOutcome
from .session_finalizer import SessionFinalizer
from .session_probe import SessionProbe

__all__ = [
    "CookieStore",
    "Credentials",
    "resolve_credentials",
    "SESSION_COOKIE",
    "IamEndpoints",
    "build_goto_url",
    "AuthenticationError",
    "ChallengeAsked",
    "ConnectorError",
    "ErrorKind",
    "LoginFailed",
    "TransportError",
    "classify",
    "HttpClient",
    "Response",
    "AuthChallenge",
    "LoginFlow",
    "AuthenticationOrchestrator",
    "AuthenticationOutcome",
    "SessionFinalizer",
    "SessionProbe",
]
