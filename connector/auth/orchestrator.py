"""
Authentication Orchestrator
===========================
Top-level entry point of the authentication core.

Resolution order:
    1. Probe the stored session → finalize it (no credentials sent)
    2. Full credential login → finalize the fresh identity
    3. Report ``AuthenticationOutcome.failure(kind)``

Reusing a stored session is tried first on every run: repeated logins
are slower and more likely to trigger the provider's anti-automation
challenge.

Usage::

    from connector.auth import AuthenticationOrchestrator, Credentials

    orchestrator = AuthenticationOrchestrator.from_config(cfg, cookies)
    outcome = orchestrator.ensure_authenticated(Credentials("me@x.fr", "..."))
    if outcome.authenticated:
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from .cookie_store import CookieStore
from .credentials import Credentials
from .endpoints import IamEndpoints
from .errors import AuthenticationError, ErrorKind
from .http_client import HttpClient
from .login_flow import LoginFlow
from .session_finalizer import SessionFinalizer
from .session_probe import SessionProbe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticationOutcome:
    """Terminal result of ``ensure_authenticated``."""

    authenticated: bool
    reason: Optional[ErrorKind] = None
    reused_session: bool = False

    @classmethod
    def success(cls, reused_session: bool = False) -> "AuthenticationOutcome":
        return cls(authenticated=True, reused_session=reused_session)

    @classmethod
    def failure(cls, reason: ErrorKind) -> "AuthenticationOutcome":
        return cls(authenticated=False, reason=reason)


class AuthenticationOrchestrator:
    """Chooses between session reuse and a full login."""

    def __init__(
        self,
        client: HttpClient,
        endpoints: IamEndpoints,
        *,
        force_login: bool = False,
        on_authenticated: Optional[Callable[[HttpClient], None]] = None,
    ):
        self.client = client
        self.endpoints = endpoints
        self.force_login = force_login
        self.on_authenticated = on_authenticated
        self.probe = SessionProbe(client, endpoints)
        self.login_flow = LoginFlow(client, endpoints)
        self.finalizer = SessionFinalizer(client, endpoints)

    @classmethod
    def from_config(
        cls,
        config,
        cookies: Optional[CookieStore] = None,
        *,
        session: Optional[requests.Session] = None,
        **kwargs,
    ) -> "AuthenticationOrchestrator":
        client = HttpClient(
            cookies,
            timeout=config.timeout_seconds,
            user_agent=config.user_agent,
            session=session,
        )
        kwargs.setdefault("force_login", config.force_login)
        return cls(client, IamEndpoints.from_config(config), **kwargs)

    @property
    def cookies(self) -> CookieStore:
        return self.client.cookies

    def ensure_authenticated(self, creds: Credentials) -> AuthenticationOutcome:
        """Reuse the stored session if possible, log in otherwise."""
        if self._try_reuse():
            return self._succeed(reused_session=True)

        logger.info("[IAM] No correct session found, authenticating...")
        try:
            identity_id = self.login_flow.login(creds)
            self.finalizer.finalize(identity_id)
        except AuthenticationError as exc:
            logger.error(f"[IAM] Authentication failed ({exc.kind.value}): {exc}")
            return AuthenticationOutcome.failure(exc.kind)

        logger.info("[IAM] Successfully logged in")
        return self._succeed(reused_session=False)

    def _try_reuse(self) -> bool:
        if self.force_login:
            logger.info("[IAM] force_login=True, skipping stored session")
            return False

        identity_id = self.probe.probe()
        if identity_id is None:
            return False

        try:
            self.finalizer.finalize(identity_id)
        except AuthenticationError as exc:
            logger.info(f"[IAM] Stored session could not be finalized ({exc.kind.value})")
            return False

        logger.info("[IAM] Reusing stored session")
        return True

    def _succeed(self, reused_session: bool) -> AuthenticationOutcome:
        if self.on_authenticated is not None:
            self.on_authenticated(self.client)
        return AuthenticationOutcome.success(reused_session=reused_session)
