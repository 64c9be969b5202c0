"""
Unified Run Configuration
=========================
Single source of truth for the connector's defaults.

The CLI populates it from flags; the auth components are built *from* it
(``IamEndpoints.from_config``, ``AuthenticationOrchestrator.from_config``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .auth import endpoints
from .auth.http_client import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Canonical defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "base_url": endpoints.BASE_URL,
    "account_url": endpoints.ACCOUNT_URL,
    "realm": endpoints.REALM,
    "client_id": endpoints.CLIENT_ID,
    "redirect_uri": endpoints.REDIRECT_URI,
    "registration_path": endpoints.REGISTRATION_PATH,
    "timeout_seconds": 30,
    "user_agent": DEFAULT_USER_AGENT,
    "state_file": "cookies.json",
}


@dataclass
class ConnectorRunConfig:
    """
    Configuration consumed by the authentication core and the CLI.

    Populate via:
      - ``ConnectorRunConfig()``                 → all defaults
      - ``ConnectorRunConfig(force_login=True)`` → override one value
      - ``ConnectorRunConfig.from_cli_args(ns)`` → from argparse Namespace
    """

    # ---- Provider ----
    base_url: str = _DEFAULTS["base_url"]
    account_url: str = _DEFAULTS["account_url"]
    realm: str = _DEFAULTS["realm"]

    # ---- OAuth client registration (gotoUrl inputs) ----
    client_id: str = _DEFAULTS["client_id"]
    redirect_uri: str = _DEFAULTS["redirect_uri"]
    registration_path: str = _DEFAULTS["registration_path"]

    # ---- Transport ----
    timeout_seconds: float = _DEFAULTS["timeout_seconds"]
    user_agent: str = _DEFAULTS["user_agent"]

    # ---- Session ----
    state_file: str = _DEFAULTS["state_file"]
    force_login: bool = False

    # ---- Credentials (never logged) ----
    login: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_cli_args(cls, args) -> "ConnectorRunConfig":
        """Build config from an argparse Namespace (``__main__.py``)."""
        return cls(
            timeout_seconds=getattr(args, "timeout", _DEFAULTS["timeout_seconds"]),
            state_file=getattr(args, "state_file", None) or _DEFAULTS["state_file"],
            force_login=getattr(args, "force_login", False),
            login=getattr(args, "login", None),
        )

    def log_summary(self) -> None:
        logger.info("=" * 60)
        logger.info("CONNECTOR RUN CONFIG")
        logger.info("=" * 60)
        logger.info(f"  Account URL:      {self.account_url}")
        logger.info(f"  Realm:            {self.realm}")
        logger.info(f"  Client ID:        {self.client_id}")
        logger.info(f"  Timeout:          {self.timeout_seconds}s per request")
        logger.info(f"  Cookie State:     {self.state_file}")
        if self.force_login:
            logger.info(f"  Force Login:      Yes (ignore saved session)")
        logger.info("=" * 60)
