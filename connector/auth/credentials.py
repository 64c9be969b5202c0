"""
Credentials
===========
Credential container plus resolution from env vars / terminal prompt.

Credentials are supplied once per authentication attempt and are never
persisted or logged by the connector.
"""

from __future__ import annotations

import getpass
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

ENV_PREFIXES = ("CARREFOUR", "CONNECTOR")


@dataclass
class Credentials:
    """Account login (e-mail) and password."""

    login: str = ""
    password: str = field(default="", repr=False)

    @property
    def is_complete(self) -> bool:
        return bool(self.login and self.password)


def resolve_credentials(
    creds: Optional[Credentials] = None,
    *,
    prefixes: Sequence[str] = ENV_PREFIXES,
    interactive: bool = True,
) -> Credentials:
    """Fill in missing credential fields.

    Resolution order:
        1. Values already set on *creds*
        2. ``{PREFIX}_LOGIN`` / ``{PREFIX}_PASSWORD`` env vars, per prefix
        3. Terminal prompt (if *interactive*)

    Returns:
        A ``Credentials`` instance, possibly still incomplete.
    """
    if creds is None:
        creds = Credentials()

    if creds.is_complete:
        return creds

    for prefix in prefixes:
        if not creds.login:
            creds.login = os.environ.get(f"{prefix}_LOGIN", "")
        if not creds.password:
            creds.password = os.environ.get(f"{prefix}_PASSWORD", "")

    if creds.is_complete:
        logger.info("[IAM] Credentials resolved from environment")
        return creds

    if interactive:
        if not creds.login:
            creds.login = input("  Carrefour login (e-mail): ").strip()
        if not creds.password:
            creds.password = getpass.getpass("  Carrefour password: ")

    return creds
