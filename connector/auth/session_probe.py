"""
Session Probe
=============
Checks whether the cookies already in the store still carry a live IAM
session, without submitting credentials.

A failed probe is expected (expired or absent session) and is never an
error: it only tells the orchestrator that a full login is needed.
"""

from __future__ import annotations

import logging
from typing import Optional

from .endpoints import IamEndpoints
from .errors import TransportError
from .http_client import HttpClient

logger = logging.getLogger(__name__)


def resolve_identity_id(client: HttpClient, endpoints: IamEndpoints) -> Optional[str]:
    """POST ``idFromSession`` and return the identity id, or None if absent.

    Raises:
        TransportError: if the call itself fails.
    """
    resp = client.post(
        endpoints.users,
        params={"_action": "idFromSession", "realm": endpoints.realm},
    )
    identity_id = resp.json_field("id")
    if not identity_id:
        return None
    return str(identity_id)


class SessionProbe:
    """Resolves an identity id purely from existing cookies."""

    def __init__(self, client: HttpClient, endpoints: IamEndpoints):
        self.client = client
        self.endpoints = endpoints

    def probe(self) -> Optional[str]:
        """Return the identity id of the stored session, or None."""
        try:
            identity_id = resolve_identity_id(self.client, self.endpoints)
        except TransportError as exc:
            logger.debug(f"[PROBE] No reusable session: {exc}")
            return None

        if identity_id is None:
            logger.debug("[PROBE] idFromSession returned no id")
            return None

        logger.info("[PROBE] Stored session resolved to an identity")
        return identity_id
