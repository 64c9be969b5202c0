"""
Session Finalizer
=================
Turns a resolved identity id into a fully established session.

Three dependent calls:
    1. GET the user profile (advances the provider's session state; the
       response is not used)
    2. POST ``validateGoto`` with the redirect target → ``successURL``
    3. GET ``successURL``

Completing step 3 without error is what "session established" means.
"""

from __future__ import annotations

import logging

from .endpoints import IamEndpoints
from .errors import LoginFailed, TransportError, raise_classified
from .http_client import HttpClient

logger = logging.getLogger(__name__)


class SessionFinalizer:
    """Performs the profile / validateGoto / successURL exchange."""

    def __init__(self, client: HttpClient, endpoints: IamEndpoints):
        self.client = client
        self.endpoints = endpoints

    def finalize(self, identity_id: str) -> None:
        """Establish the session for *identity_id*.

        Raises:
            ChallengeAsked: a step was answered with 403.
            LoginFailed:    any other failure.
        """
        try:
            # Side effect only: the provider needs this call before validateGoto.
            self.client.get(
                self.endpoints.profile(identity_id),
                params={"realm": self.endpoints.realm},
            )

            resp = self.client.post(
                self.endpoints.users,
                params={"_action": "validateGoto"},
                json={"goto": self.endpoints.goto_url},
            )
            success_url = resp.json_field("successURL")
            if not success_url:
                raise LoginFailed("validateGoto response has no successURL")

            self.client.get(success_url)
        except TransportError as exc:
            raise_classified(exc)

        logger.info("[FINALIZE] Session established")
