"""
Login Flow
==========
Full credential-based authentication against the IAM JSON API.

Steps (strictly ordered, each one using the previous response):
    1. GET the human-facing login page (seeds cookies)
    2. POST ``authenticate`` with realm + goto → ``AuthChallenge``
    3. Fill the login / password callback slots
    4. POST the filled challenge back → ``tokenId``
    5. Inject the ``c4iamsecuretk`` cookie built from the token
    6. POST ``idFromSession`` → identity id

Any failure short-circuits the remaining steps.  There is no partial
retry: the next run starts again from step 1.

Security:
    - Credentials and the token value are never logged.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .credentials import Credentials
from .endpoints import SESSION_COOKIE, IamEndpoints
from .errors import LoginFailed, TransportError, raise_classified
from .http_client import HttpClient
from .session_probe import resolve_identity_id

logger = logging.getLogger(__name__)

_LOGIN_SLOT = 0
_PASSWORD_SLOT = 1


# ---------------------------------------------------------------------------
# Challenge
# ---------------------------------------------------------------------------

@dataclass
class AuthChallenge:
    """The provider's callback structure for a credential submission.

    The provider validates the whole structure it receives back, so the
    original body is kept verbatim in ``raw``.  Only the two input values
    (login and password) are ever changed.
    """

    raw: Dict[str, Any] = field(repr=False)
    login: str = field(default="", repr=False)
    password: str = field(default="", repr=False)

    @classmethod
    def from_body(cls, body: Any) -> "AuthChallenge":
        """Validate a response body and wrap it.

        Raises:
            LoginFailed: if the body lacks two callbacks with an input slot.
        """
        if not isinstance(body, dict):
            raise LoginFailed("authenticate response is not a JSON object")

        callbacks = body.get("callbacks")
        if not isinstance(callbacks, list) or len(callbacks) < 2:
            raise LoginFailed("authenticate response has fewer than two callbacks")

        for slot in (_LOGIN_SLOT, _PASSWORD_SLOT):
            inputs = callbacks[slot].get("input") if isinstance(callbacks[slot], dict) else None
            if not isinstance(inputs, list) or not inputs or not isinstance(inputs[0], dict):
                raise LoginFailed(f"callback {slot} has no input slot")

        return cls(raw=copy.deepcopy(body))

    @property
    def auth_id(self) -> str:
        return self.raw.get("authId", "")

    @property
    def template(self) -> str:
        return self.raw.get("template", "")

    @property
    def stage(self) -> str:
        return self.raw.get("stage", "")

    @property
    def header(self) -> str:
        return self.raw.get("header", "")

    @property
    def callbacks(self) -> List[Dict[str, Any]]:
        return self.raw["callbacks"]

    def fill(self, creds: Credentials) -> "AuthChallenge":
        self.login = creds.login
        self.password = creds.password
        return self

    def to_payload(self) -> Dict[str, Any]:
        """Return the structure to echo back, with the two slots filled."""
        payload = copy.deepcopy(self.raw)
        payload["callbacks"][_LOGIN_SLOT]["input"][0]["value"] = self.login
        payload["callbacks"][_PASSWORD_SLOT]["input"][0]["value"] = self.password
        return payload


# ---------------------------------------------------------------------------
# Flow
# ---------------------------------------------------------------------------

class LoginFlow:
    """Drives the six-step credential login."""

    def __init__(self, client: HttpClient, endpoints: IamEndpoints):
        self.client = client
        self.endpoints = endpoints

    def login(self, creds: Credentials) -> str:
        """Authenticate with *creds* and return the identity id.

        Raises:
            ChallengeAsked: a step was answered with 403.
            LoginFailed:    any other failure or malformed response.
        """
        try:
            return self._run(creds)
        except TransportError as exc:
            raise_classified(exc)

    def _run(self, creds: Credentials) -> str:
        logger.info("[LOGIN] Opening login page")
        self.client.get(self.endpoints.login_page)

        challenge = self.request_challenge()
        challenge.fill(creds)

        logger.info("[LOGIN] Submitting credentials")
        token_id = self.submit_challenge(challenge)

        self.client.cookies.inject(SESSION_COOKIE, token_id, self.endpoints.account_host)

        identity_id = resolve_identity_id(self.client, self.endpoints)
        if identity_id is None:
            raise LoginFailed("idFromSession returned no id after login")

        logger.info("[LOGIN] Credentials accepted")
        return identity_id

    def request_challenge(self) -> AuthChallenge:
        resp = self.client.post(
            self.endpoints.authenticate,
            params={"realm": self.endpoints.realm, "goto": self.endpoints.goto_url},
        )
        return AuthChallenge.from_body(resp.body)

    def submit_challenge(self, challenge: AuthChallenge) -> str:
        resp = self.client.post(
            self.endpoints.authenticate,
            params={"realm": self.endpoints.realm},
            json=challenge.to_payload(),
        )
        token_id = resp.json_field("tokenId")
        if not token_id:
            raise LoginFailed("authenticate response has no tokenId")
        return str(token_id)
