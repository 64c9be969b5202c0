"""
IAM Endpoints
=============
URLs of the Carrefour identity provider and the OAuth redirect target
(``gotoUrl``) the login flow is correlated with.

``gotoUrl`` must match, byte for byte, what the client was registered
with: the account host with its ``https`` downgraded to ``http``, the
query keys in a fixed order, spaces encoded as ``%20`` and the base64
registration URL percent-encoded.  It is computed once per process by
``IamEndpoints.from_config()`` and passed explicitly to the flow
components.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from urllib.parse import quote, urlencode, urlparse

BASE_URL = "https://www.carrefour.fr"
ACCOUNT_URL = "https://moncompte.carrefour.fr"
REALM = "/CarrefourConnect"
CLIENT_ID = "carrefour_onecarrefour_web"
REDIRECT_URI = "https://www.carrefour.fr/login/check"
REGISTRATION_PATH = "/mon-compte/inscription"

SESSION_COOKIE = "c4iamsecuretk"


def build_goto_url(
    account_url: str = ACCOUNT_URL,
    client_id: str = CLIENT_ID,
    redirect_uri: str = REDIRECT_URI,
    registration_path: str = REGISTRATION_PATH,
) -> str:
    """Build the OAuth authorize URL used as the ``goto`` target."""
    registration = base64.b64encode(
        f"{account_url}{registration_path}".encode("utf-8")
    ).decode("ascii")
    query = urlencode(
        [
            ("response_type", "code"),
            ("client_id", client_id),
            ("scope", f"openid iam register-{registration}"),
            ("redirect_uri", redirect_uri),
        ],
        quote_via=quote,
        safe="!'()*",
    )
    host = account_url.replace("s://", "://", 1)
    return f"{host}/iam/oauth2/CarrefourConnect/authorize?{query}"


@dataclass(frozen=True)
class IamEndpoints:
    """Every URL and fixed parameter the authentication flow needs."""

    base_url: str = BASE_URL
    account_url: str = ACCOUNT_URL
    realm: str = REALM
    goto_url: str = ""

    @classmethod
    def from_config(cls, config) -> "IamEndpoints":
        """Build endpoints (and compute ``gotoUrl``) from a run config."""
        return cls(
            base_url=config.base_url,
            account_url=config.account_url,
            realm=config.realm,
            goto_url=build_goto_url(
                account_url=config.account_url,
                client_id=config.client_id,
                redirect_uri=config.redirect_uri,
                registration_path=config.registration_path,
            ),
        )

    @classmethod
    def default(cls) -> "IamEndpoints":
        return cls(goto_url=build_goto_url())

    @property
    def account_host(self) -> str:
        return urlparse(self.account_url).hostname or ""

    @property
    def login_page(self) -> str:
        return f"{self.base_url}/mon-compte/login"

    @property
    def authenticate(self) -> str:
        return f"{self.account_url}/iam/json/authenticate"

    @property
    def users(self) -> str:
        return f"{self.account_url}/iam/json/users"

    def profile(self, identity_id: str) -> str:
        return f"{self.account_url}/iam/json/carrefourconnect/users/{identity_id}"
