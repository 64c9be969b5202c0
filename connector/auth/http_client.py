"""
HTTP Client
===========
Thin wrapper around ``requests.Session`` used for every IAM call.

Responsibilities:
    1. Attach the ``CookieStore`` cookies to each request (the store's jar
       is the session jar).
    2. Record the cookies of each response before returning.
    3. Send the headers the identity provider requires on its JSON API.
    4. Turn non-2xx statuses and transport exceptions into ``TransportError``.

It does NOT retry and does NOT interpret status codes; classification
belongs to ``errors.classify``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .cookie_store import CookieStore
from .errors import TransportError

logger = logging.getLogger(__name__)


# Headers the IAM JSON API rejects requests without.
AUTH_HEADERS: Dict[str, str] = {
    "X-Requested-With": "XMLHttpRequest",
    "Accept-API-Version": "protocol=1.0,resource=2.0",
    "TE": "Trailers",
}

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64; rv:109.0) Gecko/20100101 Firefox/115.0"
)


@dataclass
class Response:
    """Status code + parsed body of a successful call."""

    status_code: int
    body: Any

    def json_field(self, key: str) -> Any:
        """Return ``body[key]`` or None when the body is not a JSON object."""
        if isinstance(self.body, dict):
            return self.body.get(key)
        return None


class HttpClient:
    """Issues requests carrying the shared ``CookieStore`` state."""

    def __init__(
        self,
        cookies: Optional[CookieStore] = None,
        *,
        timeout: float = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self.cookies = cookies if cookies is not None else CookieStore()
        self.timeout = timeout
        self.session = session or self._create_session(user_agent)
        self.session.cookies = self.cookies.jar

    @staticmethod
    def _create_session(user_agent: str) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.5",
        })
        return session

    def request(
        self,
        url: str,
        method: str = "GET",
        *,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Response:
        """Send one request and return its parsed ``Response``.

        Raises:
            TransportError: on a non-2xx status (``status_code`` set) or
                when no response was received (``status_code`` None).
        """
        all_headers = dict(AUTH_HEADERS)
        if headers:
            all_headers.update(headers)

        logger.debug(f"[HTTP] {method} {url}")
        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                headers=all_headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(str(exc), url=url) from exc

        self.cookies.update_from(resp.cookies)

        if not 200 <= resp.status_code < 300:
            raise TransportError(
                resp.reason or "HTTP error",
                status_code=resp.status_code,
                url=resp.url or url,
            )

        return Response(
            status_code=resp.status_code,
            body=self._parse_body(resp),
        )

    def get(self, url: str, **kwargs) -> Response:
        return self.request(url, "GET", **kwargs)

    def post(self, url: str, **kwargs) -> Response:
        return self.request(url, "POST", **kwargs)

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def _parse_body(resp: requests.Response) -> Any:
        content_type = resp.headers.get("Content-Type", "").lower()
        if "json" in content_type:
            try:
                return resp.json()
            except ValueError:
                logger.debug("[HTTP] Response advertised JSON but did not parse")
        return resp.text
