"""
Shared fixtures: a scripted ``requests`` transport adapter.

The adapter is mounted on a real ``requests.Session`` so that cookie
attachment, query encoding and JSON bodies go through ``requests`` as in
production; only the network is replaced.
"""

import json
from http import HTTPStatus
from collections import deque
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from requests.adapters import BaseAdapter

from connector.auth import CookieStore, HttpClient, IamEndpoints

ACCOUNT = "https://moncompte.carrefour.fr"
SUCCESS_URL = "https://www.carrefour.fr/login/check?code=abc123"


class ScriptedAdapter(BaseAdapter):
    """Replays queued responses keyed by method + path (+ query subset)."""

    def __init__(self):
        super().__init__()
        self.routes = []
        self.calls = []

    def add(self, method, url, *, status=200, body=None, cookies=None, error=None):
        """Queue one response for ``method url``.

        ``url`` may carry a query string; every listed parameter must then
        be present in the request for the route to match.  Queued
        responses are consumed in order, the last one repeats.
        """
        parsed = urlparse(url)
        query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
        for route in self.routes:
            if route["key"] == (method, parsed.netloc, parsed.path, tuple(sorted(query.items()))):
                route["queue"].append((status, body, cookies, error))
                return self
        self.routes.append({
            "key": (method, parsed.netloc, parsed.path, tuple(sorted(query.items()))),
            "query": query,
            "queue": deque([(status, body, cookies, error)]),
        })
        return self

    def send(self, request, **kwargs):
        self.calls.append(request)
        parsed = urlparse(request.url)
        sent_query = {k: v[0] for k, v in parse_qs(parsed.query).items()}

        for route in self.routes:
            method, netloc, path, _ = route["key"]
            if (method, netloc, path) != (request.method, parsed.netloc, parsed.path):
                continue
            if any(sent_query.get(k) != v for k, v in route["query"].items()):
                continue
            queue = route["queue"]
            status, body, cookies, error = queue.popleft() if len(queue) > 1 else queue[0]
            if error is not None:
                raise error
            return self._build(request, status, body, cookies)

        return self._build(request, 404, {"code": 404, "reason": "Not Found"}, None)

    def close(self):
        pass

    @staticmethod
    def _build(request, status, body, cookies):
        resp = requests.Response()
        resp.status_code = status
        resp.reason = HTTPStatus(status).phrase
        if isinstance(body, str):
            resp.headers["Content-Type"] = "text/html; charset=utf-8"
            resp._content = body.encode("utf-8")
        else:
            resp.headers["Content-Type"] = "application/json"
            resp._content = json.dumps(body if body is not None else {}).encode("utf-8")
        resp.encoding = "utf-8"
        resp.url = request.url
        resp.request = request
        host = urlparse(request.url).hostname
        for name, value in (cookies or {}).items():
            resp.cookies.set(name, value, domain=host, path="/")
        return resp

    # ── Inspection helpers ────────────────────────────────────────

    def calls_to(self, path, action=None):
        matched = []
        for req in self.calls:
            parsed = urlparse(req.url)
            if parsed.path != path:
                continue
            if action is not None and parse_qs(parsed.query).get("_action", [None])[0] != action:
                continue
            matched.append(req)
        return matched

    def sent_json(self, request):
        return json.loads(request.body) if request.body else None


def _challenge_body():
    """Authenticate response as returned by the provider's first call."""
    return {
        "authId": "eyJ0eXAiOiJKV1QiLCJhbGciOiJIUzI1NiJ9.e30.sig",
        "template": "",
        "stage": "DataStore1",
        "header": "Sign in",
        "callbacks": [
            {
                "type": "NameCallback",
                "output": [{"name": "prompt", "value": "User Name:"}],
                "input": [{"name": "IDToken1", "value": ""}],
            },
            {
                "type": "PasswordCallback",
                "output": [{"name": "prompt", "value": "Password:"}],
                "input": [{"name": "IDToken2", "value": ""}],
            },
            {
                "type": "ConfirmationCallback",
                "output": [{"name": "options", "value": ["Submit"]}],
                "input": [{"name": "IDToken3", "value": 0}],
            },
        ],
        "extra": {"nonce": "n-42"},
    }


def _script_login(adapter, *, token="tok-xyz", identity="u-42"):
    """Queue every response of a successful six-step login."""
    adapter.add("GET", "https://www.carrefour.fr/mon-compte/login", body="<html></html>",
                cookies={"datadome": "dd1"})
    adapter.add("POST", f"{ACCOUNT}/iam/json/authenticate", body=_challenge_body(),
                cookies={"amlbcookie": "01"})
    adapter.add("POST", f"{ACCOUNT}/iam/json/authenticate", body={"tokenId": token, "successUrl": "/"})
    adapter.add("POST", f"{ACCOUNT}/iam/json/users?_action=idFromSession",
                body={"id": identity, "realm": "/CarrefourConnect"})
    return adapter


def _script_finalize(adapter, *, identity="u-42", success_url=SUCCESS_URL):
    """Queue the three responses of a successful finalize."""
    adapter.add("GET", f"{ACCOUNT}/iam/json/carrefourconnect/users/{identity}",
                body={"username": identity, "mail": ["alice@example.fr"]})
    adapter.add("POST", f"{ACCOUNT}/iam/json/users?_action=validateGoto",
                body={"successURL": success_url})
    adapter.add("GET", success_url, body="<html>ok</html>", cookies={"session": "s-1"})
    return adapter


@pytest.fixture
def adapter():
    return ScriptedAdapter()


@pytest.fixture
def cookies():
    return CookieStore()


@pytest.fixture
def client(scripted_session, cookies):
    return HttpClient(cookies, session=scripted_session, timeout=5)


@pytest.fixture
def endpoints():
    return IamEndpoints.default()


@pytest.fixture
def scripted_session(adapter):
    """A fresh ``requests.Session`` routed through ``adapter``."""
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


@pytest.fixture
def challenge_body():
    """Factory for the provider's challenge body (a new dict per call)."""
    return _challenge_body


@pytest.fixture
def script_login():
    """Factory queuing a successful six-step login on an adapter."""
    return _script_login


@pytest.fixture
def script_finalize():
    """Factory queuing a successful finalize on an adapter."""
    return _script_finalize
