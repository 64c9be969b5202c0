"""
Tests for endpoints.py.

Covers:
  1. gotoUrl is byte-identical to the registered redirect target
  2. gotoUrl is stable across calls and derived from its inputs
  3. Endpoint URLs built from a run config
"""

import base64
from urllib.parse import parse_qs, urlparse

from connector.auth.endpoints import IamEndpoints, build_goto_url
from connector.run_config import ConnectorRunConfig

EXPECTED_GOTO = (
    "http://moncompte.carrefour.fr/iam/oauth2/CarrefourConnect/authorize?"
    "response_type=code"
    "&client_id=carrefour_onecarrefour_web"
    "&scope=openid%20iam%20register-"
    "aHR0cHM6Ly9tb25jb21wdGUuY2FycmVmb3VyLmZyL21vbi1jb21wdGUvaW5zY3JpcHRpb24%3D"
    "&redirect_uri=https%3A%2F%2Fwww.carrefour.fr%2Flogin%2Fcheck"
)


class TestGotoUrl:

    def test_exact_bytes(self):
        assert build_goto_url() == EXPECTED_GOTO

    def test_stable_across_calls(self):
        assert build_goto_url() == build_goto_url() == IamEndpoints.default().goto_url

    def test_scheme_downgraded_to_http(self):
        assert build_goto_url().startswith("http://moncompte.carrefour.fr/")

    def test_scope_decodes_to_registration_url(self):
        query = parse_qs(urlparse(build_goto_url()).query)
        scope = query["scope"][0]
        assert scope.startswith("openid iam register-")
        encoded = scope.split("register-", 1)[1]
        assert base64.b64decode(encoded).decode() == (
            "https://moncompte.carrefour.fr/mon-compte/inscription"
        )

    def test_inputs_change_output(self):
        other = build_goto_url(client_id="another_client")
        assert other != build_goto_url()
        assert "client_id=another_client" in other


class TestIamEndpoints:

    def test_from_default_config_matches_default(self):
        assert IamEndpoints.from_config(ConnectorRunConfig()) == IamEndpoints.default()

    def test_urls(self):
        ep = IamEndpoints.default()
        assert ep.account_host == "moncompte.carrefour.fr"
        assert ep.login_page == "https://www.carrefour.fr/mon-compte/login"
        assert ep.authenticate == "https://moncompte.carrefour.fr/iam/json/authenticate"
        assert ep.users == "https://moncompte.carrefour.fr/iam/json/users"
        assert ep.profile("u1") == (
            "https://moncompte.carrefour.fr/iam/json/carrefourconnect/users/u1"
        )

    def test_custom_account_url(self):
        cfg = ConnectorRunConfig(account_url="https://iam.example.test")
        ep = IamEndpoints.from_config(cfg)
        assert ep.account_host == "iam.example.test"
        assert ep.goto_url.startswith("http://iam.example.test/iam/oauth2/")
