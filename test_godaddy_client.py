#!/usr/bin/env python3
"""
Tests for the GoDaddy HTTP client.

The requests session is replaced with a mock so no network is used.
"""

import json
import unittest
from unittest.mock import Mock

import requests

from godaddy_dns_sync.exceptions import (
    ApiError,
    AuthError,
    ConfigError,
    DecodeError,
    TransportError,
)
from godaddy_dns_sync.providers.godaddy_client import (
    GODADDY_OTE_URL,
    GODADDY_PROD_URL,
    GoDaddyClient,
    base_url_for,
)
from godaddy_dns_sync.providers.godaddy_record import GoDaddyRecord


def make_response(status_code=200, text="[]"):
    """Build a fake requests response."""
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.json.side_effect = lambda: json.loads(text)
    return response


class TestGoDaddyClient(unittest.TestCase):
    """Test requests, headers and error mapping."""

    def setUp(self):
        """Set up test fixtures."""
        self.session = Mock()
        self.session.request.return_value = make_response()
        self.client = GoDaddyClient(" key ", "secret\n", api_env="ote", session=self.session)

    def test_environments(self):
        """Test base URL selection per environment."""
        self.assertEqual(base_url_for("ote"), GODADDY_OTE_URL)
        self.assertEqual(base_url_for("sandbox"), GODADDY_OTE_URL)
        self.assertEqual(base_url_for("prod"), GODADDY_PROD_URL)
        self.assertEqual(base_url_for("PRODUCTION"), GODADDY_PROD_URL)
        with self.assertRaises(ConfigError):
            base_url_for("staging")

    def test_prod_client_uses_prod_url(self):
        client = GoDaddyClient("key", "secret", api_env="prod", session=self.session)
        self.assertEqual(client.url("example.com"), f"{GODADDY_PROD_URL}/v1/domains/example.com/records")

    def test_builds_real_session(self):
        """Test that a pooled session is created when none is given."""
        client = GoDaddyClient("key", "secret", pool_size=8)
        self.assertIsInstance(client.session, requests.Session)

    def test_headers(self):
        """Test that credentials are stripped and sent on every request."""
        self.client.fetch_all("example.com")

        headers = self.session.request.call_args.kwargs["headers"]
        self.assertEqual(headers["Accept"], "application/json")
        self.assertEqual(headers["Authorization"], "sso-key key:secret")
        self.assertTrue(headers["User-Agent"].startswith("godaddy-dns-sync/"))

    def test_fetch_all(self):
        """Test listing and decoding the records of a domain."""
        payload = [
            {"name": "www", "data": "1.2.3.4", "type": "A", "ttl": 600},
            {"name": "@", "data": "mail.example.com", "type": "MX", "ttl": 3600, "priority": 10},
        ]
        self.session.request.return_value = make_response(200, json.dumps(payload))

        records = self.client.fetch_all("example.com")

        method, url = self.session.request.call_args.args
        self.assertEqual(method, "GET")
        self.assertEqual(url, f"{GODADDY_OTE_URL}/v1/domains/example.com/records")
        self.assertEqual(
            records,
            [
                GoDaddyRecord(name="www", data="1.2.3.4", type="A", ttl=600),
                GoDaddyRecord(name="@", data="mail.example.com", type="MX", ttl=3600, priority=10),
            ],
        )

    def test_replace_all(self):
        """Test that the full record list is sent in one PUT."""
        records = [
            GoDaddyRecord(name="api", data="10.0.0.1", type="A", ttl=600),
            GoDaddyRecord(name="@", data="mail.example.com", type="MX", priority=10),
        ]

        self.client.replace_all("example.com", records)

        self.session.request.assert_called_once()
        method, url = self.session.request.call_args.args
        self.assertEqual(method, "PUT")
        self.assertEqual(url, f"{GODADDY_OTE_URL}/v1/domains/example.com/records")
        self.assertEqual(
            self.session.request.call_args.kwargs["json"],
            [
                {"name": "api", "data": "10.0.0.1", "type": "A", "ttl": 600},
                {"name": "@", "data": "mail.example.com", "type": "MX", "priority": 10},
            ],
        )

    def test_auth_errors(self):
        """Test that 401 and 403 are reported as AuthError."""
        for status in (401, 403):
            with self.subTest(status=status):
                self.session.request.return_value = make_response(
                    status, '{"code": "UNABLE_TO_AUTHENTICATE", "message": "bad key"}'
                )
                with self.assertRaises(AuthError) as ctx:
                    self.client.fetch_all("example.com")
                self.assertEqual(ctx.exception.status_code, status)
                self.assertEqual(ctx.exception.domain, "example.com")
                self.assertEqual(ctx.exception.operation, "fetch")

    def test_transient_errors(self):
        """Test that 429 and 5xx are reported as TransportError."""
        for status in (429, 500, 503):
            with self.subTest(status=status):
                self.session.request.return_value = make_response(status, "")
                with self.assertRaises(TransportError) as ctx:
                    self.client.replace_all("example.com", [])
                self.assertEqual(ctx.exception.status_code, status)
                self.assertEqual(ctx.exception.operation, "replace")

    def test_network_errors(self):
        """Test that connection failures and timeouts are TransportError."""
        for error in (requests.ConnectionError("refused"), requests.Timeout("slow")):
            with self.subTest(error=error):
                self.session.request.side_effect = error
                with self.assertRaises(TransportError) as ctx:
                    self.client.fetch_all("example.com")
                self.assertIsNone(ctx.exception.status_code)

    def test_other_client_errors(self):
        """Test that other 4xx responses are ApiError with the API message."""
        body = '{"code": "INVALID_BODY", "message": "Request body doesn\'t fulfill schema"}'
        self.session.request.return_value = make_response(422, body)

        with self.assertRaises(ApiError) as ctx:
            self.client.replace_all("example.com", [])

        self.assertEqual(ctx.exception.status_code, 422)
        self.assertEqual(ctx.exception.body, body)
        self.assertIn("INVALID_BODY", str(ctx.exception))

    def test_decode_errors(self):
        """Test that unparseable responses are DecodeError with the raw body."""
        bodies = [
            "<html>maintenance</html>",
            '{"name": "www"}',
            '[{"name": "www", "data": "1.2.3.4"}]',
        ]
        for body in bodies:
            with self.subTest(body=body):
                self.session.request.return_value = make_response(200, body)
                with self.assertRaises(DecodeError) as ctx:
                    self.client.fetch_all("example.com")
                self.assertEqual(ctx.exception.body, body)
                self.assertEqual(ctx.exception.domain, "example.com")


if __name__ == "__main__":
    unittest.main(verbosity=2)
