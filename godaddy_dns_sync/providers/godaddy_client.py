"""
GoDaddy client - HTTP transport to the GoDaddy domains API.

All network, authentication and decoding concerns live here. The client
holds one requests session so its connection pool is shared by every
domain worker.
"""

import json
import logging
from typing import List, Optional

import requests
from requests.adapters import HTTPAdapter

from .. import __version__
from ..exceptions import ApiError, AuthError, ConfigError, DecodeError, TransportError
from .base_provider import RegistryClient
from .godaddy_record import GoDaddyRecord

logger = logging.getLogger(__name__)

GODADDY_OTE_URL = "https://api.ote-godaddy.com"
GODADDY_PROD_URL = "https://api.godaddy.com"

API_ENVIRONMENTS = {
    "ote": GODADDY_OTE_URL,
    "sandbox": GODADDY_OTE_URL,
    "prod": GODADDY_PROD_URL,
    "production": GODADDY_PROD_URL,
}

USER_AGENT = f"godaddy-dns-sync/{__version__}"


def base_url_for(api_env: str) -> str:
    """Resolve the API base URL for an environment name."""
    try:
        return API_ENVIRONMENTS[(api_env or "").strip().lower()]
    except KeyError:
        raise ConfigError(
            f"Unknown GoDaddy API environment '{api_env}', "
            f"expected one of: {', '.join(sorted(API_ENVIRONMENTS))}"
        )


class GoDaddyClient(RegistryClient):
    """Registry client for the GoDaddy v1 domains API."""

    # Default timeout for all HTTP requests: (connect, read) in seconds.
    DEFAULT_TIMEOUT = (10, 60)

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        api_env: str = "ote",
        base_url: Optional[str] = None,
        pool_size: int = 10,
        timeout=None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: GoDaddy API key
            api_secret: GoDaddy API secret
            api_env: "ote" (sandbox) or "prod"
            base_url: Overrides the URL derived from api_env
            pool_size: Connection pool size, at least the worker count
            timeout: Requests timeout, defaults to DEFAULT_TIMEOUT
            session: Pre-built session, mostly for tests
        """
        self.api_env = api_env
        self.api_key = (api_key or "").strip()
        self.api_secret = (api_secret or "").strip()
        self.base_url = (base_url or base_url_for(api_env)).rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT

        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self.session = session

        logger.info(f"GoDaddy client initialized for {self.base_url} ({api_env})")

    def headers(self) -> dict:
        """Return the HTTP headers to send with every API request."""
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"sso-key {self.api_key}:{self.api_secret}",
            "User-Agent": USER_AGENT,
        }

    def url(self, domain: str, path: str = "records") -> str:
        return f"{self.base_url}/v1/domains/{domain}/{path}"

    def fetch_all(self, domain: str) -> List[GoDaddyRecord]:
        """Get every record of a domain."""
        response = self._request("GET", domain, "fetch")
        records = self._decode_records(response.text, domain)
        logger.debug(f"Fetched {len(records)} records for {domain}")
        return records

    def replace_all(self, domain: str, records: List[GoDaddyRecord]) -> None:
        """Replace every record of a domain in a single call."""
        body = [record.to_dict() for record in records]
        self._request("PUT", domain, "replace", body=body)
        logger.debug(f"Replaced records for {domain} with {len(records)} records")

    def _request(self, method: str, domain: str, operation: str, body=None) -> requests.Response:
        """Send one request and map failures onto registry errors."""
        url = self.url(domain)
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers(),
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(
                f"{method} {url} failed: {e}", domain=domain, operation=operation
            ) from e

        status = response.status_code
        if status in (401, 403):
            raise AuthError(
                f"GoDaddy rejected the API credentials ({status}) for {domain}",
                domain=domain,
                operation=operation,
                status_code=status,
            )
        if status == 429 or status >= 500:
            raise TransportError(
                f"GoDaddy returned {status} for {method} {url}",
                domain=domain,
                operation=operation,
                status_code=status,
            )
        if not 200 <= status < 300:
            raise ApiError(
                f"GoDaddy returned {status} for {method} {url}: {self._error_message(response)}",
                body=response.text,
                domain=domain,
                operation=operation,
                status_code=status,
            )
        return response

    def _decode_records(self, text: str, domain: str) -> List[GoDaddyRecord]:
        """Parse a records response body."""
        try:
            payload = json.loads(text)
        except ValueError as e:
            logger.debug(f"Undecodable response body for {domain}: {text!r}")
            raise DecodeError(
                f"Invalid JSON in records response for {domain}: {e}",
                body=text,
                domain=domain,
                operation="fetch",
            ) from e

        if not isinstance(payload, list):
            logger.debug(f"Unexpected response body for {domain}: {text!r}")
            raise DecodeError(
                f"Expected a list of records for {domain}, got {type(payload).__name__}",
                body=text,
                domain=domain,
                operation="fetch",
            )

        records = []
        for item in payload:
            try:
                records.append(GoDaddyRecord.from_dict(item))
            except DecodeError as e:
                logger.debug(f"Unexpected record in response for {domain}: {text!r}")
                raise DecodeError(
                    f"Malformed record for {domain}: {e}",
                    body=text,
                    domain=domain,
                    operation="fetch",
                ) from e
        return records

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract the API's error message, falling back to the raw body."""
        try:
            payload = response.json()
        except ValueError:
            return response.text
        if isinstance(payload, dict) and payload.get("message"):
            return f"{payload.get('code', 'ERROR')}: {payload['message']}"
        return response.text
