"""
GoDaddy DNS provider.

Exposes the two operations a reconciliation host expects from a DNS
provider: listing the current endpoints and applying a change set.
"""

import logging
from typing import List, Optional

from ..core.domain_filter import DomainFilter
from ..core.endpoint import ChangeSet, Endpoint
from ..core.reconciler import ApplyResult, Reconciler
from .base_provider import RegistryClient
from .godaddy_record import to_endpoint

logger = logging.getLogger(__name__)


class GoDaddyProvider:
    """DNS provider backed by a replace-all GoDaddy registry client."""

    def __init__(
        self,
        client: RegistryClient,
        domain_filter: DomainFilter,
        max_workers: int = 4,
        relative_names: bool = False,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.domain_filter = domain_filter
        self.timeout = timeout
        self.reconciler = Reconciler(
            client,
            domain_filter,
            max_workers=max_workers,
            relative_names=relative_names,
        )

    def records(self) -> List[Endpoint]:
        """Return the endpoints of every domain in the filter."""
        if self.domain_filter.is_empty():
            logger.warning("Domain filter is empty, no domains to list records for")
            return []

        endpoints = []
        for domain in self.domain_filter.domains:
            logger.debug(f"Fetching DNS records for domain '{domain}'")
            for record in self.client.fetch_all(domain):
                endpoint = to_endpoint(record, domain)
                logger.debug(f"Got record: {endpoint}")
                endpoints.append(endpoint)

        logger.info(
            f"Fetched {len(endpoints)} records from {len(self.domain_filter.domains)} domain(s)"
        )
        return endpoints

    def apply_changes(self, changes: ChangeSet, cancel_event=None) -> ApplyResult:
        """Apply a change set; raises ApplyError on any domain failure."""
        return self.reconciler.apply(changes, cancel_event=cancel_event, timeout=self.timeout)

    def plan_changes(self, changes: ChangeSet) -> ApplyResult:
        """Compute target record lists without submitting them."""
        return self.reconciler.plan(changes)
