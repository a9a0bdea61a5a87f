"""
In-memory registry client for testing and demonstration.

Records are kept per domain in memory with the same replace-all semantics
as the live registrar, so reconciliation can be exercised safely.
"""

import copy
import logging
import threading
from collections import Counter
from typing import Dict, Iterable, List, Optional

from ..exceptions import TransportError
from .base_provider import RegistryClient
from .godaddy_record import GoDaddyRecord

logger = logging.getLogger(__name__)


class InMemoryRegistryClient(RegistryClient):
    """Registry client backed by a dictionary of domain record lists."""

    def __init__(self, records: Optional[Dict[str, Iterable[GoDaddyRecord]]] = None):
        """Initialize with optional starting records per domain."""
        self.records: Dict[str, List[GoDaddyRecord]] = {
            domain: [copy.copy(r) for r in recs] for domain, recs in (records or {}).items()
        }
        self.calls = Counter()
        self.fetch_failures: Dict[str, Exception] = {}
        self.replace_failures: Dict[str, Exception] = {}
        self._lock = threading.Lock()
        logger.info("In-memory registry client initialized")

    def fail_replace(self, domain: str, error: Optional[Exception] = None):
        """Make replace_all raise for a domain."""
        self.replace_failures[domain] = error or TransportError(
            f"Simulated replace failure for {domain}", domain=domain, operation="replace"
        )

    def fail_fetch(self, domain: str, error: Optional[Exception] = None):
        """Make fetch_all raise for a domain."""
        self.fetch_failures[domain] = error or TransportError(
            f"Simulated fetch failure for {domain}", domain=domain, operation="fetch"
        )

    def fetch_all(self, domain: str) -> List[GoDaddyRecord]:
        """Get every record of a domain."""
        with self._lock:
            self.calls["fetch_all"] += 1
            if domain in self.fetch_failures:
                raise self.fetch_failures[domain]
            records = [copy.copy(r) for r in self.records.get(domain, [])]
        logger.info(f"Memory: Retrieved {len(records)} records for {domain}")
        return records

    def replace_all(self, domain: str, records: List[GoDaddyRecord]) -> None:
        """Replace every record of a domain."""
        with self._lock:
            self.calls["replace_all"] += 1
            if domain in self.replace_failures:
                raise self.replace_failures[domain]
            self.records[domain] = [copy.copy(r) for r in records]
        logger.info(f"Memory: Replaced {domain} with {len(records)} records")
