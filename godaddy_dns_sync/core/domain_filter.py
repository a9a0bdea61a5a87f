"""
Domain filter - the authorization boundary for managed domains.

A name is managed when it equals, or is a subdomain of, one of the
configured root domains. Comparison is case-insensitive and ignores a
trailing dot, following DNS name semantics.
"""

import logging
from typing import Iterable, List, Optional

import dns.exception
import dns.name

from ..utils.validators import normalize_name

logger = logging.getLogger(__name__)


class DomainFilter:
    """Restricts which domains this instance may read and mutate."""

    def __init__(self, domains: Iterable[str] = (), match_all_when_empty: bool = True):
        """
        Initialize the filter.

        Args:
            domains: Root domains under management, in priority order
            match_all_when_empty: Whether an empty filter authorizes every
                name (permissive) or none (restrictive). A permissive empty
                filter routes each name to its last two labels, which is
                wrong under multi-label public suffixes such as co.uk;
                configure explicit domains for those.
        """
        self.domains: List[str] = []
        for domain in domains:
            normalized = normalize_name(domain)
            if normalized and normalized not in self.domains:
                self.domains.append(normalized)

        self.match_all_when_empty = match_all_when_empty
        self._names = [dns.name.from_text(domain) for domain in self.domains]

        if not self.domains:
            logger.warning(
                "Domain filter is empty, "
                f"{'all' if match_all_when_empty else 'no'} domains are managed"
            )

    def is_empty(self) -> bool:
        return not self.domains

    def match(self, name: str) -> bool:
        """Return True if name is one of the managed domains or below one."""
        if not self.domains:
            return self.match_all_when_empty
        return self.managed_domain(name) is not None

    def managed_domain(self, name: str) -> Optional[str]:
        """
        Find the managed root domain a name belongs to.

        The most specific matching entry wins. With an empty permissive
        filter the last two labels of the name are used, so a name under
        a multi-label public suffix (a.example.co.uk) routes to the suffix
        itself (co.uk).
        """
        normalized = normalize_name(name)
        if not normalized:
            return None

        if not self.domains:
            if not self.match_all_when_empty:
                return None
            return ".".join(normalized.split(".")[-2:])

        try:
            candidate = dns.name.from_text(normalized)
        except dns.exception.DNSException:
            logger.debug(f"Cannot parse DNS name '{name}'")
            return None

        best = None
        best_labels = 0
        for domain, root in zip(self.domains, self._names):
            if candidate.is_subdomain(root) and len(root) > best_labels:
                best, best_labels = domain, len(root)
        return best

    def __repr__(self) -> str:
        return f"DomainFilter({self.domains!r}, match_all_when_empty={self.match_all_when_empty})"
