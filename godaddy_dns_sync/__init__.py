"""
GoDaddy DNS Sync - Reconcile DNS records against the GoDaddy API

Applies create/update/delete change sets to domains hosted at GoDaddy,
whose API can only list or replace a domain's complete record set.
"""

__version__ = "1.0.0"
__author__ = "GoDaddy DNS Sync Team"
__description__ = "Replace-all DNS record reconciliation for GoDaddy domains"

from .core.domain_filter import DomainFilter
from .core.endpoint import ChangeSet, Endpoint
from .core.reconciler import ApplyResult, Reconciler
from .providers.godaddy_client import GoDaddyClient
from .providers.godaddy_provider import GoDaddyProvider

__all__ = [
    "ApplyResult",
    "ChangeSet",
    "DomainFilter",
    "Endpoint",
    "GoDaddyClient",
    "GoDaddyProvider",
    "Reconciler",
]
