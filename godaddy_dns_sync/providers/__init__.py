"""
Registrar client and provider implementations.

This package contains the GoDaddy record codec, the HTTP client for the
GoDaddy domains API, and an in-memory client. The provider facade lives in
godaddy_provider and is imported from there.
"""

from .base_provider import RegistryClient
from .godaddy_client import GoDaddyClient
from .godaddy_record import GoDaddyRecord, to_endpoint, to_godaddy_records
from .memory_client import InMemoryRegistryClient

__all__ = [
    "GoDaddyClient",
    "GoDaddyRecord",
    "InMemoryRegistryClient",
    "RegistryClient",
    "to_endpoint",
    "to_godaddy_records",
]
