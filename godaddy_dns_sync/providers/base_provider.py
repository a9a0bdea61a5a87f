"""
Base registry client interface.

This module defines the abstract base class for registrar clients. The
registrar only supports reading and replacing a domain's full record list.
"""

from abc import ABC, abstractmethod
from typing import List

from .godaddy_record import GoDaddyRecord


class RegistryClient(ABC):
    """Abstract base class for replace-all registrar clients."""

    @abstractmethod
    def fetch_all(self, domain: str) -> List[GoDaddyRecord]:
        """Get every record of a domain, managed or not."""
        pass

    @abstractmethod
    def replace_all(self, domain: str, records: List[GoDaddyRecord]) -> None:
        """Replace every record of a domain with the given list."""
        pass
