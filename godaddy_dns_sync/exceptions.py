"""
Exceptions raised by the GoDaddy DNS sync components.

Registry errors carry the domain and operation they failed on so callers
can log and aggregate them without re-deriving context.
"""

from typing import Dict, Optional


class GoDaddyDNSError(Exception):
    """Base exception for godaddy_dns_sync errors."""


class ConfigError(GoDaddyDNSError):
    """Configuration is missing or invalid."""


class RegistryError(GoDaddyDNSError):
    """A call to the registrar failed."""

    def __init__(
        self,
        message: str,
        domain: Optional[str] = None,
        operation: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.domain = domain
        self.operation = operation
        self.status_code = status_code


class AuthError(RegistryError):
    """The registrar rejected the API credentials."""


class TransportError(RegistryError):
    """Network failure, timeout or transient server error."""


class ApiError(RegistryError):
    """The registrar refused the request for a reason other than auth."""

    def __init__(self, message: str, body: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.body = body


class DecodeError(RegistryError):
    """The registrar response could not be parsed into records."""

    def __init__(self, message: str, body: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.body = body


class ApplyCancelled(GoDaddyDNSError):
    """Per-domain work was not started because the apply was cancelled."""


class ApplyError(GoDaddyDNSError):
    """One or more domains failed during an apply."""

    def __init__(self, failures: Dict[str, Exception], result=None):
        self.failures = dict(failures)
        self.result = result
        details = "; ".join(
            f"{domain}: {error}" for domain, error in sorted(self.failures.items())
        )
        super().__init__(
            f"Failed to apply changes for {len(self.failures)} domain(s): {details}"
        )

    @property
    def domains(self):
        """Sorted names of the failed domains."""
        return sorted(self.failures)
