"""
Utility functions and helpers.

This package contains normalization and validation helpers shared by
the parsers, the domain filter and the reconciler.
"""

from .validators import (
    normalize_name,
    validate_fqdn,
    validate_ipv4,
    validate_record_type,
    validate_target,
    validate_ttl,
)

__all__ = [
    "normalize_name",
    "validate_fqdn",
    "validate_ipv4",
    "validate_record_type",
    "validate_target",
    "validate_ttl",
]
