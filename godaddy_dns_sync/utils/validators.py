"""
Validators - Input validation for DNS endpoints

This module provides normalization and validation helpers for DNS names,
record types, TTLs and target values read from change files.
"""

import ipaddress
import logging
import re

logger = logging.getLogger(__name__)

SUPPORTED_RECORD_TYPES = ("A", "AAAA", "CNAME", "MX", "NS", "SRV", "TXT", "CAA")

# Labels may carry a leading underscore (SRV, DKIM, ACME challenge names)
_LABEL_RE = re.compile(r"^(\*|_?[a-zA-Z0-9]([a-zA-Z0-9_-]*[a-zA-Z0-9])?)$")


def normalize_name(name: str) -> str:
    """
    Normalize a DNS name for comparison.

    Args:
        name: The DNS name to normalize

    Returns:
        Lowercased name without surrounding whitespace or trailing dot
    """
    if not name:
        return ""
    return name.strip().rstrip(".").lower()


def validate_fqdn(fqdn: str) -> bool:
    """
    Validate Fully Qualified Domain Name (FQDN).

    A single trailing dot is accepted. Wildcard and underscore-prefixed
    labels are allowed since they are legal owner names in a zone.

    Args:
        fqdn: The FQDN to validate

    Returns:
        True if valid, False otherwise
    """
    if not fqdn or not isinstance(fqdn, str):
        return False

    name = fqdn.strip()
    if name.endswith("."):
        name = name[:-1]

    if len(name) > 253:
        logger.warning(f"FQDN too long: {fqdn}")
        return False

    labels = name.split(".")
    if len(labels) < 2:
        logger.warning(f"FQDN must have at least 2 labels: {fqdn}")
        return False

    if any(label == "" for label in labels):
        logger.warning(f"FQDN contains empty labels: {fqdn}")
        return False

    for i, label in enumerate(labels):
        if not _validate_label(label, i == 0):
            logger.warning(f"Invalid label '{label}' in FQDN: {fqdn}")
            return False

    return True


def _validate_label(label: str, is_first: bool) -> bool:
    """Validate a single domain label."""
    if len(label) == 0 or len(label) > 63:
        return False

    # Wildcards only make sense as the leftmost label
    if label == "*":
        return is_first

    return bool(_LABEL_RE.match(label))


def validate_ipv4(ipv4: str) -> bool:
    """
    Validate IPv4 address.

    Args:
        ipv4: The IPv4 address to validate

    Returns:
        True if valid, False otherwise
    """
    if not ipv4 or not isinstance(ipv4, str):
        return False

    try:
        ipaddress.IPv4Address(ipv4.strip())
        return True
    except ipaddress.AddressValueError:
        logger.warning(f"Invalid IPv4 address: {ipv4}")
        return False


def validate_ipv6(ipv6: str) -> bool:
    """Validate IPv6 address."""
    if not ipv6 or not isinstance(ipv6, str):
        return False

    try:
        ipaddress.IPv6Address(ipv6.strip())
        return True
    except ipaddress.AddressValueError:
        logger.warning(f"Invalid IPv6 address: {ipv6}")
        return False


def validate_record_type(record_type: str) -> bool:
    """Check that a record type is one the registrar accepts."""
    if not record_type or not isinstance(record_type, str):
        return False
    return record_type.upper() in SUPPORTED_RECORD_TYPES


def validate_ttl(ttl) -> bool:
    """A TTL is a non-negative integer; 0 means unspecified."""
    return isinstance(ttl, int) and not isinstance(ttl, bool) and ttl >= 0


def validate_target(record_type: str, target: str) -> bool:
    """
    Validate a target value against its record type.

    Only address records are checked strictly; other types just need a
    non-empty value.
    """
    if not target or not isinstance(target, str):
        return False

    record_type = record_type.upper()
    if record_type == "A":
        return validate_ipv4(target)
    if record_type == "AAAA":
        return validate_ipv6(target)
    return bool(target.strip())
