"""
GoDaddy record representation and conversion to/from endpoints.

The registrar stores one record per (name, type, value); an endpoint
carries every value for a name/type. Conversions fan out and collapse
accordingly.
"""

from dataclasses import dataclass, fields
from typing import Dict, List, Optional

from ..core.endpoint import Endpoint
from ..exceptions import DecodeError
from ..utils.validators import normalize_name

# Registrar-only fields and the record types they apply to
MX_FIELDS = ("priority",)
SRV_FIELDS = ("priority", "weight", "port", "protocol", "service")
INT_FIELDS = ("ttl", "port", "priority", "weight")

APEX = "@"


@dataclass
class GoDaddyRecord:
    """A single record as the GoDaddy domains API represents it."""

    name: str
    data: str
    type: str
    ttl: int = 0

    port: Optional[int] = None  # SRV only
    priority: Optional[int] = None  # MX, SRV only
    protocol: Optional[str] = None  # SRV only
    service: Optional[str] = None  # SRV only
    weight: Optional[int] = None  # SRV only

    @classmethod
    def from_dict(cls, data: Dict) -> "GoDaddyRecord":
        """Build a record from a decoded JSON object."""
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a record object, got {type(data).__name__}")

        for required in ("name", "type"):
            if not isinstance(data.get(required), str):
                raise DecodeError(f"Record is missing '{required}': {data!r}")

        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            if value is None:
                continue
            if f.name in INT_FIELDS:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise DecodeError(f"Record field '{f.name}' is not an integer: {data!r}")
            elif not isinstance(value, str):
                raise DecodeError(f"Record field '{f.name}' is not a string: {data!r}")
            values[f.name] = value

        values.setdefault("data", "")
        return cls(**values)

    def to_dict(self) -> Dict:
        """Serialize for the API, omitting unset fields and a zero TTL."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value == "" or (f.name == "ttl" and value == 0):
                continue
            result[f.name] = value
        return result

    def __str__(self) -> str:
        return f"{self.type} {self.name} {self.data}"


def qualify_name(name: str, domain: Optional[str]) -> str:
    """Turn a registrar-relative name into a fully-qualified one."""
    if not domain:
        return name

    domain = normalize_name(domain)
    normalized = normalize_name(name)
    if normalized in ("", APEX, domain):
        return domain
    if normalized.endswith("." + domain):
        return normalized
    return f"{normalized}.{domain}"


def relativize_name(name: str, domain: Optional[str]) -> str:
    """Turn a fully-qualified name into the registrar-relative form."""
    if not domain:
        return name

    domain = normalize_name(domain)
    normalized = normalize_name(name)
    if normalized == domain:
        return APEX
    if normalized.endswith("." + domain):
        return normalized[: -len(domain) - 1]
    return normalized


def to_endpoint(record: GoDaddyRecord, domain: Optional[str] = None) -> Endpoint:
    """
    Convert one registrar record into a single-target endpoint.

    Args:
        record: The registrar record
        domain: Domain the record was fetched from; when given, relative
            names are qualified with it

    Returns:
        Endpoint with one target and the record's TTL copied verbatim
    """
    provider_specific = {}
    record_type = record.type.upper()
    if record_type in ("MX", "SRV"):
        extra = MX_FIELDS if record_type == "MX" else SRV_FIELDS
        for name in extra:
            value = getattr(record, name)
            if value is not None:
                provider_specific[name] = str(value)

    return Endpoint(
        dns_name=qualify_name(record.name, domain),
        record_type=record.type,
        targets=[record.data],
        record_ttl=record.ttl,
        provider_specific=provider_specific,
    )


def to_godaddy_records(endpoint: Endpoint, domain: Optional[str] = None) -> List[GoDaddyRecord]:
    """
    Fan an endpoint out into one registrar record per target.

    Args:
        endpoint: The endpoint to convert
        domain: When given, names are made relative to this domain

    Returns:
        Records sharing the endpoint's name, type and TTL
    """
    record_type = endpoint.record_type.upper()
    if record_type == "MX":
        extra_fields = MX_FIELDS
    elif record_type == "SRV":
        extra_fields = SRV_FIELDS
    else:
        extra_fields = ()

    extra = {}
    for name in extra_fields:
        value = endpoint.provider_specific.get(name)
        if value is None:
            continue
        extra[name] = int(value) if name in INT_FIELDS else value

    name = relativize_name(endpoint.dns_name, domain)
    return [
        GoDaddyRecord(
            name=name,
            data=target,
            type=endpoint.record_type,
            ttl=endpoint.record_ttl,
            **extra,
        )
        for target in endpoint.targets
    ]
