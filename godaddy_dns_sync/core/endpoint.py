"""
Registrar-agnostic DNS endpoint and change set value objects.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..utils.validators import normalize_name


@dataclass
class Endpoint:
    """One DNS name/type with all of its target values."""

    dns_name: str
    record_type: str
    targets: List[str] = field(default_factory=list)
    # 0 means unspecified
    record_ttl: int = 0
    provider_specific: Dict[str, str] = field(default_factory=dict)

    def key(self) -> Tuple[str, str]:
        """Normalized (name, type) identity."""
        return normalize_name(self.dns_name), self.record_type.upper()

    def __str__(self) -> str:
        return (
            f"{self.dns_name} {self.record_ttl} IN {self.record_type} "
            f"{' '.join(self.targets)}"
        )


@dataclass
class ChangeSet:
    """Desired creations, updates (new state only) and deletions."""

    create: List[Endpoint] = field(default_factory=list)
    update: List[Endpoint] = field(default_factory=list)
    delete: List[Endpoint] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.create or self.update or self.delete)

    def __len__(self) -> int:
        return len(self.create) + len(self.update) + len(self.delete)
