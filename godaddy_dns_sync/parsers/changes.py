import logging
from typing import Dict, Optional

import yaml

from ..core.endpoint import ChangeSet, Endpoint
from ..providers.godaddy_record import SRV_FIELDS
from ..utils.validators import (
    validate_fqdn,
    validate_record_type,
    validate_target,
    validate_ttl,
)

logger = logging.getLogger(__name__)


class ChangeSetParser:
    """Reads a YAML file with create/update/delete endpoint lists."""

    SECTIONS = ("create", "update", "delete")

    def __init__(self, path: str):
        self.path = path

    def parse(self) -> ChangeSet:
        """Parse the change file and validate its endpoints."""
        try:
            with open(self.path, "r") as f:
                document = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Change file not found: {self.path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing change file: {e}")

        if not isinstance(document, dict):
            raise ValueError("Change file must be a mapping with create/update/delete lists")

        unknown = set(document) - set(self.SECTIONS)
        if unknown:
            logger.warning(f"Ignoring unknown sections in change file: {', '.join(sorted(unknown))}")

        changes = ChangeSet()
        for section in self.SECTIONS:
            entries = document.get(section) or []
            if not isinstance(entries, list):
                raise ValueError(f"Section '{section}' must be a list")
            endpoints = getattr(changes, section)
            for index, entry in enumerate(entries, start=1):
                endpoint = self.parse_endpoint(entry, f"{section}[{index}]")
                if endpoint is not None:
                    endpoints.append(endpoint)

        logger.info(
            f"Parsed {len(changes)} changes from {self.path} "
            f"({len(changes.create)} create, {len(changes.update)} update, "
            f"{len(changes.delete)} delete)"
        )
        return changes

    def parse_endpoint(self, entry: Dict, where: str) -> Optional[Endpoint]:
        """Build an endpoint from one entry, or None if it is invalid."""
        if not isinstance(entry, dict):
            logger.warning(f"Invalid entry at {where}, expected a mapping, skipping")
            return None

        name = str(entry.get("name", "")).strip()
        record_type = str(entry.get("type", "")).strip().upper()
        targets = entry.get("targets", entry.get("target", []))
        if isinstance(targets, str):
            targets = [targets]
        ttl = entry.get("ttl", 0)

        if not validate_fqdn(name):
            logger.warning(f"Invalid name '{name}' at {where}, skipping")
            return None

        if not validate_record_type(record_type):
            logger.warning(f"Unsupported record type '{record_type}' at {where}, skipping")
            return None

        if not validate_ttl(ttl):
            logger.warning(f"Invalid TTL '{ttl}' at {where}, skipping")
            return None

        targets = [str(t).strip() for t in targets or []]
        if not targets:
            logger.warning(f"No targets for '{name}' at {where}, skipping")
            return None

        invalid = [t for t in targets if not validate_target(record_type, t)]
        if invalid:
            logger.warning(f"Invalid {record_type} targets {invalid} at {where}, skipping")
            return None

        provider_specific = self._provider_specific(entry, record_type, where)
        if provider_specific is None:
            return None

        return Endpoint(
            dns_name=name,
            record_type=record_type,
            targets=targets,
            record_ttl=ttl,
            provider_specific=provider_specific,
        )

    @staticmethod
    def _provider_specific(entry: Dict, record_type: str, where: str) -> Optional[Dict[str, str]]:
        values = {}
        for key in SRV_FIELDS:
            if entry.get(key) is None:
                continue
            value = entry[key]
            if key in ("priority", "weight", "port"):
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    logger.warning(f"Invalid {key} '{value}' at {where}, skipping")
                    return None
            values[key] = str(value)

        if values and record_type not in ("MX", "SRV"):
            logger.debug(f"Ignoring {', '.join(sorted(values))} for {record_type} at {where}")
        return values
