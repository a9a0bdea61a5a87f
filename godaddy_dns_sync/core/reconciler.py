"""
Reconciler - Applies change sets to a replace-all registrar

The registrar has no per-record mutation, so every touched domain goes
through fetch -> merge -> submit: the current record list is fetched, the
changes are merged into it, and the full list is written back. Records
whose (name, type) is not touched by the change set are preserved as-is,
since a domain may hold records this instance does not own.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..exceptions import ApplyCancelled, ApplyError, GoDaddyDNSError
from ..providers.base_provider import RegistryClient
from ..providers.godaddy_record import GoDaddyRecord, qualify_name, to_godaddy_records
from ..utils.validators import normalize_name
from .domain_filter import DomainFilter
from .endpoint import ChangeSet, Endpoint

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Outcome of one reconciliation pass."""

    # Target record list per domain (submitted, or planned on a dry run)
    records: Dict[str, List[GoDaddyRecord]] = field(default_factory=dict)
    # Changes outside the managed domains
    dropped: List[Endpoint] = field(default_factory=list)
    failures: Dict[str, Exception] = field(default_factory=dict)
    changes: Dict[str, ChangeSet] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class Reconciler:
    """Computes and submits full per-domain record lists for change sets."""

    def __init__(
        self,
        client: RegistryClient,
        domain_filter: DomainFilter,
        max_workers: int = 4,
        relative_names: bool = False,
    ):
        """
        Initialize the reconciler.

        Args:
            client: Registry client used to fetch and replace records
            domain_filter: Managed domains
            max_workers: Upper bound on domains processed concurrently
            relative_names: Emit new records with names relative to their
                domain instead of the endpoint's fully-qualified name
        """
        self.client = client
        self.domain_filter = domain_filter
        self.max_workers = max(1, int(max_workers))
        self.relative_names = relative_names

    def apply(
        self,
        changes: ChangeSet,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> ApplyResult:
        """
        Apply a change set to every touched domain.

        Args:
            changes: Desired creations, updates and deletions
            cancel_event: When set, no further domain work is started
            timeout: Seconds after which no further domain work is started

        Returns:
            ApplyResult with the submitted record list per domain

        Raises:
            ApplyError: If any domain failed or was cancelled; carries the
                partial result
        """
        logger.info(
            f"Applying changes [Create ({len(changes.create)}), "
            f"Update ({len(changes.update)}), Delete ({len(changes.delete)})]"
        )
        result = self._run(changes, True, cancel_event, timeout)
        if result.failures:
            raise ApplyError(result.failures, result)

        logger.info(f"Done applying changes to {len(result.records)} domain(s)")
        return result

    def plan(self, changes: ChangeSet) -> ApplyResult:
        """Fetch and merge without submitting anything (dry run)."""
        logger.info(f"Planning {len(changes)} change(s)")
        return self._run(changes, False, None, None)

    def filter_changes(self, endpoints: List[Endpoint]) -> Tuple[List[Endpoint], List[Endpoint]]:
        """Split endpoints into managed and dropped ones."""
        kept, dropped = [], []
        for endpoint in endpoints:
            if self.domain_filter.match(endpoint.dns_name):
                kept.append(endpoint)
            else:
                logger.warning(f"Omitting change outside managed domains: {endpoint}")
                dropped.append(endpoint)
        return kept, dropped

    def group_by_domain(self, changes: ChangeSet) -> Tuple[Dict[str, ChangeSet], List[Endpoint]]:
        """Filter a change set and split it per managed domain."""
        grouped: Dict[str, ChangeSet] = {}
        dropped: List[Endpoint] = []

        for kind in ("create", "update", "delete"):
            kept, rejected = self.filter_changes(getattr(changes, kind))
            dropped.extend(rejected)
            for endpoint in kept:
                domain = self.domain_filter.managed_domain(endpoint.dns_name)
                if domain is None:
                    logger.warning(f"No managed domain for {endpoint.dns_name}, omitting")
                    dropped.append(endpoint)
                    continue
                getattr(grouped.setdefault(domain, ChangeSet()), kind).append(endpoint)

        return grouped, dropped

    def merge(
        self, domain: str, current: List[GoDaddyRecord], changes: ChangeSet
    ) -> List[GoDaddyRecord]:
        """
        Compute the full target record list for one domain.

        Records whose (name, type) is deleted or updated are removed from
        the current list, then the records of every update and create are
        appended. Everything else is kept untouched.
        """
        removed = {ep.key() for ep in changes.delete} | {ep.key() for ep in changes.update}

        target = []
        for record in current:
            if self._record_key(record, domain) in removed:
                logger.debug(f"Removing {record} from {domain}")
                continue
            target.append(record)

        seen = {self._record_identity(record, domain) for record in target}
        for endpoint in changes.update + changes.create:
            names_domain = domain if self.relative_names else None
            for record in to_godaddy_records(endpoint, names_domain):
                identity = self._record_identity(record, domain)
                if identity in seen:
                    logger.debug(f"Skipping duplicate {record} in {domain}")
                    continue
                seen.add(identity)
                logger.debug(f"Adding {record} to {domain}")
                target.append(record)

        return target

    def _run(
        self,
        changes: ChangeSet,
        submit: bool,
        cancel_event: Optional[threading.Event],
        timeout: Optional[float],
    ) -> ApplyResult:
        grouped, dropped = self.group_by_domain(changes)
        result = ApplyResult(dropped=dropped, changes=grouped)
        if dropped:
            logger.warning(f"Dropped {len(dropped)} change(s) outside managed domains")
        if not grouped:
            logger.info("No changes for managed domains")
            return result

        deadline = time.monotonic() + timeout if timeout is not None else None

        def should_stop() -> bool:
            if cancel_event is not None and cancel_event.is_set():
                return True
            return deadline is not None and time.monotonic() >= deadline

        domains = sorted(grouped)
        workers = min(self.max_workers, len(domains))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reconcile") as pool:
            futures = {
                domain: pool.submit(
                    self._reconcile_domain, domain, grouped[domain], submit, should_stop
                )
                for domain in domains
            }
            for domain in domains:
                try:
                    result.records[domain] = futures[domain].result()
                except ApplyCancelled as e:
                    logger.warning(f"Skipped {domain}: {e}")
                    result.failures[domain] = e
                except GoDaddyDNSError as e:
                    logger.error(
                        f"Failed to {getattr(e, 'operation', None) or 'reconcile'} "
                        f"records for {domain} "
                        f"(status {getattr(e, 'status_code', None) or 'n/a'}): {e}"
                    )
                    result.failures[domain] = e
                except Exception as e:
                    logger.exception(f"Unexpected error reconciling records for {domain}: {e}")
                    result.failures[domain] = e

        return result

    def _reconcile_domain(
        self,
        domain: str,
        changes: ChangeSet,
        submit: bool,
        should_stop: Callable[[], bool],
    ) -> List[GoDaddyRecord]:
        """Fetch, merge and optionally submit one domain."""
        if should_stop():
            raise ApplyCancelled(f"Apply cancelled before fetching {domain}")

        current = self.client.fetch_all(domain)
        logger.debug(f"Fetched {len(current)} current records for {domain}")

        target = self.merge(domain, current, changes)
        if not submit:
            return target

        if should_stop():
            raise ApplyCancelled(f"Apply cancelled before submitting {domain}")

        logger.info(
            f"Replacing records for {domain}: {len(current)} -> {len(target)} "
            f"[Create ({len(changes.create)}), Update ({len(changes.update)}), "
            f"Delete ({len(changes.delete)})]"
        )
        self.client.replace_all(domain, target)
        return target

    @staticmethod
    def _record_key(record: GoDaddyRecord, domain: str) -> Tuple[str, str]:
        return normalize_name(qualify_name(record.name, domain)), record.type.upper()

    @classmethod
    def _record_identity(cls, record: GoDaddyRecord, domain: str) -> Tuple:
        return cls._record_key(record, domain) + (
            record.data,
            record.ttl,
            record.priority,
            record.weight,
            record.port,
            record.protocol,
            record.service,
        )
