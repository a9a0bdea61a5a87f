"""
Sync Manager - Orchestrates change set application for the CLI

Builds the registry client, domain filter and provider from a configuration
dictionary, and reports what a change set does to each managed domain.
"""

import logging
import os
from datetime import datetime
from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table

from ..exceptions import ApplyError, ConfigError, GoDaddyDNSError
from ..providers.base_provider import RegistryClient
from ..providers.godaddy_client import GoDaddyClient
from ..providers.godaddy_provider import GoDaddyProvider
from ..providers.memory_client import InMemoryRegistryClient
from .domain_filter import DomainFilter
from .endpoint import ChangeSet, Endpoint
from .reconciler import ApplyResult

console = Console()
logger = logging.getLogger(__name__)

ENV_OVERRIDES = {
    "GODADDY_API_KEY": "api_key",
    "GODADDY_API_SECRET": "api_secret",
    "GODADDY_API_ENV": "api_env",
}


class SyncManager:
    """Main class that wires the provider together and applies change sets."""

    def __init__(self, config: Dict):
        """Initialize the sync manager with configuration."""
        self.config = config or {}
        self.provider_name = self.config.get("default_provider", "godaddy")
        self.provider_config = self._provider_config()
        self.domain_filter = self._get_domain_filter()
        self.client = self._get_registry_client()

        reconciler_config = self.config.get("reconciler", {}) or {}
        self.provider = GoDaddyProvider(
            self.client,
            self.domain_filter,
            max_workers=reconciler_config.get("max_workers", 4),
            relative_names=self.provider_config.get("relative_names", False),
            timeout=reconciler_config.get("timeout"),
        )

    def _provider_config(self) -> Dict:
        """Provider settings with environment variable overrides applied."""
        provider_config = dict(
            (self.config.get("dns_providers", {}) or {}).get(self.provider_name, {}) or {}
        )
        if self.provider_name == "godaddy":
            for env_var, key in ENV_OVERRIDES.items():
                if os.environ.get(env_var):
                    logger.debug(f"Using {env_var} from environment")
                    provider_config[key] = os.environ[env_var]
        return provider_config

    def _get_domain_filter(self) -> DomainFilter:
        """Build the domain filter, refusing an implicit empty policy."""
        filter_config = self.config.get("domain_filter", {}) or {}
        domains = filter_config.get("domains", []) or []
        if isinstance(domains, str):
            domains = domains.split()

        if not domains and "match_all_when_empty" not in filter_config:
            raise ConfigError(
                "domain_filter.domains is empty; set domain_filter.match_all_when_empty "
                "to true or false explicitly"
            )

        return DomainFilter(
            domains,
            match_all_when_empty=bool(filter_config.get("match_all_when_empty", False)),
        )

    def _get_registry_client(self) -> RegistryClient:
        """Get the registry client based on configuration."""
        if self.provider_name == "godaddy":
            if not self.provider_config.get("api_key") or not self.provider_config.get("api_secret"):
                raise ConfigError("GoDaddy api_key and api_secret are required")
            reconciler_config = self.config.get("reconciler", {}) or {}
            return GoDaddyClient(
                self.provider_config["api_key"],
                self.provider_config["api_secret"],
                api_env=self.provider_config.get("api_env", "ote"),
                base_url=self.provider_config.get("base_url"),
                pool_size=max(10, reconciler_config.get("max_workers", 4)),
            )
        elif self.provider_name == "memory":
            return InMemoryRegistryClient()
        else:
            raise ConfigError(f"Unknown provider '{self.provider_name}'")

    def list_records(self) -> List[Endpoint]:
        """Fetch and display the records of every managed domain."""
        endpoints = self.provider.records()

        table = Table(title="DNS Records")
        table.add_column("Name", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("TTL", style="white")
        table.add_column("Target", style="green")
        for endpoint in endpoints:
            table.add_row(
                endpoint.dns_name,
                endpoint.record_type,
                str(endpoint.record_ttl or "-"),
                ", ".join(endpoint.targets),
            )
        console.print(table)
        return endpoints

    def process_changes(
        self, changes: ChangeSet, dry_run: bool = False, output_file: Optional[str] = None
    ) -> bool:
        """Apply (or plan) a change set and report the outcome."""
        if changes.is_empty():
            console.print("[green]No changes required - change set is empty[/green]")
            return True

        self._display_changes_summary(changes)

        if dry_run:
            console.print("[yellow]DRY RUN MODE - No changes will be applied[/yellow]")
            try:
                result = self.provider.plan_changes(changes)
            except GoDaddyDNSError as e:
                logger.error(f"Error planning changes: {e}")
                console.print(f"[red]Error: {e}[/red]")
                return False

            self._display_result(result)
            if output_file:
                self._save_dry_run_output(result, output_file)
                console.print(f"[green]Dry run output saved to: {output_file}[/green]")
            return result.ok

        try:
            result = self.provider.apply_changes(changes)
        except ApplyError as e:
            self._display_result(e.result)
            console.print(f"[red]Failed domains: {', '.join(e.domains)}[/red]")
            return False

        self._display_result(result)
        if result.records:
            console.print("[green]All DNS changes applied successfully![/green]")
        else:
            console.print("[yellow]No managed domains were touched by the change set[/yellow]")
        return True

    def _display_changes_summary(self, changes: ChangeSet):
        """Display a summary of requested changes."""
        table = Table(title="DNS Changes Summary")
        table.add_column("Operation", style="cyan")
        table.add_column("Count", style="magenta")
        table.add_column("Details", style="white")

        for label, endpoints in (
            ("Create", changes.create),
            ("Update", changes.update),
            ("Delete", changes.delete),
        ):
            if endpoints:
                table.add_row(
                    label,
                    str(len(endpoints)),
                    ", ".join(f"{ep.dns_name} ({ep.record_type})" for ep in endpoints),
                )

        console.print(table)
        console.print(f"\n[bold]Total changes: {len(changes)}[/bold]")

    def _display_result(self, result: ApplyResult):
        """Display the per-domain outcome of a reconciliation pass."""
        if result is None:
            return

        table = Table(title="Domains")
        table.add_column("Domain", style="cyan")
        table.add_column("Status", style="magenta")
        table.add_column("Records", style="white")

        for domain in sorted(set(result.records) | set(result.failures)):
            if domain in result.failures:
                table.add_row(domain, "[red]failed[/red]", str(result.failures[domain]))
            else:
                table.add_row(domain, "[green]ok[/green]", str(len(result.records[domain])))
        console.print(table)

        for endpoint in result.dropped:
            console.print(f"[yellow]Dropped (not managed): {endpoint.dns_name} ({endpoint.record_type})[/yellow]")

    def _save_dry_run_output(self, result: ApplyResult, output_file: str):
        """Save the planned record lists to a file."""
        try:
            with open(output_file, "w") as f:
                f.write("=" * 60 + "\n")
                f.write("GODADDY DNS SYNC - DRY RUN SUMMARY\n")
                f.write("=" * 60 + "\n\n")
                f.write(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")

                for domain in sorted(result.records):
                    changes = result.changes.get(domain, ChangeSet())
                    f.write(f"DOMAIN {domain}\n")
                    f.write("-" * 20 + "\n")
                    for ep in changes.create:
                        f.write(f"  + {ep.dns_name:<30} {ep.record_type:<6} {', '.join(ep.targets)}\n")
                    for ep in changes.update:
                        f.write(f"  ~ {ep.dns_name:<30} {ep.record_type:<6} {', '.join(ep.targets)}\n")
                    for ep in changes.delete:
                        f.write(f"  - {ep.dns_name:<30} {ep.record_type}\n")
                    f.write("  Target record list:\n")
                    for record in result.records[domain]:
                        f.write(f"    {record}\n")
                    f.write("\n")

                if result.failures:
                    f.write("FAILED DOMAINS:\n")
                    for domain, error in sorted(result.failures.items()):
                        f.write(f"  ! {domain}: {error}\n")
                    f.write("\n")

                if result.dropped:
                    f.write("DROPPED CHANGES (outside managed domains):\n")
                    for ep in result.dropped:
                        f.write(f"  x {ep.dns_name} {ep.record_type}\n")
                    f.write("\n")

                f.write("=" * 60 + "\n")
                f.write("END OF DRY RUN SUMMARY\n")
                f.write("=" * 60 + "\n")

            logger.info(f"Dry run output saved to: {output_file}")
        except OSError as e:
            logger.error(f"Failed to save dry run output to {output_file}: {e}")
            console.print(f"[red]Warning: Failed to save dry run output to {output_file}: {e}[/red]")
