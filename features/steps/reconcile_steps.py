"""
Step definitions for replace-all reconciliation scenarios.
"""

from behave import given, then, when

from godaddy_dns_sync.core.domain_filter import DomainFilter
from godaddy_dns_sync.core.endpoint import ChangeSet, Endpoint
from godaddy_dns_sync.exceptions import ApplyError
from godaddy_dns_sync.providers.godaddy_provider import GoDaddyProvider
from godaddy_dns_sync.providers.godaddy_record import GoDaddyRecord
from godaddy_dns_sync.providers.memory_client import InMemoryRegistryClient


def _records_from_table(table):
    return [
        GoDaddyRecord(
            name=row["name"],
            data=row["data"],
            type=row["type"],
            ttl=int(row["ttl"]),
        )
        for row in table
    ]


def _build_provider(context):
    context.client = InMemoryRegistryClient(context.initial_records)
    for domain in context.failing_domains:
        context.client.fail_replace(domain)
    context.provider = GoDaddyProvider(context.client, context.domain_filter, max_workers=2)


def _apply(context, changes):
    _build_provider(context)
    try:
        context.result = context.provider.apply_changes(changes)
    except ApplyError as e:
        context.error = e
        context.result = e.result


@given('the managed domains are "{domains}"')
def step_managed_domains(context, domains):
    context.domain_filter = DomainFilter([d.strip() for d in domains.split(",")])


@given('the domain "{domain}" has the records:')
def step_domain_records(context, domain):
    context.initial_records[domain] = _records_from_table(context.table)


@given('the domain "{domain}" has no records')
def step_domain_empty(context, domain):
    context.initial_records[domain] = []


@given('replacing records of "{domain}" fails')
def step_replace_fails(context, domain):
    context.failing_domains.append(domain)


@when('I apply a change set deleting "{name}" "{record_type}"')
def step_apply_delete(context, name, record_type):
    _apply(context, ChangeSet(delete=[Endpoint(name, record_type, [])]))


@when("I apply a change set creating:")
def step_apply_create_table(context):
    changes = ChangeSet(
        create=[
            Endpoint(row["name"], row["type"], [row["target"]], int(row["ttl"]))
            for row in context.table
        ]
    )
    _apply(context, changes)


@when('I apply a change set creating "{name}" "{record_type}" "{target}" with ttl {ttl:d}')
def step_apply_create(context, name, record_type, target, ttl):
    _apply(context, ChangeSet(create=[Endpoint(name, record_type, [target], ttl)]))


@then("the apply succeeds")
def step_apply_succeeds(context):
    assert context.error is None, f"Unexpected error: {context.error}"


@then('the apply fails for "{domain}" only')
def step_apply_fails_for(context, domain):
    assert context.error is not None, "Expected the apply to fail"
    assert context.error.domains == [domain], context.error.domains


@then('the domain "{domain}" has exactly the records:')
def step_domain_has_records(context, domain):
    expected = _records_from_table(context.table)
    actual = context.client.fetch_all(domain)
    assert actual == expected, f"{actual!r} != {expected!r}"


@then("the registry was not contacted")
def step_registry_not_contacted(context):
    assert context.client.calls["fetch_all"] == 0
    assert context.client.calls["replace_all"] == 0


@then("{count:d} change was dropped")
def step_changes_dropped(context, count):
    assert len(context.result.dropped) == count, context.result.dropped
