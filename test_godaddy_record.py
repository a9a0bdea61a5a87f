#!/usr/bin/env python3
"""
Tests for GoDaddy record conversion.
"""

import unittest
from collections import Counter

from godaddy_dns_sync.core.endpoint import Endpoint
from godaddy_dns_sync.exceptions import DecodeError
from godaddy_dns_sync.providers.godaddy_record import (
    GoDaddyRecord,
    qualify_name,
    relativize_name,
    to_endpoint,
    to_godaddy_records,
)


class TestGoDaddyRecordToEndpoint(unittest.TestCase):
    """Test conversion of registrar records into endpoints."""

    def test_record_to_endpoint(self):
        """Test that one record becomes one single-target endpoint."""
        record = GoDaddyRecord(name="www", data="1.2.3.4", type="A", ttl=3600)
        endpoint = to_endpoint(record)

        self.assertEqual(endpoint.dns_name, "www")
        self.assertEqual(endpoint.record_type, "A")
        self.assertEqual(endpoint.targets, ["1.2.3.4"])
        self.assertEqual(endpoint.record_ttl, 3600)
        self.assertEqual(endpoint.provider_specific, {})

    def test_zero_ttl_is_preserved(self):
        """Test that an unspecified TTL is not replaced with a default."""
        endpoint = to_endpoint(GoDaddyRecord(name="www", data="1.2.3.4", type="A"))
        self.assertEqual(endpoint.record_ttl, 0)

    def test_names_are_qualified_with_domain(self):
        """Test qualification of relative registrar names."""
        apex = to_endpoint(GoDaddyRecord(name="@", data="1.2.3.4", type="A"), "example.com")
        www = to_endpoint(GoDaddyRecord(name="www", data="1.2.3.4", type="A"), "example.com")
        absolute = to_endpoint(
            GoDaddyRecord(name="api.example.com", data="1.2.3.4", type="A"), "example.com"
        )

        self.assertEqual(apex.dns_name, "example.com")
        self.assertEqual(www.dns_name, "www.example.com")
        self.assertEqual(absolute.dns_name, "api.example.com")

    def test_mx_priority_is_kept(self):
        """Test that MX priority lands in provider-specific properties."""
        record = GoDaddyRecord(name="@", data="mail.example.com", type="MX", ttl=3600, priority=10)
        self.assertEqual(to_endpoint(record).provider_specific, {"priority": "10"})


class TestEndpointToGoDaddyRecords(unittest.TestCase):
    """Test fan-out of endpoints into registrar records."""

    def test_endpoint_fans_out_per_target(self):
        """Test that every target becomes its own record."""
        endpoint = Endpoint("www", "A", ["1.2.3.4", "2.3.4.5", "3.4.5.6"], 3600)
        records = to_godaddy_records(endpoint)

        self.assertEqual(len(records), 3)
        for record in records:
            self.assertEqual(record.name, "www")
            self.assertEqual(record.type, "A")
            self.assertEqual(record.ttl, 3600)
        self.assertEqual(Counter(r.data for r in records), Counter(endpoint.targets))

    def test_duplicate_targets_are_kept(self):
        """Test multiset equality of data values with repeated targets."""
        endpoint = Endpoint("txt.example.com", "TXT", ["a", "a", "b"])
        records = to_godaddy_records(endpoint)
        self.assertEqual(Counter(r.data for r in records), Counter(["a", "a", "b"]))

    def test_mx_gets_priority_only(self):
        """Test that MX records only carry a priority."""
        endpoint = Endpoint(
            "example.com",
            "MX",
            ["mail.example.com"],
            provider_specific={"priority": "10", "weight": "5", "port": "25"},
        )
        record = to_godaddy_records(endpoint)[0]

        self.assertEqual(record.priority, 10)
        self.assertIsNone(record.weight)
        self.assertIsNone(record.port)

    def test_srv_gets_all_fields(self):
        """Test that SRV records carry priority, weight, port, protocol and service."""
        endpoint = Endpoint(
            "_sip._tcp.example.com",
            "SRV",
            ["sip.example.com"],
            provider_specific={
                "priority": "10",
                "weight": "20",
                "port": "5060",
                "protocol": "_tcp",
                "service": "_sip",
            },
        )
        record = to_godaddy_records(endpoint)[0]

        self.assertEqual(record.priority, 10)
        self.assertEqual(record.weight, 20)
        self.assertEqual(record.port, 5060)
        self.assertEqual(record.protocol, "_tcp")
        self.assertEqual(record.service, "_sip")

    def test_other_types_leave_extra_fields_unset(self):
        """Test that non MX/SRV records never carry registrar-only fields."""
        endpoint = Endpoint("www.example.com", "A", ["1.2.3.4"], provider_specific={"priority": "10"})
        record = to_godaddy_records(endpoint)[0]
        self.assertIsNone(record.priority)
        self.assertEqual(
            record.to_dict(), {"name": "www.example.com", "data": "1.2.3.4", "type": "A"}
        )

    def test_names_are_made_relative(self):
        """Test relative names for a known domain."""
        apex = to_godaddy_records(Endpoint("example.com", "A", ["1.2.3.4"]), "example.com")[0]
        www = to_godaddy_records(Endpoint("www.example.com", "A", ["1.2.3.4"]), "example.com")[0]
        self.assertEqual(apex.name, "@")
        self.assertEqual(www.name, "www")

    def test_round_trip_endpoint(self):
        """Test that endpoint -> records -> endpoints keeps every target once per record."""
        endpoints = [
            Endpoint("www.example.com", "A", ["1.2.3.4", "2.3.4.5", "1.2.3.4"], 600),
            Endpoint(
                "example.com",
                "MX",
                ["mail1.example.com", "mail2.example.com"],
                3600,
                provider_specific={"priority": "10"},
            ),
            Endpoint(
                "_sip._tcp.example.com",
                "SRV",
                ["sip1.example.com", "sip2.example.com"],
                300,
                provider_specific={
                    "priority": "1",
                    "weight": "2",
                    "port": "5060",
                    "protocol": "_tcp",
                    "service": "_sip",
                },
            ),
        ]

        for endpoint in endpoints:
            with self.subTest(endpoint=str(endpoint)):
                converted = [to_endpoint(r) for r in to_godaddy_records(endpoint)]

                self.assertEqual(len(converted), len(endpoint.targets))
                for single in converted:
                    self.assertEqual(len(single.targets), 1)
                    self.assertEqual(single.dns_name, endpoint.dns_name)
                    self.assertEqual(single.record_type, endpoint.record_type)
                    self.assertEqual(single.record_ttl, endpoint.record_ttl)
                    self.assertEqual(single.provider_specific, endpoint.provider_specific)
                self.assertEqual(
                    Counter(single.targets[0] for single in converted), Counter(endpoint.targets)
                )

    def test_round_trip_single_record(self):
        """Test that record -> endpoint -> records yields the original record."""
        records = [
            GoDaddyRecord(name="www", data="1.2.3.4", type="A", ttl=600),
            GoDaddyRecord(name="@", data="mail.example.com", type="MX", ttl=3600, priority=10),
            GoDaddyRecord(
                name="_sip._tcp",
                data="sip.example.com",
                type="SRV",
                ttl=300,
                priority=1,
                weight=2,
                port=5060,
                protocol="_tcp",
                service="_sip",
            ),
            GoDaddyRecord(name="txt", data="hello", type="TXT"),
        ]

        for record in records:
            with self.subTest(record=str(record)):
                self.assertEqual(to_godaddy_records(to_endpoint(record)), [record])


class TestGoDaddyRecordSerialization(unittest.TestCase):
    """Test wire (de)serialization of records."""

    def test_to_dict_omits_unset_fields(self):
        """Test that unset fields and a zero TTL are omitted."""
        record = GoDaddyRecord(name="api", data="10.0.0.1", type="A")
        self.assertEqual(record.to_dict(), {"name": "api", "data": "10.0.0.1", "type": "A"})

    def test_from_dict(self):
        """Test parsing of a full API record object."""
        record = GoDaddyRecord.from_dict(
            {"name": "@", "data": "mail.example.com", "type": "MX", "ttl": 3600, "priority": 10}
        )
        self.assertEqual(
            record,
            GoDaddyRecord(name="@", data="mail.example.com", type="MX", ttl=3600, priority=10),
        )

    def test_from_dict_rejects_malformed_records(self):
        """Test that malformed objects raise DecodeError."""
        malformed = [
            ["not", "a", "dict"],
            {"data": "1.2.3.4", "type": "A"},
            {"name": "www", "data": "1.2.3.4"},
            {"name": "www", "data": "1.2.3.4", "type": "A", "ttl": "600"},
            {"name": "www", "data": 5, "type": "A"},
        ]
        for data in malformed:
            with self.subTest(data=data):
                with self.assertRaises(DecodeError):
                    GoDaddyRecord.from_dict(data)

    def test_str(self):
        """Test the pretty form used in logs."""
        self.assertEqual(str(GoDaddyRecord(name="www", data="1.2.3.4", type="A")), "A www 1.2.3.4")


class TestNameHelpers(unittest.TestCase):
    """Test name qualification helpers."""

    def test_qualify_and_relativize(self):
        self.assertEqual(qualify_name("www", None), "www")
        self.assertEqual(qualify_name("@", "example.com"), "example.com")
        self.assertEqual(qualify_name("WWW.Example.com.", "example.com"), "www.example.com")
        self.assertEqual(relativize_name("www.example.com", "example.com"), "www")
        self.assertEqual(relativize_name("example.com.", "example.com"), "@")
        self.assertEqual(relativize_name("www.example.com", None), "www.example.com")


if __name__ == "__main__":
    unittest.main(verbosity=2)
