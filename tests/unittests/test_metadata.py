# This file is part of oci-vnic. See LICENSE file for license information.

import json
import logging
import uuid

import pytest
import requests
import responses

from ocivnic import metadata
from ocivnic.exceptions import FetchError
from ocivnic.metadata import InterfaceRecord, ResolvedInterface
from tests.unittests.helpers import (
    METADATA_URL,
    OPC_VM_DUAL_STACK_SECONDARY_VNIC_RESPONSE,
    OPC_VM_SECONDARY_VNIC_RESPONSE,
    vnic_entry,
    vnics_body,
)


class TestMaskLength:
    @pytest.mark.parametrize(
        "cidr, expected",
        [
            ("10.0.0.0/24", "24"),
            ("2603:c020:400d:5dbb::/64", "64"),
            ("10.0.0.0", "10.0.0.0"),
            ("", ""),
            ("a/b/16", "16"),
        ],
    )
    def test_mask_length(self, cidr, expected):
        assert expected == metadata.mask_length(cidr)


class TestParseVnicsData:
    def test_empty_array(self):
        assert [] == metadata.parse_vnics_data([])

    def test_secondary_vnic_response(self):
        records = metadata.parse_vnics_data(
            json.loads(OPC_VM_SECONDARY_VNIC_RESPONSE)
        )
        assert [
            InterfaceRecord(
                index=0,
                mac_addr="02:00:17:05:d1:db",
                private_ip="10.0.0.230",
                subnet_mask_length="24",
                virtual_router_ip="10.0.0.1",
            ),
            InterfaceRecord(
                index=1,
                mac_addr="00:00:17:02:2b:b1",
                private_ip="10.0.4.5",
                subnet_mask_length="24",
                virtual_router_ip="10.0.4.1",
            ),
        ] == records

    def test_dual_stack_response(self):
        records = metadata.parse_vnics_data(
            json.loads(OPC_VM_DUAL_STACK_SECONDARY_VNIC_RESPONSE)
        )
        assert 2 == len(records)
        second = records[1]
        assert 1 == second.index
        assert "02:00:17:18:f6:ff" == second.mac_addr
        assert (
            "2603:c020:400d:5d7e:aacc:8e5f:3b1b:3a4a",
            "2603:c020:400d:5d7e:aacc:8e5f:3b1b:3a4b",
        ) == second.ipv6_addresses
        assert "64" == second.ipv6_subnet_mask_length
        assert "fe80::200:17ff:fe40:8972" == second.ipv6_virtual_router_ip

    @pytest.mark.parametrize("ipv6_addresses", [[], None])
    def test_ipv6_fields_ignored_without_addresses(self, ipv6_addresses):
        entry = vnic_entry(
            "02:00:17:05:d1:db",
            ipv6Addresses=ipv6_addresses,
            ipv6SubnetCidrBlock="2603:c020:400d:5dbb::/64",
            ipv6VirtualRouterIp="fe80::200:17ff:fe40:8972",
        )
        record = metadata.parse_vnic_entry(0, entry)
        assert () == record.ipv6_addresses
        assert "" == record.ipv6_subnet_mask_length
        assert "" == record.ipv6_virtual_router_ip

    def test_missing_fields_are_empty(self):
        record = metadata.parse_vnic_entry(3, {"macAddr": "02:00:17:AA:BB"})
        assert InterfaceRecord(3, "02:00:17:aa:bb", "", "", "") == record

    @pytest.mark.parametrize("body", [{}, "vnics", 42, None])
    def test_non_array_body(self, body):
        with pytest.raises(FetchError, match="expected an array"):
            metadata.parse_vnics_data(body)

    @pytest.mark.parametrize("entry", [[], "02:00:17:05:d1:db", None])
    def test_non_object_entry(self, entry):
        with pytest.raises(FetchError, match="vnic entry 1"):
            metadata.parse_vnics_data([vnic_entry("02:00:17:05:d1:db"), entry])

    def test_non_list_ipv6_addresses(self):
        entry = vnic_entry("02:00:17:05:d1:db", ipv6Addresses="2603::1")
        with pytest.raises(FetchError, match="ipv6Addresses"):
            metadata.parse_vnic_entry(0, entry)


class TestResolvedInterface:
    def test_from_record_binds_name(self):
        record = InterfaceRecord(
            index=1,
            mac_addr="00:00:17:02:2b:b1",
            private_ip="10.0.4.5",
            subnet_mask_length="24",
            virtual_router_ip="10.0.4.1",
        )
        resolved = ResolvedInterface.from_record(record, "ens5")
        assert "ens5" == resolved.name
        assert record._asdict() == {
            k: v for k, v in resolved._asdict().items() if k != "name"
        }
        assert not resolved.has_ipv6

    def test_template_params(self):
        resolved = ResolvedInterface(
            name="ens5",
            index=1,
            mac_addr="02:00:17:18:f6:ff",
            private_ip="10.0.1.12",
            subnet_mask_length="24",
            virtual_router_ip="10.0.1.1",
            ipv6_addresses=("2603:c020:400d:5d7e::1",),
            ipv6_subnet_mask_length="64",
            ipv6_virtual_router_ip="fe80::1",
        )
        params = resolved.template_params()
        assert ["2603:c020:400d:5d7e::1"] == params["ipv6_addresses"]
        assert params["has_ipv6"] is True
        assert "ens5" == params["name"]
        # raises if not a valid uuid
        uuid.UUID(params["uuid"])
        assert params["uuid"] != resolved.template_params()["uuid"]


class TestFetchAllInterfaces:
    @responses.activate
    def test_empty_array_body(self):
        responses.add(responses.GET, METADATA_URL, "[]")
        assert [] == metadata.fetch_all_interfaces()
        assert 1 == len(responses.calls)

    @responses.activate
    def test_fetches_and_parses(self):
        responses.add(
            responses.GET, METADATA_URL, OPC_VM_SECONDARY_VNIC_RESPONSE
        )
        records = metadata.fetch_all_interfaces()
        assert ["02:00:17:05:d1:db", "00:00:17:02:2b:b1"] == [
            r.mac_addr for r in records
        ]
        request = responses.calls[0].request
        assert "Bearer Oracle" == request.headers["Authorization"]

    @responses.activate
    def test_authorization_is_not_logged(self, caplog):
        caplog.set_level(logging.DEBUG)
        responses.add(responses.GET, METADATA_URL, "[]")
        assert [] == metadata.fetch_all_interfaces()
        assert "requesting vnics metadata" in caplog.text
        assert "oci vnics metadata: []" in caplog.text
        assert "Bearer Oracle" not in caplog.text

    @responses.activate
    def test_custom_url_and_headers(self):
        url = "http://127.0.0.1:8080/vnics"
        responses.add(responses.GET, url, vnics_body())
        metadata.fetch_all_interfaces(url, headers={"X-Test": "1"})
        request = responses.calls[0].request
        assert "1" == request.headers["X-Test"]
        assert "Authorization" not in request.headers

    @pytest.mark.parametrize("status", [401, 404, 500])
    @responses.activate
    def test_error_status(self, status):
        responses.add(responses.GET, METADATA_URL, "", status=status)
        with pytest.raises(FetchError, match="Failed to fetch"):
            metadata.fetch_all_interfaces()

    @responses.activate
    def test_connection_error(self):
        responses.add(
            responses.GET,
            METADATA_URL,
            body=requests.ConnectionError("refused"),
        )
        with pytest.raises(FetchError, match="refused"):
            metadata.fetch_all_interfaces()

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_non_positive_timeout(self, timeout):
        with pytest.raises(FetchError, match="Failed to fetch"):
            metadata.fetch_all_interfaces(METADATA_URL, timeout=timeout)

    @pytest.mark.parametrize(
        "body", ["", "not json", '{"vnics": []}', b"\xff\xfe"]
    )
    @responses.activate
    def test_undecodable_body(self, body):
        responses.add(responses.GET, METADATA_URL, body)
        with pytest.raises(FetchError, match="decode"):
            metadata.fetch_all_interfaces()
