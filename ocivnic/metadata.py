# This file is part of oci-vnic. See LICENSE file for license information.
"""Read the vnics attached to this instance from the OCI metadata service.

The /opc/v2/vnics/ route returns a JSON array with one object per attached
vnic, for example::

    [ {
      "macAddr" : "02:00:17:05:D1:DB",
      "privateIp" : "10.0.0.230",
      "subnetCidrBlock" : "10.0.0.0/24",
      "virtualRouterIp" : "10.0.0.1",
      "ipv6Addresses" : [ "2603:c020:400d:5dbb:e94a:a85d:26e3:e0d4" ],
      "ipv6SubnetCidrBlock" : "2603:c020:400d:5dbb::/64",
      "ipv6VirtualRouterIp" : "fe80::200:17ff:fe40:8972"
    } ]
"""

import logging
import uuid
from typing import List, NamedTuple, Optional, Tuple

from ocivnic import settings, util
from ocivnic.exceptions import FetchError
from ocivnic.url_helper import UrlError, readurl

LOG = logging.getLogger(__name__)


class InterfaceRecord(NamedTuple):
    index: int
    mac_addr: str
    private_ip: str
    subnet_mask_length: str
    virtual_router_ip: str
    ipv6_addresses: Tuple[str, ...] = ()
    ipv6_subnet_mask_length: str = ""
    ipv6_virtual_router_ip: str = ""


class ResolvedInterface(NamedTuple):
    """An InterfaceRecord bound to the local interface name it matched."""

    name: str
    index: int
    mac_addr: str
    private_ip: str
    subnet_mask_length: str
    virtual_router_ip: str
    ipv6_addresses: Tuple[str, ...] = ()
    ipv6_subnet_mask_length: str = ""
    ipv6_virtual_router_ip: str = ""

    @classmethod
    def from_record(cls, record: InterfaceRecord, name: str):
        return cls(name=name, **record._asdict())

    @property
    def has_ipv6(self) -> bool:
        return bool(self.ipv6_addresses)

    def template_params(self) -> dict:
        params = self._asdict()
        params["ipv6_addresses"] = list(self.ipv6_addresses)
        params["has_ipv6"] = self.has_ipv6
        params["uuid"] = str(uuid.uuid4())
        return params


def mask_length(cidr) -> str:
    # Anything after the last '/', or the whole string when there is none.
    return str(cidr).split("/")[-1]


def _string_field(entry, key) -> str:
    value = entry.get(key)
    return "" if value is None else str(value)


def parse_vnic_entry(index: int, entry) -> InterfaceRecord:
    if not isinstance(entry, dict):
        raise FetchError(
            "vnic entry %s is a %s, expected an object"
            % (index, util.obj_name(entry))
        )
    ipv6_addresses = entry.get("ipv6Addresses") or []
    if not isinstance(ipv6_addresses, list):
        raise FetchError(
            "vnic entry %s has ipv6Addresses of type %s, expected a list"
            % (index, util.obj_name(ipv6_addresses))
        )
    record = InterfaceRecord(
        index=index,
        mac_addr=_string_field(entry, "macAddr").lower(),
        private_ip=_string_field(entry, "privateIp"),
        subnet_mask_length=mask_length(
            _string_field(entry, "subnetCidrBlock")
        ),
        virtual_router_ip=_string_field(entry, "virtualRouterIp"),
    )
    if ipv6_addresses:
        record = record._replace(
            ipv6_addresses=tuple(str(a) for a in ipv6_addresses),
            ipv6_subnet_mask_length=mask_length(
                _string_field(entry, "ipv6SubnetCidrBlock")
            ),
            ipv6_virtual_router_ip=_string_field(
                entry, "ipv6VirtualRouterIp"
            ),
        )
    return record


def parse_vnics_data(vnics_data) -> List[InterfaceRecord]:
    if not isinstance(vnics_data, list):
        raise FetchError(
            "vnics metadata is a %s, expected an array"
            % util.obj_name(vnics_data)
        )
    return [
        parse_vnic_entry(idx, entry) for idx, entry in enumerate(vnics_data)
    ]


def fetch_all_interfaces(
    url: str = settings.METADATA_VNICS_ENDPOINT,
    *,
    headers: Optional[dict] = None,
    timeout: Optional[float] = None,
) -> List[InterfaceRecord]:
    """Read every vnic attached to this instance, in response order.

    :raises: FetchError when the request fails or the body is not a JSON
        array of vnic objects.
    """
    if headers is None:
        headers = settings.METADATA_HEADERS
    LOG.info("requesting vnics metadata")
    try:
        response = readurl(
            url,
            headers=headers,
            headers_redact=["Authorization"],
            timeout=timeout,
        )
    except UrlError as e:
        raise FetchError(
            "Failed to fetch vnics metadata from %s: %s" % (url, e)
        ) from e

    LOG.info("oci vnics metadata: %s", response)
    try:
        vnics_data = util.load_json(response.contents, root_types=(list,))
    except (ValueError, TypeError) as e:
        raise FetchError("Failed to decode vnics metadata: %s" % e) from e
    return parse_vnics_data(vnics_data)
