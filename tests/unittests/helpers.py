# This file is part of oci-vnic. See LICENSE file for license information.

import json
from pathlib import Path

METADATA_URL = "http://169.254.169.254/opc/v2/vnics/"

# `curl -H "Authorization: Bearer Oracle" http://169.254.169.254/opc/v2/vnics/`
# on an Oracle Virtual Machine with a secondary VNIC attached
OPC_VM_SECONDARY_VNIC_RESPONSE = """\
[ {
  "vnicId" : "ocid1.vnic.oc1.phx.abyhqljtch72z5pd76cc2636qeqh7z_truncated",
  "privateIp" : "10.0.0.230",
  "vlanTag" : 1039,
  "macAddr" : "02:00:17:05:D1:DB",
  "virtualRouterIp" : "10.0.0.1",
  "subnetCidrBlock" : "10.0.0.0/24"
}, {
  "vnicId" : "ocid1.vnic.oc1.phx.abyhqljt4iew3gwmvrwrhhf3bp5drj_truncated",
  "privateIp" : "10.0.4.5",
  "vlanTag" : 1041,
  "macAddr" : "00:00:17:02:2B:B1",
  "virtualRouterIp" : "10.0.4.1",
  "subnetCidrBlock" : "10.0.4.0/24"
} ]"""

OPC_VM_DUAL_STACK_SECONDARY_VNIC_RESPONSE = """\
[
  {
    "ipv6Addresses": [
      "2603:c020:400d:5dbb:e94a:a85d:26e3:e0d4"
    ],
    "ipv6SubnetCidrBlock": "2603:c020:400d:5dbb::/64",
    "ipv6VirtualRouterIp": "fe80::200:17ff:fe40:8972",
    "macAddr": "02:00:17:0D:6B:BE",
    "privateIp": "10.0.0.183",
    "subnetCidrBlock": "10.0.0.0/24",
    "virtualRouterIp": "10.0.0.1",
    "vlanTag": 929,
    "vnicId": "ocid1.vnic.oc1.iad.abuwcljtr2b6363afca55nzerlvwmfhxp_truncated"
  },
  {
    "ipv6Addresses": [
      "2603:c020:400d:5d7e:aacc:8e5f:3b1b:3a4a",
      "2603:c020:400d:5d7e:aacc:8e5f:3b1b:3a4b"
    ],
    "ipv6SubnetCidrBlock": "2603:c020:400d:5d7e::/64",
    "ipv6VirtualRouterIp": "fe80::200:17ff:fe40:8972",
    "macAddr": "02:00:17:18:F6:FF",
    "privateIp": "10.0.1.12",
    "subnetCidrBlock": "10.0.1.0/24",
    "virtualRouterIp": "10.0.1.1",
    "vlanTag": 2659,
    "vnicId": "ocid1.vnic.oc1.iad.abuwcljtpfktyl2e3xm2ez4spj7wiliyc_truncated"
  }
]"""


def get_top_level_dir() -> Path:
    """Return the top-level directory of the oci-vnic source tree."""
    return Path(__file__).parent.parent.parent.resolve()


def shipped_template() -> Path:
    return get_top_level_dir() / "templates" / "profile.tpl"


def ip_link_show(mac, name="ens5", brd="ff:ff:ff:ff:ff:ff"):
    """Return `ip link show dev <name>` output for an ethernet device."""
    return (
        "3: {name}: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 9000 qdisc mq "
        "state UP mode DEFAULT group default qlen 1000\n"
        "    link/ether {mac} brd {brd}\n"
    ).format(name=name, mac=mac, brd=brd)


def vnic_entry(mac, private_ip="10.0.0.10", cidr="10.0.0.0/24", **kwargs):
    entry = {
        "macAddr": mac,
        "privateIp": private_ip,
        "subnetCidrBlock": cidr,
        "virtualRouterIp": "10.0.0.1",
    }
    entry.update(kwargs)
    return entry


def vnics_body(*entries) -> str:
    return json.dumps(list(entries))


class FakeClock:
    """Monotonic clock which only advances when sleep() is called."""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    @property
    def elapsed(self):
        return sum(self.sleeps)
