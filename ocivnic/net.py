# This file is part of oci-vnic. See LICENSE file for license information.
"""Look up the hardware address of a local network interface."""

import errno
import logging
import os

from ocivnic import subp, util
from ocivnic.exceptions import ResolutionError

LOG = logging.getLogger(__name__)

SYS_CLASS_NET = "/sys/class/net/"
DEFAULT_IP_PATH = "/sbin/ip"
LINK_ETHER = "link/ether"


def get_sys_class_path():
    """Simple function to return the global SYS_CLASS_NET."""
    return SYS_CLASS_NET


def sys_dev_path(devname, path=""):
    return get_sys_class_path() + devname + "/" + path


def read_sys_net(devname, path):
    dev_path = sys_dev_path(devname, path)
    try:
        contents = util.load_text_file(dev_path)
    except OSError as e:
        if e.errno in (errno.ENOENT, errno.ENOTDIR):
            raise ResolutionError(
                "No such network interface: %s (%s)" % (devname, dev_path)
            ) from e
        raise ResolutionError(
            "Failed reading %s: %s" % (dev_path, e)
        ) from e
    return contents.strip()


def _ip_command():
    return subp.which("ip") or DEFAULT_IP_PATH


def parse_link_show(output):
    """Return the lowercased address following 'link/ether' in ip output.

    Only the last non-empty line is considered. It must consist of exactly
    four tokens: link/ether <mac> brd <broadcast>.
    """
    lines = output.strip().splitlines()
    if not lines:
        raise ResolutionError("ip command returns empty result")
    parts = lines[-1].split()
    if len(parts) != 4 or parts[0] != LINK_ETHER:
        raise ResolutionError(
            "failed to parse mac address from %r" % lines[-1]
        )
    return parts[1].lower()


def get_interface_mac_ip(ifname):
    """Returns the hardware address of ifname as reported by ip link"""
    cmd = [_ip_command(), "link", "show", "dev", ifname]
    LOG.info("%s", " ".join(cmd))
    try:
        out, _err = subp.subp(cmd)
    except subp.ProcessExecutionError as e:
        raise ResolutionError(
            "Failed to query link of %s: %s" % (ifname, e)
        ) from e
    if not out:
        raise ResolutionError("ip command returns empty result")
    LOG.info("ip command returns: %s", out)
    return parse_link_show(out)


def get_interface_mac_sysfs(ifname):
    """Returns the hardware address of ifname as exposed in sysfs"""
    path = "address"
    if os.path.isdir(sys_dev_path(ifname, "bonding_slave")):
        # for a bond slave, get the nic's hwaddress, not the address it
        # is using because its part of a bond.
        path = "bonding_slave/perm_hwaddr"
    mac = read_sys_net(ifname, path)
    if not mac:
        raise ResolutionError("Empty hardware address for %s" % ifname)
    LOG.info("sysfs reports %s for %s", mac, ifname)
    return mac.lower()


MAC_SOURCES = {
    "ip": get_interface_mac_ip,
    "sysfs": get_interface_mac_sysfs,
}


def resolve_hardware_address(ifname, source="ip"):
    """Return the lowercased hardware address of interface ifname.

    :param source: one of MAC_SOURCES, how the address is looked up.
    :raises: ResolutionError if the address cannot be determined.
    """
    try:
        lookup = MAC_SOURCES[source]
    except KeyError as e:
        raise ResolutionError(
            "Unknown mac_source '%s', expected one of: %s"
            % (source, ", ".join(sorted(MAC_SOURCES)))
        ) from e
    return lookup(ifname)
