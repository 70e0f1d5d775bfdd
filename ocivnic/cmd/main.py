#!/usr/bin/env python3

# This file is part of oci-vnic. See LICENSE file for license information.
"""Write the network profile of a hotplugged OCI vnic."""

import argparse
import functools
import logging
import sys

from ocivnic import config, log, matcher, net, profile, version
from ocivnic.exceptions import OciVnicError
from ocivnic.metadata import fetch_all_interfaces

LOG = logging.getLogger(__name__)
NAME = "oci-vnic"


def get_parser(parser=None):
    """Build or extend an arg parser for the oci-vnic utility.

    @param parser: Optional existing ArgumentParser instance which will be
        extended to support the args of this utility.

    @returns: ArgumentParser with proper argument configuration.
    """
    if not parser:
        parser = argparse.ArgumentParser(prog=NAME, description=__doc__)

    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version="%(prog)s " + (version.version_string()),
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        help="Path to the oci-vnic config file.",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        default=False,
        help="Log at DEBUG level when no log_cfgs are configured.",
    )
    # The interface count is validated after logging is set up, so that
    # a wrong count is reported through the log rather than by argparse.
    parser.add_argument(
        "interfaces",
        nargs="*",
        metavar="INTERFACE",
        help="Name of the network interface to configure.",
    )
    return parser


def handle_interface(name, cfg):
    """Resolve the vnic metadata of interface name and write its profile."""
    mac = net.resolve_hardware_address(name, source=cfg["mac_source"])
    fetcher = functools.partial(
        fetch_all_interfaces,
        cfg["metadata_url"],
        headers=cfg["metadata_headers"],
        timeout=cfg["url_timeout"],
    )
    resolved = matcher.resolve_interface_with_retry(
        name,
        mac,
        fetcher=fetcher,
        fetch_max_wait=cfg["metadata_service_ready_timeout"],
        match_max_wait=cfg["vnic_attachment_ready_timeout"],
    )
    return profile.emit_profile(
        resolved,
        template_path=cfg["template_path"],
        profile_dir=cfg["profile_dir"],
        mode=cfg["profile_mode"],
    )


def handle_args(name, args):
    log.configure_root_logger()
    cfg = config.read_cfg(args.config)
    log.setup_logging(cfg, level=logging.DEBUG if args.debug else None)
    LOG.debug(
        "%s called with the following arguments:"
        " {interfaces: %s, config: %s}",
        name,
        args.interfaces,
        args.config,
    )

    if len(args.interfaces) != 1:
        LOG.error("invalid number of arguments")
        return 1
    interface = args.interfaces[0]

    try:
        handle_interface(interface, cfg)
    except OciVnicError as e:
        LOG.debug("Failed configuring %s", interface, exc_info=True)
        LOG.error("%s", e)
        return 1
    except Exception:
        LOG.exception("Received fatal exception configuring %s", interface)
        return 1
    finally:
        log.flush_loggers(LOG)
    return 0


def main(sysv_args=None):
    parser = get_parser()
    args = parser.parse_args(sysv_args)
    return handle_args(NAME, args)


if __name__ == "__main__":
    sys.exit(main())
