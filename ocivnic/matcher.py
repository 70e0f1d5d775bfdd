# This file is part of oci-vnic. See LICENSE file for license information.
"""Find the metadata record of a local interface by hardware address.

Two retry loops nest here. The inner one waits for the metadata service to
answer (FetchError). The outer one waits for the vnic attachment to show up
in the answer (MatchError), fetching fresh metadata on every attempt.
"""

import functools
import logging
from typing import Callable, List, Optional, Sequence

from ocivnic import backoff, settings
from ocivnic.exceptions import FetchError, MatchError
from ocivnic.metadata import (
    InterfaceRecord,
    ResolvedInterface,
    fetch_all_interfaces,
)

LOG = logging.getLogger(__name__)

Fetcher = Callable[[], List[InterfaceRecord]]


def find_record(
    records: Sequence[InterfaceRecord], mac: str
) -> Optional[InterfaceRecord]:
    """Return the first record whose mac_addr equals mac, ignoring case."""
    mac = mac.lower()
    for record in records:
        if record.mac_addr.lower() == mac:
            return record
    return None


def fetch_with_retry(
    fetcher: Fetcher = fetch_all_interfaces,
    max_wait: float = settings.METADATA_SERVICE_READY_TIMEOUT,
) -> List[InterfaceRecord]:
    """Fetch all vnic records, retrying while the service is not ready."""
    return backoff.retry_with_data(
        fetcher,
        backoff.make_backoff_policy(max_wait),
        retry_on=(FetchError,),
        status_cb=LOG.warning,
    )


def match_interface(
    name: str,
    mac: str,
    fetcher: Fetcher = fetch_all_interfaces,
    fetch_max_wait: float = settings.METADATA_SERVICE_READY_TIMEOUT,
) -> ResolvedInterface:
    """Fetch the vnic records once and bind the one carrying mac to name.

    :raises: MatchError if no record carries mac, FetchError if the records
        could not be fetched within fetch_max_wait.
    """
    LOG.info("matching vnic metadata by mac %s", mac)
    records = fetch_with_retry(fetcher, fetch_max_wait)
    record = find_record(records, mac)
    if record is None:
        raise MatchError("vnic metadata not matched for mac %s" % mac)
    return ResolvedInterface.from_record(record, name)


def resolve_interface_with_retry(
    name: str,
    mac: str,
    *,
    fetcher: Fetcher = fetch_all_interfaces,
    fetch_max_wait: float = settings.METADATA_SERVICE_READY_TIMEOUT,
    match_max_wait: float = settings.VNIC_ATTACHMENT_READY_TIMEOUT,
) -> ResolvedInterface:
    """Match name/mac against the metadata until the vnic is attached.

    :raises: MatchError or FetchError, whichever the last attempt raised,
        once match_max_wait has elapsed.
    """
    operation = functools.partial(
        match_interface,
        name,
        mac,
        fetcher=fetcher,
        fetch_max_wait=fetch_max_wait,
    )
    resolved = backoff.retry_with_data(
        operation,
        backoff.make_backoff_policy(match_max_wait),
        retry_on=(MatchError, FetchError),
        status_cb=LOG.warning,
    )
    LOG.info("vnic metadata matched: %s", resolved)
    return resolved
