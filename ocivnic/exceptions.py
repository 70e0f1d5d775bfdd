# This file is part of oci-vnic. See LICENSE file for license information.
"""Errors raised while resolving and writing a VNIC profile.

Every error below is fatal for an invocation. FetchError and MatchError are
retried by the matcher until its backoff policy gives up.
"""


class OciVnicError(Exception):
    pass


class ResolutionError(OciVnicError):
    """The hardware address of the interface could not be obtained."""


class FetchError(OciVnicError):
    """The vnics metadata could not be read or decoded."""


class MatchError(OciVnicError):
    """No vnic in the metadata carries the interface's hardware address."""


class EmitError(OciVnicError):
    """The interface profile could not be rendered or written."""
