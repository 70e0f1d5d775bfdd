# This file is part of oci-vnic. See LICENSE file for license information.

__VERSION__ = "1.2.0"
_PACKAGED_VERSION = "@@PACKAGED_VERSION@@"


def version_string():
    """Extract a version string from oci-vnic."""
    if not _PACKAGED_VERSION.startswith("@@"):
        return _PACKAGED_VERSION
    return __VERSION__
