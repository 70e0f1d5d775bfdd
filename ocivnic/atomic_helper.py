# This file is part of oci-vnic. See LICENSE file for license information.

import logging
import os
import tempfile

from ocivnic import util

_DEF_PERMS = 0o644
LOG = logging.getLogger(__name__)


def write_file(filename, content, mode=_DEF_PERMS, omode="wb"):
    """Create filename with content, complete or not at all.

    content is written to a hidden temporary file beside filename, given
    mode and then hard linked to filename. The link fails with
    FileExistsError if filename (even a dangling symlink) appeared in the
    meantime, so an existing file is never replaced. Missing parent
    directories are created. The temporary file is always removed.
    """
    dirname = os.path.dirname(filename)
    util.ensure_dir(dirname)
    tmp = tempfile.NamedTemporaryFile(
        dir=dirname, delete=False, mode=omode, prefix=".tmp-"
    )
    LOG.debug(
        "Writing %s via %s (%s, mode %o, %d bytes/chars)",
        filename,
        tmp.name,
        omode,
        mode,
        len(content),
    )
    try:
        with tmp:
            tmp.write(content)
        os.chmod(tmp.name, mode)
        os.link(tmp.name, filename)
    finally:
        util.del_file(tmp.name)
