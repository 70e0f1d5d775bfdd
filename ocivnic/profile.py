# This file is part of oci-vnic. See LICENSE file for license information.
"""Write the network-scripts profile of a resolved interface."""

import logging
import os

from jinja2 import TemplateError

from ocivnic import atomic_helper, settings, templater
from ocivnic.exceptions import EmitError
from ocivnic.metadata import ResolvedInterface

LOG = logging.getLogger(__name__)


def profile_path(name: str, profile_dir: str = settings.PROFILE_DIR) -> str:
    return os.path.join(profile_dir, settings.PROFILE_PREFIX + name)


def render_profile(
    resolved: ResolvedInterface,
    template_path: str = settings.PROFILE_TEMPLATE_PATH,
) -> str:
    try:
        return templater.render_from_file(
            template_path, resolved.template_params()
        )
    except OSError as e:
        raise EmitError(
            "Failed to load profile template %s: %s" % (template_path, e)
        ) from e
    except (TemplateError, ValueError, TypeError, KeyError) as e:
        raise EmitError(
            "Failed to render profile template %s: %s" % (template_path, e)
        ) from e


def emit_profile(
    resolved: ResolvedInterface,
    *,
    template_path: str = settings.PROFILE_TEMPLATE_PATH,
    profile_dir: str = settings.PROFILE_DIR,
    mode: int = 0o644,
) -> bool:
    """Render and write the profile of resolved unless one already exists.

    An existing profile is left untouched and its content is not read.

    :return: True if a profile was written, False if one already existed.
    :raises: EmitError when the template cannot be loaded or rendered, or
        the profile cannot be written.
    """
    path = profile_path(resolved.name, profile_dir)
    if os.path.lexists(path):
        LOG.info("%s already exists", path)
        return False

    LOG.info("generating %s", path)
    content = render_profile(resolved, template_path)
    try:
        atomic_helper.write_file(path, content, mode=mode, omode="w")
    except FileExistsError:
        # created since the check above, by someone else
        LOG.info("%s already exists", path)
        return False
    except OSError as e:
        raise EmitError("Failed to write %s: %s" % (path, e)) from e
    return True
