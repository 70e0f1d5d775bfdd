# This file is part of oci-vnic. See LICENSE file for license information.

import logging
import os
from typing import Optional

from ocivnic import settings, util

LOG = logging.getLogger(__name__)

_TIMEOUT_KEYS = (
    "metadata_service_ready_timeout",
    "vnic_attachment_ready_timeout",
    "url_timeout",
)

MAX_PROFILE_MODE = 0o777


def get_config_path(path: Optional[str] = None) -> str:
    """Return the config file to read: path, $OCI_VNIC_CFG or the default."""
    if path:
        return path
    return os.environ.get(settings.CFG_ENV_NAME) or settings.VNIC_CONFIG


def _builtin(key, value):
    LOG.warning(
        "Ignoring invalid %s value %r, using %s",
        key,
        value,
        settings.CFG_BUILTIN[key],
    )
    return settings.CFG_BUILTIN[key]


def _profile_mode(mode):
    if isinstance(mode, str):
        # yaml reads 0644 as a string when quoted
        try:
            mode = int(mode, 8)
        except ValueError:
            return _builtin("profile_mode", mode)
    if isinstance(mode, bool) or not isinstance(mode, int):
        return _builtin("profile_mode", mode)
    # an unquoted 644 is decimal and would set the sticky bit
    if not 0 <= mode <= MAX_PROFILE_MODE:
        return _builtin("profile_mode", mode)
    return mode


def _normalize(cfg: dict) -> dict:
    for key in _TIMEOUT_KEYS:
        try:
            cfg[key] = float(cfg[key])
        except (TypeError, ValueError):
            cfg[key] = float(_builtin(key, cfg[key]))
    if cfg["url_timeout"] <= 0:
        cfg["url_timeout"] = float(_builtin("url_timeout", cfg["url_timeout"]))
    cfg["profile_mode"] = _profile_mode(cfg["profile_mode"])
    return cfg


def read_cfg(path: Optional[str] = None) -> dict:
    """Read the oci-vnic config and merge it over the built-in defaults."""
    cfg_path = get_config_path(path)
    LOG.debug("Reading config from %s", cfg_path)
    cfg = util.mergemanydict(
        [util.read_conf_with_confd(cfg_path), settings.CFG_BUILTIN]
    )
    return _normalize(cfg)
