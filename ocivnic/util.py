# This file is part of oci-vnic. See LICENSE file for license information.

import copy
import json
import logging
import os
from typing import Dict, Mapping, Sequence, Union

import yaml

LOG = logging.getLogger(__name__)

CONF_SUFFIX = ".cfg"


def decode_binary(blob: Union[str, bytes], encoding="utf-8") -> str:
    if isinstance(blob, str):
        return blob
    return blob.decode(encoding=encoding)


def obj_name(obj):
    """Name of obj's class, or of obj itself when it is a class."""
    return (obj if isinstance(obj, type) else type(obj)).__name__


def load_binary_file(fname: Union[str, os.PathLike]) -> bytes:
    with open(fname, "rb") as fp:
        contents = fp.read()
    LOG.debug("Read %s bytes from %s", len(contents), fname)
    return contents


def load_text_file(fname: Union[str, os.PathLike]) -> str:
    return decode_binary(load_binary_file(fname))


def load_json(text, root_types):
    """Decode json text, raising TypeError unless the root is a root_type."""
    decoded = json.loads(decode_binary(text))
    if isinstance(decoded, tuple(root_types)):
        return decoded
    raise TypeError(
        "(%s) root types expected, got %s instead"
        % (", ".join(obj_name(t) for t in root_types), obj_name(decoded))
    )


def _yaml_error_message(error):
    mark = getattr(error, "problem_mark", None)
    if mark is None:
        return "Failed loading yaml blob. %s" % error
    return (
        'Failed loading yaml blob. Invalid format at line %s column %s: "%s"'
        % (mark.line + 1, mark.column + 1, error)
    )


def load_yaml(blob, default=None):
    """Safely load a yaml blob whose root must be a mapping.

    An empty document gives default. Unparsable yaml and a root of the wrong
    type are logged as warnings and give default too.
    """
    blob = decode_binary(blob)
    LOG.debug("Loading %s bytes of yaml", len(blob))
    try:
        loaded = yaml.safe_load(blob)
    except (yaml.YAMLError, ValueError) as e:
        LOG.warning(_yaml_error_message(e))
        return default
    if loaded is None:
        return default
    if not isinstance(loaded, dict):
        LOG.warning(
            "Failed loading yaml blob. Yaml load allows dict root types,"
            " but got %s instead",
            obj_name(loaded),
        )
        return default
    return loaded


def mergemanydict(sources: Sequence[Mapping]) -> dict:
    """Merge dicts so that keys from earlier sources win.

    Nested dicts are merged recursively, every other value is taken whole
    from the first source that defines it.
    """
    merged: dict = {}
    for source in sources:
        for key, value in (source or {}).items():
            if key not in merged:
                merged[key] = copy.deepcopy(value)
            elif isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = mergemanydict([merged[key], value])
    return merged


def ensure_dir(path):
    if path:
        os.makedirs(path, exist_ok=True)


def del_file(path):
    LOG.debug("Removing %s", path)
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def read_conf(fname) -> Dict:
    """Read a yaml config file into a dict, {} if it does not exist."""
    try:
        contents = load_text_file(fname)
    except FileNotFoundError:
        return {}
    return load_yaml(contents, default={})


def _read_conf_logged(path):
    try:
        return read_conf(path)
    except PermissionError:
        LOG.warning("Skipping config %s, insufficient permissions", path)
    except OSError as e:
        LOG.warning("Error accessing file %s: [%s]", path, e)
    return {}


def read_conf_d(confd) -> dict:
    """Merge the *.cfg files of confd, later file names winning."""
    names = sorted(
        (name for name in os.listdir(confd) if name.endswith(CONF_SUFFIX)),
        reverse=True,
    )
    return mergemanydict(
        [
            _read_conf_logged(os.path.join(confd, name))
            for name in names
            if os.path.isfile(os.path.join(confd, name))
        ]
    )


def read_conf_with_confd(cfgfile) -> dict:
    """Read cfgfile merged with the *.cfg files of the cfgfile.d directory.

    Files in the ".d" directory override the main file, for example
    /etc/oci-vnic/oci-vnic.cfg.d/*.cfg override /etc/oci-vnic/oci-vnic.cfg.
    """
    confd = cfgfile + ".d"
    cfgs = []
    if os.path.isdir(confd):
        cfgs.append(read_conf_d(confd))
    cfgs.append(_read_conf_logged(cfgfile))
    return mergemanydict(cfgs)
