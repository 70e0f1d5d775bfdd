# This file is part of oci-vnic. See LICENSE file for license information.

import collections.abc
import io
import logging
import logging.config
import os
import sys
import time
from contextlib import suppress

DEFAULT_LOG_FORMAT = "%(asctime)s - %(filename)s[%(levelname)s]: %(message)s"


def setup_basic_logging(level=logging.INFO):
    """Log everything at level and above to stdout."""
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    console.setLevel(level)
    root = logging.getLogger()
    root.addHandler(console)
    root.setLevel(level)


def flush_loggers(logger):
    """Flush the stream handlers of logger and of all its ancestors."""
    while logger:
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                with suppress(IOError):
                    handler.flush()
        logger = logger.parent


def _log_cfg_text(entry):
    # an entry may be given as a list of ini lines
    if isinstance(entry, str):
        return entry
    if isinstance(entry, collections.abc.Iterable):
        return "\n".join(str(line) for line in entry)
    return str(entry)


def _load_log_cfg(log_cfg):
    """Apply one log_cfgs entry, an ini file path or ini text."""
    if log_cfg.startswith("/") and os.path.isfile(log_cfg):
        source = log_cfg
    else:
        source = io.StringIO(log_cfg)
    logging.config.fileConfig(source, disable_existing_loggers=False)


def _level_from_cfg(cfg):
    name = str(cfg.get("log_level", "INFO")).upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    sys.stderr.write("WARN: unknown log_level %s, using INFO\n" % name)
    return logging.INFO


def setup_logging(cfg=None, level=None):
    """Configure the root logger from the 'log_cfgs' entries of cfg.

    Each entry is either a path to a logging.config ini file or the ini
    text itself. The first one that loads wins. When none loads, basic
    logging to stdout is set up at 'log_level' (or level, if given).
    """
    cfg = cfg or {}
    reset_logging()

    for entry in cfg.get("log_cfgs") or []:
        # A handler may name a log file whose directory does not exist yet
        try:
            _load_log_cfg(_log_cfg_text(entry))
        except FileNotFoundError:
            continue
        return

    setup_basic_logging(_level_from_cfg(cfg) if level is None else level)


def reset_logging():
    """Remove and close every root handler and unset the root level."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.flush()
        handler.close()
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


def configure_root_logger():
    """Start from a bare root logger that stamps records in UTC."""
    logging.Formatter.converter = time.gmtime
    reset_logging()
