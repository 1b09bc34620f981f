"""Runtime flags for the builder.

Centralized so tests can toggle behavior deterministically without
sprinkling ad-hoc environment variable reads in hot code paths.

Flags are simple module-level values read once from the environment at
import time. Code reads them through the module (``flags.DEBUG``) so a test
that flips a flag sees the new value on the next call.
"""

import os


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name, default):
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Emit structural debug logging (chain splices, scans, mount transitions)
DEBUG = _env_bool("CHAINDOM_DEBUG")

# Remount at the original sibling position instead of as the last child
REMOUNT_IN_PLACE = _env_bool("CHAINDOM_REMOUNT_IN_PLACE")

# Indent width used by pretty HTML output
PRETTY_INDENT = _env_int("CHAINDOM_INDENT", 2)
