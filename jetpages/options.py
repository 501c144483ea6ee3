"""Run-time options read from the MDBOPTS environment variable."""

import enum
import os
import sys
import threading
import warnings
from dataclasses import dataclass

ENV_VAR = "MDBOPTS"


class Option(enum.Flag):
    """Individual option flags."""

    DEBUG_LIKE = enum.auto()
    DEBUG_WRITE = enum.auto()
    DEBUG_USAGE = enum.auto()
    DEBUG_OLE = enum.auto()
    DEBUG_ROW = enum.auto()
    DEBUG_PROPS = enum.auto()
    USE_INDEX = enum.auto()
    DEBUG_ALL = DEBUG_LIKE | DEBUG_WRITE | DEBUG_USAGE | DEBUG_OLE | DEBUG_ROW | DEBUG_PROPS


_NAMES = {
    "debug_like": Option.DEBUG_LIKE,
    "debug_write": Option.DEBUG_WRITE,
    "debug_usage": Option.DEBUG_USAGE,
    "debug_ole": Option.DEBUG_OLE,
    "debug_row": Option.DEBUG_ROW,
    "debug_props": Option.DEBUG_PROPS,
    "debug_all": Option.DEBUG_ALL,
}

_USE_INDEX_WARNING = (
    f"The 'use_index' argument was supplied to the {ENV_VAR} environment variable, "
    "but index support is not available; the argument is ignored."
)
_NO_MEMO_WARNING = (
    f"The 'no_memo' argument was supplied to the {ENV_VAR} environment variable. "
    "This argument is deprecated and has no effect."
)


@dataclass(frozen=True)
class Options:
    """A set of enabled option flags."""

    flags: Option = Option(0)

    @classmethod
    def parse(cls, value):
        """Build options from a colon-separated list of option names."""
        flags = Option(0)
        for token in filter(None, value.split(":")):
            if token == "use_index":
                warnings.warn(_USE_INDEX_WARNING, UserWarning, stacklevel=2)
            elif token == "no_memo":
                warnings.warn(_NO_MEMO_WARNING, UserWarning, stacklevel=2)
            else:
                flags |= _NAMES.get(token, Option(0))
        return cls(flags)

    @classmethod
    def from_env(cls, environ=None):
        """Build options from ``environ`` (the process environment by default)."""
        env = os.environ if environ is None else environ
        value = env.get(ENV_VAR)
        return cls() if value is None else cls.parse(value)

    def enabled(self, flag):
        """Return True if any of the bits in ``flag`` is set."""
        return bool(self.flags & flag)


_local = threading.local()


def _current():
    options = getattr(_local, "options", None)
    if options is None:
        options = _local.options = Options.from_env()
    return options


def get_option(flag):
    """Return whether ``flag`` is enabled for the current thread.

    The environment is read once per thread, on first use.
    """
    return _current().enabled(flag)


def debug(flag, message):
    """Write ``message`` to standard error when ``flag`` is enabled."""
    if get_option(flag):
        print(message, file=sys.stderr)