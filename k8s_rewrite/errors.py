"""Exception types raised by the rewrite pipeline.

Library functions raise these; :func:`k8s_rewrite.workflow.run_rewrite`
is the only place they are turned into an exit code.
"""

from __future__ import annotations


class RewriteError(Exception):
    """Base class for every fatal rewrite failure."""


class InputError(RewriteError):
    """Missing or invalid command-line input (config path, suffix)."""


class ConfigError(RewriteError):
    """Unparseable config file or a required key that is missing/empty."""


class CopyError(RewriteError):
    """Filesystem failure while preparing or writing the output tree."""
