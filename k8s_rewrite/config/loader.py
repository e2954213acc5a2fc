"""Config file parsing and required-key validation.

Config files are *parsed*, never sourced.  ``KEY=value`` files are read
with :mod:`dotenv` (python-dotenv) with interpolation switched off::

    # comments and blank lines are ignored
    NET_PREFIX=10.0
    export NAMESPACE=prod
    IMAGE_PREFIX="registry.example.com/team/"
    IMAGE_SUFFIX=''              # trailing comments are dropped

Command substitution and ``$VAR`` references are kept as literal text.
Later assignments win.  Nothing is written to ``os.environ``.

Files with a ``.yaml`` / ``.yml`` extension are read as a flat YAML
mapping of the same keys instead.  Scalars keep their source text
(``10.10`` stays ``10.10``, ``no`` stays ``no``).

Provides:

- :func:`parse_config_text` - ``KEY=value`` text to an ordered dict
- :func:`parse_config_yaml` - flat YAML mapping to an ordered dict
- :func:`ensure_required_keys` - first missing/empty required key is fatal
- :func:`load_config` - file to a validated :class:`RewriteConfig`
"""

from __future__ import annotations

import io
import logging
import re
from pathlib import Path
from typing import Dict, Mapping

import yaml
from dotenv import dotenv_values
from dotenv.parser import Original, parse_stream

from k8s_rewrite.config.models import KNOWN_KEYS, REQUIRED_KEYS, RewriteConfig
from k8s_rewrite.errors import ConfigError

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

YAML_SUFFIXES = (".yaml", ".yml")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _statement_line(original: Original) -> int:
    """Line number of the statement itself, past any leading blank lines."""
    text = original.string
    leading = text[: len(text) - len(text.lstrip())]
    return original.line + leading.count("\n")


def _check_statements(text: str, source: str) -> None:
    """Reject anything that is not a comment, blank, or ``KEY=value``."""
    for binding in parse_stream(io.StringIO(text)):
        if binding.key is None and not binding.error:
            continue
        if binding.error or binding.value is None or not _KEY_RE.match(binding.key):
            lineno = _statement_line(binding.original)
            raise ConfigError(
                f"{source}:{lineno}: expected KEY=value, got: {binding.original.string.strip()}"
            )


def parse_config_text(text: str, source: str = "<config>") -> Dict[str, str]:
    """Parse ``KEY=value`` lines into a dict (insertion ordered).

    Raises:
        ConfigError: On a line that is not a comment, blank, or assignment.
    """
    _check_statements(text, source)
    values = dotenv_values(stream=io.StringIO(text), interpolate=False)
    return {key: value or "" for key, value in values.items()}


def parse_config_yaml(text: str, source: str = "<config>") -> Dict[str, str]:
    """Parse a flat YAML mapping of config keys.

    Uses :class:`yaml.BaseLoader`, so every scalar is returned exactly as
    written; an empty value is ``""``.

    Raises:
        ConfigError: On invalid YAML, a non-mapping document, or nested values.
    """
    try:
        raw = yaml.load(text, Loader=yaml.BaseLoader) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"{source}: invalid YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{source}: expected a mapping of KEY: value")

    values: Dict[str, str] = {}
    for key, val in raw.items():
        if isinstance(val, (dict, list)):
            raise ConfigError(f"{source}: {key} must be a scalar value")
        values[key] = val
    return values


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def ensure_required_keys(values: Mapping[str, str]) -> None:
    """Fail on the first required key that is absent or empty.

    Keys are checked in :data:`REQUIRED_KEYS` order.
    """
    for key in REQUIRED_KEYS:
        if not values.get(key):
            raise ConfigError(f"{key} not defined")


def build_config(values: Mapping[str, str]) -> RewriteConfig:
    """Validate *values* and build the immutable :class:`RewriteConfig`."""
    ensure_required_keys(values)
    known = {k: v for k, v in values.items() if k in KNOWN_KEYS}
    extra = {k: v for k, v in values.items() if k not in KNOWN_KEYS}
    if extra:
        logger.debug("Ignoring unknown config keys: %s", ", ".join(sorted(extra)))
    return RewriteConfig(**known, extra=extra)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_config(path: str | Path) -> RewriteConfig:
    """Load, parse and validate a config file.

    Raises:
        ConfigError: If the file cannot be read, parsed, or lacks a
            required key.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc

    if path.suffix.lower() in YAML_SUFFIXES:
        values = parse_config_yaml(text, source=str(path))
    else:
        values = parse_config_text(text, source=str(path))

    cfg = build_config(values)
    logger.info(
        "Config loaded from %s: namespace=%s cluster=%s pull_secret=%s",
        path,
        cfg.namespace,
        cfg.tikv_cluster,
        "yes" if cfg.has_pull_secret else "no",
    )
    return cfg
