"""Configuration loading and required-key validation."""

from k8s_rewrite.config.loader import (
    build_config,
    ensure_required_keys,
    load_config,
    parse_config_text,
    parse_config_yaml,
)
from k8s_rewrite.config.models import (
    KNOWN_KEYS,
    OPTIONAL_KEYS,
    REQUIRED_KEYS,
    RewriteConfig,
)

__all__ = [
    "KNOWN_KEYS",
    "OPTIONAL_KEYS",
    "REQUIRED_KEYS",
    "RewriteConfig",
    "build_config",
    "ensure_required_keys",
    "load_config",
    "parse_config_text",
    "parse_config_yaml",
]
