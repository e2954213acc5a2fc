"""Placeholder substitution for generated manifest trees."""

from k8s_rewrite.render.renderer import (
    ALL_TOKENS,
    MANIFEST_SUFFIX,
    PLACEHOLDER_KEYS,
    PULL_SECRETS_TOKEN,
    build_substitutions,
    find_manifests,
    find_unresolved,
    pull_secret_fragment,
    render_file,
    render_text,
    substitute_tree,
)

__all__ = [
    "ALL_TOKENS",
    "MANIFEST_SUFFIX",
    "PLACEHOLDER_KEYS",
    "PULL_SECRETS_TOKEN",
    "build_substitutions",
    "find_manifests",
    "find_unresolved",
    "pull_secret_fragment",
    "render_file",
    "render_text",
    "substitute_tree",
]
