"""Manifest renderer - replaces ``__TOKEN__`` placeholders.

Replacement is plain text substitution: no escaping, no template
language, every occurrence of a token replaced with the same value.
Tokens are applied one after another in :data:`PLACEHOLDER_KEYS` order,
so a value that happens to contain a later token is substituted again.

Only files whose name ends in ``.yaml`` are touched; everything else in
the tree is left exactly as copied.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Tuple

from k8s_rewrite.config.models import RewriteConfig
from k8s_rewrite.errors import CopyError

logger = logging.getLogger(__name__)

# ── constants ────────────────────────────────────────────────────────

#: Placeholder token -> config attribute, in substitution order.
PLACEHOLDER_KEYS: Tuple[Tuple[str, str], ...] = (
    ("__NET_PREFIX__", "net_prefix"),
    ("__EXTERNAL_IPS__", "external_ips"),
    ("__IMAGE_PREFIX__", "image_prefix"),
    ("__IMAGE_SUFFIX__", "image_suffix"),
    ("__NAMESPACE__", "namespace"),
    ("__TIKV_CLUSTER__", "tikv_cluster"),
)

#: Resolves to nothing, or to an ``imagePullSecrets`` block.
PULL_SECRETS_TOKEN = "__MAYBE_PULL_SECRETS__"

#: Every token the renderer knows about.
ALL_TOKENS: Tuple[str, ...] = tuple(t for t, _ in PLACEHOLDER_KEYS) + (
    PULL_SECRETS_TOKEN,
)

MANIFEST_SUFFIX = ".yaml"

# The token sits at container-spec indentation in the templates; the list
# entry is indented to match.
_PULL_SECRET_TEMPLATE = 'imagePullSecrets:\n      - name: "{secret}"'

Substitutions = List[Tuple[str, str]]


# ── public API ───────────────────────────────────────────────────────


def pull_secret_fragment(secret: str) -> str:
    """Return the replacement for :data:`PULL_SECRETS_TOKEN`.

    Empty *secret* gives an empty string so the token line disappears.
    """
    if not secret:
        return ""
    return _PULL_SECRET_TEMPLATE.format(secret=secret)


def build_substitutions(cfg: RewriteConfig) -> Substitutions:
    """Ordered ``(token, value)`` pairs for *cfg*."""
    subs: Substitutions = [(token, getattr(cfg, attr)) for token, attr in PLACEHOLDER_KEYS]
    subs.append((PULL_SECRETS_TOKEN, pull_secret_fragment(cfg.image_pull_secret)))
    return subs


def render_text(text: str, substitutions: Substitutions) -> Tuple[str, Dict[str, int]]:
    """Apply *substitutions* to *text*.

    Returns:
        ``(rendered_text, counts)`` where *counts* maps each token to the
        number of occurrences replaced.
    """
    counts: Dict[str, int] = {}
    result = text
    for token, value in substitutions:
        counts[token] = result.count(token)
        if counts[token]:
            result = result.replace(token, value)
    return result, counts


def find_manifests(root: str | Path) -> List[Path]:
    """Return every ``*.yaml`` regular file under *root*, any depth.

    Symlinks are skipped; nothing outside *root* is rewritten through a link.

    Sorted by path relative to *root* so repeated runs list manifests
    in the same order.
    """
    root = Path(root)
    found = [
        p for p in root.rglob(f"*{MANIFEST_SUFFIX}")
        if p.is_file() and not p.is_symlink()
    ]
    return sorted(found, key=lambda p: p.relative_to(root).as_posix())


def render_file(path: Path, substitutions: Substitutions) -> Dict[str, int]:
    """Rewrite *path* in place; unchanged files are not written.

    Line endings are left exactly as they are in the file.
    """
    with path.open("r", encoding="utf-8", newline="") as fh:
        text = fh.read()
    rendered, counts = render_text(text, substitutions)
    if rendered != text:
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(rendered)
        logger.debug("Rendered %s (%d replacements)", path, sum(counts.values()))
    return counts


def substitute_tree(root: str | Path, substitutions: Substitutions) -> Dict[str, int]:
    """Render every manifest under *root* in place.

    Returns:
        Total replacements per token across the tree.

    Raises:
        CopyError: If a manifest cannot be read or written.
    """
    totals: Dict[str, int] = {token: 0 for token, _ in substitutions}
    manifests = find_manifests(root)
    for path in manifests:
        try:
            counts = render_file(path, substitutions)
        except (OSError, UnicodeDecodeError) as exc:
            raise CopyError(f"cannot rewrite {path}: {exc}") from exc
        for token, n in counts.items():
            totals[token] += n

    logger.info(
        "Substituted %d placeholder(s) across %d manifest(s) in %s",
        sum(totals.values()),
        len(manifests),
        root,
    )
    return totals


def find_unresolved(root: str | Path) -> Dict[str, List[str]]:
    """Map each manifest (relative path) to tokens still present in it."""
    root = Path(root)
    leftovers: Dict[str, List[str]] = {}
    for path in find_manifests(root):
        text = path.read_text(encoding="utf-8")
        present = [t for t in ALL_TOKENS if t in text]
        if present:
            leftovers[path.relative_to(root).as_posix()] = present
    return leftovers
