"""Output tree preparation: destructive reset + template copy.

The generated directory is always ``<root>/k8s.<suffix>``.  Re-running with
the same suffix deletes the previous tree without confirmation;
:func:`remove_output_tree` is the only code path allowed to delete
anything, and it refuses any path whose name is not exactly the
generated-directory name.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Optional

from k8s_rewrite.errors import CopyError, InputError

logger = logging.getLogger(__name__)

OUTPUT_PREFIX = "k8s"
TEMPLATE_DIR_NAME = "k8s"
TEMPLATE_DIR_ENV = "K8S_REWRITE_TEMPLATE_DIR"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def output_dir_name(suffix: str) -> str:
    """``k8s.<suffix>``."""
    return f"{OUTPUT_PREFIX}.{suffix}"


def validate_suffix(suffix: str) -> None:
    """Reject suffixes that would escape the output root.

    Raises:
        InputError: Empty suffix, ``.``/``..``, or a path separator.
    """
    if not suffix:
        raise InputError("suffix required")
    if suffix in (".", "..") or "/" in suffix or (os.altsep and os.altsep in suffix):
        raise InputError(f"invalid suffix (must be a single path component): {suffix!r}")


def output_dir_for(suffix: str, root: Optional[str | Path] = None) -> Path:
    """Return the generated directory for *suffix* under *root* (default cwd)."""
    validate_suffix(suffix)
    base = Path(root) if root is not None else Path.cwd()
    return base / output_dir_name(suffix)


def default_template_dir() -> Path:
    """Template tree location.

    ``$K8S_REWRITE_TEMPLATE_DIR`` if set, otherwise a ``k8s`` directory next
    to the invoked script.  For an installed console script that is the
    environment's ``bin/`` directory, so installed runs normally pass
    ``--template-dir`` or set the variable.
    """
    env = os.environ.get(TEMPLATE_DIR_ENV, "")
    if env:
        return Path(env)
    script = Path(sys.argv[0]) if sys.argv and sys.argv[0] else Path.cwd()
    return script.resolve().parent / TEMPLATE_DIR_NAME


# ---------------------------------------------------------------------------
# Destructive reset
# ---------------------------------------------------------------------------


def remove_output_tree(path: str | Path, suffix: str) -> bool:
    """Delete a previous output tree at *path*.

    A symlink is unlinked, never followed.  A missing path is a no-op.

    Returns:
        ``True`` if something was removed.

    Raises:
        CopyError: If *path* is not named ``k8s.<suffix>`` or cannot be removed.
    """
    path = Path(path)
    expected = output_dir_name(suffix)
    if path.name != expected:
        raise CopyError(f"refusing to remove {path}: expected a directory named {expected}")

    try:
        if path.is_symlink():
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()
        else:
            return False
    except OSError as exc:
        raise CopyError(f"cannot remove {path}: {exc}") from exc

    logger.info("Removed previous output tree %s", path)
    return True


# ---------------------------------------------------------------------------
# Copy
# ---------------------------------------------------------------------------


def copy_template_tree(
    template_dir: str | Path,
    suffix: str,
    *,
    root: Optional[str | Path] = None,
) -> Path:
    """Replace ``<root>/k8s.<suffix>`` with a fresh copy of *template_dir*.

    Returns:
        The output directory path.

    Raises:
        InputError: Invalid *suffix*.
        CopyError: Missing template dir, or any filesystem error during
            removal or copy.
    """
    src = Path(template_dir)
    dest = output_dir_for(suffix, root)

    if not src.is_dir():
        raise CopyError(f"template directory not found: {src}")
    if not dest.is_symlink() and dest.resolve() == src.resolve():
        raise CopyError(f"output directory {dest} is the template directory")

    remove_output_tree(dest, suffix)

    try:
        shutil.copytree(src, dest, symlinks=True)
    except OSError as exc:
        raise CopyError(f"cannot copy {src} to {dest}: {exc}") from exc

    logger.info("Copied template %s -> %s", src, dest)
    return dest
