"""``apply.sh`` generation for a rendered output tree."""

from __future__ import annotations

import logging
import os
import shlex
import stat
from pathlib import Path
from typing import Iterable, List

from k8s_rewrite.errors import CopyError
from k8s_rewrite.render.renderer import MANIFEST_SUFFIX

logger = logging.getLogger(__name__)

APPLY_SCRIPT_NAME = "apply.sh"
DEFAULT_APPLY_COMMAND = "kubectl apply -f"

_HEADER = [
    "#!/bin/sh",
    'cd "`dirname $0`"',
]


def find_apply_targets(output_dir: str | Path) -> List[Path]:
    """Every ``*.yaml`` entry under *output_dir* that is not a directory.

    Unlike :func:`~k8s_rewrite.render.renderer.find_manifests` this keeps
    symlinked manifests: they are not rewritten, but they are applied.
    Sorted by relative path.
    """
    output_dir = Path(output_dir)
    found = [p for p in output_dir.rglob(f"*{MANIFEST_SUFFIX}") if not p.is_dir()]
    return sorted(found, key=lambda p: p.relative_to(output_dir).as_posix())


def _relative_arg(output_dir: Path, manifest: Path) -> str:
    """``./sub/file.yaml`` relative to *output_dir*, shell-quoted if needed."""
    rel = manifest.relative_to(output_dir).as_posix()
    return shlex.quote(f"./{rel}")


def render_apply_script(
    output_dir: str | Path,
    manifests: Iterable[Path],
    apply_command: str = DEFAULT_APPLY_COMMAND,
) -> str:
    """Build the script text: shebang, ``cd`` to itself, one line per manifest."""
    output_dir = Path(output_dir)
    lines: List[str] = list(_HEADER)
    for manifest in manifests:
        lines.append(f"{apply_command} {_relative_arg(output_dir, manifest)}")
    return "\n".join(lines) + "\n"


def write_apply_script(
    output_dir: str | Path,
    manifests: Iterable[Path],
    apply_command: str = DEFAULT_APPLY_COMMAND,
) -> Path:
    """Write ``apply.sh`` at the root of *output_dir* and mark it executable.

    Returns:
        Path of the written script.

    Raises:
        CopyError: If the output directory is gone or the script cannot be
            written.
    """
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        raise CopyError(f"output directory not found: {output_dir}")

    manifests = list(manifests)
    dest = output_dir / APPLY_SCRIPT_NAME
    content = render_apply_script(output_dir, manifests, apply_command)
    try:
        dest.write_text(content, encoding="utf-8")
        mode = os.stat(dest).st_mode
        os.chmod(dest, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as exc:
        raise CopyError(f"cannot write {dest}: {exc}") from exc

    logger.info("Wrote %s (%d manifest(s))", dest, len(manifests))
    return dest
