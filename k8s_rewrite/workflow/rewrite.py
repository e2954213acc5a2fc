"""Rewrite pipeline orchestrator.

Single forward pass, five stages::

    1. Input validation   - config path + suffix present, config is a file
    2. Config load        - parse KEY=value file, check required keys
    3. Template copy      - remove old k8s.<suffix>, copy template tree
    4. Substitution       - replace placeholders in every *.yaml file
    5. Apply script       - write executable apply.sh

Every stage fails terminally.  Nothing is rolled back: a run that dies
after stage 3 leaves the partial tree for inspection, and the next run's
reset removes it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from k8s_rewrite import ui
from k8s_rewrite.config.loader import load_config
from k8s_rewrite.errors import InputError, RewriteError
from k8s_rewrite.render.renderer import (
    build_substitutions,
    find_manifests,
    find_unresolved,
    substitute_tree,
)
from k8s_rewrite.state.models import RewriteResult
from k8s_rewrite.tree.apply_script import (
    DEFAULT_APPLY_COMMAND,
    find_apply_targets,
    write_apply_script,
)
from k8s_rewrite.tree.copier import (
    copy_template_tree,
    default_template_dir,
    validate_suffix,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


# ---------------------------------------------------------------------------
# Stage 1
# ---------------------------------------------------------------------------


def validate_inputs(config_path: Optional[str], suffix: Optional[str]) -> Path:
    """Check the two positional inputs.

    Returns:
        The config path.

    Raises:
        InputError: Missing argument, invalid suffix, or config file not found.
    """
    if not config_path:
        raise InputError("config file required")
    if not suffix:
        raise InputError("suffix required")
    validate_suffix(suffix)

    path = Path(config_path)
    if not path.is_file():
        raise InputError(f"config file does not exist: {config_path}")
    return path


# ---------------------------------------------------------------------------
# Stages 2-5
# ---------------------------------------------------------------------------


def rewrite(
    config_path: Optional[str],
    suffix: Optional[str],
    *,
    template_dir: Optional[str | Path] = None,
    output_root: Optional[str | Path] = None,
    apply_command: str = DEFAULT_APPLY_COMMAND,
) -> RewriteResult:
    """Run the whole pipeline and return its summary.

    Raises:
        RewriteError: From whichever stage failed.
    """
    path = validate_inputs(config_path, suffix)

    ui.phase("CONFIG")
    cfg = load_config(path)
    ui.ok(f"Loaded {path}")
    ui.detail("namespace", cfg.namespace)
    ui.detail("tikv cluster", cfg.tikv_cluster)
    ui.detail("image", f"{cfg.image_prefix}<name>{cfg.image_suffix}")
    ui.detail("pull secret", cfg.image_pull_secret or "(none)")

    ui.phase("COPY")
    src = Path(template_dir) if template_dir is not None else default_template_dir()
    out_dir = copy_template_tree(src, suffix, root=output_root)
    ui.ok(f"Copied {src} -> {out_dir}")

    ui.phase("RENDER")
    counts = substitute_tree(out_dir, build_substitutions(cfg))
    manifests = find_manifests(out_dir)
    ui.ok(f"Rendered {len(manifests)} manifest(s), {sum(counts.values())} replacement(s)")

    unresolved = find_unresolved(out_dir)
    for rel, tokens in unresolved.items():
        ui.warn(f"{rel} still contains {', '.join(tokens)}")
        logger.warning("Unresolved placeholders in %s: %s", rel, tokens)

    ui.phase("APPLY SCRIPT")
    targets = find_apply_targets(out_dir)
    script = write_apply_script(out_dir, targets, apply_command)
    ui.ok(f"Wrote {script}")

    return RewriteResult(
        suffix=suffix,
        template_dir=str(src),
        output_dir=str(out_dir),
        apply_script=str(script),
        manifests=[f"./{m.relative_to(out_dir).as_posix()}" for m in targets],
        replacements=counts,
        unresolved=unresolved,
    )


# ---------------------------------------------------------------------------
# Entry used by the CLI
# ---------------------------------------------------------------------------


def run_rewrite(
    config_path: Optional[str],
    suffix: Optional[str],
    *,
    template_dir: Optional[str | Path] = None,
    output_root: Optional[str | Path] = None,
    apply_command: str = DEFAULT_APPLY_COMMAND,
    debug: bool = False,
    json_output: bool = False,
) -> int:
    """Run :func:`rewrite` and map the outcome to an exit code.

    Returns ``EXIT_SUCCESS`` (0) or ``EXIT_FAILURE`` (1); every failure
    kind shares the same code.
    """
    if debug:
        logging.getLogger("k8s_rewrite").setLevel(logging.DEBUG)

    try:
        result = rewrite(
            config_path,
            suffix,
            template_dir=template_dir,
            output_root=output_root,
            apply_command=apply_command,
        )
    except RewriteError as exc:
        logger.error("Rewrite failed: %s", exc)
        ui.fail(str(exc))
        return EXIT_FAILURE

    if json_output:
        print(result.to_sorted_json())
    else:
        ui.success_panel(
            "REWRITE COMPLETE",
            f"Output : {result.output_dir}\n"
            f"Apply  : {result.apply_script}\n"
            f"Files  : {len(result.manifests)} manifest(s)",
        )
    return EXIT_SUCCESS
