"""CLI entry point for k8s-rewrite, built on typer.

Usage::

    k8s-rewrite CONFIG SUFFIX
    k8s-rewrite deploy/prod.conf prod --template-dir ./k8s
    python -m k8s_rewrite deploy/staging.conf staging --json

Generates ``./k8s.<SUFFIX>/`` from the template tree and writes
``./k8s.<SUFFIX>/apply.sh``.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import typer

from k8s_rewrite import __version__
from k8s_rewrite.tree.apply_script import DEFAULT_APPLY_COMMAND
from k8s_rewrite.tree.copier import TEMPLATE_DIR_ENV

app = typer.Typer(
    name="k8s-rewrite",
    help="Render a parameterized Kubernetes manifest tree into k8s.<suffix>.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"k8s-rewrite {__version__}")
        raise typer.Exit()


@app.command()
def rewrite(
    config: Optional[str] = typer.Argument(
        None,
        help="Config file with KEY=value lines (or a flat YAML mapping).",
        show_default=False,
    ),
    suffix: Optional[str] = typer.Argument(
        None,
        help="Output suffix; the tree is written to ./k8s.<suffix>.",
        show_default=False,
    ),
    template_dir: Optional[str] = typer.Option(
        None,
        "--template-dir",
        envvar=TEMPLATE_DIR_ENV,
        help=(
            "Template tree to copy. Default: k8s/ next to the invoked script, "
            "which for an installed k8s-rewrite is the bin/ directory, so pass "
            "this (or set the env var) after installation."
        ),
    ),
    output_root: Optional[str] = typer.Option(
        None,
        "--output-root",
        help="Directory in which k8s.<suffix> is created. Default: cwd.",
    ),
    apply_command: str = typer.Option(
        DEFAULT_APPLY_COMMAND,
        "--apply-command",
        help="Command written to apply.sh for each manifest.",
    ),
    json_flag: bool = typer.Option(
        False, "--json", "-j", help="Print the run summary as JSON."
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Copy the template tree, substitute placeholders, write apply.sh.

    Existing ./k8s.<SUFFIX> is deleted first.  Exits 0 on success, 1 on
    any failure.

    Recognised config keys:
      NET_PREFIX, EXTERNAL_IPS, IMAGE_PREFIX, NAMESPACE, TIKV_CLUSTER (required)
      IMAGE_SUFFIX, IMAGE_PULL_SECRET (optional)
    """
    from k8s_rewrite.workflow.rewrite import run_rewrite

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    rc = run_rewrite(
        config,
        suffix,
        template_dir=template_dir,
        output_root=output_root,
        apply_command=apply_command,
        debug=debug,
        json_output=json_flag,
    )
    raise typer.Exit(rc)


# ── Entry point ──────────────────────────────────────────────────────────────


def main() -> int:
    """Run the CLI and return an exit code."""
    try:
        app()
        return 0
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
