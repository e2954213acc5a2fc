"""Console status output for k8s-rewrite runs.

Thin wrapper around :mod:`rich`.  Status lines go to stderr so stdout
stays clean for ``--json`` output; Rich drops markup automatically when
stderr is not a TTY.  ``logger.*`` calls remain the record for
``--debug`` runs.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

console = Console(stderr=True, force_terminal=None, highlight=False)

# ── Symbols ────────────────────────────────────────────────────────────────

_PASS = "[bold green]✓[/]"
_FAIL = "[bold red]✗[/]"
_WARN = "[bold yellow]⚠[/]"

# ── Stage headers ──────────────────────────────────────────────────────────


def phase(title: str) -> None:
    """Bold stage header (``CONFIG``, ``COPY``, ``RENDER``...)."""
    console.print(f"[bold blue]── {escape(title)} ──[/]")


# ── Status lines ───────────────────────────────────────────────────────────


def ok(msg: str) -> None:
    console.print(f"  {_PASS} {escape(msg)}")


def fail(msg: str) -> None:
    """Failure marker + message; used for every fatal diagnostic."""
    console.print(f"  {_FAIL} [red]{escape(msg)}[/]")


def warn(msg: str) -> None:
    console.print(f"  {_WARN} [yellow]{escape(msg)}[/]")


def detail(key: str, value: str) -> None:
    """Key-value pair, indented."""
    console.print(f"    [bold]{escape(key)}[/]: {escape(value)}")


# ── Banner ─────────────────────────────────────────────────────────────────


def success_panel(title: str, body: str) -> None:
    """Green-bordered summary panel shown at the end of a run."""
    console.print()
    console.print(
        Panel(
            escape(body),
            title=f"[bold green]{escape(title)}[/]",
            border_style="green",
            padding=(1, 2),
        )
    )
