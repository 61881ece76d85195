"""Terminal output for the httptoolkit CLI.

CLI commands print through these helpers rather than printing directly.
The themed ``console`` itself lives in :mod:`httptoolkit.core.console`.
"""

from __future__ import annotations

from rich.markup import escape
from rich.syntax import Syntax

from httptoolkit.core.console import console

VERSION = "0.1.0"


def print_banner(host: str, port: int) -> None:
    """Print a one-line startup banner for ``serve``."""
    console.print()
    console.print(
        f"  [accent]httptoolkit[/] [muted]v{VERSION}[/]"
        f"  [muted]─[/]  [info]http://{host}:{port}[/]"
        f"  [muted]─  Ctrl+C to stop[/]"
    )
    console.print()


def print_status(status_code: int) -> None:
    style = "status.ok" if 200 <= status_code < 300 else "status.bad"
    console.print(f"[{style}]HTTP {status_code}[/]")


def print_body(text: str) -> None:
    """Print a response body, pretty-printing it when it looks like JSON."""
    stripped = text.strip()
    if stripped.startswith(("{", "[")):
        console.print(Syntax(stripped, "json", word_wrap=True))
    elif stripped:
        console.print(stripped, markup=False)
    else:
        console.print("[muted][empty body][/]")


def print_error(
    title: str,
    detail: str | None = None,
    suggestion: str | None = None,
) -> None:
    """Print a structured, actionable error message."""
    console.print(f"[error]✘ {escape(title)}[/]")
    if detail:
        console.print(f"  [error.detail]{escape(detail)}[/]")
    if suggestion:
        console.print(f"  [muted]→ {suggestion}[/]")
