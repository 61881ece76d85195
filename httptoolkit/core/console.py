"""Shared rich console.

The CLI printers and the close listener both write through ``console`` so
terminal styling is defined once.
"""

from rich.console import Console
from rich.theme import Theme

_theme = Theme(
    {
        "info": "cyan",
        "error": "bold red",
        "error.detail": "red",
        "warning": "bold yellow",
        "notice": "blue",
        "muted": "dim",
        "accent": "bold white",
        "status.ok": "bold green",
        "status.bad": "bold red",
    }
)

console = Console(theme=_theme, highlight=False)
