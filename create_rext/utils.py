"""Shared utility functions for create-rext.

Provides async command execution, JSON I/O and Rich-based console reporting.
Errors go to a dedicated stderr console so that progress output and failures
can be told apart by the calling shell.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(cmd: list[str], cwd: str | Path | None = None) -> int:
    """Run *cmd* with the parent's stdin/stdout/stderr and wait for it to exit.

    No timeout is applied: a child that never exits blocks the caller.

    Returns:
        The child's exit code.

    Raises:
        OSError: If the process cannot be spawned (e.g. executable not found).
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=str(cwd) if cwd else None,
    )
    return await process.wait()


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file whose top level must be an object.

    Raises:
        FileNotFoundError: If the file does not exist.
        UnicodeDecodeError: If the file is not UTF-8.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the top-level value is not a JSON object.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object in {path}, got {type(data).__name__}"
        )
    return data


def write_json_atomic(
    data: dict[str, Any],
    path: str | Path,
    indent: int = 2,
    trailing_newline: bool = False,
) -> Path:
    """Serialise *data* and replace *path* with it in a single rename.

    The content is written to a sibling ``.<name>.tmp`` file first, so a
    reader of *path* sees either the old or the new document, never a
    truncated one.  The temporary file is removed if the write fails.

    Returns:
        The written path.
    """
    file_path = Path(path)
    content = json.dumps(data, indent=indent, ensure_ascii=False)
    if trailing_newline:
        content += "\n"

    tmp_path = file_path.with_name(f".{file_path.name}.tmp")
    try:
        tmp_path.write_text(content, encoding="utf-8")
        tmp_path.replace(file_path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    return file_path


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STAGE_NAMES: dict[int, str] = {
    1: "RESOLVE",
    2: "GUARD",
    3: "MATERIALIZE",
    4: "PATCH",
    5: "INSTALL",
}

STAGE_COLORS: dict[int, str] = {
    1: "bright_cyan",
    2: "bright_yellow",
    3: "bright_green",
    4: "bright_magenta",
    5: "bright_blue",
}


def print_stage_header(stage: int, name: str) -> None:
    """Print a rule with the stage number and name, coloured per stage."""
    color = STAGE_COLORS.get(stage, "white")
    console.print(
        Rule(
            f"[bold {color}] Step {stage}: {name.upper()} [/bold {color}]",
            style=color,
        )
    )


def print_banner(title: str, lines: dict[str, str]) -> None:
    """Print a bordered panel with aligned ``label : value`` lines."""
    width = max((len(label) for label in lines), default=0)
    body = "\n".join(f"{label.ljust(width)} : {escape(str(value))}" for label, value in lines.items())
    console.print(
        Panel(
            body,
            title=f"[bold]{title}[/bold]",
            border_style="bright_cyan",
        )
    )


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
