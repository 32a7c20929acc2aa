"""Shared utility functions for create-ps.

Provides async command execution, JSON I/O, file-system helpers and
Rich-based console reporting.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 120,
) -> tuple[int, str, str]:
    """Run an external command asynchronously.

    Args:
        cmd: Program and arguments; no shell is involved.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A missing executable is
        reported as return code ``127`` rather than raised.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError as exc:
        return (127, "", f"Command not found: {exc.filename or cmd[0]}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def git_user_name(cwd: str | Path | None = None) -> str:
    """Return ``git config user.name`` or an empty string when unavailable."""
    returncode, stdout, _ = await run_command(
        ["git", "config", "user.name"], cwd=cwd, timeout=10
    )
    return stdout if returncode == 0 else ""


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def split_comma_list(text: str | None) -> list[str]:
    """Split comma-separated free text into trimmed, non-empty items.

    Examples::

        split_comma_list("left-pad, chalk ,,") -> ["left-pad", "chalk"]
        split_comma_list("") -> []
    """
    if not text:
        return []
    return [item.strip() for item in text.split(",") if item.strip()]


def to_camel_case(name: str) -> str:
    """Convert ``left-pad`` or ``lodash.merge`` to ``leftPad`` / ``lodashMerge``.

    A leading digit is prefixed with an underscore so the result is always a
    usable identifier.
    """
    parts = [p for p in re.split(r"[^A-Za-z0-9]+", name) if p]
    if not parts:
        return "_"
    result = parts[0].lower() + "".join(p[:1].upper() + p[1:] for p in parts[1:])
    if result[0].isdigit():
        result = f"_{result}"
    return result


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def dump_json(data: dict[str, Any] | list[Any]) -> str:
    """Serialise *data* the way npm writes manifests: 2-space indent, trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def write_text_file(path: Path, content: str) -> None:
    """Create parent dirs and write *content*, truncating any previous file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def append_text_file(path: Path, content: str) -> None:
    """Append *content* to *path*, creating the file if needed."""
    with path.open("a", encoding="utf-8") as fh:
        fh.write(content)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_header(title: str) -> None:
    """Print a full-width rule with the command title."""
    console.print()
    console.print(Rule(f"[bold black on cyan] {title} [/bold black on cyan]", style="cyan"))
    console.print()


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
