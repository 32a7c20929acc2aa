"""Detects selected outputs that already exist and asks what to do about them."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..config import ConflictPolicy
from ..utils import console
from . import catalog

if TYPE_CHECKING:
    from ..prompts import Prompter
    from .models import Selection


class ScaffoldAborted(Exception):
    """Raised when the user declines to continue past existing outputs."""


def find_conflicts(target_dir: Path, keys: list[str], esm: bool = False) -> dict[str, list[Path]]:
    """Map each selected feature to its owned paths that already exist.

    Files and directories both count. Features without collisions (and
    unknown keys) are omitted.
    """
    conflicts: dict[str, list[Path]] = {}
    for key in keys:
        feature = catalog.resolve(key)
        if feature is None:
            continue
        existing = [
            target_dir / rel
            for rel in feature.output_paths(esm)
            if (target_dir / rel).exists()
        ]
        if existing:
            conflicts[key] = existing
    return conflicts


def resolve_conflicts(
    target_dir: Path,
    selection: Selection,
    prompter: Prompter,
    policy: ConflictPolicy = ConflictPolicy.SKIP,
) -> Selection:
    """Return the effective selection after asking about existing outputs.

    With ``ConflictPolicy.SKIP`` an affirmative answer drops every colliding
    feature and a negative one keeps them (they are rewritten). With
    ``ConflictPolicy.ABORT`` a negative answer raises :class:`ScaffoldAborted`.
    """
    conflicts = find_conflicts(target_dir, selection.features, selection.esm)
    if not conflicts:
        return selection

    console.print()
    console.print("[bold yellow]The following paths already exist:[/bold yellow]")
    for paths in conflicts.values():
        for path in paths:
            kind = "directory" if path.is_dir() else "file"
            console.print(f"[yellow]  - {path.relative_to(target_dir)} ({kind})[/yellow]")
    console.print()

    if policy is ConflictPolicy.ABORT:
        if not prompter.confirm("They may be overwritten. Continue anyway?", default=False):
            raise ScaffoldAborted("Package creation aborted: existing files were not overwritten.")
        return selection

    if prompter.confirm("Skip the features that would overwrite them?", default=True):
        return selection.without(conflicts.keys())
    return selection
