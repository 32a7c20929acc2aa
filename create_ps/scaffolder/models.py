"""Data models shared by the scaffolding engine and its feature handlers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ..config import Config
    from ..manifest import ManifestEditor
    from ..prompts import Prompter
    from ..remote import RemoteClient
    from .dependencies import DependencySpecifier
    from .templates import TemplateRenderer

CommandRunner = Callable[..., Awaitable[tuple[int, str, str]]]


class FeatureError(Exception):
    """A single feature could not be materialized; other features carry on."""


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


class Selection(BaseModel):
    """What the user asked for in one invocation."""

    package_name: str = Field(..., min_length=1)
    description: str = Field(default="")
    features: list[str] = Field(default_factory=list)
    esm: bool = Field(default=False, description="ECMAScript modules instead of CommonJS")

    model_config = {"frozen": True}

    def has(self, key: str) -> bool:
        return key in self.features

    def without(self, keys: Iterable[str]) -> "Selection":
        """Return a copy with *keys* removed."""
        drop = set(keys)
        return self.model_copy(update={"features": [k for k in self.features if k not in drop]})


class LicenseChoice(BaseModel):
    """The license picked during a run, with placeholders already filled in."""

    key: str
    name: str
    text: str


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class RunState(str, Enum):
    INIT = "init"
    CONFLICT_CHECK = "conflict_check"
    MATERIALIZING = "materializing"
    REPORTED = "reported"
    ABORTED = "aborted"


class FeatureStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    FAILED = "failed"
    SKIPPED = "skipped"


class FeatureOutcome(BaseModel):
    key: str
    status: FeatureStatus = Field(default=FeatureStatus.PENDING)
    paths: list[str] = Field(default_factory=list, description="Written paths, relative")
    error: str | None = Field(default=None)


class ScaffoldReport(BaseModel):
    """Per-feature results of one scaffolding run."""

    package_name: str = Field(default="")
    state: RunState = Field(default=RunState.INIT)
    outcomes: list[FeatureOutcome] = Field(default_factory=list)
    ignored: list[str] = Field(default_factory=list, description="Unknown feature keys")
    message: str | None = Field(default=None)

    def outcome(self, key: str) -> FeatureOutcome | None:
        for item in self.outcomes:
            if item.key == key:
                return item
        return None

    def _with_status(self, status: FeatureStatus) -> list[FeatureOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def succeeded(self) -> list[FeatureOutcome]:
        return self._with_status(FeatureStatus.DONE)

    @property
    def failed(self) -> list[FeatureOutcome]:
        return self._with_status(FeatureStatus.FAILED)

    @property
    def skipped(self) -> list[FeatureOutcome]:
        return self._with_status(FeatureStatus.SKIPPED)

    @property
    def ok(self) -> bool:
        return self.state is RunState.REPORTED and not self.failed

    def summary(self) -> dict[str, str]:
        """``{feature: status}`` rows for the console summary table."""
        rows: dict[str, str] = {}
        for item in self.outcomes:
            text = item.status.value
            if item.error:
                text = f"{text}: {item.error}"
            rows[item.key] = text
        return rows


# ---------------------------------------------------------------------------
# Per-run context
# ---------------------------------------------------------------------------


@dataclass
class RunContext:
    """Everything a feature handler may read or record during one run.

    Values produced by one feature and consumed by a later one (the chosen
    license, the entry file) are stored here rather than in module state.
    """

    target_dir: Path
    selection: Selection
    manifest: ManifestEditor
    config: Config
    prompter: Prompter
    remote: RemoteClient
    run_command: CommandRunner
    renderer: TemplateRenderer
    today: date = field(default_factory=date.today)
    license: LicenseChoice | None = None
    entry_file: Path | None = None
    installed: list[DependencySpecifier] = field(default_factory=list)

    def template_context(self) -> dict[str, Any]:
        """Variables available to every Jinja2 template."""
        return {
            "package_name": self.selection.package_name,
            "description": self.selection.description,
            "esm": self.selection.esm,
            "package_manager": self.config.package_manager,
            "version": self.manifest.get("version", "1.0.0"),
            "today": self.today.isoformat(),
            "has_contributing": self.selection.has("contributing"),
            "license_name": self.license.name if self.license else None,
        }

    def relative(self, path: Path) -> str:
        return path.relative_to(self.target_dir).as_posix()
