"""Main scaffolding orchestrator.

Takes a :class:`Selection` and materializes every selected feature into a
target directory: directories, static and templated files, remote templates
and the manifest edits the ``src`` feature needs.

Run lifecycle::

    INIT -> CONFLICT_CHECK -> MATERIALIZING -> REPORTED
                           \\-> ABORTED

Each feature goes ``PENDING -> IN_PROGRESS -> DONE | FAILED`` (or
``SKIPPED`` when the conflict check removed it). A failing feature never
stops the ones after it; only a cancelled prompt ends the run early.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from rich.markup import escape

from ..config import Config
from ..manifest import ManifestEditor
from ..prompts import Prompter, UserCancelled
from ..remote import RemoteClient
from ..utils import print_warning, run_command
from . import catalog
from .conflicts import ScaffoldAborted, resolve_conflicts
from .handlers import HANDLERS
from .models import (
    CommandRunner,
    FeatureOutcome,
    FeatureStatus,
    RunContext,
    RunState,
    ScaffoldReport,
    Selection,
)
from .templates import TemplateRenderer


class ScaffoldEngine:
    """Materializes a feature selection against a target directory.

    Collaborators are injected so the engine can be driven by scripted
    prompts, a fake remote and a fake command runner.
    """

    def __init__(
        self,
        config: Config,
        prompter: Prompter,
        remote: RemoteClient,
        command_runner: CommandRunner = run_command,
        renderer: TemplateRenderer | None = None,
        today: date | None = None,
    ) -> None:
        self.config = config
        self.prompter = prompter
        self.remote = remote
        self.command_runner = command_runner
        self.renderer = renderer or TemplateRenderer()
        self.today = today

    # -- Public API --------------------------------------------------------

    async def run(
        self,
        target_dir: str | Path,
        selection: Selection,
        manifest: ManifestEditor,
    ) -> ScaffoldReport:
        """Check for existing outputs, then materialize what remains.

        Raises:
            ManifestError: If the manifest cannot be loaded.
            UserCancelled: If the user cancels at any prompt.
        """
        root = Path(target_dir)
        report = ScaffoldReport(package_name=selection.package_name)
        if not manifest.loaded:
            manifest.load()

        report.state = RunState.CONFLICT_CHECK
        try:
            effective = resolve_conflicts(
                root, selection, self.prompter, self.config.conflict_policy
            )
        except ScaffoldAborted as exc:
            report.state = RunState.ABORTED
            report.message = str(exc)
            return report

        for key in catalog.ordered(selection.features):
            if not effective.has(key):
                report.outcomes.append(
                    FeatureOutcome(key=key, status=FeatureStatus.SKIPPED, error="already exists")
                )

        return await self.materialize(root, effective, manifest, report)

    async def materialize(
        self,
        target_dir: str | Path,
        selection: Selection,
        manifest: ManifestEditor,
        report: ScaffoldReport | None = None,
    ) -> ScaffoldReport:
        """Materialize every feature of an already-effective *selection*.

        Unknown keys are reported in ``report.ignored`` and otherwise
        skipped. Features run in catalog order, adjusted so README follows
        license and contributing and dependencies follow src.
        """
        root = Path(target_dir)
        report = report or ScaffoldReport(package_name=selection.package_name)
        report.state = RunState.MATERIALIZING

        for key in selection.features:
            if catalog.resolve(key) is None and key not in report.ignored:
                print_warning(f"Ignoring unknown feature '{key}'.")
                report.ignored.append(key)

        ctx = RunContext(
            target_dir=root,
            selection=selection,
            manifest=manifest,
            config=self.config,
            prompter=self.prompter,
            remote=self.remote,
            run_command=self.command_runner,
            renderer=self.renderer,
        )
        if self.today is not None:
            ctx.today = self.today

        for key in catalog.ordered(selection.features):
            report.outcomes.append(await self._materialize_one(ctx, key))

        report.state = RunState.REPORTED
        return report

    # -- Per-feature step --------------------------------------------------

    async def _materialize_one(self, ctx: RunContext, key: str) -> FeatureOutcome:
        feature = catalog.CATALOG[key]
        outcome = FeatureOutcome(key=key, status=FeatureStatus.IN_PROGRESS)
        try:
            written = await HANDLERS[key](ctx, feature)
        except UserCancelled:
            raise
        except Exception as exc:  # noqa: BLE001
            outcome.status = FeatureStatus.FAILED
            outcome.error = str(exc) or exc.__class__.__name__
            print_warning(f"Could not create {feature.label.lower()}: {escape(outcome.error)}")
            return outcome

        outcome.status = FeatureStatus.DONE
        outcome.paths = [ctx.relative(p) for p in written]
        return outcome
