"""create-ps scaffolder -- materializes selected features into a package directory.

Quick usage::

    from create_ps.scaffolder import ScaffoldEngine, Selection

    selection = Selection(package_name="foo", features=["src", "readme"], esm=True)
    engine = ScaffoldEngine(config, prompter, remote)
    report = await engine.run(target_dir, selection, manifest)
"""

from create_ps.scaffolder.catalog import CATALOG, FeatureDefinition, ordered, resolve
from create_ps.scaffolder.conflicts import ScaffoldAborted, find_conflicts, resolve_conflicts
from create_ps.scaffolder.engine import ScaffoldEngine
from create_ps.scaffolder.models import (
    FeatureError,
    FeatureOutcome,
    FeatureStatus,
    RunContext,
    RunState,
    ScaffoldReport,
    Selection,
)
from create_ps.scaffolder.templates import TemplateRenderer

__all__ = [
    "CATALOG",
    "FeatureDefinition",
    "FeatureError",
    "FeatureOutcome",
    "FeatureStatus",
    "RunContext",
    "RunState",
    "ScaffoldAborted",
    "ScaffoldEngine",
    "ScaffoldReport",
    "Selection",
    "TemplateRenderer",
    "find_conflicts",
    "ordered",
    "resolve",
    "resolve_conflicts",
]
