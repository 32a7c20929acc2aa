"""Static catalog of scaffoldable features.

Each entry describes what a feature owns on disk and what it depends on.
The catalog is data only: the code that materializes a feature lives in
:mod:`create_ps.scaffolder.handlers`, keyed by the same string.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field


class FeatureDefinition(BaseModel):
    """One selectable feature.

    ``paths`` are the outputs the feature owns (checked for conflicts);
    ``files`` are the files it writes. Both are relative to the target
    directory and may contain ``{ext}``, resolved to ``mjs`` for ESM packages
    and ``js`` otherwise.
    """

    key: str
    label: str
    paths: tuple[str, ...] = Field(default=())
    files: tuple[str, ...] = Field(default=())
    recommended: bool = Field(default=False)
    remote: bool = Field(default=False, description="Content is fetched over the network")
    needs_input: bool = Field(default=False, description="Asks the user for free text")
    after: tuple[str, ...] = Field(
        default=(), description="Features that must be materialized first when selected"
    )

    model_config = {"frozen": True}

    def output_paths(self, esm: bool = False) -> list[str]:
        return [_with_ext(p, esm) for p in self.paths]

    def output_files(self, esm: bool = False) -> list[str]:
        return [_with_ext(f, esm) for f in self.files]


def _with_ext(path: str, esm: bool) -> str:
    return path.replace("{ext}", "mjs" if esm else "js")


FEATURES: tuple[FeatureDefinition, ...] = (
    FeatureDefinition(
        key="src",
        label="Source",
        paths=("src",),
        files=("src/index.{ext}",),
        recommended=True,
    ),
    FeatureDefinition(
        key="test",
        label="Test",
        paths=("test",),
        files=("test/example.test.js",),
    ),
    FeatureDefinition(
        key="examples",
        label="Examples",
        paths=("examples",),
        files=("examples/example.{ext}",),
    ),
    FeatureDefinition(
        key="docs",
        label="Documentation",
        paths=("docs",),
        files=("docs/example.md",),
    ),
    FeatureDefinition(key="assets", label="Assets / Images", paths=("assets",)),
    FeatureDefinition(
        key="i18n",
        label="Internationalization (i18n)",
        paths=("i18n/locales",),
        files=("i18n/locales/en_US.json",),
    ),
    FeatureDefinition(
        key="workflows",
        label="GitHub workflows",
        paths=(".github/workflows",),
        files=(".github/workflows/workflow.yml",),
    ),
    FeatureDefinition(
        key="dependabot",
        label="Dependabot configuration",
        paths=(".github/dependabot.yml",),
        files=(".github/dependabot.yml",),
        recommended=True,
    ),
    FeatureDefinition(
        key="gitignore",
        label="Gitignore",
        paths=(".gitignore",),
        files=(".gitignore",),
        recommended=True,
        remote=True,
    ),
    FeatureDefinition(
        key="readme",
        label="Readme",
        paths=("README.md",),
        files=("README.md",),
        recommended=True,
        after=("license", "contributing"),
    ),
    FeatureDefinition(
        key="contributing",
        label="Contributing guidelines",
        paths=("CONTRIBUTING.md",),
        files=("CONTRIBUTING.md",),
    ),
    FeatureDefinition(
        key="changelog",
        label="Changelog",
        paths=("CHANGELOG.md",),
        files=("CHANGELOG.md",),
    ),
    FeatureDefinition(
        key="code_of_conduct",
        label="Code of Conduct",
        paths=("CODE_OF_CONDUCT.md",),
        files=("CODE_OF_CONDUCT.md",),
        remote=True,
    ),
    FeatureDefinition(
        key="license",
        label="License",
        paths=("LICENSE",),
        files=("LICENSE",),
        recommended=True,
        remote=True,
        needs_input=True,
    ),
    FeatureDefinition(
        key="dependencies",
        label="Dependencies",
        remote=True,
        needs_input=True,
        after=("src",),
    ),
)

CATALOG: dict[str, FeatureDefinition] = {f.key: f for f in FEATURES}


def resolve(key: str) -> FeatureDefinition | None:
    """Look up a feature by key; ``None`` for unknown keys."""
    return CATALOG.get(key)


def recommended_keys() -> list[str]:
    return [f.key for f in FEATURES if f.recommended]


def ordered(keys: Iterable[str]) -> list[str]:
    """Return the known *keys* in execution order.

    Catalog order is kept except where a feature's ``after`` list names
    another selected feature, which is then placed first. Unknown keys and
    duplicates are dropped.
    """
    selected = [f.key for f in FEATURES if f.key in set(keys)]
    result: list[str] = []
    visiting: set[str] = set()

    def _visit(key: str) -> None:
        if key in result:
            return
        if key in visiting:
            raise ValueError(f"Cyclic feature ordering at '{key}'")
        visiting.add(key)
        for dep in CATALOG[key].after:
            if dep in selected:
                _visit(dep)
        visiting.discard(key)
        result.append(key)

    for key in selected:
        _visit(key)
    return result
