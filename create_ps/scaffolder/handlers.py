"""Feature handlers: one coroutine per catalog key.

Every handler receives the per-run :class:`RunContext` and its
:class:`FeatureDefinition`, writes the feature's outputs and returns the
paths it wrote. Handlers raise on failure; the engine records the error and
moves on to the next feature.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

from ..utils import append_text_file, ensure_dir, print_warning, write_text_file
from .catalog import FeatureDefinition
from .dependencies import collect_dependencies, import_statements
from .models import FeatureError, LicenseChoice, RunContext

Handler = Callable[[RunContext, FeatureDefinition], Awaitable[list[Path]]]

YEAR_PLACEHOLDERS = ("[year]", "[yyyy]", "<year>")
AUTHOR_PLACEHOLDERS = ("[fullname]", "[name of copyright owner]", "<name of author>")
PROJECT_PLACEHOLDERS = ("[project]", "[project_name]", "[INSERT PROJECT NAME]")


def substitute_placeholders(text: str, placeholders: tuple[str, ...], value: str) -> str:
    """Replace every occurrence of each placeholder in *text* with *value*."""
    for placeholder in placeholders:
        text = text.replace(placeholder, value)
    return text


async def _write(ctx: RunContext, rel: str, content: str) -> Path:
    path = ctx.target_dir / rel
    await asyncio.to_thread(write_text_file, path, content)
    return path


async def _render(ctx: RunContext, template: str, rel: str) -> Path:
    return await ctx.renderer.render_to_file(
        template, ctx.target_dir / rel, ctx.template_context()
    )


async def _ensure_dirs(ctx: RunContext, feature: FeatureDefinition) -> None:
    """Create the owned directories of a directory-rooted feature."""
    for rel in feature.output_paths(ctx.selection.esm):
        await asyncio.to_thread(ensure_dir, ctx.target_dir / rel)


# ---------------------------------------------------------------------------
# Directory features
# ---------------------------------------------------------------------------


async def materialize_src(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    """Create an empty entry file and point the manifest at it."""
    await _ensure_dirs(ctx, feature)
    (rel,) = feature.output_files(ctx.selection.esm)
    entry = await _write(ctx, rel, "")

    ctx.manifest.set_entry_point(ctx.selection.esm, entry.name)
    # Flushed now: later steps (the package manager) read the manifest from disk.
    await ctx.manifest.persist()
    ctx.entry_file = entry
    return [entry]


async def materialize_test(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    await _ensure_dirs(ctx, feature)
    (rel,) = feature.output_files(ctx.selection.esm)
    return [await _render(ctx, "example.test.js.j2", rel)]


async def materialize_examples(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    await _ensure_dirs(ctx, feature)
    (rel,) = feature.output_files(ctx.selection.esm)
    return [await _render(ctx, "example.js.j2", rel)]


async def materialize_docs(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    await _ensure_dirs(ctx, feature)
    (rel,) = feature.output_files(ctx.selection.esm)
    return [await _render(ctx, "example.md.j2", rel)]


async def materialize_assets(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    await _ensure_dirs(ctx, feature)
    return [ctx.target_dir / rel for rel in feature.output_paths(ctx.selection.esm)]


async def materialize_i18n(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    await _ensure_dirs(ctx, feature)
    (rel,) = feature.output_files(ctx.selection.esm)
    return [await _write(ctx, rel, "{}\n")]


async def materialize_workflows(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    await _ensure_dirs(ctx, feature)
    (rel,) = feature.output_files(ctx.selection.esm)
    return [await _render(ctx, "workflow.yml.j2", rel)]


# ---------------------------------------------------------------------------
# Single-file features
# ---------------------------------------------------------------------------


async def materialize_dependabot(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    return [await _render(ctx, "dependabot.yml.j2", feature.files[0])]


async def materialize_contributing(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    return [await _render(ctx, "CONTRIBUTING.md.j2", feature.files[0])]


async def materialize_changelog(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    return [await _render(ctx, "CHANGELOG.md.j2", feature.files[0])]


async def materialize_readme(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    """Render the README; runs after ``license`` and ``contributing``."""
    return [await _render(ctx, "README.md.j2", feature.files[0])]


async def _fetch_template(ctx: RunContext, url: str) -> str:
    with ctx.prompter.status(f"Fetching {url}..."):
        text = await ctx.remote.fetch_text(url)
    return substitute_placeholders(text, PROJECT_PLACEHOLDERS, ctx.selection.package_name)


async def materialize_gitignore(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    content = await _fetch_template(ctx, ctx.config.remote.gitignore_url)
    return [await _write(ctx, feature.files[0], content)]


async def materialize_code_of_conduct(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    content = await _fetch_template(ctx, ctx.config.remote.code_of_conduct_url)
    return [await _write(ctx, feature.files[0], content)]


async def materialize_license(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    """Ask for a license, fetch its text and fill in the year and author."""
    with ctx.prompter.status("Fetching licenses..."):
        licenses = await ctx.remote.fetch_license_catalog()
    if not licenses:
        raise FeatureError("the license catalog is empty")

    key = ctx.prompter.select(
        "Select a license:", [(item.key, item.name, item.spdx_id or "") for item in licenses]
    )
    with ctx.prompter.status(f"Fetching the {key} license..."):
        detail = await ctx.remote.fetch_license(key)

    text = substitute_placeholders(detail.body, YEAR_PLACEHOLDERS, str(ctx.today.year))
    if ctx.config.user_name:
        text = substitute_placeholders(text, AUTHOR_PLACEHOLDERS, ctx.config.user_name)
    else:
        print_warning("No user name configured; the license author placeholder was left as is.")

    path = await _write(ctx, feature.files[0], text)
    ctx.license = LicenseChoice(key=detail.key, name=detail.name, text=text)
    return [path]


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


async def materialize_dependencies(ctx: RunContext, feature: FeatureDefinition) -> list[Path]:
    """Validate, install and (when ``src`` ran) import the requested dependencies."""
    specs = await collect_dependencies(ctx.prompter, ctx.remote)
    if not specs:
        return []

    cmd = [ctx.config.package_manager, "install", *(str(s) for s in specs)]
    with ctx.prompter.status(f"Running {' '.join(cmd)}..."):
        returncode, _, stderr = await ctx.run_command(
            cmd, cwd=ctx.target_dir, timeout=ctx.config.command_timeout
        )
    if returncode != 0:
        raise FeatureError(f"'{' '.join(cmd)}' failed: {stderr or f'exit code {returncode}'}")
    ctx.installed = list(specs)

    if ctx.entry_file is None or not ctx.entry_file.exists():
        return []
    await asyncio.to_thread(
        append_text_file, ctx.entry_file, import_statements(specs, ctx.selection.esm)
    )
    print_warning(
        f"Added imports to {ctx.relative(ctx.entry_file)}; the binding names are "
        "guessed from the package names, check them before use."
    )
    return [ctx.entry_file]


HANDLERS: dict[str, Handler] = {
    "src": materialize_src,
    "test": materialize_test,
    "examples": materialize_examples,
    "docs": materialize_docs,
    "assets": materialize_assets,
    "i18n": materialize_i18n,
    "workflows": materialize_workflows,
    "dependabot": materialize_dependabot,
    "gitignore": materialize_gitignore,
    "readme": materialize_readme,
    "contributing": materialize_contributing,
    "changelog": materialize_changelog,
    "code_of_conduct": materialize_code_of_conduct,
    "license": materialize_license,
    "dependencies": materialize_dependencies,
}
