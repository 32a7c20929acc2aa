"""create-ps command pipeline and CLI entry point.

Two commands:

create (default)   Initialise ``package.json`` if needed, ask for a
                   description and the features to include, scaffold them,
                   then ``git init``.
pkg-config         Edit metadata fields of an existing ``package.json``
                   (alias: ``config-update``).

Usage::

    create-ps my-package --esm
    python -m create_ps my-package
    create-ps pkg-config --fix
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.markup import escape

from .config import Config, ConflictPolicy
from .config_update import ConfigUpdater
from .manifest import ManifestEditor, ManifestError
from .prompts import Prompter, UserCancelled
from .remote import RemoteClient
from .scaffolder import catalog
from .scaffolder.engine import ScaffoldEngine
from .scaffolder.models import CommandRunner, RunState, ScaffoldReport, Selection
from .utils import (
    git_user_name,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)

CREATE_COMMAND = "create"
PKG_CONFIG_COMMANDS = ("pkg-config", "config-update")


# ---------------------------------------------------------------------------
# Create pipeline
# ---------------------------------------------------------------------------


class CreatePipeline:
    """Bootstraps a package in *target_dir*.

    Steps: ensure a manifest exists (``npm init -y``), write name and
    description, ask for features, run the scaffolding engine, ``git init``.

    Attributes:
        config: Global configuration.
        prompter: Prompt collaborator.
        remote: Template, license and registry client.
    """

    def __init__(
        self,
        config: Config,
        prompter: Prompter | None = None,
        remote: RemoteClient | None = None,
        command_runner: CommandRunner = run_command,
    ) -> None:
        self.config = config
        self.prompter = prompter or Prompter()
        self.remote = remote or RemoteClient(config.remote)
        self.command_runner = command_runner

    async def run(
        self,
        target_dir: str | Path,
        package_name: str | None = None,
        esm: bool = False,
    ) -> ScaffoldReport:
        """Run the whole create flow.

        Raises:
            ManifestError: If no manifest exists after ``npm init``.
            UserCancelled: If the user cancels at any prompt.
        """
        root = Path(target_dir)
        print_header("create-ps")

        manifest = await self._init_manifest(root)
        if not self.config.user_name:
            self.config.user_name = await git_user_name(root)

        name = package_name or manifest.get("name") or root.resolve().name
        description = self.prompter.text(
            "Enter a short description of the package:",
            default=manifest.get("description") or None,
        )
        manifest.apply({"name": name, "description": description})
        await manifest.persist()

        features = self.prompter.multiselect(
            "Select what you'd like to include:",
            [(f.key, f.label, "Recommended" if f.recommended else "") for f in catalog.FEATURES],
            defaults=catalog.recommended_keys(),
            required=True,
        )
        selection = Selection(
            package_name=name, description=description, features=features, esm=esm
        )

        engine = ScaffoldEngine(self.config, self.prompter, self.remote, self.command_runner)
        report = await engine.run(root, selection, manifest)
        if report.state is RunState.ABORTED:
            print_warning(report.message or "Package creation aborted.")
            return report

        await self._git_init(root)
        self._print_report(report)
        return report

    async def _init_manifest(self, root: Path) -> ManifestEditor:
        manifest = ManifestEditor(root / self.config.manifest_name)
        if not manifest.path.exists():
            cmd = [self.config.package_manager, "init", "-y"]
            with self.prompter.status(f"Running {' '.join(cmd)}..."):
                returncode, _, stderr = await self.command_runner(
                    cmd, cwd=root, timeout=self.config.command_timeout
                )
            if returncode != 0:
                print_warning(f"'{' '.join(cmd)}' failed: {escape(stderr or str(returncode))}")
        manifest.load()
        return manifest

    async def _git_init(self, root: Path) -> None:
        if (root / ".git").exists():
            return
        returncode, _, stderr = await self.command_runner(
            ["git", "init"], cwd=root, timeout=self.config.command_timeout
        )
        if returncode != 0:
            print_warning(
                f"An error occurred when initializing a Git repository: {escape(stderr or str(returncode))}"
            )

    def _print_report(self, report: ScaffoldReport) -> None:
        if report.outcomes:
            rows = {key: escape(value) for key, value in report.summary().items()}
            print_summary_table(rows, title="Scaffold report")
        if report.failed:
            names = ", ".join(o.key for o in report.failed)
            print_warning(f"The package structure was created with failures: {names}.")
        else:
            print_success(
                f"The package structure for '{escape(report.package_name)}' has been created successfully."
            )


async def run_pkg_config(
    config: Config,
    target_dir: str | Path,
    prompter: Prompter | None = None,
    command_runner: CommandRunner = run_command,
) -> bool:
    """Run the ``pkg-config`` flow against ``<target_dir>/package.json``."""
    root = Path(target_dir)
    print_header("create-ps pkg-config")
    manifest = ManifestEditor(root / config.manifest_name)
    manifest.load()
    if not config.user_name:
        config.user_name = await git_user_name(root)
    updater = ConfigUpdater(manifest, prompter or Prompter(), config, command_runner)
    return await updater.run()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-ps",
        description="create-ps -- create the foundations for an npm package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-ps my-package\n"
            "  create-ps my-package --esm\n"
            "  create-ps pkg-config      edit fields of an existing package.json\n"
        ),
    )
    parser.add_argument(
        "package_name",
        nargs="?",
        default=None,
        help="Package name (defaults to the manifest name or the directory name)",
    )
    modules = parser.add_mutually_exclusive_group()
    modules.add_argument("--esm", dest="esm", action="store_true", help="Use ESM files and syntax")
    modules.add_argument(
        "--cjs", dest="esm", action="store_false", help="Use CommonJS files and syntax (default)"
    )
    parser.add_argument("--dir", default=".", help="Target directory (default: current directory)")
    parser.add_argument(
        "--abort-on-conflict",
        action="store_true",
        help="Ask whether to abort, instead of which features to skip, when outputs already exist",
    )
    return parser


def build_pkg_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-ps pkg-config",
        description="Customise different fields in your package.json",
    )
    parser.add_argument("--dir", default=".", help="Directory containing package.json")
    parser.add_argument(
        "--no-confirm", action="store_true", help="Write without showing the pending changes"
    )
    parser.add_argument("--fix", action="store_true", help="Run 'npm pkg fix' afterwards")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``create-ps`` and ``python -m create_ps``."""
    args_list = list(sys.argv[1:] if argv is None else argv)
    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"Error: invalid configuration: {escape(str(exc))}")
        return 1

    try:
        if args_list and args_list[0] in PKG_CONFIG_COMMANDS:
            args = build_pkg_config_parser().parse_args(args_list[1:])
            config.confirm_changes = not args.no_confirm
            config.run_pkg_fix = args.fix
            asyncio.run(run_pkg_config(config, args.dir))
            return 0

        if args_list and args_list[0] == CREATE_COMMAND:
            args_list = args_list[1:]
        args = build_create_parser().parse_args(args_list)
        if args.abort_on_conflict:
            config.conflict_policy = ConflictPolicy.ABORT
        target = Path(args.dir)
        if not target.is_dir():
            print_error(f"Error: target directory not found: {target}")
            return 1
        report = asyncio.run(CreatePipeline(config).run(target, args.package_name, args.esm))
    except ManifestError as exc:
        print_error(f"Error: {escape(str(exc))}")
        return 1
    except (UserCancelled, KeyboardInterrupt):
        print_warning("\nOperation cancelled.")
        return 0

    return 0 if report.state in (RunState.REPORTED, RunState.ABORTED) else 1


if __name__ == "__main__":
    sys.exit(main())
