"""Shared pytest fixtures for the create-ps test suite.

Provides reusable fixtures for:
- Temporary package directories with a ``package.json``
- A scripted prompter that replays canned answers
- A fake remote (templates, licenses, registry) and a fake command runner
- A ready-made ``ScaffoldEngine`` wired to the fakes
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any

import pytest

from create_ps.config import Config, RemoteConfig
from create_ps.manifest import ManifestEditor
from create_ps.prompts import UserCancelled
from create_ps.remote import LicenseDetail, LicenseSummary, RemoteError
from create_ps.scaffolder.engine import ScaffoldEngine

CANCEL = object()
"""Answer that makes the scripted prompter raise ``UserCancelled``."""

FIXED_DATE = date(2024, 5, 17)

MIT_BODY = (
    "MIT License\n\n"
    "Copyright (c) [year] [fullname]\n\n"
    "Permission is hereby granted, free of charge, to any person obtaining a copy\n"
)


# ---------------------------------------------------------------------------
# Scripted collaborators
# ---------------------------------------------------------------------------


class ScriptedPrompter:
    """Replays canned answers per prompt kind and records every question."""

    def __init__(
        self,
        text: list[Any] | None = None,
        select: list[Any] | None = None,
        multiselect: list[Any] | None = None,
        confirm: list[Any] | None = None,
    ) -> None:
        self.answers: dict[str, list[Any]] = {
            "text": list(text or []),
            "select": list(select or []),
            "multiselect": list(multiselect or []),
            "confirm": list(confirm or []),
        }
        self.asked: list[tuple[str, str]] = []
        self.rejected: list[str] = []
        self.options: dict[str, list[tuple[str, str, str]]] = {}

    def _next(self, kind: str, message: str) -> Any:
        self.asked.append((kind, message))
        if not self.answers[kind]:
            raise AssertionError(f"Unexpected {kind} prompt: {message}")
        answer = self.answers[kind].pop(0)
        if answer is CANCEL:
            raise UserCancelled()
        return answer

    def text(self, message, default=None, validator=None) -> str:
        while True:
            answer = self._next("text", message)
            if answer == "" and default is not None:
                answer = default
            if validator is None or validator(answer) is None:
                return answer
            self.rejected.append(answer)

    def select(self, message, options) -> str:
        self.options[message] = list(options)
        return self._next("select", message)

    def multiselect(self, message, options, defaults=(), required=False) -> list[str]:
        self.options[message] = list(options)
        answer = self._next("multiselect", message)
        return list(defaults) if answer is None else answer

    def confirm(self, message, default=True) -> bool:
        return self._next("confirm", message)

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        yield

    def messages(self, kind: str) -> list[str]:
        return [m for k, m in self.asked if k == kind]


class FakeRemote:
    """In-memory stand-in for ``RemoteClient``."""

    def __init__(
        self,
        texts: dict[str, str] | None = None,
        licenses: dict[str, tuple[str, str]] | None = None,
        packages: set[str] | None = None,
        fail_licenses: bool = False,
    ) -> None:
        self.texts = texts or {}
        self.licenses = licenses if licenses is not None else {"mit": ("MIT License", MIT_BODY)}
        self.packages = packages if packages is not None else {"left-pad", "chalk"}
        self.fail_licenses = fail_licenses
        self.validated: list[tuple[str, str | None]] = []

    async def fetch_text(self, url: str) -> str:
        if url not in self.texts:
            raise RemoteError(f"{url} returned HTTP 404")
        return self.texts[url]

    async def fetch_license_catalog(self) -> list[LicenseSummary]:
        if self.fail_licenses:
            raise RemoteError("Cannot connect to https://api.github.com/licenses")
        return [LicenseSummary(key=k, name=name) for k, (name, _) in self.licenses.items()]

    async def fetch_license(self, key: str) -> LicenseDetail:
        name, body = self.licenses[key]
        return LicenseDetail(key=key, name=name, body=body)

    async def validate_dependency(self, name: str, version: str | None = None) -> bool:
        self.validated.append((name, version))
        return name in self.packages


class FakeCommandRunner:
    """Records commands; returns ``(returncode, stdout, stderr)`` per program."""

    def __init__(self, results: dict[str, tuple[int, str, str]] | None = None) -> None:
        self.results = results or {}
        self.calls: list[tuple[list[str], Path | None]] = []

    async def __call__(self, cmd, cwd=None, timeout=120, **kwargs) -> tuple[int, str, str]:
        cmd = list(cmd)
        self.calls.append((cmd, Path(cwd) if cwd else None))
        key = " ".join(cmd[:2])
        if key in self.results:
            return self.results[key]
        return self.results.get(cmd[0], (0, "", ""))

    def commands(self) -> list[str]:
        return [" ".join(cmd) for cmd, _ in self.calls]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary package directory containing an ``npm init -y`` style manifest."""
    project_dir = tmp_path / "foo"
    project_dir.mkdir()
    manifest = {
        "name": "foo",
        "version": "1.0.0",
        "description": "",
        "main": "index.js",
        "scripts": {"test": 'echo "Error: no test specified" && exit 1'},
        "keywords": [],
        "author": "",
        "license": "ISC",
    }
    (project_dir / "package.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    yield project_dir


@pytest.fixture
def manifest(tmp_project_dir: Path) -> ManifestEditor:
    editor = ManifestEditor(tmp_project_dir / "package.json")
    editor.load()
    return editor


@pytest.fixture
def config() -> Config:
    return Config(
        remote=RemoteConfig(
            gitignore_url="https://templates.test/Node.gitignore",
            code_of_conduct_url="https://templates.test/coc.md",
        ),
        user_name="Jane Doe",
    )


@pytest.fixture
def fake_remote(config: Config) -> FakeRemote:
    return FakeRemote(
        texts={
            config.remote.gitignore_url: "node_modules/\n",
            config.remote.code_of_conduct_url: "# [INSERT PROJECT NAME] Code of Conduct\n",
        }
    )


@pytest.fixture
def make_remote():
    """Factory for ``FakeRemote`` instances."""
    return FakeRemote


@pytest.fixture
def cancel_answer():
    """Scripted answer that cancels the prompt it is given to."""
    return CANCEL


@pytest.fixture
def command_runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def make_prompter():
    """Factory for ``ScriptedPrompter`` instances."""
    return ScriptedPrompter


@pytest.fixture
def make_engine(config: Config, fake_remote: FakeRemote, command_runner: FakeCommandRunner):
    """Factory building a ``ScaffoldEngine`` around a given prompter."""

    def _make(prompter: ScriptedPrompter, remote: FakeRemote | None = None) -> ScaffoldEngine:
        return ScaffoldEngine(
            config,
            prompter,
            remote or fake_remote,
            command_runner=command_runner,
            today=FIXED_DATE,
        )

    return _make
