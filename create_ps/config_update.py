"""Interactive editing of metadata fields in an existing ``package.json``.

Collects one value per selected field, validates URL-shaped answers, shows
the pending changes for confirmation and writes them through the
:class:`ManifestEditor`. Optionally runs ``npm pkg fix`` afterwards.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, ValidationError
from rich.markup import escape
from rich.table import Table

from .config import Config
from .manifest import ManifestEditor
from .prompts import Prompter
from .utils import console, print_success, print_warning, run_command, split_comma_list

FIELDS: tuple[tuple[str, str], ...] = (
    ("author", "Author"),
    ("repository", "Repository"),
    ("keywords", "Keywords"),
    ("homepage", "Homepage"),
    ("funding", "Funding"),
    ("license", "License"),
    ("bugs", "Bugs (URL or e-mail)"),
)

DEFAULT_FUNDING_TYPE = "individual"

_url_adapter = TypeAdapter(AnyUrl)
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_url(value: str) -> bool:
    """Return ``True`` for an absolute URL with a scheme and a host."""
    try:
        url = _url_adapter.validate_python(value.strip())
    except ValidationError:
        return False
    return bool(url.host)


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value.strip()))


def _url_validator(value: str) -> str | None:
    if is_valid_url(value):
        return None
    return f"'{value}' is not a valid URL (e.g. https://example.com)."


def _bugs_validator(value: str) -> str | None:
    if is_valid_url(value) or is_valid_email(value):
        return None
    return f"'{value}' is neither a URL nor an e-mail address."


class Funding(BaseModel):
    """The ``funding`` manifest field."""

    type: str = Field(default=DEFAULT_FUNDING_TYPE)
    url: str


class ConfigUpdater:
    """Drives the ``pkg-config`` command against one manifest."""

    def __init__(
        self,
        manifest: ManifestEditor,
        prompter: Prompter,
        config: Config | None = None,
        command_runner=run_command,
    ) -> None:
        self.manifest = manifest
        self.prompter = prompter
        self.config = config or Config()
        self.command_runner = command_runner

    # -- Public API --------------------------------------------------------

    def select_fields(self) -> list[str]:
        """Ask which manifest fields to edit."""
        return self.prompter.multiselect(
            "Select the package.json fields to update:",
            [(key, label, "") for key, label in FIELDS],
            required=True,
        )

    def collect(self, fields: list[str]) -> dict[str, Any]:
        """Ask for a value for each selected field, in catalog order."""
        collectors = {
            "author": self._ask_author,
            "repository": self._ask_repository,
            "keywords": self._ask_keywords,
            "homepage": self._ask_homepage,
            "funding": self._ask_funding,
            "license": self._ask_license,
            "bugs": self._ask_bugs,
        }
        changes: dict[str, Any] = {}
        for key, _ in FIELDS:
            if key in fields:
                changes[key] = collectors[key]()
        return changes

    async def run(self, fields: list[str] | None = None) -> bool:
        """Collect, confirm and persist the changes.

        Returns:
            ``True`` if the manifest was written, ``False`` when there was
            nothing to write or the user declined.

        Raises:
            ManifestError: If the manifest cannot be loaded or written.
            UserCancelled: If the user cancels at any prompt.
        """
        if not self.manifest.loaded:
            self.manifest.load()
        if fields is None:
            fields = self.select_fields()

        changes = self.collect(fields)
        if not changes:
            print_warning("No fields selected; package.json was not changed.")
            return False

        if self.config.confirm_changes:
            self._render_changes(changes)
            if not self.prompter.confirm("Write these changes to package.json?", default=True):
                print_warning("No changes were written.")
                return False

        self.manifest.apply(changes)
        await self.manifest.persist()
        print_success(f"Updated {self.manifest.path.name} successfully.")

        if self.config.run_pkg_fix:
            await self._pkg_fix()
        return True

    # -- Field collectors ----------------------------------------------------

    def _ask_author(self) -> str:
        current = _person_string(self.manifest.get("author"))
        return self.prompter.text(
            "Enter the author of this package:",
            default=current or self.config.user_name or None,
        )

    def _ask_repository(self) -> str:
        current = self.manifest.get("repository")
        if isinstance(current, dict):
            current = current.get("url")
        return self.prompter.text(
            "Enter the repository URL:", default=current or None, validator=_url_validator
        )

    def _ask_keywords(self) -> list[str]:
        current = self.manifest.get("keywords") or []
        answer = self.prompter.text(
            "Enter some keywords (comma-separated):",
            default=", ".join(current) if current else None,
        )
        return split_comma_list(answer)

    def _ask_homepage(self) -> str:
        return self.prompter.text(
            "Enter the homepage URL:",
            default=self.manifest.get("homepage") or None,
            validator=_url_validator,
        )

    def _ask_funding(self) -> dict[str, str]:
        funding_type = self.prompter.text(
            "Enter the funding type (e.g. individual, patreon, opencollective):"
        )
        if not funding_type:
            print_warning(f"No funding type given; using '{DEFAULT_FUNDING_TYPE}'.")
            funding_type = DEFAULT_FUNDING_TYPE
        url = self.prompter.text("Enter the funding URL:", validator=_url_validator)
        return Funding(type=funding_type, url=url).model_dump()

    def _ask_license(self) -> str:
        current = self.manifest.get("license")
        if isinstance(current, dict):
            current = current.get("type")
        return self.prompter.text(
            "Enter the license identifier (e.g. MIT):",
            default=current or None,
        )

    def _ask_bugs(self) -> dict[str, str]:
        answer = self.prompter.text(
            "Enter a URL or e-mail address for bug reports:", validator=_bugs_validator
        )
        if is_valid_url(answer):
            return {"url": answer}
        return {"email": answer}

    # -- Helpers -----------------------------------------------------------

    def _render_changes(self, changes: dict[str, Any]) -> None:
        table = Table(title="Pending package.json changes", header_style="bold cyan")
        table.add_column("Field", style="dim", no_wrap=True)
        table.add_column("Current")
        table.add_column("New")
        for key, value in changes.items():
            table.add_row(key, escape(_display(self.manifest.get(key))), escape(_display(value)))
        console.print(table)

    async def _pkg_fix(self) -> None:
        cmd = [self.config.package_manager, "pkg", "fix"]
        returncode, _, stderr = await self.command_runner(
            cmd, cwd=self.manifest.path.parent, timeout=self.config.command_timeout
        )
        if returncode != 0:
            print_warning(f"'{' '.join(cmd)}' failed: {escape(stderr or f'exit code {returncode}')}")


def _person_string(value: Any) -> str:
    """Flatten an npm person object to ``"name <email> (url)"``."""
    if not isinstance(value, dict):
        return value if isinstance(value, str) else ""
    text = value.get("name", "")
    if value.get("email"):
        text += f" <{value['email']}>"
    if value.get("url"):
        text += f" ({value['url']})"
    return text.strip()


def _display(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return ", ".join(f"{k}: {v}" for k, v in value.items())
    return str(value)
