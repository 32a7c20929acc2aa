"""Dependency specifiers: parsing, registry validation and entry-file imports.

The validation loop is a small retry state machine::

    COLLECTING -> VALIDATING -> ALL_VALID (done)
                             -> SOME_INVALID -> COLLECTING (invalid subset only)

A cancelled prompt raises ``UserCancelled`` from any state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel
from rich.markup import escape

from ..utils import console, split_comma_list, to_camel_case

if TYPE_CHECKING:
    from ..prompts import Prompter
    from ..remote import RemoteClient


class DependencySpecifier(BaseModel):
    """A package name with an optional version constraint."""

    name: str
    version: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, text: str) -> "DependencySpecifier":
        """Parse ``name``, ``name@version``, ``@scope/name`` or ``@scope/name@version``."""
        text = text.strip()
        # The first "@" of a scoped name is part of the name.
        at = text.find("@", 1 if text.startswith("@") else 0)
        if at == -1:
            return cls(name=text)
        name, version = text[:at], text[at + 1 :].strip()
        return cls(name=name, version=version or None)

    @property
    def binding(self) -> str:
        """Identifier used in the generated import statement.

        Scope and version are stripped and the rest camel-cased
        (``@scope/left-pad@1.0`` -> ``leftPad``).
        """
        return to_camel_case(self.name.rsplit("/", 1)[-1])

    def __str__(self) -> str:
        return f"{self.name}@{self.version}" if self.version else self.name


def parse_specifiers(text: str | None) -> list[DependencySpecifier]:
    """Split comma-separated input into specifiers, dropping blanks and duplicates."""
    result: list[DependencySpecifier] = []
    for item in split_comma_list(text):
        spec = DependencySpecifier.parse(item)
        if spec.name and spec not in result:
            result.append(spec)
    return result


async def partition_specifiers(
    specs: list[DependencySpecifier], remote: RemoteClient
) -> tuple[list[DependencySpecifier], list[DependencySpecifier]]:
    """Validate each specifier in turn; returns ``(valid, invalid)``."""
    valid: list[DependencySpecifier] = []
    invalid: list[DependencySpecifier] = []
    for spec in specs:
        if await remote.validate_dependency(spec.name, spec.version):
            valid.append(spec)
        else:
            invalid.append(spec)
    return valid, invalid


async def collect_dependencies(
    prompter: Prompter, remote: RemoteClient
) -> list[DependencySpecifier]:
    """Ask for dependencies until every entered specifier exists on the registry.

    Only the invalid subset is asked for again. An empty answer to a
    re-prompt removes the remaining invalid specifiers. Specifiers that
    failed validation are never returned.
    """
    answer = prompter.text("Enter the dependencies to install (comma-separated):")
    pending = parse_specifiers(answer)
    accepted: list[DependencySpecifier] = []

    while pending:
        with prompter.status("Checking the registry..."):
            valid, invalid = await partition_specifiers(pending, remote)
        accepted.extend(s for s in valid if s not in accepted)
        if not invalid:
            break

        names = ", ".join(str(s) for s in invalid)
        console.print(f"[yellow]Not found on the registry: {escape(names)}[/yellow]")
        answer = prompter.text(
            f"Re-enter {names} (comma-separated, leave blank to drop):"
        )
        pending = parse_specifiers(answer)

    return accepted


def import_statements(specs: list[DependencySpecifier], esm: bool) -> str:
    """Render one import (ESM) or require (CommonJS) line per dependency.

    The binding name is a guess derived from the package name; packages
    whose export does not match it need the line edited by hand.
    """
    lines = []
    for spec in specs:
        if esm:
            lines.append(f"import {spec.binding} from '{spec.name}';")
        else:
            lines.append(f"const {spec.binding} = require('{spec.name}');")
    return "\n".join(lines) + "\n" if lines else ""
