"""Reads, patches and writes the package manifest (``package.json``).

The editor is the only component that writes the manifest during a run.
Patches are applied in memory and flushed with :meth:`ManifestEditor.persist`;
callers that need a later step to see a change on disk must persist first.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from .utils import dump_json, write_text_file


class ManifestError(OSError):
    """Raised when the manifest cannot be read, parsed or written."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class ManifestEditor:
    """In-memory view of a ``package.json`` with explicit load/persist."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] | None = None

    @property
    def data(self) -> dict[str, Any]:
        """The loaded manifest; loads lazily on first access."""
        if self._data is None:
            return self.load()
        return self._data

    @property
    def loaded(self) -> bool:
        return self._data is not None

    def load(self) -> dict[str, Any]:
        """Read the manifest from disk, replacing any in-memory state.

        Raises:
            ManifestError: If the file is missing, unreadable, not valid JSON
                or not a JSON object.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ManifestError(self.path, "file not found") from exc
        except OSError as exc:
            raise ManifestError(self.path, f"cannot read file ({exc.strerror or exc})") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ManifestError(
                self.path, f"malformed JSON at line {exc.lineno} column {exc.colno}"
            ) from exc
        if not isinstance(data, dict):
            raise ManifestError(self.path, "expected a JSON object at the top level")

        self._data = data
        return data

    def get(self, field: str, default: Any = None) -> Any:
        return self.data.get(field, default)

    def apply(self, patch: dict[str, Any]) -> dict[str, Any]:
        """Shallow-merge *patch* into the manifest.

        Later patches for the same field overwrite earlier ones. A ``None``
        value removes the field.
        """
        data = self.data
        for field, value in patch.items():
            if value is None:
                data.pop(field, None)
            else:
                data[field] = value
        return data

    def set_entry_point(self, esm: bool, filename: str, directory: str = "src") -> dict[str, Any]:
        """Point the manifest at the generated entry file.

        ESM packages get an ``exports`` map and ``"type": "module"``; CommonJS
        packages get ``main`` and ``"type": "commonjs"``. The other entry
        field is always removed so exactly one of them is present.
        """
        entry = f"./{directory}/{filename}"
        if esm:
            patch: dict[str, Any] = {"main": None, "exports": {".": entry}, "type": "module"}
        else:
            patch = {"exports": None, "main": entry, "type": "commonjs"}
        return self.apply(patch)

    async def persist(self) -> Path:
        """Write the manifest back with 2-space indentation.

        Raises:
            ManifestError: If the file cannot be written.
        """
        content = dump_json(self.data)
        try:
            await asyncio.to_thread(write_text_file, self.path, content)
        except OSError as exc:
            raise ManifestError(self.path, f"cannot write file ({exc.strerror or exc})") from exc
        return self.path
