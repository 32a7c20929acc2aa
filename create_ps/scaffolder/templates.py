"""Jinja2 template rendering for the static scaffold files.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``create_ps/scaffolder/templates/`` directory and renders them with
package-specific context data.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from ..utils import to_camel_case, write_text_file

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Renders Jinja2 templates for package scaffolding.

    Templates are ``.j2`` files under a configurable template directory and
    are rendered with a context dictionary holding the package metadata
    (name, description, module system, resolved license, ...).
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["camel_case"] = to_camel_case

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"README.md.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically and an existing file is
        overwritten.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(write_text_file, out, content)
        return out
