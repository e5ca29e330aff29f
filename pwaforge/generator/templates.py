"""Jinja2 template rendering for generated project files.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``pwaforge/generator/templates/`` directory. Templates receive an
``ArtifactBuilder`` as ``b``; helper calls on it emit markup and record the
matching cross-artifact reference in the same step.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from pwaforge.utils import slugify, to_pascal


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project files.

    The renderer discovers ``.j2`` template files under a configurable
    template directory. Output is plain text; escaping of business copy is
    explicit through the ``jsx_text`` and ``js_string`` filters.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([], default_for_string=False),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["slugify"] = slugify
        self.env.filters["pascal_case"] = to_pascal
        self.env.filters["jsx_text"] = jsx_text
        self.env.filters["js_string"] = js_string
        self.env.filters["css_text"] = css_text

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"pages/home.tsx.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    async def render_async(self, template_path: str, context: dict[str, Any]) -> str:
        """Render in a worker thread so concurrent builds do not block the loop."""
        return await asyncio.to_thread(self.render, template_path, context)

    # -- Utility -----------------------------------------------------------

    def has_template(self, template_path: str) -> bool:
        return (self.template_dir / template_path).is_file()

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

_JSX_ENTITIES = {
    "&": "&amp;",
    "{": "&#123;",
    "}": "&#125;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "/": "&#47;",
}


def jsx_text(value: Any) -> str:
    """Escape copy for use as JSX text content.

    Braces, angle brackets, quotes and slashes become HTML entities so copy
    can never open an expression, a tag, a string or a comment.
    """
    return "".join(_JSX_ENTITIES.get(ch, ch) for ch in str(value))


def js_string(value: Any) -> str:
    """Render a value as a double-quoted JS string literal without braces or tags."""
    encoded = json.dumps(str(value), ensure_ascii=False)
    return (
        encoded.replace("{", "\\u007b")
        .replace("}", "\\u007d")
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
    )


def css_text(value: Any) -> str:
    """Strip characters that would break out of a CSS comment or block."""
    return "".join(ch for ch in str(value) if ch not in "{}*/\\\"'")
