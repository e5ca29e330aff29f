"""Stand-in artifacts for import targets that were never generated.

Pages and components are rendered from the ``stubs/`` templates with an
``ArtifactBuilder`` in scope, so a stand-in declares its references exactly
like a generated artifact does. Every other file type gets the smallest
placeholder that is still valid for its format.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Container
from pathlib import PurePosixPath
from typing import Optional

from pwaforge.generator.builder import ArtifactBuilder
from pwaforge.generator.templates import TemplateRenderer
from pwaforge.graph.resolution import paired_stylesheet
from pwaforge.models import PAGES_DIR, Artifact, ArtifactKind
from pwaforge.utils import label_from_route, to_kebab, to_pascal

PAGE_STUB_TEMPLATE = "stubs/page.tsx.j2"
COMPONENT_STUB_TEMPLATE = "stubs/component.tsx.j2"
STYLESHEET_STUB_TEMPLATE = "stubs/stylesheet.css.j2"

MARKUP_STUB_SUFFIXES = frozenset({".tsx", ".jsx"})
MODULE_STUB_SUFFIXES = frozenset({".ts", ".js"})

_PLACEHOLDERS = {
    ".ts": "export {};\n",
    ".js": "export {};\n",
    ".json": "{}\n",
    ".svg": '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 1 1"></svg>\n',
}


def placeholder_content(path: str) -> str:
    """Empty-but-valid content for a non-markup file."""
    return _PLACEHOLDERS.get(PurePosixPath(path).suffix.lower(), "")


def stub_kind(path: str) -> ArtifactKind:
    suffix = PurePosixPath(path).suffix.lower()
    if suffix == ".css":
        return ArtifactKind.STYLESHEET
    if suffix == ".json":
        return ArtifactKind.CONFIG
    if suffix in MARKUP_STUB_SUFFIXES and posixpath.dirname(path).startswith(PAGES_DIR):
        return ArtifactKind.PAGE
    if suffix in MARKUP_STUB_SUFFIXES | MODULE_STUB_SUFFIXES and path.startswith("src/"):
        return ArtifactKind.COMPONENT
    return ArtifactKind.ASSET


def stub_identifier(path: str) -> str:
    """Component identifier for a stand-in (``src/pages/contact-us.tsx`` -> ``ContactUs``)."""
    pure = PurePosixPath(path)
    base = pure.parent.name if pure.stem == "index" else pure.stem
    name = re.sub(r"\W", "", to_pascal(base))
    if not name:
        return "Placeholder"
    return f"Stub{name}" if name[0].isdigit() else name


class StubSynthesizer:
    """Renders stand-ins for missing artifacts.

    Args:
        renderer: Template renderer; defaults to the bundled templates.
        business: Business name shown on stand-in pages.
    """

    def __init__(
        self,
        renderer: Optional[TemplateRenderer] = None,
        business: str = "My Business",
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.business = business

    def synthesize(self, path: str, existing: Container[str] = ()) -> list[Artifact]:
        """Stand-ins needed to make ``path`` exist.

        A page or component comes with its paired stylesheet unless that
        stylesheet is already in ``existing``.
        """
        suffix = PurePosixPath(path).suffix.lower()
        if suffix in MARKUP_STUB_SUFFIXES:
            markup = self.markup(path)
            sheet = paired_stylesheet(path)
            if sheet in existing:
                return [markup]
            return [markup, self.stylesheet(sheet, self.css_class(path))]
        if suffix == ".css":
            return [self.stylesheet(path)]
        return [Artifact(path=path, kind=stub_kind(path), content=placeholder_content(path))]

    def markup(self, path: str) -> Artifact:
        kind = stub_kind(path)
        name = stub_identifier(path)
        template = PAGE_STUB_TEMPLATE if kind == ArtifactKind.PAGE else COMPONENT_STUB_TEMPLATE
        sheet = paired_stylesheet(path)
        specifier = posixpath.relpath(sheet, posixpath.dirname(path) or ".")
        if not specifier.startswith("."):
            specifier = f"./{specifier}"

        builder = ArtifactBuilder(path, kind)
        content = self.renderer.render(
            template,
            {
                "b": builder,
                "name": name,
                "css_class": self.css_class(path),
                "title": label_from_route(f"/{to_kebab(name)}"),
                "business": self.business,
                "stylesheet": specifier,
            },
        )
        return builder.build(content)

    def stylesheet(self, path: str, css_class: str = "") -> Artifact:
        title = label_from_route(f"/{to_kebab(PurePosixPath(path).stem)}")
        content = self.renderer.render(
            STYLESHEET_STUB_TEMPLATE, {"css_class": css_class, "title": title}
        )
        return Artifact(path=path, kind=ArtifactKind.STYLESHEET, content=content)

    @staticmethod
    def css_class(path: str) -> str:
        """Root class of a stand-in: ``chat-page`` for pages, ``price-table`` otherwise."""
        base = to_kebab(stub_identifier(path))
        return f"{base}-page" if stub_kind(path) == ArtifactKind.PAGE else base
