"""Artifact builder handed to templates as ``b``.

Every helper returns the text to emit and records the reference that text
creates on the artifact under construction, so an artifact's reference list
is complete the moment its content is rendered::

    {{ b.import_default("ContactForm", "../components/ContactForm") }}
    <section {{ b.cls("page-content", "contact-page") }}>
"""

from __future__ import annotations

from collections.abc import Iterable

from pwaforge.generator.templates import jsx_text
from pwaforge.models import Artifact, ArtifactKind, ReferenceKind


class ArtifactBuilder:
    """Accumulates references for one artifact while its template renders."""

    def __init__(self, path: str, kind: ArtifactKind) -> None:
        self.artifact = Artifact(path=path, kind=kind)

    @classmethod
    def patching(cls, artifact: Artifact) -> "ArtifactBuilder":
        """A builder that records onto an existing artifact, for in-place edits."""
        builder = cls(artifact.path, artifact.kind)
        builder.artifact = artifact
        return builder

    @property
    def path(self) -> str:
        return self.artifact.path

    # -- Imports -----------------------------------------------------------

    def import_default(self, name: str, specifier: str) -> str:
        self.artifact.add_reference(specifier, ReferenceKind.IMPORT)
        return f"import {name} from '{specifier}';"

    def import_named(self, names: Iterable[str], specifier: str) -> str:
        self.artifact.add_reference(specifier, ReferenceKind.IMPORT)
        return f"import {{ {', '.join(names)} }} from '{specifier}';"

    def side_effect(self, specifier: str) -> str:
        """A bare ``import './x.css';`` statement."""
        self.artifact.add_reference(specifier, ReferenceKind.IMPORT)
        return f"import '{specifier}';"

    def asset(self, specifier: str) -> str:
        """A file referenced by URL (script src, manifest link, service worker)."""
        self.artifact.add_reference(specifier, ReferenceKind.IMPORT)
        return specifier

    # -- Styling -----------------------------------------------------------

    def cls(self, *tokens: str) -> str:
        """A ``className`` attribute binding every token to a style rule."""
        names = [t for t in tokens if t]
        for token in names:
            self.artifact.add_reference(token, ReferenceKind.CLASS_BINDING)
        return f'className="{" ".join(names)}"'

    # -- Routing -----------------------------------------------------------

    def route(self, path: str, component: str) -> str:
        self.artifact.add_reference(path, ReferenceKind.ROUTE)
        return f'<Route path="{path}" element={{<{component} />}} />'

    def fallback_route(self, component: str) -> str:
        """The catch-all route; it has no navigation counterpart."""
        return f'<Route path="*" element={{<{component} />}} />'

    def nav(self, path: str, label: str, *classes: str) -> str:
        """A ``<Link>`` to an in-app route."""
        self.artifact.add_reference(path, ReferenceKind.NAV_LINK)
        class_attr = self.cls(*(classes or ("nav-link",)))
        return f'<Link to="{path}" {class_attr}>{jsx_text(label)}</Link>'

    # -- Finalisation ------------------------------------------------------

    def build(self, content: str) -> Artifact:
        self.artifact.content = content
        return self.artifact
