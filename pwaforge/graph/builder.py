"""Reference graph construction.

Turns every declared reference in an artifact set into a ``ReferenceEdge``
with a resolution verdict. The pass is read-only over the artifact set and
runs from scratch on each repair iteration.
"""

from __future__ import annotations

from collections import defaultdict

from pydantic import BaseModel, Field

from pwaforge.graph.resolution import is_external, paired_stylesheet, resolve_import
from pwaforge.graph.selectors import scan_selectors
from pwaforge.models import (
    GLOBAL_STYLESHEETS,
    Artifact,
    ArtifactSet,
    ReferenceEdge,
    ReferenceKind,
)


class ReferenceGraph(BaseModel):
    """All resolved and unresolved edges of one artifact set, in source path order."""

    edges: list[ReferenceEdge] = Field(default_factory=list)

    def unresolved(self) -> list[ReferenceEdge]:
        return [e for e in self.edges if not e.resolved]

    def by_kind(self) -> dict[ReferenceKind, list[ReferenceEdge]]:
        grouped: dict[ReferenceKind, list[ReferenceEdge]] = defaultdict(list)
        for edge in self.edges:
            grouped[edge.kind].append(edge)
        return dict(grouped)

    def of_kind(self, kind: ReferenceKind) -> list[ReferenceEdge]:
        return [e for e in self.edges if e.kind == kind]

    def routes(self) -> list[ReferenceEdge]:
        return self.of_kind(ReferenceKind.ROUTE)

    def nav_links(self) -> list[ReferenceEdge]:
        return self.of_kind(ReferenceKind.NAV_LINK)

    def edges_from(self, path: str) -> list[ReferenceEdge]:
        return [e for e in self.edges if e.source == path]

    @property
    def is_closed(self) -> bool:
        """True when every edge resolves."""
        return all(e.resolved for e in self.edges)


class ReferenceGraphBuilder:
    """Resolves declared references against an artifact set."""

    def __init__(self, global_stylesheets: tuple[str, ...] = GLOBAL_STYLESHEETS) -> None:
        self.global_stylesheets = global_stylesheets

    def build(self, artifacts: ArtifactSet) -> ReferenceGraph:
        paths = set(artifacts.paths())
        selectors: dict[str, frozenset[str]] = {}

        def selectors_of(path: str) -> frozenset[str]:
            if path not in selectors:
                sheet = artifacts.get(path)
                selectors[path] = scan_selectors(sheet.content) if sheet else frozenset()
            return selectors[path]

        route_paths = self._declared(artifacts, ReferenceKind.ROUTE)
        nav_paths = self._declared(artifacts, ReferenceKind.NAV_LINK)

        edges: list[ReferenceEdge] = []
        for artifact in artifacts:
            for ref in artifact.declared_references:
                if ref.kind == ReferenceKind.IMPORT:
                    if is_external(ref.target):
                        continue
                    target, resolved = resolve_import(artifact.path, ref.target, paths)
                elif ref.kind == ReferenceKind.CLASS_BINDING:
                    target, resolved = self._bind_class(artifact, ref.target, selectors_of)
                elif ref.kind == ReferenceKind.ROUTE:
                    target, resolved = ref.target, ref.target in nav_paths
                else:
                    target, resolved = ref.target, ref.target in route_paths
                edges.append(
                    ReferenceEdge(
                        source=artifact.path,
                        target=target,
                        kind=ref.kind,
                        resolved=resolved,
                        specifier=ref.target,
                    )
                )
        return ReferenceGraph(edges=edges)

    # -- Internal helpers --------------------------------------------------

    @staticmethod
    def _declared(artifacts: ArtifactSet, kind: ReferenceKind) -> set[str]:
        return {r.target for a in artifacts for r in a.references_of(kind)}

    def _bind_class(self, artifact: Artifact, token: str, selectors_of) -> tuple[str, bool]:
        """Look the token up in the paired stylesheet, then the global ones.

        An unresolved binding targets the paired stylesheet, where a fix
        belongs.
        """
        paired = paired_stylesheet(artifact.path)
        for sheet in (paired, *self.global_stylesheets):
            if token in selectors_of(sheet):
                return sheet, True
        return paired, False
