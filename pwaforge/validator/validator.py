"""Consistency validation: reference graph + artifacts -> ordered defects.

Checks run in a fixed order: dangling imports, orphan classes, route/nav
mismatches, missing dependencies, malformed syntax. Within a check, defects
are ordered by artifact path. Syntax checks run per artifact in worker
threads and are merged back in path order.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from types import MappingProxyType

from pwaforge.graph.builder import ReferenceGraph
from pwaforge.models import (
    DEPENDENCY_MANIFEST_PATH,
    NAVIGATION_PATH,
    ROUTER_PATH,
    Artifact,
    ArtifactSet,
    Defect,
    DefectKind,
    Manifest,
    ReferenceKind,
)
from pwaforge.resolver.tables import DEFAULT_TABLES, ResolverTables
from pwaforge.validator.syntax import check_syntax

# Whether the repair engine has a strategy for each defect kind.
DEFECT_POLICY: Mapping[DefectKind, bool] = MappingProxyType({
    DefectKind.DANGLING_IMPORT: True,
    DefectKind.ORPHAN_CLASS: True,
    DefectKind.ROUTE_NAV_MISMATCH: True,
    DefectKind.MISSING_DEPENDENCY: True,
    DefectKind.MALFORMED_SYNTAX: True,
    DefectKind.REPAIR_NONCONVERGENT: False,
})


def make_defect(
    kind: DefectKind,
    artifact: str,
    detail: str,
    target: str = "",
    subject: str = "",
) -> Defect:
    return Defect(
        kind=kind,
        artifact=artifact,
        detail=detail,
        auto_fixable=DEFECT_POLICY[kind],
        target=target,
        subject=subject,
    )


class ConsistencyValidator:
    """Detects structural inconsistencies across a whole artifact set."""

    def __init__(self, tables: ResolverTables = DEFAULT_TABLES) -> None:
        self.tables = tables

    async def validate(
        self,
        artifacts: ArtifactSet,
        graph: ReferenceGraph,
        manifest: Manifest,
    ) -> list[Defect]:
        dangling = self.dangling_imports(graph)
        dangling_targets = {d.target for d in dangling}

        defects: list[Defect] = []
        defects.extend(dangling)
        defects.extend(self.orphan_classes(graph, dangling_targets))
        defects.extend(self.route_nav_mismatches(graph))
        defects.extend(self.missing_dependencies(artifacts, manifest))
        defects.extend(await self.malformed_syntax(artifacts))
        return defects

    # -- Individual checks -------------------------------------------------

    @staticmethod
    def dangling_imports(graph: ReferenceGraph) -> list[Defect]:
        return [
            make_defect(
                DefectKind.DANGLING_IMPORT,
                artifact=edge.source,
                detail=f"Import '{edge.specifier}' does not resolve; expected {edge.target}",
                target=edge.target,
                subject=edge.specifier,
            )
            for edge in graph.of_kind(ReferenceKind.IMPORT)
            if not edge.resolved
        ]

    @staticmethod
    def orphan_classes(graph: ReferenceGraph, dangling_targets: set[str]) -> list[Defect]:
        """Unbound class tokens, except where the paired stylesheet itself is missing."""
        return [
            make_defect(
                DefectKind.ORPHAN_CLASS,
                artifact=edge.source,
                detail=f"Class '{edge.specifier}' has no matching selector in {edge.target} "
                "or the global stylesheets",
                target=edge.target,
                subject=edge.specifier,
            )
            for edge in graph.of_kind(ReferenceKind.CLASS_BINDING)
            if not edge.resolved and edge.target not in dangling_targets
        ]

    @staticmethod
    def route_nav_mismatches(graph: ReferenceGraph) -> list[Defect]:
        defects: list[Defect] = []
        for edge in graph.edges:
            if edge.resolved:
                continue
            if edge.kind == ReferenceKind.ROUTE:
                defects.append(
                    make_defect(
                        DefectKind.ROUTE_NAV_MISMATCH,
                        artifact=edge.source,
                        detail=f"Route '{edge.target}' has no navigation entry",
                        target=NAVIGATION_PATH,
                        subject=edge.target,
                    )
                )
            elif edge.kind == ReferenceKind.NAV_LINK:
                defects.append(
                    make_defect(
                        DefectKind.ROUTE_NAV_MISMATCH,
                        artifact=edge.source,
                        detail=f"Navigation link '{edge.target}' has no route",
                        target=ROUTER_PATH,
                        subject=edge.target,
                    )
                )
        return defects

    def missing_dependencies(self, artifacts: ArtifactSet, manifest: Manifest) -> list[Defect]:
        """Packages the selected features need that ``package.json`` does not declare.

        An unparseable ``package.json`` is left to the syntax check.
        """
        required = self.tables.required_dependencies(manifest.features)
        package = artifacts.get(DEPENDENCY_MANIFEST_PATH)
        declared: set[str] = set()
        if package is not None:
            try:
                data = json.loads(package.content)
            except json.JSONDecodeError:
                return []
            if not isinstance(data, dict):
                return []
            for section in ("dependencies", "devDependencies", "peerDependencies"):
                block = data.get(section)
                if isinstance(block, dict):
                    declared.update(block)

        where = "is missing" if package is None else "does not declare it"
        return [
            make_defect(
                DefectKind.MISSING_DEPENDENCY,
                artifact=DEPENDENCY_MANIFEST_PATH,
                detail=f"Package '{name}' is required but {DEPENDENCY_MANIFEST_PATH} {where}",
                target=DEPENDENCY_MANIFEST_PATH,
                subject=name,
            )
            for name in required
            if name not in declared
        ]

    async def malformed_syntax(self, artifacts: ArtifactSet) -> list[Defect]:
        ordered = artifacts.ordered()
        results = await asyncio.gather(
            *(asyncio.to_thread(self._syntax_defects, artifact) for artifact in ordered)
        )
        return [defect for per_artifact in results for defect in per_artifact]

    @staticmethod
    def _syntax_defects(artifact: Artifact) -> list[Defect]:
        return [
            make_defect(
                DefectKind.MALFORMED_SYNTAX,
                artifact=artifact.path,
                detail=f"{issue.message} (line {issue.line})",
                target=artifact.path,
                subject=issue.code,
            )
            for issue in check_syntax(artifact.path, artifact.content)
        ]
