"""Deterministic repair strategies, one per defect kind.

Each strategy names the artifact paths it may write (so the engine can lock
them), re-checks whether its fix is still needed, and either edits the
artifact set and returns a ``FixRecord`` or returns ``None``. Strategies
are pure text transforms over the set; nothing here does I/O.
"""

from __future__ import annotations

import json
import posixpath
import re
from collections.abc import Mapping
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Optional

from pwaforge.generator.builder import ArtifactBuilder
from pwaforge.graph.resolution import paired_stylesheet, resolve_import
from pwaforge.graph.selectors import scan_selectors, selector_rule
from pwaforge.models import (
    DEPENDENCY_MANIFEST_PATH,
    NAVIGATION_PATH,
    ROUTER_PATH,
    Artifact,
    ArtifactKind,
    ArtifactSet,
    Defect,
    DefectKind,
    FixOutcome,
    FixRecord,
    ReferenceKind,
)
from pwaforge.repair.stubs import MARKUP_STUB_SUFFIXES, StubSynthesizer
from pwaforge.resolver.tables import DEFAULT_TABLES, ResolverTables
from pwaforge.utils import component_name_from_route, label_from_route
from pwaforge.validator.syntax import (
    INVALID_JSON,
    SCRIPT_SUFFIXES,
    UNBALANCED_DELIMITER,
    UNQUOTED_ATTRIBUTE,
    brace_balance,
    close_delimiters,
    find_unquoted_attributes,
    json_error,
    quote_attributes,
    remove_unmatched_closers,
    repair_json,
)

STRATEGY_CONFIDENCE: Mapping[str, float] = MappingProxyType({
    "synthesized-stub": 0.6,
    "appended-selector": 0.9,
    "pinned-dependency": 0.95,
    "quoted-attribute": 0.95,
    "closed-delimiter": 0.6,
    "removed-delimiter": 0.6,
    "repaired-json": 0.9,
    "added-nav-entry": 0.9,
    "added-route": 0.9,
})

_IMPORT_STATEMENT = re.compile(r"^import\b[^;]*;[ \t]*$", re.MULTILINE)
_LEADING_SPACE = re.compile(r"^[ \t]*")


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def insert_import(content: str, statement: str) -> str:
    """Insert ``statement`` after the last import, or at the top of the file."""
    last = None
    for last in _IMPORT_STATEMENT.finditer(content):
        pass
    if last is None:
        return f"{statement}\n{content}"
    return f"{content[: last.end()]}\n{statement}{content[last.end():]}"


def append_block(content: str, block: str) -> str:
    if not content:
        return block
    separator = "\n" if content.endswith("\n") else "\n\n"
    return f"{content}{separator}{block}"


def relative_specifier(source_path: str, target_path: str) -> str:
    specifier = posixpath.relpath(target_path, posixpath.dirname(source_path) or ".")
    return specifier if specifier.startswith(".") else f"./{specifier}"


def _indent_of(line: str) -> str:
    return _LEADING_SPACE.match(line).group(0)


def _last_line_index(lines: list[str], needle: str) -> Optional[int]:
    for index in range(len(lines) - 1, -1, -1):
        if needle in lines[index]:
            return index
    return None


def _first_line_index(lines: list[str], needle: str) -> Optional[int]:
    for index, line in enumerate(lines):
        if needle in line:
            return index
    return None


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

class RepairContext:
    """What strategies read and write during one repair pass."""

    def __init__(
        self,
        artifacts: ArtifactSet,
        stubs: Optional[StubSynthesizer] = None,
        tables: ResolverTables = DEFAULT_TABLES,
        package_name: str = "my-pwa-app",
    ) -> None:
        self.artifacts = artifacts
        self.stubs = stubs or StubSynthesizer()
        self.tables = tables
        self.package_name = package_name


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class RepairStrategy:
    """Base class: subclasses set ``name`` and implement ``apply``."""

    name: str = ""
    outcome: FixOutcome = FixOutcome.PATCHED

    def paths(self, defect: Defect) -> tuple[str, ...]:
        """Artifact paths this strategy may write for ``defect``."""
        return (defect.target or defect.artifact,)

    def apply(self, defect: Defect, context: RepairContext) -> Optional[FixRecord]:
        raise NotImplementedError

    def record(self, defect: Defect, paths: list[str], strategy: str = "") -> FixRecord:
        name = strategy or self.name
        return FixRecord(
            defect=defect,
            strategy=name,
            result_artifacts=list(dict.fromkeys(paths)),
            confidence=STRATEGY_CONFIDENCE.get(name, 0.5),
            outcome=self.outcome,
        )


class SynthesizedStub(RepairStrategy):
    """Create a stand-in at the exact path a dangling import expects."""

    name = "synthesized-stub"
    outcome = FixOutcome.SYNTHESIZED_STAND_IN

    def paths(self, defect: Defect) -> tuple[str, ...]:
        if PurePosixPath(defect.target).suffix.lower() in MARKUP_STUB_SUFFIXES:
            return (defect.target, paired_stylesheet(defect.target))
        return (defect.target,)

    def apply(self, defect: Defect, context: RepairContext) -> Optional[FixRecord]:
        artifacts = context.artifacts
        if not defect.target or defect.target in artifacts:
            return None
        created = context.stubs.synthesize(defect.target, artifacts)
        for artifact in created:
            artifacts.add(artifact)
        return self.record(defect, [a.path for a in created])


class AppendedSelector(RepairStrategy):
    """Append a minimal rule for an unbound class to the paired stylesheet.

    When the stylesheet does not exist it is created and imported from the
    artifact that uses the class.
    """

    name = "appended-selector"

    def paths(self, defect: Defect) -> tuple[str, ...]:
        return (defect.target, defect.artifact)

    def apply(self, defect: Defect, context: RepairContext) -> Optional[FixRecord]:
        artifacts = context.artifacts
        token = defect.subject
        sheet = artifacts.get(defect.target)
        if sheet is not None:
            if token in scan_selectors(sheet.content):
                return None
            sheet.content = append_block(sheet.content, selector_rule(token))
            return self.record(defect, [sheet.path])

        artifacts.add(
            Artifact(path=defect.target, kind=ArtifactKind.STYLESHEET, content=selector_rule(token))
        )
        written = [defect.target]
        source = artifacts.get(defect.artifact)
        if source is not None and source.suffix in SCRIPT_SUFFIXES and not self._imports(
            source, defect.target, artifacts
        ):
            builder = ArtifactBuilder.patching(source)
            statement = builder.side_effect(relative_specifier(source.path, defect.target))
            source.content = insert_import(source.content, statement)
            written.append(source.path)
        return self.record(defect, written)

    @staticmethod
    def _imports(source: Artifact, target: str, artifacts: ArtifactSet) -> bool:
        paths = set(artifacts.paths())
        return any(
            resolve_import(source.path, ref.target, paths)[0] == target
            for ref in source.references_of(ReferenceKind.IMPORT)
        )


class PinnedDependency(RepairStrategy):
    """Declare a required package at its pinned default version."""

    name = "pinned-dependency"

    def paths(self, defect: Defect) -> tuple[str, ...]:
        return (DEPENDENCY_MANIFEST_PATH,)

    def apply(self, defect: Defect, context: RepairContext) -> Optional[FixRecord]:
        artifacts = context.artifacts
        package = artifacts.get(DEPENDENCY_MANIFEST_PATH)
        if package is None:
            data: dict = {
                "name": context.package_name,
                "private": True,
                "version": "0.1.0",
                "type": "module",
                "dependencies": {},
            }
            package = Artifact(path=DEPENDENCY_MANIFEST_PATH, kind=ArtifactKind.CONFIG)
            artifacts.add(package)
        else:
            try:
                data = json.loads(package.content)
            except json.JSONDecodeError:
                return None
            if not isinstance(data, dict):
                return None

        name = defect.subject
        sections = [data.get(key) for key in ("dependencies", "devDependencies", "peerDependencies")]
        if any(isinstance(block, dict) and name in block for block in sections):
            return None
        dependencies = data.setdefault("dependencies", {})
        if not isinstance(dependencies, dict):
            return None
        dependencies[name] = context.tables.pinned_version(name)
        data["dependencies"] = dict(sorted(dependencies.items()))
        package.content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        return self.record(defect, [DEPENDENCY_MANIFEST_PATH])


class SyntaxRepair(RepairStrategy):
    """Targeted transforms for the issues the syntax check reports."""

    name = "malformed-syntax"

    def paths(self, defect: Defect) -> tuple[str, ...]:
        return (defect.artifact,)

    def apply(self, defect: Defect, context: RepairContext) -> Optional[FixRecord]:
        artifact = context.artifacts.get(defect.artifact)
        if artifact is None:
            return None
        content = artifact.content

        if defect.subject == UNQUOTED_ATTRIBUTE:
            spans = find_unquoted_attributes(content)
            if not spans:
                return None
            artifact.content = quote_attributes(content, spans)
            return self.record(defect, [artifact.path], "quoted-attribute")

        if defect.subject == UNBALANCED_DELIMITER:
            balance = brace_balance(content, line_comments=artifact.suffix != ".css")
            if balance.unmatched_closers:
                artifact.content = remove_unmatched_closers(content, balance.unmatched_closers)
                return self.record(defect, [artifact.path], "removed-delimiter")
            if balance.unclosed:
                artifact.content = close_delimiters(content, balance.unclosed)
                return self.record(defect, [artifact.path], "closed-delimiter")
            return None

        if defect.subject == INVALID_JSON:
            if json_error(content) is None:
                return None
            repaired = repair_json(content)
            if repaired is None:
                return None
            artifact.content = repaired
            return self.record(defect, [artifact.path], "repaired-json")
        return None


class RouteNavigationRepair(RepairStrategy):
    """Add the missing side of a route/navigation pair.

    A route with no link gets a navigation entry; a link with no route gets
    a route plus an import of the page component it renders.
    """

    name = "route-navigation"

    def paths(self, defect: Defect) -> tuple[str, ...]:
        return (defect.target,)

    def apply(self, defect: Defect, context: RepairContext) -> Optional[FixRecord]:
        if defect.target == NAVIGATION_PATH:
            return self._add_nav_entry(defect, context)
        if defect.target == ROUTER_PATH:
            return self._add_route(defect, context)
        return None

    def _add_nav_entry(self, defect: Defect, context: RepairContext) -> Optional[FixRecord]:
        nav = context.artifacts.get(NAVIGATION_PATH)
        route = defect.subject
        if nav is None or any(r.target == route for r in nav.references_of(ReferenceKind.NAV_LINK)):
            return None

        lines = nav.content.splitlines(keepends=True)
        anchor = _last_line_index(lines, 'className="nav-link"')
        if anchor is not None:
            index, indent = anchor + 1, _indent_of(lines[anchor])
        else:
            closing = _last_line_index(lines, "</ul>")
            if closing is None:
                return None
            index, indent = closing, _indent_of(lines[closing]) + "  "

        b = ArtifactBuilder.patching(nav)
        entry = f'{indent}<li {b.cls("nav-item")}>{b.nav(route, label_from_route(route))}</li>\n'
        lines.insert(index, entry)
        content = "".join(lines)
        if not re.search(r"\bLink\b[^;]*from\s+'react-router-dom'", content):
            content = insert_import(content, b.import_named(["Link"], "react-router-dom"))
        nav.content = content
        return self.record(defect, [NAVIGATION_PATH], "added-nav-entry")

    def _add_route(self, defect: Defect, context: RepairContext) -> Optional[FixRecord]:
        app = context.artifacts.get(ROUTER_PATH)
        route = defect.subject
        if app is None or any(r.target == route for r in app.references_of(ReferenceKind.ROUTE)):
            return None

        lines = app.content.splitlines(keepends=True)
        anchor = _first_line_index(lines, '<Route path="*"')
        if anchor is not None:
            index, indent = anchor, _indent_of(lines[anchor])
        else:
            closing = _last_line_index(lines, "</Routes>")
            if closing is None:
                return None
            index, indent = closing, _indent_of(lines[closing]) + "  "

        component = component_name_from_route(route)
        b = ArtifactBuilder.patching(app)
        lines.insert(index, f"{indent}{b.route(route, component)}\n")
        content = "".join(lines)
        if not re.search(rf"^import\s+{component}\b", content, re.MULTILINE):
            content = insert_import(content, b.import_default(component, f"./pages/{component}"))
        app.content = content
        return self.record(defect, [ROUTER_PATH], "added-route")


STRATEGIES: Mapping[DefectKind, RepairStrategy] = MappingProxyType({
    DefectKind.DANGLING_IMPORT: SynthesizedStub(),
    DefectKind.ORPHAN_CLASS: AppendedSelector(),
    DefectKind.ROUTE_NAV_MISMATCH: RouteNavigationRepair(),
    DefectKind.MISSING_DEPENDENCY: PinnedDependency(),
    DefectKind.MALFORMED_SYNTAX: SyntaxRepair(),
})
