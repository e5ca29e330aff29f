"""Reference graph -- resolves every declared reference across an artifact set."""

from pwaforge.graph.builder import ReferenceGraph, ReferenceGraphBuilder
from pwaforge.graph.resolution import (
    SOURCE_EXTENSIONS,
    candidate_paths,
    expected_path,
    is_external,
    paired_stylesheet,
    resolve_import,
)
from pwaforge.graph.selectors import scan_selectors, selector_rule

__all__ = [
    "ReferenceGraph",
    "ReferenceGraphBuilder",
    "SOURCE_EXTENSIONS",
    "candidate_paths",
    "expected_path",
    "is_external",
    "paired_stylesheet",
    "resolve_import",
    "scan_selectors",
    "selector_rule",
]
