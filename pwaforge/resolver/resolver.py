"""Configuration resolver: validated request -> deterministic manifest.

``load_selection`` is the only place a raw request is trusted into a
``FeatureSelection``; anything structurally malformed raises
``ConfigurationError`` before generation starts. ``resolve_manifest`` is a
pure, total function over the immutable tables in
:mod:`pwaforge.resolver.tables`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from rich.markup import escape

from pwaforge.models import FeatureSelection, Manifest
from pwaforge.resolver.tables import DEFAULT_TABLES, ResolverTables
from pwaforge.utils import print_warning

SUPPORTED_FRAMEWORKS: Mapping[str, str] = {
    "react": "react",
    "react-ts": "react",
    "react-vite": "react",
}


class ConfigurationError(Exception):
    """Raised when a generation request is malformed and cannot be processed."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


def load_selection(raw: FeatureSelection | Mapping[str, Any]) -> FeatureSelection:
    """Validate an untrusted request into a ``FeatureSelection``.

    ``None`` values are treated as "not provided" so that an absent or null
    feature list behaves like an empty one. The framework name is normalised
    to its canonical form.

    Raises:
        ConfigurationError: The request is not a mapping, has wrongly-typed
            fields, or names an unsupported framework.
    """
    if isinstance(raw, FeatureSelection):
        selection = raw
    else:
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                f"Feature selection must be a mapping, got {type(raw).__name__}"
            )
        cleaned = {k: v for k, v in raw.items() if v is not None}
        try:
            selection = FeatureSelection.model_validate(cleaned)
        except ValidationError as exc:
            messages = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            ]
            raise ConfigurationError(
                "Invalid feature selection: " + "; ".join(messages), messages
            ) from exc

    framework = SUPPORTED_FRAMEWORKS.get(selection.framework.lower())
    if framework is None:
        raise ConfigurationError(
            f"Unsupported framework '{selection.framework}'. "
            f"Supported: {', '.join(sorted(SUPPORTED_FRAMEWORKS))}"
        )
    if framework != selection.framework:
        selection = selection.model_copy(update={"framework": framework})
    return selection


def resolve_manifest(
    selection: FeatureSelection,
    tables: ResolverTables = DEFAULT_TABLES,
) -> Manifest:
    """Expand a feature selection into the concrete manifest.

    Core pages and components are always present. Feature contributions are
    added in table order, so the manifest does not depend on the order the
    caller listed features in. Unknown ids are reported and ignored.
    """
    requested = list(dict.fromkeys(selection.selected_features))
    known = [f for f in tables.features if f in requested]
    ignored = [f for f in requested if f not in tables.features]

    for feature_id in ignored:
        print_warning(f"Ignoring unknown feature id '{escape(feature_id)}'")

    pages: list[str] = list(tables.core_pages)
    components: list[str] = list(tables.core_components)
    for feature_id in known:
        spec = tables.features[feature_id]
        pages.extend(p for p in spec.pages if p not in pages)
        components.extend(c for c in spec.components if c not in components)

    styles: list[str] = list(tables.global_styles)
    styles.extend(Manifest.paired_style_id(Manifest.page_path(p)) for p in pages)
    styles.extend(Manifest.paired_style_id(Manifest.component_path(c)) for c in components)

    return Manifest(
        pages=tuple(pages),
        components=tuple(components),
        styles=tuple(styles),
        features=tuple(known),
        ignored_features=tuple(ignored),
        dependencies=tables.required_dependencies(known),
    )
