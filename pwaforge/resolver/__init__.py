"""Configuration resolver -- feature selection to file manifest.

Quick usage::

    from pwaforge.resolver import load_selection, resolve_manifest

    selection = load_selection({"selectedFeatures": ["gallery"], "industry": "restaurant"})
    manifest = resolve_manifest(selection)
"""

from pwaforge.resolver.resolver import (
    SUPPORTED_FRAMEWORKS,
    ConfigurationError,
    load_selection,
    resolve_manifest,
)
from pwaforge.resolver.tables import DEFAULT_TABLES, FeatureSpec, ResolverTables

__all__ = [
    "ConfigurationError",
    "DEFAULT_TABLES",
    "FeatureSpec",
    "ResolverTables",
    "SUPPORTED_FRAMEWORKS",
    "load_selection",
    "resolve_manifest",
]
