"""Unit tests for the configuration resolver (pwaforge.resolver).

Tests cover:
- load_selection: validation, None handling, framework normalisation
- resolve_manifest: core entries, feature expansion, ordering, unknown ids
- ResolverTables: dependency resolution and pinned versions
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from pwaforge.models import FeatureSelection
from pwaforge.resolver import (
    DEFAULT_TABLES,
    ConfigurationError,
    FeatureSpec,
    ResolverTables,
    load_selection,
    resolve_manifest,
)
from pwaforge.resolver.tables import DEFAULT_PINNED_VERSION, FEATURE_TABLE


class TestLoadSelection:
    @pytest.mark.unit
    def test_accepts_mapping(self, restaurant_selection):
        selection = load_selection(restaurant_selection)
        assert selection.industry == "restaurant"
        assert selection.selected_features == ["contact-form", "gallery"]

    @pytest.mark.unit
    def test_accepts_model(self):
        selection = FeatureSelection(selected_features=["gallery"])
        assert load_selection(selection).selected_features == ["gallery"]

    @pytest.mark.unit
    def test_empty_mapping_is_valid(self):
        selection = load_selection({})
        assert selection.selected_features == []

    @pytest.mark.unit
    def test_null_feature_list_is_empty(self):
        selection = load_selection({"selectedFeatures": None, "industry": None})
        assert selection.selected_features == []
        assert selection.industry == "small-business"

    @pytest.mark.unit
    def test_non_mapping_is_rejected(self):
        with pytest.raises(ConfigurationError, match="mapping"):
            load_selection(["gallery"])  # type: ignore[arg-type]

    @pytest.mark.unit
    def test_wrong_field_type_is_rejected(self):
        with pytest.raises(ConfigurationError) as excinfo:
            load_selection({"selectedFeatures": "gallery"})
        assert excinfo.value.errors
        assert "selectedFeatures" in excinfo.value.errors[0] or "selected_features" in excinfo.value.errors[0]

    @pytest.mark.unit
    def test_framework_aliases_are_normalised(self):
        assert load_selection({"framework": "React-TS"}).framework == "react"
        assert load_selection({"framework": "react-vite"}).framework == "react"

    @pytest.mark.unit
    def test_unsupported_framework(self):
        with pytest.raises(ConfigurationError, match="Unsupported framework"):
            load_selection({"framework": "angular"})


class TestResolveManifest:
    @pytest.mark.unit
    def test_empty_selection_gives_core_project(self):
        manifest = resolve_manifest(load_selection({}))
        assert manifest.pages == ("home", "about", "services")
        assert manifest.components == ("Navigation", "LoadingSpinner", "ErrorFallback")
        assert manifest.styles[:2] == ("index", "App")
        assert set(manifest.dependencies) == {"react", "react-dom", "react-router-dom"}

    @pytest.mark.unit
    def test_restaurant_scenario_pages(self, restaurant_selection):
        manifest = resolve_manifest(load_selection(restaurant_selection))
        assert manifest.pages == ("home", "about", "services", "contact", "gallery")
        assert "ContactForm" in manifest.components
        assert "Gallery" in manifest.components

    @pytest.mark.unit
    def test_gallery_alone_has_page_and_paired_style(self):
        manifest = resolve_manifest(load_selection({"selectedFeatures": ["gallery"]}))
        assert any("Gallery" in path for path in manifest.page_paths())
        assert "pages/Gallery" in manifest.styles

    @pytest.mark.unit
    def test_every_page_and_component_has_a_style(self, everything_selection):
        manifest = resolve_manifest(load_selection(everything_selection))
        for page in manifest.pages:
            assert f"pages/{page.capitalize()}" in manifest.styles
        for component in manifest.components:
            assert f"components/{component}" in manifest.styles

    @pytest.mark.unit
    def test_feature_order_does_not_matter(self):
        a = resolve_manifest(load_selection({"selectedFeatures": ["gallery", "contact-form"]}))
        b = resolve_manifest(load_selection({"selectedFeatures": ["contact-form", "gallery"]}))
        assert a == b

    @pytest.mark.unit
    def test_pages_are_not_duplicated(self):
        manifest = resolve_manifest(load_selection({"selectedFeatures": ["auth", "profile"]}))
        assert manifest.pages.count("profile") == 1
        assert manifest.features == ("auth", "profile")

    @pytest.mark.unit
    def test_unknown_ids_are_ignored(self):
        manifest = resolve_manifest(load_selection({"selectedFeatures": ["gallery", "teleport"]}))
        assert manifest.features == ("gallery",)
        assert manifest.ignored_features == ("teleport",)
        assert "teleport" not in manifest.pages

    @pytest.mark.unit
    def test_feature_dependencies(self):
        manifest = resolve_manifest(load_selection({"selectedFeatures": ["payments", "chat"]}))
        assert manifest.dependencies["socket.io-client"] == "^4.7.2"
        assert "@stripe/stripe-js" in manifest.dependencies

    @pytest.mark.unit
    def test_alternative_tables(self):
        tables = ResolverTables(
            core_pages=("home",),
            core_components=("Navigation",),
            features={"faq": FeatureSpec(pages=("faq",))},
            feature_dependencies={},
        )
        manifest = resolve_manifest(load_selection({"selectedFeatures": ["faq", "gallery"]}), tables)
        assert manifest.pages == ("home", "faq")
        assert manifest.ignored_features == ("gallery",)


class TestResolverTables:
    @pytest.mark.unit
    def test_pinned_version_default(self):
        assert DEFAULT_TABLES.pinned_version("react") == "^18.2.0"
        assert DEFAULT_TABLES.pinned_version("left-pad") == DEFAULT_PINNED_VERSION

    @pytest.mark.unit
    def test_required_dependencies_base_first(self):
        deps = DEFAULT_TABLES.required_dependencies(["auth"])
        assert list(deps)[:3] == ["react", "react-dom", "react-router-dom"]
        assert deps["axios"] == "^1.6.2"

    @pytest.mark.unit
    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_TABLES.features["new"] = FeatureSpec()  # type: ignore[index]

    @pytest.mark.unit
    def test_bundle_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_TABLES.features = {}  # type: ignore[misc]

    @pytest.mark.unit
    def test_caller_dicts_are_wrapped_read_only(self):
        tables = ResolverTables(features=dict(FEATURE_TABLE), pinned_versions={"react": "^18.2.0"})
        with pytest.raises(TypeError):
            tables.features["x"] = FeatureSpec()  # type: ignore[index]
        with pytest.raises(TypeError):
            tables.pinned_versions["vue"] = "^3.0.0"  # type: ignore[index]
        assert tables.pinned_version("react") == "^18.2.0"

    @pytest.mark.unit
    def test_fresh_bundle_matches_defaults(self):
        tables = ResolverTables()
        assert dict(tables.features) == dict(FEATURE_TABLE)
        assert tables.required_dependencies(["payments"]) == DEFAULT_TABLES.required_dependencies(["payments"])
