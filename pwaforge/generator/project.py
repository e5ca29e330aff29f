"""Project-level files: build config, PWA manifest, entry points and global styles."""

from __future__ import annotations

import json
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pwaforge.content.industries import normalise_industry
from pwaforge.models import Artifact, ArtifactKind, FeatureSelection, Manifest, ReferenceKind
from pwaforge.resolver.tables import ResolverTables
from pwaforge.utils import slugify

# industry -> (primary, primary-dark)
THEME_PALETTES: Mapping[str, tuple[str, str]] = MappingProxyType({
    "restaurant": ("#b4432f", "#8a2f1f"),
    "technology": ("#2563eb", "#1d4ed8"),
    "healthcare": ("#0f766e", "#115e59"),
    "cyber-security": ("#334155", "#1e293b"),
    "retail": ("#c2410c", "#9a3412"),
    "default": ("#4f46e5", "#4338ca"),
})

# (template, output path, kind); rendered with an ArtifactBuilder like pages.
PROJECT_TEMPLATES: tuple[tuple[str, str, ArtifactKind], ...] = (
    ("project/index.html.j2", "index.html", ArtifactKind.ASSET),
    ("project/vite.config.ts.j2", "vite.config.ts", ArtifactKind.CONFIG),
    ("project/tsconfig.json.j2", "tsconfig.json", ArtifactKind.CONFIG),
    ("project/tsconfig.node.json.j2", "tsconfig.node.json", ArtifactKind.CONFIG),
    ("project/sw.js.j2", "public/sw.js", ArtifactKind.ASSET),
    ("project/icon.svg.j2", "public/icon.svg", ArtifactKind.ASSET),
    ("project/main.tsx.j2", "src/main.tsx", ArtifactKind.COMPONENT),
    ("project/App.tsx.j2", "src/App.tsx", ArtifactKind.COMPONENT),
    ("project/index.css.j2", "src/index.css", ArtifactKind.STYLESHEET),
    ("project/App.css.j2", "src/App.css", ArtifactKind.STYLESHEET),
)

PACKAGE_SCRIPTS: Mapping[str, str] = MappingProxyType({
    "dev": "vite",
    "build": "tsc && vite build",
    "preview": "vite preview",
})


def theme_palette(industry: str) -> tuple[str, str]:
    return THEME_PALETTES.get(normalise_industry(industry), THEME_PALETTES["default"])


def package_name(selection: FeatureSelection) -> str:
    return slugify(selection.project_name) or "my-pwa-app"


def _json_text(data: Mapping[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def build_package_json(
    selection: FeatureSelection,
    manifest: Manifest,
    tables: ResolverTables,
) -> Artifact:
    """The npm dependency manifest; dependencies come straight from the manifest."""
    data = {
        "name": package_name(selection),
        "private": True,
        "version": "0.1.0",
        "type": "module",
        "scripts": dict(PACKAGE_SCRIPTS),
        "dependencies": dict(manifest.dependencies),
        "devDependencies": dict(tables.dev_dependencies),
    }
    return Artifact(path="package.json", kind=ArtifactKind.CONFIG, content=_json_text(data))


def build_web_manifest(selection: FeatureSelection) -> Artifact:
    """``public/manifest.json`` for installability; records its icon reference."""
    primary, _ = theme_palette(selection.industry)
    name = selection.display_name
    artifact = Artifact(path="public/manifest.json", kind=ArtifactKind.CONFIG)
    icon = "/icon.svg"
    data = {
        "name": name,
        "short_name": name[:12],
        "description": selection.business_data.description or f"{name} app",
        "start_url": "/",
        "scope": "/",
        "display": "standalone",
        "theme_color": primary,
        "background_color": "#ffffff",
        "icons": [
            {"src": icon, "sizes": "any", "type": "image/svg+xml", "purpose": "any maskable"},
        ],
    }
    artifact.add_reference(icon, ReferenceKind.IMPORT)
    artifact.content = _json_text(data)
    return artifact
