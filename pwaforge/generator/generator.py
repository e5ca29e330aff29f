"""Artifact generator: manifest + copy -> artifact set.

Every artifact is rendered from a Jinja2 template with an ``ArtifactBuilder``
in scope, so its references are recorded while its text is written.
Independent artifacts render concurrently under a semaphore; copy is fetched
per page through ``fetch_content`` so a slow or failing provider only
degrades the pages it was asked for.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from rich.markup import escape

from pwaforge.content.models import ContentResult
from pwaforge.content.provider import ContentProvider, StaticContentProvider, fetch_content
from pwaforge.generator.builder import ArtifactBuilder
from pwaforge.generator.catalog import DEFAULT_CATALOG, ArtifactTemplate, TemplateCatalog
from pwaforge.generator.project import (
    PROJECT_TEMPLATES,
    build_package_json,
    build_web_manifest,
    theme_palette,
)
from pwaforge.generator.templates import TemplateRenderer
from pwaforge.models import (
    Artifact,
    ArtifactKind,
    ArtifactSet,
    FeatureSelection,
    Manifest,
)
from pwaforge.resolver.tables import DEFAULT_TABLES, ResolverTables
from pwaforge.utils import label_from_route, print_warning, slugify


class PageInfo(BaseModel):
    """Naming for one manifest page, as templates see it."""

    model_config = ConfigDict(frozen=True)

    id: str
    component: str
    route: str
    label: str
    path: str

    @classmethod
    def from_page_id(cls, page_id: str) -> "PageInfo":
        route = Manifest.page_route(page_id)
        return cls(
            id=page_id,
            component=Manifest.page_component(page_id),
            route=route,
            label=label_from_route(route),
            path=Manifest.page_path(page_id),
        )


class GenerationOutput(BaseModel):
    """Raw generator output before validation and repair."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    artifacts: ArtifactSet
    skipped_artifacts: list[str] = Field(default_factory=list)
    content_fallbacks: list[str] = Field(default_factory=list)


class ArtifactGenerator:
    """Renders every artifact a manifest calls for."""

    def __init__(
        self,
        provider: Optional[ContentProvider] = None,
        renderer: Optional[TemplateRenderer] = None,
        catalog: TemplateCatalog = DEFAULT_CATALOG,
        tables: ResolverTables = DEFAULT_TABLES,
        content_timeout: float = 5.0,
        max_parallel: int = 8,
    ) -> None:
        if max_parallel < 1:
            raise ValueError("max_parallel must be >= 1")
        self.provider = provider or StaticContentProvider()
        self.renderer = renderer or TemplateRenderer()
        self.catalog = catalog
        self.tables = tables
        self.content_timeout = content_timeout
        self.max_parallel = max_parallel

    # -- Public API --------------------------------------------------------

    async def generate(self, selection: FeatureSelection, manifest: Manifest) -> GenerationOutput:
        """Render the full artifact set for ``manifest``.

        Manifest entries without a template are skipped with a warning and
        listed in ``skipped_artifacts``; references to them surface later as
        dangling imports.
        """
        semaphore = asyncio.Semaphore(self.max_parallel)
        context = self._base_context(selection, manifest)
        skipped: list[str] = []

        project_jobs = [
            self._render(semaphore, template, path, kind, context)
            for template, path, kind in PROJECT_TEMPLATES
        ]

        page_jobs = []
        page_ids: list[str] = []
        for page in context["pages"]:
            template = self.catalog.page_template(page.id)
            if template is None:
                print_warning(f"No page template for '{escape(page.id)}'; skipping {page.path}")
                skipped.append(page.path)
                continue
            page_ids.append(page.id)
            page_jobs.append(self._build_page(semaphore, page, template, selection, context))

        component_jobs = []
        for component_id in manifest.components:
            path = Manifest.component_path(component_id)
            template = self.catalog.component_template(component_id)
            if template is None:
                print_warning(
                    f"No component template for '{escape(component_id)}'; skipping {path}"
                )
                skipped.append(path)
                continue
            component_jobs.append(
                self._build_pair(semaphore, template, path, ArtifactKind.COMPONENT, context)
            )

        project_results, page_results, component_results = await asyncio.gather(
            asyncio.gather(*project_jobs),
            asyncio.gather(*page_jobs),
            asyncio.gather(*component_jobs),
        )

        artifacts = ArtifactSet()
        artifacts.add(build_package_json(selection, manifest, self.tables))
        artifacts.add(build_web_manifest(selection))
        for artifact in project_results:
            artifacts.add(artifact)

        fallbacks: list[str] = []
        for page_id, (pair, result) in zip(page_ids, page_results):
            for artifact in pair:
                artifacts.add(artifact)
            if not result.success:
                fallbacks.append(page_id)
                print_warning(
                    f"Using default copy for page '{escape(page_id)}': {escape(result.error or '')}"
                )

        for pair in component_results:
            for artifact in pair:
                artifacts.add(artifact)

        return GenerationOutput(
            artifacts=artifacts,
            skipped_artifacts=skipped,
            content_fallbacks=fallbacks,
        )

    # -- Internal helpers --------------------------------------------------

    def _base_context(self, selection: FeatureSelection, manifest: Manifest) -> dict[str, Any]:
        business = selection.display_name
        primary, dark = theme_palette(selection.industry)
        pages = [PageInfo.from_page_id(p) for p in manifest.pages]
        return {
            "business": business,
            "business_data": selection.business_data,
            "slug": slugify(business) or "app",
            "initial": (business[:1] or "A").upper(),
            "description": selection.business_data.description or f"{business} - Progressive Web App",
            "cache_name": f"{slugify(selection.project_name) or 'pwa'}-v1",
            "theme_color": primary,
            "theme_dark": dark,
            "pages": pages,
            "components": frozenset(manifest.components),
            "has_page": lambda page_id: page_id in manifest.pages,
            "page_route": Manifest.page_route,
        }

    async def _render(
        self,
        semaphore: asyncio.Semaphore,
        template: str,
        path: str,
        kind: ArtifactKind,
        context: dict[str, Any],
    ) -> Artifact:
        async with semaphore:
            builder = ArtifactBuilder(path, kind)
            text = await self.renderer.render_async(template, {**context, "b": builder})
            return builder.build(text)

    async def _build_pair(
        self,
        semaphore: asyncio.Semaphore,
        template: ArtifactTemplate,
        path: str,
        kind: ArtifactKind,
        context: dict[str, Any],
    ) -> list[Artifact]:
        style_path = Manifest.style_path(Manifest.paired_style_id(path))
        markup, stylesheet = await asyncio.gather(
            self._render(semaphore, template.markup, path, kind, context),
            self._render(semaphore, template.stylesheet, style_path, ArtifactKind.STYLESHEET, context),
        )
        return [markup, stylesheet]

    async def _build_page(
        self,
        semaphore: asyncio.Semaphore,
        page: PageInfo,
        template: ArtifactTemplate,
        selection: FeatureSelection,
        context: dict[str, Any],
    ) -> tuple[list[Artifact], ContentResult]:
        result = await fetch_content(self.provider, selection.industry, self.content_timeout)
        copy = result.content.personalize(selection.display_name)
        page_context = {
            **context,
            "page": page,
            "content": copy,
            "cta_primary": copy.cta_texts[0] if copy.cta_texts else "Get Started",
        }
        pair = await self._build_pair(semaphore, template, page.path, ArtifactKind.PAGE, page_context)
        return pair, result
