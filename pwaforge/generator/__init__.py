"""Artifact generator -- renders the project files a manifest calls for.

Quick usage::

    from pwaforge.generator import ArtifactGenerator

    output = await ArtifactGenerator().generate(selection, manifest)
    for artifact in output.artifacts:
        print(artifact.path, len(artifact.declared_references))
"""

from pwaforge.generator.builder import ArtifactBuilder
from pwaforge.generator.catalog import (
    COMPONENT_TEMPLATES,
    DEFAULT_CATALOG,
    PAGE_TEMPLATES,
    ArtifactTemplate,
    PageKind,
    TemplateCatalog,
    resolve_page_kind,
)
from pwaforge.generator.generator import ArtifactGenerator, GenerationOutput, PageInfo
from pwaforge.generator.templates import TemplateRenderer, js_string, jsx_text

__all__ = [
    "ArtifactBuilder",
    "ArtifactGenerator",
    "ArtifactTemplate",
    "COMPONENT_TEMPLATES",
    "DEFAULT_CATALOG",
    "GenerationOutput",
    "PAGE_TEMPLATES",
    "PageInfo",
    "PageKind",
    "TemplateCatalog",
    "TemplateRenderer",
    "js_string",
    "jsx_text",
    "resolve_page_kind",
]
