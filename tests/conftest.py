"""Shared pytest fixtures for the pwaforge test suite.

Provides reusable fixtures for:
- Raw feature selections (the two reference scenarios and variants)
- A small, fully consistent hand-built artifact set and its manifest
- Content providers that fail, hang or return empty copy
- A mocked ``httpx.AsyncClient`` for the Ollama provider
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from pwaforge.content.models import IndustryContent
from pwaforge.content.provider import ContentProviderError
from pwaforge.generator.builder import ArtifactBuilder
from pwaforge.models import (
    DEPENDENCY_MANIFEST_PATH,
    NAVIGATION_PATH,
    ROUTER_PATH,
    Artifact,
    ArtifactKind,
    ArtifactSet,
    Manifest,
)


# ---------------------------------------------------------------------------
# Selections
# ---------------------------------------------------------------------------

@pytest.fixture
def restaurant_selection() -> dict[str, Any]:
    """Contact form + gallery for a restaurant."""
    return {
        "projectName": "Bella Vista",
        "businessName": "Bella Vista Bistro",
        "framework": "react",
        "industry": "restaurant",
        "selectedFeatures": ["contact-form", "gallery"],
        "businessData": {
            "description": "Family-run Italian bistro",
            "location": "Lisbon",
            "contactEmail": "hello@bellavista.example",
        },
    }


@pytest.fixture
def chat_selection() -> dict[str, Any]:
    """Chat only; no chat page template ships, so repair has to stand one in."""
    return {"selectedFeatures": ["chat"]}


@pytest.fixture
def everything_selection() -> dict[str, Any]:
    return {
        "businessName": "Acme & Sons",
        "industry": "technology",
        "selectedFeatures": [
            "contact-form", "gallery", "testimonials", "auth", "reviews", "profile",
            "search", "payments", "booking", "analytics", "geolocation",
            "notifications", "social",
        ],
    }


# ---------------------------------------------------------------------------
# Hand-built artifacts
# ---------------------------------------------------------------------------

def make_router(pages: list[tuple[str, str]]) -> Artifact:
    """``src/App.tsx`` with one import and one route per ``(route, component)``."""
    b = ArtifactBuilder(ROUTER_PATH, ArtifactKind.COMPONENT)
    lines = [b.import_named(["BrowserRouter", "Routes", "Route"], "react-router-dom")]
    lines.extend(b.import_default(component, f"./pages/{component}") for _, component in pages)
    lines.append(b.side_effect("./App.css"))
    routes = "".join(f"          {b.route(route, component)}\n" for route, component in pages)
    body = (
        "\n\nfunction App() {\n"
        "  return (\n"
        "    <BrowserRouter>\n"
        "      <main>\n"
        "        <Routes>\n"
        f"{routes}"
        f"          {b.fallback_route(pages[0][1])}\n"
        "        </Routes>\n"
        "      </main>\n"
        "    </BrowserRouter>\n"
        "  );\n"
        "}\n\n"
        "export default App;\n"
    )
    return b.build("\n".join(lines) + body)


def make_navigation(links: list[tuple[str, str]]) -> Artifact:
    b = ArtifactBuilder(NAVIGATION_PATH, ArtifactKind.COMPONENT)
    head = "\n".join([
        b.import_named(["Link"], "react-router-dom"),
        b.side_effect("./Navigation.css"),
    ])
    items = "".join(
        f'        <li {b.cls("nav-item")}>{b.nav(route, label)}</li>\n' for route, label in links
    )
    body = (
        "\n\nfunction Navigation() {\n"
        "  return (\n"
        f"    <nav {b.cls('navigation')}>\n"
        f"      <ul {b.cls('nav-menu')}>\n"
        f"{items}"
        "      </ul>\n"
        "    </nav>\n"
        "  );\n"
        "}\n\n"
        "export default Navigation;\n"
    )
    return b.build(head + body)


def make_page(component: str, classes: tuple[str, ...] = ()) -> Artifact:
    b = ArtifactBuilder(f"src/pages/{component}.tsx", ArtifactKind.PAGE)
    head = b.side_effect(f"./{component}.css")
    tokens = classes or (f"{component.lower()}-page",)
    body = (
        f"\n\nfunction {component}() {{\n"
        f"  return <div {b.cls(*tokens)}>{component}</div>;\n"
        "}\n\n"
        f"export default {component};\n"
    )
    return b.build(head + body)


def make_stylesheet(path: str, classes: tuple[str, ...]) -> Artifact:
    content = "".join(f".{name} {{\n  display: block;\n}}\n\n" for name in classes)
    return Artifact(path=path, kind=ArtifactKind.STYLESHEET, content=content)


def make_package_json(dependencies: dict[str, str]) -> Artifact:
    data = {"name": "fixture-app", "private": True, "dependencies": dependencies}
    return Artifact(
        path=DEPENDENCY_MANIFEST_PATH,
        kind=ArtifactKind.CONFIG,
        content=json.dumps(data, indent=2) + "\n",
    )


BASE_DEPENDENCIES = {
    "react": "^18.2.0",
    "react-dom": "^18.2.0",
    "react-router-dom": "^6.20.0",
}


@pytest.fixture
def small_manifest() -> Manifest:
    return Manifest(
        pages=("home", "about"),
        components=("Navigation",),
        styles=("index", "App", "pages/Home", "pages/About", "components/Navigation"),
        dependencies=dict(BASE_DEPENDENCIES),
    )


@pytest.fixture
def small_artifacts() -> ArtifactSet:
    """A tiny project in which every reference resolves."""
    return ArtifactSet([
        make_router([("/", "Home"), ("/about", "About")]),
        make_navigation([("/", "Home"), ("/about", "About")]),
        make_page("Home"),
        make_page("About"),
        make_stylesheet("src/pages/Home.css", ("home-page",)),
        make_stylesheet("src/pages/About.css", ("about-page",)),
        make_stylesheet(
            "src/components/Navigation.css", ("navigation", "nav-menu", "nav-item", "nav-link")
        ),
        make_stylesheet("src/App.css", ("app",)),
        make_stylesheet("src/index.css", ("container",)),
        make_package_json(dict(BASE_DEPENDENCIES)),
    ])


@pytest.fixture
def artifact_factory() -> dict[str, Callable[..., Artifact]]:
    """The builders above, for tests that assemble their own sets."""
    return {
        "router": make_router,
        "navigation": make_navigation,
        "page": make_page,
        "stylesheet": make_stylesheet,
        "package_json": make_package_json,
    }


# ---------------------------------------------------------------------------
# Content providers
# ---------------------------------------------------------------------------

class FailingProvider:
    name = "failing"

    async def get_content_for_industry(self, industry: str) -> IndustryContent:
        raise ContentProviderError("backend unavailable")


class CrashingProvider:
    name = "crashing"

    async def get_content_for_industry(self, industry: str) -> IndustryContent:
        raise RuntimeError("boom")


class HangingProvider:
    name = "hanging"

    async def get_content_for_industry(self, industry: str) -> IndustryContent:
        await asyncio.sleep(3600)
        raise AssertionError("unreachable")


class EmptyProvider:
    name = "empty"

    async def get_content_for_industry(self, industry: str) -> IndustryContent:
        return IndustryContent()


@pytest.fixture
def failing_provider() -> FailingProvider:
    return FailingProvider()


@pytest.fixture
def crashing_provider() -> CrashingProvider:
    return CrashingProvider()


@pytest.fixture
def hanging_provider() -> HangingProvider:
    return HangingProvider()


@pytest.fixture
def empty_provider() -> EmptyProvider:
    return EmptyProvider()


# ---------------------------------------------------------------------------
# Ollama HTTP mocking
# ---------------------------------------------------------------------------

@pytest.fixture
def ollama_copy() -> dict[str, Any]:
    """A well-formed content document as the model would return it."""
    return {
        "hero": {"title": "Welcome to {business}", "subtitle": "Fresh ideas daily"},
        "services": [
            {"title": "Consulting", "description": "Advice from {business}"},
            {"title": "Support", "description": "Around the clock"},
        ],
        "testimonials": [{"name": "Ana", "text": "Great team", "rating": 5}],
        "about_text": "{business} has served the city since 2001.",
        "cta_texts": ["Get started", "Talk to us"],
    }


@pytest.fixture
def mock_http_client() -> Callable[..., AsyncMock]:
    """Factory for an ``httpx.AsyncClient`` stand-in usable as an async context manager."""

    def _make(*, payload: Any = None, side_effect: Exception | None = None) -> AsyncMock:
        response = MagicMock()
        response.json.return_value = payload
        response.raise_for_status = MagicMock()

        client = AsyncMock()
        if side_effect is not None:
            client.post = AsyncMock(side_effect=side_effect)
        else:
            client.post = AsyncMock(return_value=response)
        client.__aenter__ = AsyncMock(return_value=client)
        client.__aexit__ = AsyncMock(return_value=False)
        return client

    return _make
