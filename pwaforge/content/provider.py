"""Content provider interface, the static provider and the guarded fetch.

Typical usage::

    provider = StaticContentProvider()
    result = await fetch_content(provider, "restaurant", timeout=5.0)
    hero = result.content.personalize("Bella Vista").hero
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from pwaforge.content.industries import (
    DEFAULT_INDUSTRY,
    INDUSTRY_CONTENT,
    default_content,
    normalise_industry,
)
from pwaforge.content.models import ContentResult, IndustryContent


class ContentProviderError(Exception):
    """Raised by a provider when copy cannot be obtained or understood."""


@runtime_checkable
class ContentProvider(Protocol):
    """Anything that can supply copy for an industry tag.

    Implementations must be safe to call concurrently and must return
    non-empty copy for unknown industries (or raise ``ContentProviderError``).
    """

    name: str

    async def get_content_for_industry(self, industry: str) -> IndustryContent:
        ...


class StaticContentProvider:
    """Serves copy from the read-only built-in industry table."""

    name = "static"

    async def get_content_for_industry(self, industry: str) -> IndustryContent:
        key = normalise_industry(industry)
        content = INDUSTRY_CONTENT.get(key) or INDUSTRY_CONTENT[DEFAULT_INDUSTRY]
        return content.model_copy(deep=True)

    def industries(self) -> list[str]:
        return sorted(INDUSTRY_CONTENT)


async def fetch_content(
    provider: ContentProvider,
    industry: str,
    timeout: float = 5.0,
) -> ContentResult:
    """Fetch copy with a timeout, substituting default copy on any failure.

    Never raises for provider failures; cancellation of the calling task
    still propagates.
    """
    source = getattr(provider, "name", type(provider).__name__)
    error: str | None = None
    content: IndustryContent | None = None

    try:
        content = await asyncio.wait_for(
            provider.get_content_for_industry(industry), timeout=timeout
        )
    except asyncio.TimeoutError:
        error = f"Content provider '{source}' timed out after {timeout}s"
    except ContentProviderError as exc:
        error = f"Content provider '{source}' failed: {exc}"
    except Exception as exc:  # noqa: BLE001
        error = f"Unexpected error from content provider '{source}': {exc}"

    if error is None and (content is None or not content.is_complete):
        error = f"Content provider '{source}' returned empty copy for '{industry}'"

    if error is not None or content is None:
        return ContentResult(
            success=False,
            content=default_content(),
            source="default",
            error=error,
        )
    return ContentResult(success=True, content=content, source=source)
