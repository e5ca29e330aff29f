"""Content providers -- industry copy for generated pages.

Quick usage::

    from pwaforge.content import StaticContentProvider, fetch_content

    result = await fetch_content(StaticContentProvider(), "restaurant")
"""

from pwaforge.content.industries import INDUSTRY_CONTENT, default_content, normalise_industry
from pwaforge.content.models import (
    ContentResult,
    HeroContent,
    IndustryContent,
    ServiceItem,
    Testimonial,
)
from pwaforge.content.ollama import OllamaContentProvider
from pwaforge.content.provider import (
    ContentProvider,
    ContentProviderError,
    StaticContentProvider,
    fetch_content,
)

__all__ = [
    "ContentProvider",
    "ContentProviderError",
    "ContentResult",
    "HeroContent",
    "INDUSTRY_CONTENT",
    "IndustryContent",
    "OllamaContentProvider",
    "ServiceItem",
    "StaticContentProvider",
    "Testimonial",
    "default_content",
    "fetch_content",
    "normalise_industry",
]
