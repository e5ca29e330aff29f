"""Pydantic models for page copy and content fetch results."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

BUSINESS_TOKEN = "{business}"


class HeroContent(BaseModel):
    title: str = Field(default="")
    subtitle: str = Field(default="")


class ServiceItem(BaseModel):
    title: str
    description: str = Field(default="")


class Testimonial(BaseModel):
    name: str
    text: str
    rating: int = Field(default=5, ge=1, le=5)


class IndustryContent(BaseModel):
    """Marketing copy for one industry.

    Strings may contain the ``{business}`` token, which ``personalize``
    replaces with the business display name.
    """

    hero: HeroContent = Field(default_factory=HeroContent)
    services: list[ServiceItem] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)
    about_text: str = Field(default="")
    cta_texts: list[str] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True when there is enough copy to render a page: a hero title and services."""
        return bool(self.hero.title.strip()) and any(s.title.strip() for s in self.services)

    def personalize(self, business_name: str) -> "IndustryContent":
        """Return a copy with every ``{business}`` token filled in."""

        def fill(text: str) -> str:
            return text.replace(BUSINESS_TOKEN, business_name)

        return IndustryContent(
            hero=HeroContent(title=fill(self.hero.title), subtitle=fill(self.hero.subtitle)),
            services=[
                ServiceItem(title=fill(s.title), description=fill(s.description))
                for s in self.services
            ],
            testimonials=[
                t.model_copy(update={"text": fill(t.text)}) for t in self.testimonials
            ],
            about_text=fill(self.about_text),
            cta_texts=[fill(c) for c in self.cta_texts],
        )


class ContentResult(BaseModel):
    """Outcome of a guarded content fetch.

    ``content`` is always usable: on failure it holds the built-in default
    copy and ``success`` is ``False``.
    """

    success: bool = Field(default=True)
    content: IndustryContent
    source: str = Field(default="", description="Provider name, or 'default' on fallback")
    error: Optional[str] = Field(default=None)
