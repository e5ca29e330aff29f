"""Template catalog: which template renders which page or component.

Page ids resolve once to a ``PageKind``; the kind then indexes the page
template table. A page or component with no table entry is skipped by the
generator and left for the repair loop to stand in for.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PageKind(str, Enum):
    HOME = "home"
    ABOUT = "about"
    SERVICES = "services"
    CONTACT = "contact"
    GALLERY = "gallery"
    TESTIMONIALS = "testimonials"
    LOGIN = "login"
    REGISTER = "register"
    PROFILE = "profile"
    REVIEWS = "reviews"
    CHAT = "chat"
    SEARCH = "search"
    PAYMENTS = "payments"
    BOOKING = "booking"
    ANALYTICS = "analytics"
    LOCATIONS = "locations"


class ArtifactTemplate(BaseModel):
    """Markup template plus the template of its paired stylesheet."""

    model_config = ConfigDict(frozen=True)

    markup: str
    stylesheet: str


def _page(kind: PageKind) -> ArtifactTemplate:
    return ArtifactTemplate(
        markup=f"pages/{kind.value}.tsx.j2",
        stylesheet=f"pages/{kind.value}.css.j2",
    )


def _component(name: str) -> ArtifactTemplate:
    return ArtifactTemplate(
        markup=f"components/{name}.tsx.j2",
        stylesheet=f"components/{name}.css.j2",
    )


# No chat page template ships yet; the chat page is synthesized during repair.
PAGE_TEMPLATES: Mapping[PageKind, ArtifactTemplate] = MappingProxyType({
    PageKind.HOME: _page(PageKind.HOME),
    PageKind.ABOUT: _page(PageKind.ABOUT),
    PageKind.SERVICES: _page(PageKind.SERVICES),
    PageKind.CONTACT: _page(PageKind.CONTACT),
    PageKind.GALLERY: _page(PageKind.GALLERY),
    PageKind.TESTIMONIALS: _page(PageKind.TESTIMONIALS),
    PageKind.LOGIN: _page(PageKind.LOGIN),
    PageKind.REGISTER: _page(PageKind.REGISTER),
    PageKind.PROFILE: _page(PageKind.PROFILE),
    PageKind.REVIEWS: _page(PageKind.REVIEWS),
    PageKind.SEARCH: _page(PageKind.SEARCH),
    PageKind.PAYMENTS: _page(PageKind.PAYMENTS),
    PageKind.BOOKING: _page(PageKind.BOOKING),
    PageKind.ANALYTICS: _page(PageKind.ANALYTICS),
    PageKind.LOCATIONS: _page(PageKind.LOCATIONS),
})

COMPONENT_TEMPLATES: Mapping[str, ArtifactTemplate] = MappingProxyType({
    name: _component(name)
    for name in (
        "Navigation",
        "LoadingSpinner",
        "ErrorFallback",
        "ContactForm",
        "Gallery",
        "TestimonialCard",
        "AuthForm",
        "ReviewCard",
        "LiveChat",
        "ChatMessage",
        "ChatWidget",
        "ProfileForm",
        "SearchBox",
        "SearchResults",
        "PaymentForm",
        "PaymentStatus",
        "BookingForm",
        "BookingCalendar",
        "AnalyticsChart",
        "AnalyticsMetrics",
        "LocationMap",
        "LocationPicker",
        "NotificationBanner",
        "NotificationList",
        "SocialShare",
        "SocialLogin",
    )
})


def resolve_page_kind(page_id: str) -> Optional[PageKind]:
    try:
        return PageKind(page_id)
    except ValueError:
        return None


@dataclass(frozen=True)
class TemplateCatalog:
    """Page and component template tables, passed by reference to the generator."""

    pages: Mapping[PageKind, ArtifactTemplate] = field(default_factory=lambda: PAGE_TEMPLATES)
    components: Mapping[str, ArtifactTemplate] = field(default_factory=lambda: COMPONENT_TEMPLATES)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pages", MappingProxyType(dict(self.pages)))
        object.__setattr__(self, "components", MappingProxyType(dict(self.components)))

    def page_template(self, page_id: str) -> Optional[ArtifactTemplate]:
        kind = resolve_page_kind(page_id)
        if kind is None:
            return None
        return self.pages.get(kind)

    def component_template(self, component_id: str) -> Optional[ArtifactTemplate]:
        return self.components.get(component_id)


DEFAULT_CATALOG = TemplateCatalog()
