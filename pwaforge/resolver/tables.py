"""Immutable lookup tables driving manifest resolution and dependency checks.

Every feature id maps to a ``FeatureSpec`` naming the pages and components it
adds. Every feature that needs an npm package maps to it here too, with the
pinned default version used when the dependency manifest has to be patched.
The tables are built once at import time and exposed through read-only
mapping proxies; ``ResolverTables`` bundles them so callers can pass an
alternative set by reference (tests do this to simulate a sparser catalog).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field


class FeatureSpec(BaseModel):
    """Pages and components contributed by one feature id."""

    model_config = ConfigDict(frozen=True)

    pages: tuple[str, ...] = Field(default=())
    components: tuple[str, ...] = Field(default=())


CORE_PAGES: tuple[str, ...] = ("home", "about", "services")
CORE_COMPONENTS: tuple[str, ...] = ("Navigation", "LoadingSpinner", "ErrorFallback")
GLOBAL_STYLES: tuple[str, ...] = ("index", "App")

# Table order is the order feature pages appear in the manifest.
FEATURE_TABLE: Mapping[str, FeatureSpec] = MappingProxyType({
    "contact-form": FeatureSpec(pages=("contact",), components=("ContactForm",)),
    "gallery": FeatureSpec(pages=("gallery",), components=("Gallery",)),
    "testimonials": FeatureSpec(pages=("testimonials",), components=("TestimonialCard",)),
    "auth": FeatureSpec(pages=("login", "register", "profile"), components=("AuthForm",)),
    "reviews": FeatureSpec(pages=("reviews",), components=("ReviewCard",)),
    "chat": FeatureSpec(pages=("chat",), components=("LiveChat", "ChatMessage", "ChatWidget")),
    "profile": FeatureSpec(pages=("profile",), components=("ProfileForm",)),
    "search": FeatureSpec(pages=("search",), components=("SearchBox", "SearchResults")),
    "payments": FeatureSpec(pages=("payments",), components=("PaymentForm", "PaymentStatus")),
    "booking": FeatureSpec(pages=("booking",), components=("BookingForm", "BookingCalendar")),
    "analytics": FeatureSpec(pages=("analytics",), components=("AnalyticsChart", "AnalyticsMetrics")),
    "geolocation": FeatureSpec(pages=("locations",), components=("LocationMap", "LocationPicker")),
    "notifications": FeatureSpec(components=("NotificationBanner", "NotificationList")),
    "social": FeatureSpec(components=("SocialShare", "SocialLogin")),
})

BASE_DEPENDENCIES: tuple[str, ...] = ("react", "react-dom", "react-router-dom")

FEATURE_DEPENDENCIES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "auth": ("axios",),
    "chat": ("socket.io-client",),
    "payments": ("@stripe/stripe-js", "@stripe/react-stripe-js"),
    "analytics": ("react-ga4",),
    "notifications": ("react-toastify",),
    "social": ("react-social-icons",),
})

PINNED_VERSIONS: Mapping[str, str] = MappingProxyType({
    "react": "^18.2.0",
    "react-dom": "^18.2.0",
    "react-router-dom": "^6.20.0",
    "axios": "^1.6.2",
    "socket.io-client": "^4.7.2",
    "@stripe/stripe-js": "^2.2.0",
    "@stripe/react-stripe-js": "^2.4.0",
    "react-ga4": "^2.1.0",
    "react-toastify": "^9.1.3",
    "react-social-icons": "^6.4.0",
})

DEV_DEPENDENCIES: Mapping[str, str] = MappingProxyType({
    "@types/react": "^18.2.43",
    "@types/react-dom": "^18.2.17",
    "@vitejs/plugin-react": "^4.2.1",
    "typescript": "^5.2.2",
    "vite": "^5.0.8",
})

DEFAULT_PINNED_VERSION = "^1.0.0"


@dataclass(frozen=True)
class ResolverTables:
    """The full set of immutable tables, passed by reference into resolution.

    Mapping arguments are wrapped in read-only proxies, so a caller-supplied
    ``dict`` cannot be edited through the bundle.
    """

    core_pages: tuple[str, ...] = CORE_PAGES
    core_components: tuple[str, ...] = CORE_COMPONENTS
    global_styles: tuple[str, ...] = GLOBAL_STYLES
    features: Mapping[str, FeatureSpec] = field(default_factory=lambda: FEATURE_TABLE)
    base_dependencies: tuple[str, ...] = BASE_DEPENDENCIES
    feature_dependencies: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: FEATURE_DEPENDENCIES)
    pinned_versions: Mapping[str, str] = field(default_factory=lambda: PINNED_VERSIONS)
    dev_dependencies: Mapping[str, str] = field(default_factory=lambda: DEV_DEPENDENCIES)

    def __post_init__(self) -> None:
        for name in ("features", "feature_dependencies", "pinned_versions", "dev_dependencies"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def pinned_version(self, package: str) -> str:
        return self.pinned_versions.get(package, DEFAULT_PINNED_VERSION)

    def required_dependencies(self, features: Iterable[str]) -> dict[str, str]:
        """Every npm package the given features need, with pinned versions.

        Base packages come first, then feature packages in table order.
        """
        selected = set(features)
        packages: list[str] = list(self.base_dependencies)
        for feature_id, deps in self.feature_dependencies.items():
            if feature_id in selected:
                packages.extend(d for d in deps if d not in packages)
        return {name: self.pinned_version(name) for name in packages}


DEFAULT_TABLES = ResolverTables()
