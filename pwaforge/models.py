"""Pydantic v2 models shared by every stage of the pipeline.

Defines the request (``FeatureSelection``), the derived ``Manifest``, the
generated ``Artifact`` records with their construction-time references, the
reference graph edges, defects, fix records and the final report.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from pwaforge.utils import to_pascal

# ---------------------------------------------------------------------------
# Project layout constants
# ---------------------------------------------------------------------------

PAGES_DIR = "src/pages"
COMPONENTS_DIR = "src/components"
ROUTER_PATH = "src/App.tsx"
NAVIGATION_PATH = "src/components/Navigation.tsx"
DEPENDENCY_MANIFEST_PATH = "package.json"
GLOBAL_STYLESHEETS: tuple[str, ...] = ("src/index.css", "src/App.css")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ArtifactKind(str, Enum):
    """What role a generated file plays in the project."""
    PAGE = "page"
    COMPONENT = "component"
    STYLESHEET = "stylesheet"
    CONFIG = "config"
    ASSET = "asset"


class ReferenceKind(str, Enum):
    """Kinds of cross-artifact references an artifact can declare."""
    IMPORT = "import"
    ROUTE = "route"
    NAV_LINK = "nav-link"
    CLASS_BINDING = "class-binding"


class DefectKind(str, Enum):
    """Structural inconsistencies the validator can report."""
    DANGLING_IMPORT = "dangling-import"
    ORPHAN_CLASS = "orphan-class"
    ROUTE_NAV_MISMATCH = "route-nav-mismatch"
    MISSING_DEPENDENCY = "missing-dependency"
    MALFORMED_SYNTAX = "malformed-syntax"
    REPAIR_NONCONVERGENT = "repair-nonconvergent"


class FixOutcome(str, Enum):
    """Whether a fix patched existing content or stood in for missing content."""
    PATCHED = "patched"
    SYNTHESIZED_STAND_IN = "synthesized-stand-in"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class BusinessData(BaseModel):
    """Free-form business details used to personalise copy."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: str = Field(default="", description="Business display name")
    description: str = Field(default="", description="One-line business description")
    location: str = Field(default="")
    target_audience: str = Field(default="")
    primary_goal: str = Field(default="")
    contact_email: str = Field(default="")
    contact_phone: str = Field(default="")


class FeatureSelection(BaseModel):
    """The declarative request: which features, for which industry and framework.

    Accepts both camelCase keys (``selectedFeatures``) and snake_case keys.
    Unknown feature ids are kept as-is; the resolver decides what to ignore.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    project_name: str = Field(default="my-pwa-app")
    business_name: str = Field(default="My Business")
    framework: str = Field(default="react")
    industry: str = Field(default="small-business")
    selected_features: list[str] = Field(default_factory=list)
    business_data: BusinessData = Field(default_factory=BusinessData)

    @field_validator("project_name", "business_name", "framework", "industry")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("selected_features")
    @classmethod
    def _normalise_ids(cls, value: list[str]) -> list[str]:
        return [v.strip().lower() for v in value if v.strip()]

    @property
    def display_name(self) -> str:
        """Business name used in copy, falling back to ``business_data.name``."""
        return self.business_name or self.business_data.name or "My Business"


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class Manifest(BaseModel):
    """Concrete list of pages, components and stylesheets for one selection."""

    model_config = ConfigDict(frozen=True)

    pages: tuple[str, ...] = Field(default=())
    components: tuple[str, ...] = Field(default=())
    styles: tuple[str, ...] = Field(default=())
    features: tuple[str, ...] = Field(default=(), description="Recognised feature ids")
    ignored_features: tuple[str, ...] = Field(default=(), description="Unknown ids that were skipped")
    dependencies: dict[str, str] = Field(default_factory=dict, description="npm package -> pinned version")

    @staticmethod
    def page_component(page_id: str) -> str:
        """React component identifier for a page id (``contact`` -> ``Contact``)."""
        return to_pascal(page_id)

    @staticmethod
    def page_route(page_id: str) -> str:
        """Route path for a page id; ``home`` is served at ``/``."""
        return "/" if page_id == "home" else f"/{page_id}"

    @classmethod
    def page_path(cls, page_id: str) -> str:
        return f"{PAGES_DIR}/{cls.page_component(page_id)}.tsx"

    @staticmethod
    def component_path(component_id: str) -> str:
        return f"{COMPONENTS_DIR}/{component_id}.tsx"

    @staticmethod
    def style_path(style_id: str) -> str:
        return f"src/{style_id}.css"

    @staticmethod
    def paired_style_id(path: str) -> str:
        """Style id of the stylesheet paired with a page/component path.

        ``src/pages/Gallery.tsx`` -> ``pages/Gallery``.
        """
        pure = PurePosixPath(path)
        relative = pure.parent.relative_to("src") if pure.parent.parts[:1] == ("src",) else pure.parent
        prefix = "" if str(relative) == "." else f"{relative}/"
        return f"{prefix}{pure.stem}"

    def page_paths(self) -> list[str]:
        return [self.page_path(p) for p in self.pages]

    def component_paths(self) -> list[str]:
        return [self.component_path(c) for c in self.components]


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------

class Reference(BaseModel):
    """A reference declared by an artifact at the moment its text was written."""

    model_config = ConfigDict(frozen=True)

    target: str = Field(..., description="Import specifier, route path or class token")
    kind: ReferenceKind


class Artifact(BaseModel):
    """One generated file record."""

    path: str = Field(..., description="Project-relative POSIX path, unique per run")
    kind: ArtifactKind
    content: str = Field(default="")
    declared_references: list[Reference] = Field(default_factory=list)

    @property
    def directory(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return "" if parent == "." else parent

    @property
    def suffix(self) -> str:
        return PurePosixPath(self.path).suffix

    def add_reference(self, target: str, kind: ReferenceKind) -> None:
        """Record a reference, ignoring exact duplicates."""
        ref = Reference(target=target, kind=kind)
        if ref not in self.declared_references:
            self.declared_references.append(ref)

    def references_of(self, kind: ReferenceKind) -> list[Reference]:
        return [r for r in self.declared_references if r.kind == kind]


class DuplicateArtifactError(ValueError):
    """Raised when two artifacts claim the same path within one run."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Artifact path already exists: {path}")


class ArtifactSet:
    """Path-keyed artifact container that enforces path uniqueness.

    Iteration is always in sorted path order so every pass over the set is
    deterministic regardless of the order artifacts were added.
    """

    def __init__(self, artifacts: Iterable[Artifact] = ()) -> None:
        self._items: dict[str, Artifact] = {}
        for artifact in artifacts:
            self.add(artifact)

    def add(self, artifact: Artifact) -> None:
        if artifact.path in self._items:
            raise DuplicateArtifactError(artifact.path)
        self._items[artifact.path] = artifact

    def replace(self, artifact: Artifact) -> None:
        self._items[artifact.path] = artifact

    def get(self, path: str) -> Optional[Artifact]:
        return self._items.get(path)

    def paths(self) -> list[str]:
        return sorted(self._items)

    def ordered(self) -> list[Artifact]:
        return [self._items[p] for p in self.paths()]

    def of_kind(self, kind: ArtifactKind) -> list[Artifact]:
        return [a for a in self.ordered() if a.kind == kind]

    def snapshot(self) -> tuple[Artifact, ...]:
        """Deep copies of every artifact, in path order."""
        return tuple(a.model_copy(deep=True) for a in self.ordered())

    def __contains__(self, path: object) -> bool:
        return path in self._items

    def __iter__(self) -> Iterator[Artifact]:
        return iter(self.ordered())

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Graph, defects and repair records
# ---------------------------------------------------------------------------

class ReferenceEdge(BaseModel):
    """A declared reference after resolution against the artifact set."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Path of the declaring artifact")
    target: str = Field(..., description="Resolved/expected artifact path, or route path")
    kind: ReferenceKind
    resolved: bool
    specifier: str = Field(default="", description="Raw declared target (specifier, token, route)")


class Defect(BaseModel):
    """A detected structural inconsistency."""

    model_config = ConfigDict(frozen=True)

    kind: DefectKind
    artifact: str = Field(..., description="Artifact the defect was found in")
    detail: str
    auto_fixable: bool
    target: str = Field(default="", description="Path a fix must write")
    subject: str = Field(default="", description="Class token, package, route path or syntax code")

    @property
    def key(self) -> tuple[str, str, str, str]:
        """Identity used to de-duplicate defects across iterations."""
        return (self.kind.value, self.artifact, self.target, self.subject)


class FixRecord(BaseModel):
    """The outcome of applying one repair strategy to one defect."""

    defect: Defect
    strategy: str
    result_artifacts: list[str] = Field(default_factory=list)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    outcome: FixOutcome = Field(default=FixOutcome.PATCHED)


class GenerationReport(BaseModel):
    """Final status of one generation request."""

    defects_found: list[Defect] = Field(default_factory=list)
    fixes_applied: list[FixRecord] = Field(default_factory=list)
    residual_defects: list[Defect] = Field(default_factory=list)
    iterations: int = Field(default=0, ge=0)
    converged: bool = Field(default=True)
    content_fallbacks: list[str] = Field(
        default_factory=list, description="Pages rendered with built-in default copy"
    )
    ignored_features: list[str] = Field(default_factory=list)
    skipped_artifacts: list[str] = Field(
        default_factory=list, description="Manifest entries the generator had no template for"
    )

    @computed_field  # type: ignore[misc]
    @property
    def ready(self) -> bool:
        """True when no residual defects remain."""
        return len(self.residual_defects) == 0

    @computed_field  # type: ignore[misc]
    @property
    def stand_in_artifacts(self) -> list[str]:
        """Paths produced as synthesized stand-ins rather than full generation."""
        paths: list[str] = []
        for record in self.fixes_applied:
            if record.outcome == FixOutcome.SYNTHESIZED_STAND_IN:
                paths.extend(p for p in record.result_artifacts if p not in paths)
        return paths

    @computed_field  # type: ignore[misc]
    @property
    def content_complete(self) -> bool:
        """True when every artifact was fully generated with provider copy."""
        return not self.stand_in_artifacts and not self.content_fallbacks


class GenerationResult(BaseModel):
    """Frozen artifact set plus report handed to delivery."""

    model_config = ConfigDict(frozen=True)

    manifest: Manifest
    artifacts: tuple[Artifact, ...]
    report: GenerationReport

    def artifact(self, path: str) -> Optional[Artifact]:
        for item in self.artifacts:
            if item.path == path:
                return item
        return None
