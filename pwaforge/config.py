"""pwaforge configuration.

Centralised, typed configuration for the generation-and-repair pipeline. All
settings use Pydantic v2 models so they can be validated at construction time
and serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


class OllamaConfig(BaseModel):
    """Configuration for the optional Ollama-backed content provider."""

    url: str = Field(default="http://localhost:11434")
    model: str = Field(default="llama3.1:8b")
    timeout: int = Field(default=60, ge=1, description="Per-request HTTP timeout in seconds")


class ContentConfig(BaseModel):
    """How page copy is sourced."""

    provider: str = Field(
        default="static",
        description="Content provider to use: 'static' or 'ollama'",
    )
    timeout: float = Field(
        default=5.0,
        gt=0.0,
        description="Seconds to wait for the provider before falling back to default copy",
    )
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)


class GeneratorConfig(BaseModel):
    """Tuning knobs for artifact generation."""

    max_parallel_artifacts: int = Field(
        default=8, ge=1, description="Maximum artifacts rendered concurrently"
    )
    template_dir: Optional[Path] = Field(
        default=None,
        description="Override for the bundled Jinja2 template directory",
    )


class RepairConfig(BaseModel):
    """Tuning knobs for the repair loop."""

    max_iterations: int = Field(
        default=6, ge=1, description="Maximum validate-repair cycles before hard failure"
    )
    max_parallel_repairs: int = Field(
        default=4, ge=1, description="Maximum artifact paths repaired concurrently"
    )


class ForgeConfig(BaseModel):
    """Global pwaforge configuration.

    Instances are typically created once by the CLI entry point (or by a
    caller embedding the pipeline) and then passed through the rest of the
    system.
    """

    output_dir: Path = Field(default=Path("./output"))
    report_name: str = Field(default="generation-report.json")
    content: ContentConfig = Field(default_factory=ContentConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    repair: RepairConfig = Field(default_factory=RepairConfig)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    @property
    def report_path(self) -> Path:
        """Where the JSON generation report is written."""
        return self.output_dir / self.report_name

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``<output_dir>/pwaforge.json``.

        Returns:
            The path where the file was written.
        """
        target = path or (self.output_dir / "pwaforge.json")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ForgeConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ForgeConfig":
        """Build a ``ForgeConfig`` from environment variables.

        Recognised variables (all optional):
            PWAFORGE_OUTPUT_DIR, PWAFORGE_CONTENT_PROVIDER,
            PWAFORGE_CONTENT_TIMEOUT, PWAFORGE_OLLAMA_URL,
            PWAFORGE_OLLAMA_MODEL, PWAFORGE_MAX_PARALLEL_ARTIFACTS,
            PWAFORGE_MAX_ITERATIONS, PWAFORGE_MAX_PARALLEL_REPAIRS.
        """
        ollama_kwargs: dict[str, Any] = {}
        if os.environ.get("PWAFORGE_OLLAMA_URL"):
            ollama_kwargs["url"] = os.environ["PWAFORGE_OLLAMA_URL"]
        if os.environ.get("PWAFORGE_OLLAMA_MODEL"):
            ollama_kwargs["model"] = os.environ["PWAFORGE_OLLAMA_MODEL"]

        content_kwargs: dict[str, Any] = {"ollama": OllamaConfig(**ollama_kwargs)}
        if os.environ.get("PWAFORGE_CONTENT_PROVIDER"):
            content_kwargs["provider"] = os.environ["PWAFORGE_CONTENT_PROVIDER"]
        if os.environ.get("PWAFORGE_CONTENT_TIMEOUT"):
            content_kwargs["timeout"] = float(os.environ["PWAFORGE_CONTENT_TIMEOUT"])

        generator_kwargs: dict[str, Any] = {}
        if os.environ.get("PWAFORGE_MAX_PARALLEL_ARTIFACTS"):
            generator_kwargs["max_parallel_artifacts"] = int(
                os.environ["PWAFORGE_MAX_PARALLEL_ARTIFACTS"]
            )

        repair_kwargs: dict[str, Any] = {}
        if os.environ.get("PWAFORGE_MAX_ITERATIONS"):
            repair_kwargs["max_iterations"] = int(os.environ["PWAFORGE_MAX_ITERATIONS"])
        if os.environ.get("PWAFORGE_MAX_PARALLEL_REPAIRS"):
            repair_kwargs["max_parallel_repairs"] = int(
                os.environ["PWAFORGE_MAX_PARALLEL_REPAIRS"]
            )

        return cls(
            output_dir=Path(os.environ.get("PWAFORGE_OUTPUT_DIR", "./output")),
            content=ContentConfig(**content_kwargs),
            generator=GeneratorConfig(**generator_kwargs),
            repair=RepairConfig(**repair_kwargs),
        )
