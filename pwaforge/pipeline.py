"""pwaforge pipeline orchestrator.

Runs one generation request end to end:

1. RESOLVE  -- validate the feature selection and derive the file manifest.
2. GENERATE -- render every artifact, fetching industry copy per page.
3. REPAIR   -- validate the artifact set and apply deterministic fixes until
               it is consistent or the iteration cap is reached.

Usage::

    pwaforge selection.json --output ./my-pwa
    python -m pwaforge.pipeline selection.json -o ./my-pwa --max-iterations 3
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from collections.abc import Iterable, Mapping
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from rich.markup import escape
from rich.panel import Panel

from pwaforge.config import ContentConfig, ForgeConfig
from pwaforge.content.ollama import OllamaContentProvider
from pwaforge.content.provider import ContentProvider, StaticContentProvider
from pwaforge.generator.generator import ArtifactGenerator
from pwaforge.generator.project import package_name
from pwaforge.generator.templates import TemplateRenderer
from pwaforge.models import Artifact, FeatureSelection, GenerationReport, GenerationResult
from pwaforge.repair.engine import RepairEngine
from pwaforge.repair.loop import RepairLoop
from pwaforge.repair.strategies import RepairContext
from pwaforge.repair.stubs import StubSynthesizer
from pwaforge.resolver.resolver import ConfigurationError, load_selection, resolve_manifest
from pwaforge.resolver.tables import DEFAULT_TABLES, ResolverTables
from pwaforge.utils import (
    console,
    format_duration,
    load_json,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    save_json,
    write_file,
)
from pwaforge.validator.validator import ConsistencyValidator


def build_provider(config: ContentConfig) -> ContentProvider:
    """The content provider named by ``config.provider``."""
    if config.provider == "static":
        return StaticContentProvider()
    if config.provider == "ollama":
        return OllamaContentProvider.from_config(config.ollama)
    raise ConfigurationError(f"Unknown content provider: {config.provider!r}")


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class GenerationPipeline:
    """Resolve -> generate -> repair for one feature selection at a time.

    Attributes:
        config: Global configuration.
        provider: Source of industry copy; built from ``config.content``
            when not supplied.
        tables: Feature, dependency and version tables shared by every stage.
    """

    def __init__(
        self,
        config: Optional[ForgeConfig] = None,
        *,
        provider: Optional[ContentProvider] = None,
        tables: ResolverTables = DEFAULT_TABLES,
    ) -> None:
        self.config = config or ForgeConfig()
        self.tables = tables
        self.provider = provider or build_provider(self.config.content)
        self.renderer = TemplateRenderer(self.config.generator.template_dir)
        self.generator = ArtifactGenerator(
            provider=self.provider,
            renderer=self.renderer,
            tables=tables,
            content_timeout=self.config.content.timeout,
            max_parallel=self.config.generator.max_parallel_artifacts,
        )

    async def generate(
        self, raw: FeatureSelection | Mapping[str, Any]
    ) -> GenerationResult:
        """Run one request.

        Raises:
            ConfigurationError: If the selection is malformed. Nothing is
                generated in that case.
        """
        selection = load_selection(raw)
        manifest = resolve_manifest(selection, self.tables)

        console.print(
            Panel(
                f"[bold]{escape(selection.display_name)}[/bold]\n"
                f"{len(manifest.pages)} page(s), {len(manifest.components)} component(s)",
                title="[bold]Generating[/bold]",
                border_style="cyan",
            )
        )
        output = await self.generator.generate(selection, manifest)

        context = RepairContext(
            output.artifacts,
            stubs=StubSynthesizer(self.renderer, business=selection.display_name),
            tables=self.tables,
            package_name=package_name(selection),
        )
        loop = RepairLoop(
            self.config.repair.max_iterations,
            engine=RepairEngine(max_parallel=self.config.repair.max_parallel_repairs),
            validator=ConsistencyValidator(self.tables),
        )
        outcome = await loop.run(context, manifest)

        report = GenerationReport(
            defects_found=outcome.defects_found,
            fixes_applied=outcome.fixes_applied,
            residual_defects=outcome.residual_defects,
            iterations=outcome.iterations,
            converged=outcome.converged,
            content_fallbacks=output.content_fallbacks,
            ignored_features=list(manifest.ignored_features),
            skipped_artifacts=output.skipped_artifacts,
        )
        return GenerationResult(
            manifest=manifest,
            artifacts=context.artifacts.snapshot(),
            report=report,
        )


def generate_project(
    raw: FeatureSelection | Mapping[str, Any],
    config: Optional[ForgeConfig] = None,
) -> GenerationResult:
    """Blocking wrapper around :meth:`GenerationPipeline.generate`."""
    return asyncio.run(GenerationPipeline(config).generate(raw))


# ---------------------------------------------------------------------------
# Delivery helpers
# ---------------------------------------------------------------------------


def write_artifacts(artifacts: Iterable[Artifact], output_dir: str | Path) -> list[Path]:
    """Write every artifact under ``output_dir``.

    Raises:
        ValueError: If an artifact path is absolute or escapes ``output_dir``.
    """
    root = Path(output_dir)
    written: list[Path] = []
    for artifact in artifacts:
        pure = PurePosixPath(artifact.path)
        if pure.is_absolute() or ".." in pure.parts:
            raise ValueError(f"Refusing to write outside the output directory: {artifact.path}")
        target = root.joinpath(*pure.parts)
        write_file(target, artifact.content)
        written.append(target)
    return written


async def save_report(report: GenerationReport, path: str | Path) -> None:
    await save_json(report.model_dump(mode="json"), path)


def print_report(result: GenerationResult, elapsed: Optional[float] = None) -> None:
    """Print the summary table and the final status panel."""
    report = result.report
    summary = {
        "Pages": ", ".join(result.manifest.pages) or "none",
        "Artifacts": str(len(result.artifacts)),
        "Iterations": str(report.iterations),
        "Defects found": str(len(report.defects_found)),
        "Fixes applied": str(len(report.fixes_applied)),
        "Residual defects": str(len(report.residual_defects)),
        "Stand-ins": ", ".join(report.stand_in_artifacts) or "none",
        "Content fallbacks": ", ".join(report.content_fallbacks) or "none",
    }
    if report.ignored_features:
        summary["Ignored features"] = ", ".join(report.ignored_features)
    if elapsed is not None:
        summary["Duration"] = format_duration(elapsed)
    print_summary_table({k: escape(v) for k, v in summary.items()}, title="Generation Summary")

    for defect in report.residual_defects:
        print_warning(f"  [{defect.kind.value}] {escape(defect.artifact or '-')}: {escape(defect.detail)}")

    if report.ready:
        border_style = "bold green"
        status = "[bold green]READY[/bold green]"
        if not report.content_complete:
            status += " [yellow](with stand-ins or default copy)[/yellow]"
    else:
        border_style = "bold red"
        status = "[bold red]NOT READY[/bold red]"

    console.print(Panel(status, title="[bold]Generation Complete[/bold]", border_style=border_style))


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return number


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``pwaforge``."""
    parser = argparse.ArgumentParser(
        description="pwaforge -- generate a consistent PWA project from a feature selection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  pwaforge selection.json\n"
            "  pwaforge selection.json -o ./my-pwa --max-iterations 3\n"
            "  pwaforge selection.json --ollama --content-timeout 30\n"
        ),
    )
    parser.add_argument("selection", help="Path to the feature selection JSON file")
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output directory (default: ./output or PWAFORGE_OUTPUT_DIR)",
    )
    parser.add_argument(
        "--max-iterations",
        type=_positive_int,
        default=None,
        help="Maximum validate-repair iterations (default: 6)",
    )
    parser.add_argument(
        "--content-timeout",
        type=_positive_float,
        default=None,
        help="Seconds to wait for page copy before using default copy (default: 5)",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Load settings from a saved pwaforge.json instead of PWAFORGE_* variables",
    )
    parser.add_argument(
        "--ollama",
        action="store_true",
        help="Source page copy from a local Ollama model",
    )

    args = parser.parse_args(argv)

    selection_path = Path(args.selection)
    if not selection_path.exists():
        print_error(f"Error: selection file not found: {selection_path}")
        sys.exit(1)
    try:
        raw = load_json(selection_path)
    except json.JSONDecodeError as exc:
        print_error(f"Error: {selection_path} is not valid JSON: {escape(str(exc))}")
        sys.exit(1)

    try:
        config = ForgeConfig.load(Path(args.config)) if args.config else ForgeConfig.from_env()
    except (OSError, ValueError) as exc:
        print_error(f"Error: invalid configuration: {escape(str(exc))}")
        sys.exit(1)
    if args.output:
        config.output_dir = Path(args.output)
    if args.max_iterations is not None:
        config.repair.max_iterations = args.max_iterations
    if args.content_timeout is not None:
        config.content.timeout = args.content_timeout
    if args.ollama:
        config.content.provider = "ollama"

    started = time.monotonic()
    try:
        result = asyncio.run(GenerationPipeline(config).generate(raw))
    except ConfigurationError as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)

    written = write_artifacts(result.artifacts, config.output_dir)
    asyncio.run(save_report(result.report, config.report_path))
    config_path = config.save()
    print_report(result, time.monotonic() - started)
    print_success(
        f"Wrote {len(written)} file(s) to {escape(str(config.output_dir.resolve()))}; "
        f"report at {escape(str(config.report_path))}; "
        f"settings at {escape(str(config_path))}"
    )

    if not result.report.ready:
        sys.exit(1)


if __name__ == "__main__":
    main()
