"""Validate-repair loop management.

Each iteration rebuilds the reference graph from scratch, validates the
artifact set and hands the fixable defects to the repair engine. The loop
stops when nothing is left to fix, when an iteration applies no fix, or
when *max_iterations* repair passes did not reach a clean set.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Optional

from pydantic import BaseModel, Field
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pwaforge.graph.builder import ReferenceGraphBuilder
from pwaforge.models import Defect, DefectKind, FixRecord, Manifest
from pwaforge.repair.engine import RepairEngine
from pwaforge.repair.strategies import RepairContext
from pwaforge.utils import console
from pwaforge.validator.validator import ConsistencyValidator, make_defect


class RepairOutcome(BaseModel):
    """What the loop found, fixed and left behind."""

    defects_found: list[Defect] = Field(default_factory=list)
    fixes_applied: list[FixRecord] = Field(default_factory=list)
    residual_defects: list[Defect] = Field(default_factory=list)
    iterations: int = Field(default=0, ge=0, description="Repair passes performed")
    converged: bool = Field(default=True)


class RepairLoop:
    """Runs validate-repair cycles over one artifact set.

    Parameters
    ----------
    max_iterations:
        Maximum number of repair passes before the run is declared
        non-convergent.
    engine, validator, graph_builder:
        Collaborators; defaults are constructed when omitted.
    """

    def __init__(
        self,
        max_iterations: int = 6,
        *,
        engine: Optional[RepairEngine] = None,
        validator: Optional[ConsistencyValidator] = None,
        graph_builder: Optional[ReferenceGraphBuilder] = None,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        self.max_iterations = max_iterations
        self.engine = engine or RepairEngine()
        self.validator = validator or ConsistencyValidator()
        self.graph_builder = graph_builder or ReferenceGraphBuilder()

    # -- Public API ----------------------------------------------------------

    async def validate(self, context: RepairContext, manifest: Manifest) -> list[Defect]:
        graph = self.graph_builder.build(context.artifacts)
        return await self.validator.validate(context.artifacts, graph, manifest)

    async def run(self, context: RepairContext, manifest: Manifest) -> RepairOutcome:
        """Repair ``context.artifacts`` in place and report the result."""
        found: dict[tuple[str, str, str, str], Defect] = {}
        fixes: list[FixRecord] = []
        # Defects a strategy already looked at and could not fix.
        declined: set[tuple[str, str, str, str]] = set()
        iterations = 0

        while True:
            defects = await self.validate(context, manifest)
            for defect in defects:
                found.setdefault(defect.key, defect)

            if not defects:
                if iterations:
                    console.print(
                        f"[green bold]No defects remaining after {iterations} "
                        f"iteration(s).[/green bold]"
                    )
                else:
                    console.print("[green]No defects found -- nothing to repair.[/green]")
                return self._outcome(found, fixes, [], iterations)

            actionable = [d for d in defects if d.auto_fixable and d.key not in declined]
            if not actionable:
                console.print(
                    f"[yellow]{len(defects)} defect(s) have no applicable fix.[/yellow]"
                )
                return self._outcome(found, fixes, defects, iterations)

            if iterations == self.max_iterations:
                console.print(
                    f"[red]Repair loop exhausted after {self.max_iterations} iterations. "
                    f"{len(defects)} defect(s) remain.[/red]"
                )
                stuck = make_defect(
                    DefectKind.REPAIR_NONCONVERGENT,
                    artifact="",
                    detail=f"Repair did not converge within {self.max_iterations} iteration(s); "
                    f"{len(defects)} defect(s) remain",
                    subject=str(self.max_iterations),
                )
                found.setdefault(stuck.key, stuck)
                return self._outcome(found, fixes, [*defects, stuck], iterations, converged=False)

            iterations += 1
            console.print(
                Panel(
                    f"[bold]Repair Iteration {iterations}/{self.max_iterations}[/bold]",
                    style="magenta",
                )
            )
            self._print_defect_summary(defects, iterations)

            records = await self.engine.repair(actionable, context)
            fixed = {record.defect.key for record in records}
            declined.update(d.key for d in actionable if d.key not in fixed)
            fixes.extend(records)

            if not records:
                console.print(
                    "[yellow]No fixes were applied in this iteration. Stopping loop.[/yellow]"
                )
                return self._outcome(found, fixes, defects, iterations)

    # -- Internal ------------------------------------------------------------

    @staticmethod
    def _outcome(
        found: dict[tuple[str, str, str, str], Defect],
        fixes: list[FixRecord],
        residual: list[Defect],
        iterations: int,
        *,
        converged: bool = True,
    ) -> RepairOutcome:
        return RepairOutcome(
            defects_found=list(found.values()),
            fixes_applied=fixes,
            residual_defects=residual,
            iterations=iterations,
            converged=converged,
        )

    @staticmethod
    def _print_defect_summary(defects: list[Defect], iteration: int) -> None:
        """Print a Rich table summarising defects by kind."""
        grouped: dict[str, list[Defect]] = defaultdict(list)
        for defect in defects:
            grouped[defect.kind.value].append(defect)

        table = Table(title=f"Defects by kind (iteration {iteration})", show_lines=True)
        table.add_column("Kind", style="cyan")
        table.add_column("Count", justify="right")
        table.add_column("Sample", max_width=80)

        for kind, items in sorted(grouped.items()):
            table.add_row(kind, str(len(items)), escape(items[0].detail[:120]))

        console.print(table)
