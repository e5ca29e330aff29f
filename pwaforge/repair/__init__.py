"""Repair engine -- deterministic fixes for validator defects.

Quick usage::

    from pwaforge.repair import RepairContext, RepairLoop

    outcome = await RepairLoop(max_iterations=6).run(RepairContext(artifacts), manifest)
    print(outcome.converged, len(outcome.residual_defects))
"""

from pwaforge.repair.engine import RepairEngine
from pwaforge.repair.loop import RepairLoop, RepairOutcome
from pwaforge.repair.strategies import (
    STRATEGIES,
    STRATEGY_CONFIDENCE,
    AppendedSelector,
    PinnedDependency,
    RepairContext,
    RepairStrategy,
    RouteNavigationRepair,
    SynthesizedStub,
    SyntaxRepair,
    insert_import,
)
from pwaforge.repair.stubs import StubSynthesizer, placeholder_content

__all__ = [
    "AppendedSelector",
    "PinnedDependency",
    "RepairContext",
    "RepairEngine",
    "RepairLoop",
    "RepairOutcome",
    "RepairStrategy",
    "RouteNavigationRepair",
    "STRATEGIES",
    "STRATEGY_CONFIDENCE",
    "StubSynthesizer",
    "SynthesizedStub",
    "SyntaxRepair",
    "insert_import",
    "placeholder_content",
]
