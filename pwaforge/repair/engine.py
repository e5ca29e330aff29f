"""Repair engine: applies one strategy per defect under per-path locks.

Defects whose strategies touch disjoint paths are repaired concurrently;
writes to the same path are serialised in defect order. Records come back
in the order of the defects that produced them.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Mapping, Sequence
from contextlib import AsyncExitStack
from typing import Optional

from rich.markup import escape

from pwaforge.models import Defect, DefectKind, FixRecord
from pwaforge.repair.strategies import STRATEGIES, RepairContext, RepairStrategy
from pwaforge.utils import console


class RepairEngine:
    """Dispatches defects to the strategy registered for their kind.

    Parameters
    ----------
    strategies:
        Defect kind -> strategy. Kinds with no entry are never repaired.
    max_parallel:
        Maximum number of repairs in flight at once.
    """

    def __init__(
        self,
        strategies: Mapping[DefectKind, RepairStrategy] = STRATEGIES,
        max_parallel: int = 4,
    ) -> None:
        if max_parallel < 1:
            raise ValueError("max_parallel must be >= 1")
        self.strategies = strategies
        self.max_parallel = max_parallel

    async def repair(self, defects: Sequence[Defect], context: RepairContext) -> list[FixRecord]:
        """Apply a fix for every defect that still needs one."""
        locks: dict[str, asyncio.Lock] = {}
        semaphore = asyncio.Semaphore(self.max_parallel)

        async def run(defect: Defect) -> Optional[FixRecord]:
            strategy = self.strategies.get(defect.kind)
            if strategy is None or not defect.auto_fixable:
                return None
            paths = sorted({p for p in strategy.paths(defect) if p})
            async with semaphore, AsyncExitStack() as stack:
                # Sorted acquisition keeps multi-path strategies deadlock-free.
                for path in paths:
                    await stack.enter_async_context(locks.setdefault(path, asyncio.Lock()))
                result = strategy.apply(defect, context)
                if inspect.isawaitable(result):
                    result = await result
            if result is not None:
                console.print(
                    f"  [green]{escape(result.strategy)}[/green] "
                    f"{escape(defect.kind.value)} in {escape(defect.artifact or '-')} "
                    f"-> {escape(', '.join(result.result_artifacts))}"
                )
            return result

        results = await asyncio.gather(*(run(defect) for defect in defects))
        return [record for record in results if record is not None]
