from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from tickquant.contexts.rules.domain.entities import Rule
from tickquant.platform.config import TickQuantRuntimeConfig
from tickquant.shared_kernel.primitives import Candle

if TYPE_CHECKING:
    from tickquant.contexts.evaluation.application.services import EvaluationContext

log = logging.getLogger(__name__)

_DEFAULT_PARALLEL_MIN_INDICES = 4096


class RuleExecutor:
    """
    Scan every index of a context's series and report where a rule holds.

    Large ranges may be split into contiguous chunks evaluated on a thread pool; chunk results
    are concatenated in ascending index order, so output never depends on scheduling.

    Related:
      - src/tickquant/contexts/rules/domain/entities/rule.py
      - src/tickquant/contexts/backtest/application/services/backtest_runner.py
    """

    def __init__(
        self,
        *,
        max_workers: int = 1,
        parallel_min_indices: int = _DEFAULT_PARALLEL_MIN_INDICES,
    ) -> None:
        """
        Validate and store parallelism settings.

        Args:
            max_workers: Thread count; `1` disables the pool.
            parallel_min_indices: Minimum series length before splitting.
        Returns:
            None.
        Assumptions:
            Rules and contexts are safe for concurrent reads.
        Raises:
            ValueError: If any setting is non-positive.
        Side Effects:
            None.
        """
        if max_workers <= 0:
            raise ValueError(f"max_workers must be > 0, got {max_workers}")
        if parallel_min_indices <= 0:
            raise ValueError(f"parallel_min_indices must be > 0, got {parallel_min_indices}")
        self._max_workers = max_workers
        self._parallel_min_indices = parallel_min_indices

    @classmethod
    def from_runtime_config(cls, *, config: TickQuantRuntimeConfig) -> RuleExecutor:
        return cls(
            max_workers=config.rules.executor_max_workers,
            parallel_min_indices=config.rules.parallel_min_indices,
        )

    def evaluate_mask(self, context: EvaluationContext, rule: Rule) -> list[bool]:
        """
        Evaluate rule at every index `[0, len)`.

        Args:
            context: Open evaluation context.
            rule: Rule tree.
        Returns:
            list[bool]: One boolean per index, ascending.
        Assumptions:
            Absent data never raises; leaves return `False`.
        Raises:
            RuntimeError: If the context is closed.
        Side Effects:
            Fills indicator caches inside `context`.
        """
        size = len(context.series)
        if self._max_workers == 1 or size < self._parallel_min_indices:
            return _evaluate_range(context, rule, 0, size)

        chunk_size = -(-size // self._max_workers)
        bounds = [
            (start, min(start + chunk_size, size)) for start in range(0, size, chunk_size)
        ]
        log.debug(
            "rule executor parallel split",
            extra={
                "symbol": str(context.series.symbol),
                "size": size,
                "chunks": len(bounds),
                "max_workers": self._max_workers,
            },
        )
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = [
                pool.submit(_evaluate_range, context, rule, start, stop)
                for start, stop in bounds
            ]
            mask: list[bool] = []
            for future in futures:
                mask.extend(future.result())
        return mask

    def execute(self, context: EvaluationContext, rule: Rule) -> list[int]:
        """Ascending indices where `rule` holds."""
        return [index for index, hit in enumerate(self.evaluate_mask(context, rule)) if hit]

    def execute_candles(self, context: EvaluationContext, rule: Rule) -> list[Candle]:
        """Candles at the indices where `rule` holds."""
        series = context.series
        return [series[index] for index in self.execute(context, rule)]


def _evaluate_range(
    context: EvaluationContext,
    rule: Rule,
    start: int,
    stop: int,
) -> list[bool]:
    series = context.series
    return [rule.evaluate(series, index, context) for index in range(start, stop)]
