"""Per-strategy breakdown — runs the report pipeline once per partition plus overall."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from journal_analytics.analysis.report import build_report
from journal_analytics.core.normalizer import normalize_trades
from journal_analytics.core.types import (
    OVERALL_SCOPE,
    UNGROUPED_SCOPE,
    MetricsReport,
    NormalizedTradeSet,
    Trade,
)

if TYPE_CHECKING:
    from journal_analytics.config import Settings

logger = logging.getLogger(__name__)

_RESERVED_SCOPES = frozenset({OVERALL_SCOPE, UNGROUPED_SCOPE})


def strategy_scope(strategy_id: str | None) -> str:
    """Report key for a strategy id.

    ``None`` maps to ``__ungrouped__``. An id that spells a reserved scope
    is prefixed with ``strategy:`` so it never replaces the overall report
    or merges into the ungrouped bucket.
    """
    if strategy_id is None:
        return UNGROUPED_SCOPE
    if strategy_id in _RESERVED_SCOPES:
        return f"strategy:{strategy_id}"
    return strategy_id


def partition_by_strategy(trade_set: NormalizedTradeSet) -> dict[str, NormalizedTradeSet]:
    """Group trades by their literal strategy_id, keeping chronological order.

    Keys come from :func:`strategy_scope`. Strategy ids are not checked against any list of known strategies.
    """
    buckets: dict[str, list[Trade]] = {}
    for trade in trade_set.trades:
        buckets.setdefault(strategy_scope(trade.strategy_id), []).append(trade)
    return {key: trade_set.subset(trades) for key, trades in buckets.items()}


class StrategyAggregator:
    """Builds a MetricsReport for the whole trade set and for each strategy.

    Usage::

        aggregator = StrategyAggregator.from_settings(settings)
        reports = aggregator.aggregate(trades, known_strategies=["breakout"])
        reports["__overall__"].win_rate

    Partitions share nothing, so with ``max_workers > 1`` they are
    computed on a thread pool. The result is keyed, never ordered.
    """

    def __init__(
        self,
        annualization_factor: float | None = None,
        average_risk_per_trade: float = 1.0,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.annualization_factor = annualization_factor
        self.average_risk_per_trade = average_risk_per_trade
        self.max_workers = max_workers

    @classmethod
    def from_settings(cls, settings: Settings) -> StrategyAggregator:
        return cls(
            annualization_factor=settings.annualization_factor,
            average_risk_per_trade=settings.average_risk_per_trade,
            max_workers=settings.max_workers,
        )

    def _build(self, scope: str, trade_set: NormalizedTradeSet) -> MetricsReport:
        return build_report(
            trade_set,
            scope,
            annualization_factor=self.annualization_factor,
            average_risk_per_trade=self.average_risk_per_trade,
        )

    def aggregate(
        self,
        records: Iterable[Trade | Mapping[str, Any]] | NormalizedTradeSet,
        known_strategies: Iterable[str] = (),
    ) -> dict[str, MetricsReport]:
        """Return reports keyed by ``__overall__`` and by each strategy id.

        Args:
            records: Raw records, or a trade set that is already normalized.
            known_strategies: Strategy ids that must appear in the result
                even with no trades; they get a zero-valued report.
        """
        trade_set = (
            records if isinstance(records, NormalizedTradeSet) else normalize_trades(records)
        )

        partitions = partition_by_strategy(trade_set)
        for strategy_id in known_strategies:
            partitions.setdefault(strategy_scope(strategy_id), NormalizedTradeSet())

        jobs: list[tuple[str, NormalizedTradeSet]] = [(OVERALL_SCOPE, trade_set)]
        jobs.extend(sorted(partitions.items()))

        logger.info(
            "Aggregating %d trades across %d partitions (workers=%d)",
            len(trade_set),
            len(partitions),
            self.max_workers,
        )

        if self.max_workers == 1 or len(jobs) == 1:
            built = [self._build(scope, subset) for scope, subset in jobs]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                built = list(pool.map(lambda job: self._build(*job), jobs))

        reports: dict[str, MetricsReport] = {}
        for partition_report in built:
            reports[partition_report.scope] = partition_report
        return reports
