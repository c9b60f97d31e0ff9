"""Drawdown detection over an equity curve.

Each drawdown period moves through three states::

    NoDrawdown --(drawdown > 0)--> InDrawdown --(equity > period peak)--> Recovered

A recovered period is closed and the analyzer returns to NoDrawdown. A
period still InDrawdown when the curve ends is reported with
``recovered=False`` and no recovery fields.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date

from journal_analytics.core.types import DrawdownAnalysis, DrawdownPeriod, EquityPoint

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _OpenPeriod:
    """Mutable accumulator for the period currently InDrawdown."""

    start_date: date
    end_date: date
    magnitude: float
    peak_equity: float
    start_index: int
    end_index: int

    def extend(self, point: EquityPoint) -> None:
        self.end_date = point.trade_date
        self.end_index = point.index
        if point.drawdown > self.magnitude:
            self.magnitude = point.drawdown

    def freeze(self) -> DrawdownPeriod:
        return DrawdownPeriod(
            start_date=self.start_date,
            end_date=self.end_date,
            magnitude=self.magnitude,
            peak_equity=self.peak_equity,
            start_index=self.start_index,
            end_index=self.end_index,
        )


def calculate_max_drawdown(equity_curve: Sequence[EquityPoint]) -> float:
    """Largest absolute peak-to-current gap on the curve. 0.0 for an empty curve."""
    return max((p.drawdown for p in equity_curve), default=0.0)


def analyze_drawdowns(equity_curve: Sequence[EquityPoint]) -> DrawdownAnalysis:
    """Find the maximum drawdown and every drawdown period, in chronological order.

    A period closes only when running equity strictly exceeds the peak
    recorded when it opened. Returning exactly to that peak keeps the
    period open.
    """
    periods: list[DrawdownPeriod] = []
    current: _OpenPeriod | None = None

    for point in equity_curve:
        if current is not None:
            if point.running_equity > current.peak_equity:
                closed = current.freeze()
                periods.append(
                    replace(
                        closed,
                        recovered=True,
                        recovery_date=point.trade_date,
                        recovery_time_days=(point.trade_date - closed.start_date).days,
                    )
                )
                current = None
            else:
                current.extend(point)
                continue

        if point.drawdown > 0:
            current = _OpenPeriod(
                start_date=point.trade_date,
                end_date=point.trade_date,
                magnitude=point.drawdown,
                peak_equity=point.peak_so_far,
                start_index=point.index,
                end_index=point.index,
            )

    if current is not None:
        periods.append(current.freeze())

    analysis = DrawdownAnalysis(
        max_drawdown=calculate_max_drawdown(equity_curve),
        current_drawdown=equity_curve[-1].drawdown if equity_curve else 0.0,
        periods=tuple(periods),
    )
    logger.debug(
        "Drawdown analysis: max=%.2f, periods=%d, open=%s",
        analysis.max_drawdown,
        len(analysis.periods),
        current is not None,
    )
    return analysis
