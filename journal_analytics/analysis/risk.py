"""Risk-adjusted metrics: Sharpe ratio, recovery factor, edge ratio."""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence
from typing import Literal

from journal_analytics.core.types import (
    CoreMetrics,
    DrawdownAnalysis,
    NormalizedTradeSet,
    RiskAdjustedMetrics,
)

Rating = Literal["excellent", "good", "average", "poor"]


def calculate_standard_deviation(pnls: Sequence[float]) -> float:
    """Population standard deviation. 0.0 for fewer than two values.

    Exact arithmetic, so identical values give exactly 0.0.
    """
    if len(pnls) <= 1:
        return 0.0
    return statistics.pstdev(pnls)


def calculate_sharpe_ratio(
    pnls: Sequence[float],
    annualization_factor: float | None = None,
) -> float:
    """Per-trade Sharpe ratio: mean P&L over its population standard deviation.

    Each trade's P&L is one observation of the returns series; no
    risk-free rate is subtracted. When ``annualization_factor`` is given
    (e.g. 252 for one trade per trading day) the ratio is multiplied by
    its square root.

    Returns 0.0 for fewer than two trades or zero standard deviation.
    """
    if len(pnls) <= 1:
        return 0.0

    std_dev = calculate_standard_deviation(pnls)
    if std_dev == 0.0:
        return 0.0

    sharpe = statistics.fmean(pnls) / std_dev
    if annualization_factor is not None:
        sharpe *= math.sqrt(annualization_factor)
    return sharpe


def calculate_recovery_factor(total_pnl: float, max_drawdown: float) -> float:
    """Net profit over maximum drawdown.

    Returns:
        inf if there was no drawdown and the net result is positive.
        0.0 if there was no drawdown otherwise.
        The ratio otherwise (negative when net profit is negative).
    """
    if max_drawdown == 0.0:
        return float("inf") if total_pnl > 0 else 0.0
    return total_pnl / max_drawdown


def calculate_edge_ratio(trade_expectancy: float, average_risk_per_trade: float = 1.0) -> float:
    """Expectancy per unit of risk. 0.0 when the risk measure is zero."""
    if average_risk_per_trade == 0.0:
        return 0.0
    return trade_expectancy / average_risk_per_trade


def calculate_risk_adjusted_metrics(
    trade_set: NormalizedTradeSet,
    core: CoreMetrics,
    drawdown: DrawdownAnalysis,
    *,
    annualization_factor: float | None = None,
    average_risk_per_trade: float = 1.0,
) -> RiskAdjustedMetrics:
    """Derive the risk-adjusted metrics from finalized core and drawdown results."""
    pnls = trade_set.pnls
    # Same value as sum(pnls); derived from the gross figures so the two always agree.
    total_pnl = core.gross_profit - core.gross_loss

    return RiskAdjustedMetrics(
        total_pnl=total_pnl,
        standard_deviation=calculate_standard_deviation(pnls),
        sharpe_ratio=calculate_sharpe_ratio(pnls, annualization_factor),
        recovery_factor=calculate_recovery_factor(total_pnl, drawdown.max_drawdown),
        edge_ratio=calculate_edge_ratio(core.trade_expectancy, average_risk_per_trade),
    )


def rate_recovery_factor(value: float) -> Rating:
    if value >= 3:
        return "excellent"
    if value >= 2:
        return "good"
    if value >= 1:
        return "average"
    return "poor"


def rate_edge_ratio(value: float) -> Rating:
    if value >= 2.0:
        return "excellent"
    if value >= 1.5:
        return "good"
    if value >= 1.0:
        return "average"
    return "poor"
