"""Order-independent trade statistics: win rate, profit factor, expectancy."""

from __future__ import annotations

from collections.abc import Sequence

from journal_analytics.core.types import CoreMetrics, NormalizedTradeSet


def _ratio_or_infinity(numerator: float, denominator: float) -> float:
    """numerator / denominator, with inf for a positive numerator over zero and 0.0 otherwise."""
    if denominator == 0.0:
        return float("inf") if numerator > 0 else 0.0
    return numerator / denominator


def calculate_win_rate(pnls: Sequence[float]) -> float:
    """Fraction of winning trades (0.0 to 1.0).

    Break-even trades (pnl == 0) count in the denominator but not as wins.
    Returns 0.0 if there are no trades.
    """
    if not pnls:
        return 0.0
    winners = sum(1 for p in pnls if p > 0)
    return winners / len(pnls)


def calculate_profit_factor(pnls: Sequence[float]) -> float:
    """Gross profit divided by gross loss.

    Returns:
        0.0 if no trades or no winning trades.
        inf if there are winners but no losers.
        The ratio otherwise.
    """
    gross_profit = sum(p for p in pnls if p > 0)
    gross_loss = abs(sum(p for p in pnls if p < 0))
    return _ratio_or_infinity(gross_profit, gross_loss)


def calculate_trade_expectancy(pnls: Sequence[float]) -> float:
    """Expected P&L per trade: win_rate * avg_win - loss_rate * avg_loss.

    Algebraically this is the mean P&L. Returns 0.0 for no trades.
    """
    return calculate_core_metrics_from_pnls(pnls).trade_expectancy


def calculate_core_metrics_from_pnls(pnls: Sequence[float]) -> CoreMetrics:
    """Compute every core aggregate from a bare sequence of P&L values."""
    total = len(pnls)
    if total == 0:
        return CoreMetrics()

    wins = [p for p in pnls if p > 0]
    losses = [p for p in pnls if p < 0]

    gross_profit = sum(wins)
    gross_loss = abs(sum(losses))

    win_rate = len(wins) / total
    loss_rate = len(losses) / total
    average_win = gross_profit / len(wins) if wins else 0.0
    average_loss = gross_loss / len(losses) if losses else 0.0

    return CoreMetrics(
        total_trades=total,
        winning_trades=len(wins),
        losing_trades=len(losses),
        breakeven_trades=total - len(wins) - len(losses),
        win_rate=win_rate,
        loss_rate=loss_rate,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        profit_factor=_ratio_or_infinity(gross_profit, gross_loss),
        average_win=average_win,
        average_loss=average_loss,
        average_win_loss_ratio=_ratio_or_infinity(average_win, average_loss),
        trade_expectancy=win_rate * average_win - loss_rate * average_loss,
        largest_win=max(wins) if wins else 0.0,
        largest_loss=abs(min(losses)) if losses else 0.0,
    )


def calculate_core_metrics(trade_set: NormalizedTradeSet) -> CoreMetrics:
    """Core metrics for a normalized trade set. Never raises on empty input."""
    return calculate_core_metrics_from_pnls(trade_set.pnls)
