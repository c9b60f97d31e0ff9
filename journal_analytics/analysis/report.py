"""Assembles the full metrics pipeline into one immutable report per scope."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

from journal_analytics.analysis.drawdown import analyze_drawdowns
from journal_analytics.analysis.equity import build_equity_curve
from journal_analytics.analysis.metrics import calculate_core_metrics
from journal_analytics.analysis.risk import calculate_risk_adjusted_metrics
from journal_analytics.core.types import OVERALL_SCOPE, MetricsReport, NormalizedTradeSet

logger = logging.getLogger(__name__)


def build_report(
    trade_set: NormalizedTradeSet,
    scope: str = OVERALL_SCOPE,
    *,
    annualization_factor: float | None = None,
    average_risk_per_trade: float = 1.0,
) -> MetricsReport:
    """Run normalizer output through every calculator and return the report.

    Each stage only reads results that are already complete; the report
    itself is constructed once, at the end.
    """
    core = calculate_core_metrics(trade_set)
    equity_curve = build_equity_curve(trade_set)
    drawdown = analyze_drawdowns(equity_curve)
    risk = calculate_risk_adjusted_metrics(
        trade_set,
        core,
        drawdown,
        annualization_factor=annualization_factor,
        average_risk_per_trade=average_risk_per_trade,
    )

    logger.debug(
        "Report %s: trades=%d, pnl=%.2f, max_dd=%.2f",
        scope,
        core.total_trades,
        risk.total_pnl,
        drawdown.max_drawdown,
    )

    return MetricsReport(
        scope=scope,
        core=core,
        drawdown=drawdown,
        risk=risk,
        equity_curve=equity_curve,
        skipped_count=trade_set.skipped_count,
    )


def reports_to_dict(reports: Mapping[str, MetricsReport]) -> dict[str, dict[str, Any]]:
    """Serialize an aggregator result, keyed by scope."""
    return {scope: report.to_dict() for scope, report in reports.items()}


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)  # "inf", "-inf" or "nan"
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_json_safe(item) for item in value]
    return value


def reports_to_json(reports: Mapping[str, MetricsReport], indent: int | None = 2) -> str:
    """Serialize an aggregator result as strict JSON.

    Non-finite ratios become the strings ``"inf"``, ``"-inf"`` or ``"nan"``,
    since JSON has no token for them.
    """
    return json.dumps(_json_safe(reports_to_dict(reports)), indent=indent, allow_nan=False)

