"""Analysis module — performance metrics, equity curve and drawdowns for a trade set."""

from journal_analytics.analysis.aggregator import (
    StrategyAggregator,
    partition_by_strategy,
    strategy_scope,
)
from journal_analytics.analysis.drawdown import analyze_drawdowns, calculate_max_drawdown
from journal_analytics.analysis.equity import build_equity_curve
from journal_analytics.analysis.metrics import (
    calculate_core_metrics,
    calculate_profit_factor,
    calculate_trade_expectancy,
    calculate_win_rate,
)
from journal_analytics.analysis.report import build_report, reports_to_dict, reports_to_json
from journal_analytics.analysis.risk import (
    calculate_edge_ratio,
    calculate_recovery_factor,
    calculate_risk_adjusted_metrics,
    calculate_sharpe_ratio,
    rate_edge_ratio,
    rate_recovery_factor,
)

__all__ = [
    "StrategyAggregator",
    "analyze_drawdowns",
    "build_equity_curve",
    "build_report",
    "calculate_core_metrics",
    "calculate_edge_ratio",
    "calculate_max_drawdown",
    "calculate_profit_factor",
    "calculate_recovery_factor",
    "calculate_risk_adjusted_metrics",
    "calculate_sharpe_ratio",
    "calculate_trade_expectancy",
    "calculate_win_rate",
    "partition_by_strategy",
    "rate_edge_ratio",
    "rate_recovery_factor",
    "reports_to_dict",
    "reports_to_json",
    "strategy_scope",
]
