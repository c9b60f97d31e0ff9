"""Trade file loading for the command-line harness.

Reads journal exports into raw record mappings. Nothing here validates
trade content; that is the normalizer's job.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".json", ".parquet")


class TradeFileError(ValueError):
    """The trade file is missing, of an unsupported type, or malformed."""


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            return []
        return [dict(row) for row in reader]


def _read_json(path: Path) -> list[dict[str, Any]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise TradeFileError(f"Malformed JSON in {path}: {e}") from e

    if isinstance(payload, dict):
        payload = payload.get("trades")
    if not isinstance(payload, list):
        raise TradeFileError(
            f"Expected a list of trades or an object with a 'trades' list in {path}"
        )
    return payload


def _read_parquet(path: Path) -> list[dict[str, Any]]:
    try:
        table = pq.read_table(path)
    except pa.ArrowException as e:
        raise TradeFileError(f"Unreadable Parquet file {path}: {e}") from e
    return table.to_pylist()


def load_trades(path: str | Path) -> list[dict[str, Any]]:
    """Load raw trade records from a .csv, .json or .parquet file.

    CSV and Parquet columns are the Trade field names (``id``,
    ``trade_date``, ``pnl``, ``strategy_id``, ...). JSON may be a list of
    objects or ``{"trades": [...]}``.

    Raises:
        TradeFileError: If the file does not exist, has an unsupported
            suffix, or cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise TradeFileError(f"Trade file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        records = _read_csv(path)
    elif suffix == ".json":
        records = _read_json(path)
    elif suffix == ".parquet":
        records = _read_parquet(path)
    else:
        raise TradeFileError(
            f"Unsupported trade file type '{suffix}'. Expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        )

    logger.info("Loaded %d trade records from %s", len(records), path)
    return records
