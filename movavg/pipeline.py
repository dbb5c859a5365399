"""
pandas adapters for the sliding averager.

Runs a ``pd.Series`` (or selected ``pd.DataFrame`` columns) through a
fresh :class:`~movavg.averager.SlidingAverager` and returns the averages
as pandas objects indexed by the ready keys.

Typical usage
-------------
::

    from movavg.config import AveragerConfig
    from movavg.pipeline import load_series, moving_average

    close = load_series("prices/AAPL_1d.csv", "close")
    sma20 = moving_average(close, AveragerConfig(period=20))

Missing values
--------------
``NaN``, ``pd.NA`` (nullable dtypes) and ``None`` (object series) count
as absent: they take a slot in the window but contribute neither to the
sum nor to the count.
A window holding nothing but absent values raises
:class:`~movavg.types.DivisionByZeroError`.

Duplicate index labels share one output slot; the later average wins.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from .config import AveragerConfig, build_averager

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def load_series(
    path: str | Path,
    column: str,
    *,
    index_col: str = "timestamp",
) -> pd.Series:
    """Load one column of a CSV or Parquet file as a ``pd.Series``.

    Parameters
    ----------
    path : str | Path
        ``.parquet`` files are read with :func:`pd.read_parquet`,
        anything else with :func:`pd.read_csv`.
    column : str
        Column holding the observations.
    index_col : str
        Column used as the index (parsed to datetimes when named
        ``timestamp`` or ``date``).  Ignored if absent from the file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If *column* is missing from the file.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"No data file at {p}")

    if p.suffix == ".parquet":
        df = pd.read_parquet(p)
    else:
        df = pd.read_csv(p)

    if column not in df.columns:
        raise ValueError(f"{p} missing required column '{column}'")

    if index_col in df.columns:
        if index_col in ("timestamp", "date"):
            df[index_col] = pd.to_datetime(df[index_col])
        df = df.set_index(index_col)

    series = df[column].astype(np.float64)
    log.debug("loaded %d rows of %r from %s", len(series), column, p)
    return series


# ---------------------------------------------------------------------------
# Series / DataFrame averages
# ---------------------------------------------------------------------------


def moving_average(series: pd.Series, config: AveragerConfig) -> pd.Series:
    """Moving average of *series* under *config*.

    Returns a float64 series named ``{name}_ma{period}`` (``ma{period}``
    for an unnamed input) whose index holds the ready keys in emission
    order.  With a valid config every input label is emitted once.
    """
    averager = build_averager(config)
    # Nullable dtypes yield pd.NA, which numpy cannot cast to float.
    values = series.to_numpy(dtype=np.float64, na_value=np.nan)
    results = averager.compute_from_stream(zip(series.index, values))

    name = f"{series.name}_ma{config.period}" if series.name is not None else f"ma{config.period}"
    index = pd.Index(list(results.keys()), name=series.index.name)
    return pd.Series(list(results.values()), index=index, dtype=np.float64, name=name)


def moving_average_frame(
    df: pd.DataFrame,
    config: AveragerConfig,
    columns: Optional[List[str]] = None,
) -> pd.DataFrame:
    """Apply :func:`moving_average` to each of *columns* (default: all numeric).

    Each column gets its own averager, so the columns are independent
    streams.  Output columns are renamed ``{column}_ma{period}``.
    """
    if columns is None:
        columns = list(df.select_dtypes(include="number").columns)

    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"DataFrame missing column(s): {missing}")

    out = {col: moving_average(df[col], config) for col in columns}
    if not out:
        return pd.DataFrame(index=df.index[:0])
    return pd.concat(list(out.values()), axis=1)
