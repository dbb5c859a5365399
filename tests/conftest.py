"""
Pytest configuration and shared fixtures.
"""
import sys
from pathlib import Path
from typing import Dict

# Add project root to path so "movavg" can be imported without installing
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pandas as pd
import pytest


@pytest.fixture
def minute_prices() -> Dict[str, int]:
    """Eight one-minute closes keyed by clock time."""
    return {
        "13:30": 20,
        "13:31": 18,
        "13:32": 24,
        "13:33": 21,
        "13:34": 15,
        "13:35": 15,
        "13:36": 17,
        "13:37": 19,
    }


@pytest.fixture
def letters() -> Dict[str, int]:
    """A..G mapped to 1..7."""
    return {k: i + 1 for i, k in enumerate("ABCDEFG")}


@pytest.fixture
def daily_close() -> pd.Series:
    """Ten daily closes with a DatetimeIndex named ``timestamp``."""
    dates = pd.date_range("2024-01-01", periods=10, freq="D", name="timestamp")
    return pd.Series([float(10 + i) for i in range(10)], index=dates, name="close")
