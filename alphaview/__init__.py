from __future__ import annotations

from alphaview.client import AlphaVantageClient, AlphaVantageError
from alphaview.state import ChartMode, View, WidgetState
from alphaview.widget import EffectQueue, StockWidget

__all__ = [
    "AlphaVantageClient",
    "AlphaVantageError",
    "ChartMode",
    "EffectQueue",
    "StockWidget",
    "View",
    "WidgetState",
]
