"""
Intraday data model and the pure derivations behind both chart views.

Alpha Vantage hands back every number as a string and lists intraday bars
newest first; everything here works on the parsed, oldest-first samples.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import pandas as pd

INTERVAL = "5min"
SERIES_KEY = f"Time Series ({INTERVAL})"
_OHLC_FIELDS = {
    "1. open": "open",
    "2. high": "high",
    "3. low": "low",
    "4. close": "close",
}

LinePoint = Tuple[str, float]
CandlePoint = Tuple[str, Tuple[float, float, float, float]]


class MalformedSeries(ValueError):
    """Raised when a payload does not carry a usable intraday series."""


@dataclass(frozen=True)
class SymbolSuggestion:
    symbol: str
    name: str

    @property
    def label(self) -> str:
        return f"{self.symbol} - {self.name}"


@dataclass(frozen=True)
class TimeSeriesSample:
    timestamp: str
    open: float
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class ChartSeries:
    """Both chart projections of one response, derived together."""

    symbol: str
    samples: Tuple[TimeSeriesSample, ...]
    line: Tuple[LinePoint, ...]
    candlestick: Tuple[CandlePoint, ...]

    def __len__(self) -> int:
        return len(self.samples)


def parse_matches(payload: Dict[str, object]) -> List[SymbolSuggestion]:
    matches = payload.get("bestMatches")
    if not isinstance(matches, list):
        return []
    out = []
    for item in matches:
        if not isinstance(item, dict):
            continue
        out.append(
            SymbolSuggestion(
                symbol=str(item.get("1. symbol", "")),
                name=str(item.get("2. name", "")),
            )
        )
    return out


def parse_intraday(payload: Dict[str, object], series_key: str = SERIES_KEY) -> List[TimeSeriesSample]:
    """Turn a TIME_SERIES_INTRADAY payload into samples, oldest first.

    The API order is reversed rather than sorted, matching what the
    provider documents (newest first).
    """
    block = payload.get(series_key)
    if not isinstance(block, dict):
        raise MalformedSeries(f"missing {series_key!r} in response")
    if not block:
        return []
    if not all(isinstance(row, dict) for row in block.values()):
        raise MalformedSeries("series rows must be objects")

    df = pd.DataFrame.from_dict(block, orient="index")
    missing = [field for field in _OHLC_FIELDS if field not in df.columns]
    if missing:
        raise MalformedSeries(f"series rows lack fields: {', '.join(missing)}")
    df = df[list(_OHLC_FIELDS)].rename(columns=_OHLC_FIELDS).iloc[::-1]
    try:
        df = df.astype(float)
    except (TypeError, ValueError) as exc:
        raise MalformedSeries(f"non-numeric price in series: {exc}") from exc
    if df.isna().to_numpy().any():
        raise MalformedSeries("series rows have empty prices")

    return [
        TimeSeriesSample(
            timestamp=str(ts),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
        )
        for ts, row in zip(df.index, df.itertuples(index=False))
    ]


def line_series(samples: Sequence[TimeSeriesSample]) -> Tuple[LinePoint, ...]:
    return tuple((s.timestamp, s.open) for s in samples)


def candlestick_series(samples: Sequence[TimeSeriesSample]) -> Tuple[CandlePoint, ...]:
    return tuple((s.timestamp, (s.open, s.high, s.low, s.close)) for s in samples)


def derive_series(symbol: str, samples: Sequence[TimeSeriesSample]) -> ChartSeries:
    ordered = tuple(samples)
    return ChartSeries(
        symbol=symbol,
        samples=ordered,
        line=line_series(ordered),
        candlestick=candlestick_series(ordered),
    )


def to_epoch(timestamp: str) -> int:
    return int(pd.Timestamp(timestamp).timestamp())
