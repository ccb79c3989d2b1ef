"""
Widget state record and its transitions.

Every transition returns a new ``WidgetState``; nothing mutates in place.
Fetch results carry the generation they were issued for and are dropped
when a newer selection has happened since.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from alphaview.series import ChartSeries, SymbolSuggestion


class ChartMode(str, Enum):
    LINE = "line"
    CANDLESTICK = "candlestick"


class View(str, Enum):
    PROMPT = "prompt"
    LOADING = "loading"
    LINE = "line"
    CANDLESTICK = "candlestick"
    EMPTY = "empty"


@dataclass(frozen=True)
class WidgetState:
    query: str = ""
    suggestions: Tuple[SymbolSuggestion, ...] = ()
    selected: str = ""
    series: Optional[ChartSeries] = None
    loading: bool = False
    mode: ChartMode = ChartMode.CANDLESTICK
    generation: int = 0
    notice: str = ""


def set_query(state: WidgetState, query: str) -> WidgetState:
    if not query:
        return replace(state, query=query, suggestions=())
    return replace(state, query=query)


def apply_suggestions(
    state: WidgetState, query: str, suggestions: Sequence[SymbolSuggestion]
) -> WidgetState:
    if query != state.query:
        return state
    return replace(state, suggestions=tuple(suggestions), notice="")


def select_symbol(state: WidgetState, symbol: str) -> WidgetState:
    return replace(
        state,
        query=symbol,
        suggestions=(),
        selected=symbol,
        loading=True,
        generation=state.generation + 1,
    )


def is_current(state: WidgetState, generation: int) -> bool:
    return generation == state.generation


def settle_fetch(
    state: WidgetState,
    generation: int,
    series: Optional[ChartSeries] = None,
    notice: str = "",
) -> WidgetState:
    """Finish the fetch issued for *generation*.

    A ``None`` series keeps whatever was displayed before.
    """
    if not is_current(state, generation):
        return state
    return replace(
        state,
        loading=False,
        series=state.series if series is None else series,
        notice=notice,
    )


def with_notice(state: WidgetState, notice: str) -> WidgetState:
    return replace(state, notice=notice)


def set_mode(state: WidgetState, mode: ChartMode) -> WidgetState:
    return replace(state, mode=ChartMode(mode))


def current_view(state: WidgetState) -> View:
    if state.loading:
        return View.LOADING
    if not state.selected:
        return View.PROMPT
    if state.series is None or len(state.series) == 0:
        return View.EMPTY
    if state.mode is ChartMode.LINE:
        return View.LINE
    return View.CANDLESTICK
