from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, List, Optional

from alphaview.client import AlphaVantageClient, AlphaVantageError
from alphaview.series import ChartSeries, derive_series
from alphaview.state import (
    ChartMode,
    View,
    WidgetState,
    apply_suggestions,
    current_view,
    is_current,
    select_symbol,
    set_mode,
    set_query,
    settle_fetch,
    with_notice,
)

logger = logging.getLogger(__name__)

Effect = Callable[[], None]
Scheduler = Callable[[Effect], None]
SelectionEffect = Callable[[str, int], None]


def run_now(effect: Effect) -> None:
    effect()


class EffectQueue:
    """Holds scheduled effects until the host drains them."""

    def __init__(self) -> None:
        self._effects: Deque[Effect] = deque()

    def __call__(self, effect: Effect) -> None:
        self._effects.append(effect)

    def __len__(self) -> int:
        return len(self._effects)

    def drain(self) -> int:
        ran = 0
        while self._effects:
            self._effects.popleft()()
            ran += 1
        return ran


class StockWidget:
    """Search box, selection and chart data for one page.

    Selecting a symbol notifies every registered selection effect; the
    intraday fetch is registered as one of them at construction time.
    """

    def __init__(
        self,
        client: AlphaVantageClient,
        schedule: Optional[Scheduler] = None,
        state: Optional[WidgetState] = None,
    ) -> None:
        self._client = client
        self._schedule = schedule if schedule is not None else run_now
        self._state = state if state is not None else WidgetState()
        self._selection_effects: List[SelectionEffect] = []
        self.on_select(self._schedule_fetch)

    @property
    def state(self) -> WidgetState:
        return self._state

    @property
    def view(self) -> View:
        return current_view(self._state)

    def on_select(self, effect: SelectionEffect) -> None:
        self._selection_effects.append(effect)

    def type_query(self, query: str) -> None:
        self._state = set_query(self._state, query)
        if len(query) > 0:
            self._search(query)

    def _search(self, query: str) -> None:
        try:
            matches = self._client.search_symbols(query)
        except AlphaVantageError as exc:
            logger.warning("Error fetching stock symbols for %r: %s", query, exc)
            if query == self._state.query:
                self._state = with_notice(self._state, "Search failed. Try again.")
            return
        self._state = apply_suggestions(self._state, query, matches)

    def select(self, symbol: str) -> None:
        self._state = select_symbol(self._state, symbol)
        generation = self._state.generation
        for effect in list(self._selection_effects):
            effect(symbol, generation)

    def set_mode(self, mode: ChartMode) -> None:
        self._state = set_mode(self._state, mode)

    def _schedule_fetch(self, symbol: str, generation: int) -> None:
        self._schedule(lambda: self.fetch(symbol, generation))

    def fetch(self, symbol: str, generation: int) -> None:
        """Load intraday data for *symbol* on behalf of *generation*."""
        if not is_current(self._state, generation):
            logger.debug("Skipping superseded fetch for %s (generation %d)", symbol, generation)
            return
        series: Optional[ChartSeries] = None
        notice = ""
        try:
            series = derive_series(symbol, self._client.intraday(symbol))
        except AlphaVantageError as exc:
            logger.error("Error fetching stock data for %s: %s", symbol, exc)
            notice = f"Could not load data for {symbol}."
        finally:
            if not is_current(self._state, generation):
                logger.debug("Discarding stale response for %s (generation %d)", symbol, generation)
            self._state = settle_fetch(self._state, generation, series, notice)
