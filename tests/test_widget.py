"""Tests for the widget controller: search, selection effects and fetch guards."""

import logging
from unittest.mock import MagicMock

import pytest

from alphaview.client import AlphaVantageClient, MalformedResponseError, TransportError
from alphaview.series import SymbolSuggestion, TimeSeriesSample, parse_intraday
from alphaview.state import ChartMode, View
from alphaview.widget import EffectQueue, StockWidget


def _bar(ts, price):
    return TimeSeriesSample(ts, price, price + 1, price - 1, price + 0.5)


@pytest.fixture
def av():
    return MagicMock(spec=AlphaVantageClient)


class TestSearch:
    def test_suggestions_from_search(self, av):
        av.search_symbols.return_value = [SymbolSuggestion("AAPL", "Apple Inc.")]
        widget = StockWidget(av)
        widget.type_query("AAP")
        av.search_symbols.assert_called_once_with("AAP")
        assert [s.label for s in widget.state.suggestions] == ["AAPL - Apple Inc."]

    def test_empty_query_skips_request(self, av):
        av.search_symbols.return_value = [SymbolSuggestion("AAPL", "Apple Inc.")]
        widget = StockWidget(av)
        widget.type_query("A")
        widget.type_query("")
        assert av.search_symbols.call_count == 1
        assert widget.state.suggestions == ()

    def test_whitespace_query_is_searched(self, av):
        av.search_symbols.return_value = []
        StockWidget(av).type_query(" ")
        av.search_symbols.assert_called_once_with(" ")

    def test_no_matches_clears_list(self, av):
        av.search_symbols.side_effect = [[SymbolSuggestion("AAPL", "Apple Inc.")], []]
        widget = StockWidget(av)
        widget.type_query("AAP")
        widget.type_query("AAPX")
        assert widget.state.suggestions == ()

    def test_failure_keeps_prior_suggestions(self, av, caplog):
        apple = SymbolSuggestion("AAPL", "Apple Inc.")
        av.search_symbols.side_effect = [[apple], TransportError("boom")]
        widget = StockWidget(av)
        widget.type_query("AAP")
        with caplog.at_level(logging.WARNING, logger="alphaview.widget"):
            widget.type_query("AAPL")
        assert widget.state.suggestions == (apple,)
        assert widget.state.notice
        assert "Error fetching stock symbols" in caplog.text

    def test_late_failure_for_old_query_leaves_no_notice(self, av):
        widget = StockWidget(av)

        def _search(query):
            if query == "AA":
                # user keeps typing while "AA" is still in flight
                widget.type_query("AAPL")
                raise TransportError("late failure")
            return [SymbolSuggestion("AAPL", "Apple Inc.")]

        av.search_symbols.side_effect = _search
        widget.type_query("AA")
        assert widget.state.query == "AAPL"
        assert widget.state.notice == ""
        assert [s.symbol for s in widget.state.suggestions] == ["AAPL"]


class TestSelection:
    def test_select_fetches_once(self, av):
        av.intraday.return_value = [_bar("09:30", 1.0)]
        widget = StockWidget(av)
        widget.select("AAPL")
        av.intraday.assert_called_once_with("AAPL")
        assert widget.state.selected == "AAPL"
        assert widget.state.query == "AAPL"
        assert widget.view is View.CANDLESTICK

    def test_reselecting_same_symbol_refetches(self, av):
        av.intraday.return_value = [_bar("09:30", 1.0)]
        widget = StockWidget(av)
        widget.select("AAPL")
        widget.select("AAPL")
        assert av.intraday.call_count == 2

    def test_descending_api_order_is_reversed(self, av, intraday_payload):
        av.intraday.return_value = parse_intraday(intraday_payload)
        widget = StockWidget(av)
        widget.select("AAPL")
        line = widget.state.series.line
        assert [ts[11:16] for ts, _ in line] == ["09:30", "09:35"]
        assert len(widget.state.series.candlestick) == 2

    def test_extra_selection_effect_notified(self, av):
        av.intraday.return_value = []
        seen = []
        widget = StockWidget(av)
        widget.on_select(lambda symbol, generation: seen.append((symbol, generation)))
        widget.select("MSFT")
        assert seen == [("MSFT", 1)]


class TestLoadingFlag:
    def test_true_while_in_flight(self, av):
        widget = StockWidget(av)
        observed = []

        def _intraday(symbol):
            observed.append(widget.state.loading)
            return [_bar("09:30", 1.0)]

        av.intraday.side_effect = _intraday
        widget.select("AAPL")
        assert observed == [True]
        assert widget.state.loading is False

    def test_deferred_fetch_shows_loading(self, av):
        av.intraday.return_value = [_bar("09:30", 1.0)]
        effects = EffectQueue()
        widget = StockWidget(av, schedule=effects)
        widget.select("AAPL")
        assert widget.view is View.LOADING
        assert len(effects) == 1
        assert effects.drain() == 1
        assert widget.state.loading is False

    def test_empty_queue_is_kept_as_scheduler(self, av):
        effects = EffectQueue()
        widget = StockWidget(av, schedule=effects)
        widget.select("AAPL")
        av.intraday.assert_not_called()
        assert len(effects) == 1

    def test_network_error_resets_flag_and_keeps_chart(self, av, caplog):
        first = [_bar("09:30", 1.0)]
        av.intraday.side_effect = [first, TransportError("unreachable")]
        widget = StockWidget(av)
        widget.select("AAPL")
        shown = widget.state.series
        with caplog.at_level(logging.ERROR, logger="alphaview.widget"):
            widget.select("MSFT")
        assert widget.state.loading is False
        assert widget.state.series is shown
        assert widget.view is View.CANDLESTICK
        assert widget.state.notice == "Could not load data for MSFT."
        assert "Error fetching stock data for MSFT" in caplog.text

    def test_malformed_response_keeps_chart(self, av):
        av.intraday.side_effect = [[_bar("09:30", 1.0)], MalformedResponseError("bad shape")]
        widget = StockWidget(av)
        widget.select("AAPL")
        shown = widget.state.series
        widget.select("AAPL")
        assert widget.state.series is shown
        assert widget.state.loading is False

    def test_unexpected_error_still_resets_flag(self, av):
        av.intraday.side_effect = RuntimeError("bug")
        widget = StockWidget(av)
        with pytest.raises(RuntimeError):
            widget.select("AAPL")
        assert widget.state.loading is False

    def test_success_clears_notice(self, av):
        av.intraday.side_effect = [TransportError("down"), [_bar("09:30", 1.0)]]
        widget = StockWidget(av)
        widget.select("AAPL")
        assert widget.state.notice
        widget.select("AAPL")
        assert widget.state.notice == ""


class TestChartMode:
    def test_toggle_never_fetches(self, av):
        av.intraday.return_value = [_bar("09:30", 1.0)]
        widget = StockWidget(av)
        widget.select("AAPL")
        for mode in (ChartMode.LINE, ChartMode.CANDLESTICK, ChartMode.LINE):
            widget.set_mode(mode)
        assert av.intraday.call_count == 1
        assert widget.view is View.LINE

    def test_toggle_before_selection_keeps_prompt(self, av):
        widget = StockWidget(av)
        widget.set_mode(ChartMode.LINE)
        assert widget.view is View.PROMPT
        av.intraday.assert_not_called()


class TestStaleFetch:
    def test_stale_response_does_not_overwrite_newer_selection(self, av):
        widget = StockWidget(av)
        msft = [_bar("09:30", 400.0)]

        def _intraday(symbol):
            if symbol == "AAPL":
                # user picks MSFT while AAPL is still in flight
                widget.select("MSFT")
                return [_bar("09:30", 185.0)]
            return msft

        av.intraday.side_effect = _intraday
        widget.select("AAPL")
        assert widget.state.selected == "MSFT"
        assert widget.state.series.symbol == "MSFT"
        assert widget.state.series.line == (("09:30", 400.0),)
        assert widget.state.loading is False

    def test_out_of_order_effects(self, av):
        pending = []
        av.intraday.side_effect = lambda symbol: [_bar("09:30", 1.0 if symbol == "AAPL" else 2.0)]
        widget = StockWidget(av, schedule=pending.append)
        widget.select("AAPL")
        widget.select("MSFT")
        pending[1]()
        pending[0]()
        assert widget.state.series.symbol == "MSFT"
        av.intraday.assert_called_once_with("MSFT")

    def test_stale_failure_does_not_touch_state(self, av):
        widget = StockWidget(av)

        def _intraday(symbol):
            if symbol == "AAPL":
                widget.select("MSFT")
                raise TransportError("late failure")
            return [_bar("09:30", 2.0)]

        av.intraday.side_effect = _intraday
        widget.select("AAPL")
        assert widget.state.notice == ""
        assert widget.state.series.symbol == "MSFT"
