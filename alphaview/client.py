from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests

from alphaview.config import ALPHAVANTAGE_URL, Settings
from alphaview.series import (
    INTERVAL,
    MalformedSeries,
    SymbolSuggestion,
    TimeSeriesSample,
    parse_intraday,
    parse_matches,
)

logger = logging.getLogger(__name__)

# Keys Alpha Vantage uses instead of data when it refuses a call.
_NOTICE_KEYS = ("Error Message", "Note", "Information")


class AlphaVantageError(Exception):
    """Any failure talking to Alpha Vantage."""


class TransportError(AlphaVantageError):
    """Connection, timeout, HTTP status or JSON decoding failure."""


class MalformedResponseError(AlphaVantageError):
    """The response decoded but does not have the expected shape."""


def api_notice(payload: Dict[str, object]) -> str:
    for key in _NOTICE_KEYS:
        value = payload.get(key)
        if value:
            return str(value)
    return ""


class AlphaVantageClient:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = ALPHAVANTAGE_URL,
        timeout: int = 10,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "AlphaVantageClient":
        return cls(
            settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            session=session,
        )

    def _get(self, params: Dict[str, str]) -> Dict[str, object]:
        query = dict(params, apikey=self._api_key)
        try:
            resp = self._session.get(self._base_url, params=query, timeout=self._timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"{params.get('function')} request failed: {exc}") from exc
        try:
            payload = resp.json()
        except ValueError as exc:
            raise TransportError(f"{params.get('function')} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise MalformedResponseError(
                f"{params.get('function')} returned {type(payload).__name__}, expected object"
            )
        return payload

    def search_symbols(self, keywords: str) -> List[SymbolSuggestion]:
        """Return symbol matches for *keywords*.

        A response without ``bestMatches`` yields an empty list rather than
        an error.
        """
        payload = self._get({"function": "SYMBOL_SEARCH", "keywords": keywords})
        if "bestMatches" not in payload:
            notice = api_notice(payload)
            if notice:
                logger.warning("Symbol search for %r returned no matches: %s", keywords, notice)
        return parse_matches(payload)

    def intraday(self, symbol: str, interval: str = INTERVAL) -> List[TimeSeriesSample]:
        payload = self._get(
            {
                "function": "TIME_SERIES_INTRADAY",
                "symbol": symbol,
                "interval": interval,
            }
        )
        try:
            return parse_intraday(payload, series_key=f"Time Series ({interval})")
        except MalformedSeries as exc:
            notice = api_notice(payload)
            detail = f"{exc} ({notice})" if notice else str(exc)
            raise MalformedResponseError(f"invalid intraday data for {symbol}: {detail}") from exc
