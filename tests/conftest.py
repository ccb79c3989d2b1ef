import pytest
from unittest.mock import MagicMock

from alphaview.client import AlphaVantageClient


@pytest.fixture
def make_response():
    def _make(payload, status_error=None):
        resp = MagicMock()
        resp.json.return_value = payload
        if status_error is not None:
            resp.raise_for_status.side_effect = status_error
        return resp
    return _make


@pytest.fixture
def intraday_payload():
    """Two 5-minute bars, newest first as Alpha Vantage sends them."""
    return {
        "Meta Data": {"2. Symbol": "AAPL", "4. Interval": "5min"},
        "Time Series (5min)": {
            "2024-01-02 09:35:00": {
                "1. open": "185.10",
                "2. high": "185.60",
                "3. low": "184.90",
                "4. close": "185.40",
                "5. volume": "120000",
            },
            "2024-01-02 09:30:00": {
                "1. open": "184.50",
                "2. high": "185.20",
                "3. low": "184.10",
                "4. close": "185.05",
                "5. volume": "250000",
            },
        },
    }


@pytest.fixture
def search_payload():
    return {
        "bestMatches": [
            {
                "1. symbol": "AAPL",
                "2. name": "Apple Inc.",
                "3. type": "Equity",
                "4. region": "United States",
            }
        ]
    }


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return AlphaVantageClient("test-key", session=session, timeout=5)
