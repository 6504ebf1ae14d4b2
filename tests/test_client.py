"""
Tests for the NWPS HTTP client (transport, retry and error mapping).
"""

import httpx
import pytest

from nwps.client import NWPSClient, _clean_query, fetch_json, path_segment
from nwps.config import ClientConfig
from nwps.exceptions import (
    NWPSBadRequestError,
    NWPSConnectionError,
    NWPSError,
    NWPSNotFoundError,
    NWPSQueryError,
    NWPSServerError,
)

BASE = "https://nwps.test/api/v1"


def make_client(handler, **config):
    settings = {"base_url": BASE, "backoff_factor": 0, "max_retries": 3}
    settings.update(config)
    return NWPSClient(ClientConfig(**settings), transport=httpx.MockTransport(handler))


class RecordingHandler:
    """Serve queued responses (or raise queued exceptions) and record requests."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class TestNWPSClient:
    """Test NWPSClient functionality."""

    def test_init_defaults(self):
        client = NWPSClient()
        assert client.config.base_url == "https://api.water.noaa.gov/nwps/v1"
        assert client.timeout == 30.0
        client.close()

    def test_timeout_override(self):
        with NWPSClient(timeout=5) as client:
            assert client.timeout == 5
            assert client.config.max_retries == 3

    def test_success_returns_json(self):
        handler = RecordingHandler(httpx.Response(200, json={"lid": "PTTP1"}))
        with make_client(handler) as client:
            assert client.request("/gauges/PTTP1") == {"lid": "PTTP1"}

        request = handler.requests[0]
        assert str(request.url) == f"{BASE}/gauges/PTTP1"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"].startswith("nwps-python-client")

    def test_query_drops_none_and_renders_bools(self):
        handler = RecordingHandler(httpx.Response(200, json={"gauges": []}))
        with make_client(handler) as client:
            client.request("/gauges", {"catfim": True, "srid": None, "bbox.xmin": -77.5})

        params = handler.requests[0].url.params
        assert params["catfim"] == "true"
        assert params["bbox.xmin"] == "-77.5"
        assert "srid" not in params

    def test_404_not_retried(self):
        handler = RecordingHandler(httpx.Response(404, json={"message": "nope"}))
        with make_client(handler) as client:
            with pytest.raises(NWPSNotFoundError, match="Check that the identifier") as exc:
                client.request("/gauges/XXXX1")

        assert exc.value.status_code == 404
        assert exc.value.endpoint == "/gauges/XXXX1"
        assert isinstance(exc.value, NWPSQueryError)
        assert len(handler.requests) == 1

    def test_400_not_retried(self):
        handler = RecordingHandler(httpx.Response(400))
        with make_client(handler) as client:
            with pytest.raises(NWPSBadRequestError, match="parameters") as exc:
                client.request("/gauges/PTTP1/ratings", {"limit": 5})

        assert exc.value.status_code == 400
        assert len(handler.requests) == 1

    def test_server_error_retried_then_raised(self):
        handler = RecordingHandler(httpx.Response(500))
        with make_client(handler) as client:
            with pytest.raises(NWPSServerError, match="try again later") as exc:
                client.request("/monitor")

        assert exc.value.status_code == 500
        assert len(handler.requests) == 3

    def test_transient_server_error_recovers(self):
        handler = RecordingHandler(
            httpx.Response(503), httpx.Response(200, json={"hml": {}})
        )
        with make_client(handler) as client:
            assert client.request("/monitor") == {"hml": {}}
        assert len(handler.requests) == 2

    def test_max_retries_one_disables_retry(self):
        handler = RecordingHandler(httpx.Response(502))
        with make_client(handler, max_retries=1) as client:
            with pytest.raises(NWPSServerError):
                client.request("/monitor")
        assert len(handler.requests) == 1

    def test_connection_error(self):
        handler = RecordingHandler(httpx.ConnectError("name resolution failed"))
        with make_client(handler) as client:
            with pytest.raises(NWPSConnectionError, match="Failed to connect"):
                client.request("/gauges")
        assert len(handler.requests) == 3

    def test_timeout_error(self):
        handler = RecordingHandler(httpx.ReadTimeout("slow"))
        with make_client(handler, max_retries=2) as client:
            with pytest.raises(NWPSConnectionError, match="timed out"):
                client.request("/gauges")
        assert len(handler.requests) == 2

    def test_other_status_is_query_error(self):
        handler = RecordingHandler(httpx.Response(418))
        with make_client(handler) as client:
            with pytest.raises(NWPSQueryError) as exc:
                client.request("/gauges")

        assert type(exc.value) is NWPSQueryError
        assert exc.value.status_code == 418
        assert len(handler.requests) == 1

    def test_invalid_json(self):
        handler = RecordingHandler(httpx.Response(200, text="<html>maintenance</html>"))
        with make_client(handler) as client:
            with pytest.raises(NWPSQueryError, match="Invalid JSON"):
                client.request("/gauges")

    def test_all_errors_share_base_class(self):
        for error in (
            NWPSConnectionError,
            NWPSServerError,
            NWPSQueryError,
            NWPSNotFoundError,
            NWPSBadRequestError,
        ):
            assert issubclass(error, NWPSError)


class TestHelpers:
    """Test module-level helpers."""

    def test_clean_query(self):
        assert _clean_query(None) == {}
        assert _clean_query({"a": None, "b": False, "c": 3}) == {"b": "false", "c": 3}

    def test_path_segment_escapes_reserved_characters(self):
        assert path_segment("PTTP1") == "PTTP1"
        assert path_segment("a/b c") == "a%2Fb%20c"

    def test_fetch_json_uses_given_client(self, mock_client):
        mock_client.request.return_value = {"ok": True}
        assert fetch_json("/monitor", {"x": 1}, client=mock_client) == {"ok": True}
        mock_client.request.assert_called_once_with("/monitor", {"x": 1})
