"""Unit tests for the upstream sales API client."""

from unittest.mock import MagicMock

import pytest
import requests

from metas_pacing.upstream import UpstreamClient, UpstreamError, rows, store_sales_total


def _response(status_code=200, body=None, json_error=False):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = "OK" if response.ok else "Service Unavailable"
    response.text = "upstream body"
    if json_error:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return UpstreamClient(base_url="http://upstream.test/", secret_key="s3cret", timeout=5, session=session)


class TestRequests:
    """Test how requests are built."""

    def test_sends_secret_key_and_params(self, client, session):
        session.get.return_value = _response(body={"dias": []})

        client.fetch_metas_distribuida("001", 2026, 1)

        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        assert args[0] == "http://upstream.test/metas/distribuida"
        assert kwargs["params"] == {"store_codigo": "001", "ano": 2026, "mes": 1}
        assert kwargs["headers"]["X-Secret-Key"] == "s3cret"
        assert kwargs["timeout"] == 5

    def test_unset_params_are_dropped(self, client, session):
        session.get.return_value = _response(body={"vendas": []})

        client.fetch_vendas(data="2026-01-10")

        assert session.get.call_args.kwargs["params"] == {"data": "2026-01-10"}

    def test_range_query(self, client, session):
        session.get.return_value = _response(body={"vendas": []})

        client.fetch_vendas(data_inicio="2026-01-01", data_fim="2026-01-31")

        args, kwargs = session.get.call_args
        assert args[0] == "http://upstream.test/vendas-realtime"
        assert kwargs["params"] == {"data_inicio": "2026-01-01", "data_fim": "2026-01-31"}

    @pytest.mark.parametrize("method, args, path", [
        ("fetch_vendas_diarias", ("001", 2026, 1), "/metas/vendas-diarias"),
        ("fetch_metas_regional", (2026, 1), "/metas"),
        ("fetch_sync_status", (), "/sync-status"),
    ])
    def test_paths(self, client, session, method, args, path):
        session.get.return_value = _response(body={})

        getattr(client, method)(*args)

        assert session.get.call_args.args[0] == "http://upstream.test" + path


class TestFailures:
    """Test that every failure surfaces as UpstreamError."""

    def test_http_error(self, client, session):
        session.get.return_value = _response(status_code=503)

        with pytest.raises(UpstreamError) as exc:
            client.fetch_sync_status()

        assert exc.value.status_code == 503
        assert "503" in str(exc.value)

    def test_connection_error(self, client, session):
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(UpstreamError, match="ConnectionError"):
            client.fetch_sync_status()

    def test_timeout(self, client, session):
        session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(UpstreamError):
            client.fetch_metas_regional(2026, 1)

    def test_invalid_json(self, client, session):
        session.get.return_value = _response(json_error=True)

        with pytest.raises(UpstreamError, match="invalid JSON"):
            client.fetch_sync_status()

    def test_non_object_payload(self, client, session):
        session.get.return_value = _response(body=[1, 2, 3])

        with pytest.raises(UpstreamError, match="unexpected payload"):
            client.fetch_sync_status()


class TestHelpers:
    def test_store_sales_total(self):
        response = {"vendas": [{"codigo": "001", "venda_total": 10}, {"codigo": " 002 ", "venda_total": "20"}]}

        assert store_sales_total(response, "001") == 10
        assert store_sales_total(response, "002") == "20"
        assert store_sales_total(response, "003") is None
        assert store_sales_total({"vendas": None}, "001") is None

    def test_rows(self):
        assert rows({"dias": [{"dia": 1}]}, "dias") == [{"dia": 1}]
        assert rows({"dias": None}, "dias") == []
        assert rows({}, "dias") == []
        assert rows({"dias": "oops"}, "dias") == []
