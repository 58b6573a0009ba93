"""
Pytest configuration and fixtures for the metas pacing tests.

Provides month feeds, live figures and a fake upstream client.
"""
from datetime import date

import pytest

from metas_pacing.models import DayTarget, LiveSales
from metas_pacing.upstream import UpstreamError


@pytest.fixture
def flat_month() -> list[DayTarget]:
    """30-day month, meta 100 and weight 1 every day, 90 sold per closed day."""
    return [
        DayTarget(day=d, meta_value=100, weight=1, reported_sales=90)
        for d in range(1, 31)
    ]


@pytest.fixture
def live_sales() -> LiveSales:
    return LiveSales(today_total=120, month_to_date_total=930)


@pytest.fixture
def network_targets() -> list[dict]:
    return [
        {"loja_codigo": "001", "meta": 100000},
        {"loja_codigo": "002", "meta": "50000"},
        {"loja_codigo": "003", "meta": 80000},
        {"loja_codigo": "004", "meta": 0},
    ]


@pytest.fixture
def network_sales() -> list[dict]:
    return [
        {"codigo": "001", "loja": "Loja Centro", "regional": "Sul", "venda_total": 40000},
        {"codigo": "002", "loja": "Loja Norte", "regional": "Norte", "venda_total": "10000.50"},
        {"codigo": "004", "loja": "Loja Praia", "regional": "Sul", "venda_total": 500},
        {"codigo": "999", "loja": "Sem Meta", "regional": "Leste", "venda_total": 7000},
    ]


class FakeUpstream:
    """In-memory stand-in for UpstreamClient."""

    base_url = "http://upstream.test"

    def __init__(self):
        self.distribuida = {"dias": [], "total_meta_mes": 0, "sazonalidade_usada": "PADRAO"}
        self.vendas_diarias = {"dias": []}
        self.metas = {"metas": []}
        self.vendas_today = {"vendas": []}
        self.vendas_range = {"vendas": []}
        self.sync = {"data_consulta": "2026-01-10T12:00:00", "lojas": []}
        self.fail = set()
        self.calls = []

    def _answer(self, name, payload):
        self.calls.append(name)
        if name in self.fail:
            raise UpstreamError(f"Upstream error on {name}: 503 Service Unavailable", status_code=503)
        return payload

    def fetch_metas_distribuida(self, store_codigo, ano, mes):
        return self._answer("distribuida", self.distribuida)

    def fetch_vendas_diarias(self, store_codigo, ano, mes):
        return self._answer("vendas_diarias", self.vendas_diarias)

    def fetch_metas_regional(self, ano, mes):
        return self._answer("metas", self.metas)

    def fetch_vendas(self, data=None, data_inicio=None, data_fim=None):
        if data:
            return self._answer("vendas_today", self.vendas_today)
        return self._answer("vendas_range", self.vendas_range)

    def fetch_sync_status(self):
        return self._answer("sync", self.sync)


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def frozen_today(monkeypatch):
    """Pin the stores' clock to 2026-01-10."""
    from metas_pacing import config

    today = date(2026, 1, 10)
    monkeypatch.setattr(config, "local_today", lambda now=None: today)
    return today
