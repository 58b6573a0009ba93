"""
Client for the upstream sales API.

Every call sends the secret key header and returns the decoded JSON body.
Network problems, non-2xx answers and bodies that are not JSON objects all
surface as UpstreamError; the engine only ever sees successful fetches.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from metas_pacing import config

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """The upstream sales API could not be reached or answered badly."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamClient:
    def __init__(self, base_url: str = None, secret_key: str = None,
                 timeout: float = None, session: requests.Session = None):
        self.base_url = (base_url or config.API_BASE_URL).rstrip('/')
        self.secret_key = secret_key if secret_key is not None else config.API_SECRET_KEY
        self.timeout = timeout or config.UPSTREAM_TIMEOUT
        self.session = session or requests.Session()

    def _get(self, path: str, params: Dict[str, Any] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(
                url,
                params={k: v for k, v in (params or {}).items() if v is not None},
                headers={'X-Secret-Key': self.secret_key, 'Content-Type': 'application/json'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Upstream request to %s failed: %s: %s", path, type(e).__name__, e)
            raise UpstreamError(f"Upstream unavailable: {type(e).__name__}") from e

        if not response.ok:
            logger.error("Upstream %s answered %s: %s", path, response.status_code, response.text[:300])
            raise UpstreamError(
                f"Upstream error on {path}: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(f"Upstream returned invalid JSON on {path}") from e
        if not isinstance(body, dict):
            raise UpstreamError(f"Upstream returned unexpected payload on {path}")
        return body

    # ------------------------------------------------------------------
    # Feeds
    # ------------------------------------------------------------------

    def fetch_metas_distribuida(self, store_codigo: str, ano: int, mes: int) -> Dict[str, Any]:
        """Day-by-day meta for one store."""
        return self._get('/metas/distribuida', {'store_codigo': store_codigo, 'ano': ano, 'mes': mes})

    def fetch_vendas_diarias(self, store_codigo: str, ano: int, mes: int) -> Dict[str, Any]:
        """Closed-day sales history for one store (day 1 to yesterday)."""
        return self._get('/metas/vendas-diarias', {'store_codigo': store_codigo, 'ano': ano, 'mes': mes})

    def fetch_metas_regional(self, ano: int, mes: int) -> Dict[str, Any]:
        """Month targets for every store in the network."""
        return self._get('/metas', {'ano': ano, 'mes': mes})

    def fetch_vendas(self, data: str = None, data_inicio: str = None, data_fim: str = None) -> Dict[str, Any]:
        """Network sales for a single day (`data`) or a date range."""
        return self._get('/vendas-realtime', {'data': data, 'data_inicio': data_inicio, 'data_fim': data_fim})

    def fetch_sync_status(self) -> Dict[str, Any]:
        return self._get('/sync-status')


def store_sales_total(vendas_response: Dict[str, Any], store_codigo: str) -> Any:
    """Raw `venda_total` for one store in a /vendas-realtime answer, or None."""
    for venda in vendas_response.get('vendas') or []:
        if str(venda.get('codigo', '')).strip() == store_codigo:
            return venda.get('venda_total')
    return None


def rows(response: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    """List field of an upstream answer, tolerating null or missing values."""
    value = response.get(key)
    return value if isinstance(value, list) else []
