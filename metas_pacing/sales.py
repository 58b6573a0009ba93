"""
Network sales list for one day or one month.

Rows come straight from /vendas-realtime (`{codigo, loja, regional,
venda_total, total_quantidade, numero_vendas}`).
"""
from typing import Any, Iterable, List, Mapping

from metas_pacing.models import SalesSummary, StoreSales
from metas_pacing.normalizer import coerce_amount


def average_ticket(sales_total: float, quantity: float) -> float:
    """Sales per unit sold, 0 when nothing was sold."""
    if not quantity:
        return 0.0
    return sales_total / quantity


def build_sales_list(vendas: Iterable[Mapping[str, Any]]) -> List[StoreSales]:
    """One entry per store, highest sales first. Ties keep feed order."""
    entries = []
    for row in vendas or []:
        if not isinstance(row, Mapping):
            continue
        sales_total = coerce_amount(row.get('venda_total'))
        quantity = coerce_amount(row.get('total_quantidade'))
        entries.append(StoreSales(
            store_code=str(row.get('codigo') or '').strip(),
            store_name=str(row.get('loja') or ''),
            region=str(row.get('regional') or ''),
            sales_total=sales_total,
            quantity=quantity,
            sales_count=coerce_amount(row.get('numero_vendas')),
            average_ticket=average_ticket(sales_total, quantity),
        ))
    return sorted(entries, key=lambda e: e.sales_total, reverse=True)


def summarize_sales(entries: Iterable[StoreSales]) -> SalesSummary:
    summary = SalesSummary()
    for entry in entries:
        summary.stores += 1
        summary.sales_total += entry.sales_total
        summary.quantity += entry.quantity
    summary.average_ticket = average_ticket(summary.sales_total, summary.quantity)
    return summary
