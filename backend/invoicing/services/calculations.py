"""
Calcoli monetari
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Funzioni pure (nessun accesso al database) per totali di riga,
totali documento e fatturato di periodo. Gli importi sono sempre
Decimal; nessun arrotondamento a livello di riga.

Le righe sono oggetti con attributi `unit_price` e `quantity`
(modelli ORM o schemi di creazione).
"""

from decimal import ROUND_FLOOR, Decimal
from typing import Iterable, Protocol

from invoicing.schemas.invoice import InvoiceStatus, RevenueBreakdown

ZERO = Decimal("0")


class PricedLine(Protocol):
    unit_price: Decimal
    quantity: int


def line_total(line: PricedLine) -> Decimal:
    """Totale riga: prezzo unitario × quantità."""
    return Decimal(line.unit_price) * line.quantity


def document_total(lines: Iterable[PricedLine]) -> Decimal:
    """Somma dei totali di riga (indipendente dall'ordine delle righe)."""
    return sum((line_total(line) for line in lines), ZERO)


def quote_display_total(quote) -> Decimal:
    """
    Totale da mostrare per un preventivo.

    Il totale memorizzato ha la precedenza anche se non coincide con
    le righe; se manca viene ricalcolato dalle righe.
    """
    if quote.total_amount is not None:
        return quote.total_amount
    return document_total(quote.lines)


def period_revenue(invoices: Iterable) -> RevenueBreakdown:
    """
    Fatturato di un insieme di fatture, ripartito per stato.

    Il filtro sulla finestra temporale è a carico del chiamante.

    Args:
        invoices: Fatture con attributi `status` e `lines`

    Returns:
        RevenueBreakdown: total (PAID + UNPAID), paid_total, pending_total.
        Le fatture CANCELLED sono escluse da tutte le voci.
    """
    total = paid_total = pending_total = ZERO
    for invoice in invoices:
        if invoice.status == InvoiceStatus.CANCELLED:
            continue
        amount = document_total(invoice.lines)
        total += amount
        if invoice.status == InvoiceStatus.PAID:
            paid_total += amount
        elif invoice.status == InvoiceStatus.UNPAID:
            pending_total += amount
    return RevenueBreakdown(total=total, paid_total=paid_total, pending_total=pending_total)


def total_revenue(invoices: Iterable) -> Decimal:
    """Somma dei totali di tutte le fatture, senza distinzione di stato."""
    return sum((document_total(invoice.lines) for invoice in invoices), ZERO)


def revenue_evolution_percent(current: Decimal, previous: Decimal) -> int:
    """
    Variazione percentuale del fatturato rispetto al periodo precedente.

    Restituisce 0 se il periodo precedente è a zero. Altrimenti
    arrotonda all'intero più vicino, con i casi a metà verso +infinito
    (12.5 → 13, -12.5 → -12).
    """
    if previous == 0:
        return 0
    percent = (Decimal(current) - Decimal(previous)) / Decimal(previous) * 100
    return int((percent + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))
