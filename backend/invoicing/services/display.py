"""
Metadati di visualizzazione degli stati
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Etichette e colori degli stati come match esaustivi sugli enum:
un nuovo stato non gestito qui viene segnalato dal type checker
(assert_never) invece di produrre un'etichetta vuota.
"""

import datetime
from typing import Union, assert_never

from invoicing.schemas.invoice import InvoiceLateness, InvoiceStatus
from invoicing.schemas.quote import QuoteStatus

DocumentStatus = Union[QuoteStatus, InvoiceStatus]


def status_label(status: DocumentStatus) -> str:
    """Etichetta italiana dello stato."""
    match status:
        case QuoteStatus.DRAFT:
            return "Bozza"
        case QuoteStatus.SENT:
            return "Inviato"
        case QuoteStatus.ACCEPTED:
            return "Accettato"
        case QuoteStatus.DECLINED:
            return "Rifiutato"
        case InvoiceStatus.UNPAID:
            return "Non pagata"
        case InvoiceStatus.PAID:
            return "Pagata"
        case InvoiceStatus.CANCELLED:
            return "Annullata"
        case _:
            assert_never(status)


def status_color(status: DocumentStatus) -> str:
    """Colore del badge di stato."""
    match status:
        case QuoteStatus.DRAFT | InvoiceStatus.CANCELLED:
            return "gray"
        case QuoteStatus.SENT:
            return "blue"
        case QuoteStatus.ACCEPTED | InvoiceStatus.PAID:
            return "green"
        case QuoteStatus.DECLINED:
            return "red"
        case InvoiceStatus.UNPAID:
            return "orange"
        case _:
            assert_never(status)


def invoice_lateness(due_date: datetime.date, today: datetime.date) -> InvoiceLateness:
    """
    Ritardo di una fattura rispetto alla scadenza.

    Solo informativo: non blocca alcuna transizione.

    Example:
        >>> invoice_lateness(date(2025, 1, 10), date(2025, 1, 15))
        InvoiceLateness(is_late=True, days_late=5)
    """
    days_late = (today - due_date).days
    return InvoiceLateness(is_late=days_late > 0, days_late=days_late)
