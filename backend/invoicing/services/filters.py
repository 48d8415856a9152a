"""
Predicati di filtro per i documenti
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Funzioni pure, senza effetti collaterali: possono essere rieseguite
ad ogni ricerca sulla stessa lista già letta dal database.
"""

from typing import Collection, Iterable, Optional, TypeVar

D = TypeVar("D")


def matches_search(document, search_text: Optional[str]) -> bool:
    """
    Ricerca testuale case-insensitive su numero, nome cliente e titolo.

    Un testo vuoto soddisfa qualsiasi documento; un titolo assente
    non corrisponde mai.
    """
    if not search_text:
        return True
    needle = search_text.lower()
    candidates = (document.num, document.customer.name, document.title)
    return any(value is not None and needle in value.lower() for value in candidates)


def matches_status(document, statuses: Optional[Collection[str]]) -> bool:
    """Filtro per stato: un insieme vuoto soddisfa qualsiasi documento."""
    if not statuses:
        return True
    wanted = {_status_value(status) for status in statuses}
    return _status_value(document.status) in wanted


def _status_value(status) -> str:
    # Enum o stringa grezza letta dal database
    return getattr(status, "value", status)


def matches(document, search_text: Optional[str], statuses: Optional[Collection[str]]) -> bool:
    """Il documento è incluso se soddisfa sia la ricerca che il filtro per stato."""
    return matches_search(document, search_text) and matches_status(document, statuses)


def filter_documents(
    documents: Iterable[D],
    search_text: Optional[str] = None,
    statuses: Optional[Collection[str]] = None,
) -> list[D]:
    """Filtra i documenti mantenendo l'ordine originale."""
    return [doc for doc in documents if matches(doc, search_text, statuses)]
