"""
Numerazione dei documenti
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Genera il numero progressivo annuale (YYYY-NNN) di preventivi e fatture.
Il numero è un riferimento per l'utente, distinto dall'id tecnico;
l'unicità è garantita dal vincolo unique sulla colonna `num`.
"""

import datetime
import logging

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Namespace degli advisory lock PostgreSQL, uno per tipo di documento
LOCK_NAMESPACES = {
    "quotes": 7301,
    "invoices": 7302,
}


def format_document_number(year: int, sequence: int) -> str:
    """
    Formatta il numero documento con zero-padding a 3 cifre.

    Example:
        >>> format_document_number(2025, 7)
        '2025-007'
    """
    return f"{year}-{sequence:03d}"


def parse_sequence(num: str) -> int:
    """Progressivo contenuto in un numero YYYY-NNN."""
    return int(num.split("-", 1)[1])


async def next_document_number(
    db: AsyncSession,
    model,
    emit_date: datetime.date,
) -> str:
    """
    Genera il prossimo numero documento per l'anno di emissione.

    Logica:
    1. Su PostgreSQL acquisisce un advisory lock di transazione
       (tipo documento, anno) per serializzare le generazioni concorrenti
    2. Cerca il numero più alto dell'anno
    3. Incrementa il progressivo

    Args:
        db: Sessione database
        model: Modello del documento (Quote o Invoice)
        emit_date: Data di emissione del documento

    Returns:
        str: Numero documento formattato
    """
    year = emit_date.year
    year_prefix = f"{year}-"

    bind = db.bind
    if bind is not None and bind.dialect.name == "postgresql":
        # SELECT FOR UPDATE non blocca nulla se non esistono righe per l'anno
        await db.execute(
            text("SELECT pg_advisory_xact_lock(:namespace, :year)"),
            {"namespace": LOCK_NAMESPACES[model.__tablename__], "year": year},
        )

    # Ordinamento per lunghezza: oltre 999 il progressivo prende una cifra in più
    stmt = (
        select(model.num)
        .where(model.num.like(f"{year_prefix}%"))
        .order_by(func.length(model.num).desc(), model.num.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    last_num = result.scalar_one_or_none()

    next_sequence = parse_sequence(last_num) + 1 if last_num else 1
    num = format_document_number(year, next_sequence)
    logger.debug("Generato numero %s per %s", num, model.__tablename__)
    return num
