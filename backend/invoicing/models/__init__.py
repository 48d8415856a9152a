"""
Modelli Database SQLAlchemy
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Import centralizzato di tutti i modelli per create_all e usage generico.

Modelli:
- Customer: Anagrafica clienti
- Quote: Preventivi
- QuoteLine: Righe preventivo
- Invoice: Fatture
- InvoiceLine: Righe fattura
- Activity: Registro attività
"""

# SQLAlchemy 2.0 Base declarativa
# Importato qui per essere disponibile per tutti i modelli
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class per tutti i modelli SQLAlchemy."""
    pass


# Import modelli implementati
from invoicing.models.customer import Customer
from invoicing.models.quote import Quote, QuoteLine
from invoicing.models.invoice import Invoice, InvoiceLine
from invoicing.models.activity import Activity

# Esportazione di tutti i modelli
__all__ = [
    "Base",
    "Customer",
    "Quote",
    "QuoteLine",
    "Invoice",
    "InvoiceLine",
    "Activity",
]
