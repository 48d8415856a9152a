"""
Schemas Pydantic per il Registro Attività
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Contiene:
- Enum: ActivityType
- Subject: variante tipizzata del soggetto (cliente, preventivo o fattura)
- Schemas per il feed delle attività recenti
"""

import datetime
import uuid
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# -------------------------------------------------------------------
# Enum
# -------------------------------------------------------------------

class ActivityType(str, Enum):
    """Tipi di evento registrati nel feed attività."""
    QUOTE_CREATED = "QUOTE_CREATED"
    QUOTE_SENT = "QUOTE_SENT"
    QUOTE_ACCEPTED = "QUOTE_ACCEPTED"
    QUOTE_DECLINED = "QUOTE_DECLINED"
    INVOICE_CREATED = "INVOICE_CREATED"
    INVOICE_SENT = "INVOICE_SENT"
    INVOICE_PAID = "INVOICE_PAID"
    INVOICE_CANCELLED = "INVOICE_CANCELLED"
    CUSTOMER_CREATED = "CUSTOMER_CREATED"
    CUSTOMER_DELETED = "CUSTOMER_DELETED"
    CUSTOMER_EDITED = "CUSTOMER_EDITED"

    @property
    def subject_kind(self) -> str:
        """Tipo di soggetto atteso: 'quote', 'invoice' o 'customer'."""
        return self.value.split("_", 1)[0].lower()


# -------------------------------------------------------------------
# Soggetto dell'attività
# -------------------------------------------------------------------

class CustomerSubject(BaseModel):
    """Soggetto cliente."""
    kind: Literal["customer"] = "customer"
    customer_id: uuid.UUID

    model_config = ConfigDict(frozen=True)


class QuoteSubject(BaseModel):
    """Soggetto preventivo."""
    kind: Literal["quote"] = "quote"
    quote_id: uuid.UUID

    model_config = ConfigDict(frozen=True)


class InvoiceSubject(BaseModel):
    """Soggetto fattura."""
    kind: Literal["invoice"] = "invoice"
    invoice_id: uuid.UUID

    model_config = ConfigDict(frozen=True)


# Esattamente un soggetto per attività: la variante rende impossibile
# rappresentarne zero o più di uno
Subject = Annotated[
    Union[CustomerSubject, QuoteSubject, InvoiceSubject],
    Field(discriminator="kind"),
]


# -------------------------------------------------------------------
# Schemas per il feed
# -------------------------------------------------------------------

class ActivityFeedEntry(BaseModel):
    """
    Voce del feed attività, con identificativo del soggetto già risolto.

    Attributes:
        id: UUID dell'attività
        type: Tipo di evento
        created_at: Istante di registrazione
        subject: Soggetto dell'attività
        identifier: Numero documento o nome cliente mostrato all'utente
        text: Descrizione leggibile dell'evento
        link: Percorso della pagina di dettaglio del soggetto
    """
    id: uuid.UUID
    type: ActivityType
    created_at: datetime.datetime
    subject: Subject
    identifier: str = Field(..., description="Identificativo mostrato (numero documento o nome cliente)")
    text: str = Field(..., description="Descrizione dell'evento")
    link: str = Field(..., description="Percorso della pagina di dettaglio")


class ActivityFeed(BaseModel):
    """Schema per la lista delle attività recenti."""
    items: list[ActivityFeedEntry]
