"""
Schemas Pydantic per i Preventivi
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Contiene:
- Enums: QuoteStatus, QuoteAction
- Matrice delle transizioni di stato (QUOTE_TRANSITIONS)
- Schemas per creazione e lettura dei preventivi
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from invoicing.schemas.common import (
    CustomerSummary,
    DocumentLineCreate,
    DocumentLineRead,
    check_lines_total,
)


# -------------------------------------------------------------------
# Enum
# -------------------------------------------------------------------

class QuoteStatus(str, Enum):
    """Stati del preventivo."""
    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class QuoteAction(str, Enum):
    """Azioni richiedibili su un preventivo."""
    SEND = "send"
    ACCEPT = "accept"
    DECLINE = "decline"
    DELETE = "delete"


# -------------------------------------------------------------------
# Matrice delle transizioni di stato valide
# -------------------------------------------------------------------

# Nota: la validazione delle transizioni avviene nel service layer (services/lifecycle.py)
# Questa matrice è definita qui come unica source of truth e importata dal service.
# DELETE porta a None: il preventivo viene rimosso, non cambia stato.
QUOTE_TRANSITIONS: dict[QuoteStatus, dict[QuoteAction, Optional[QuoteStatus]]] = {
    QuoteStatus.DRAFT: {
        QuoteAction.SEND: QuoteStatus.SENT,
        QuoteAction.DELETE: None,
    },
    QuoteStatus.SENT: {
        QuoteAction.ACCEPT: QuoteStatus.ACCEPTED,
        QuoteAction.DECLINE: QuoteStatus.DECLINED,
    },
    QuoteStatus.ACCEPTED: {},  # Stato finale
    QuoteStatus.DECLINED: {},  # Stato finale
}


# -------------------------------------------------------------------
# Schemas per Quote
# -------------------------------------------------------------------

class QuoteCreate(BaseModel):
    """
    Schema per la creazione di un preventivo.

    Il preventivo nasce sempre in stato DRAFT; numero e totale
    sono assegnati dal service.
    """
    type: Literal["quote"] = "quote"
    customer_id: uuid.UUID = Field(..., description="UUID del cliente")
    title: Optional[str] = Field(None, max_length=255, description="Titolo del preventivo")
    notes: Optional[str] = Field(None, description="Note")
    emit_date: Optional[datetime.date] = Field(None, description="Data emissione (default: oggi)")
    expiration_date: Optional[datetime.date] = Field(None, description="Data di scadenza")
    lines: list[DocumentLineCreate] = Field(..., min_length=1, description="Righe del preventivo")

    _check_total = field_validator("lines")(check_lines_total)

    @model_validator(mode="after")
    def validate_dates(self) -> "QuoteCreate":
        """La scadenza non può precedere la data di emissione."""
        if (
            self.emit_date is not None
            and self.expiration_date is not None
            and self.expiration_date < self.emit_date
        ):
            raise ValueError("La data di scadenza non può precedere la data di emissione")
        return self


class QuoteRead(BaseModel):
    """Schema per la lettura di un preventivo con righe e totale."""
    id: uuid.UUID
    num: str
    customer_id: uuid.UUID
    customer: CustomerSummary
    status: QuoteStatus
    status_label: str = Field(..., description="Etichetta dello stato")
    status_color: str = Field(..., description="Colore del badge di stato")
    allowed_actions: list[QuoteAction] = Field(default_factory=list, description="Azioni consentite")
    title: Optional[str] = None
    notes: Optional[str] = None
    total_amount: Optional[Decimal] = Field(None, description="Totale memorizzato alla creazione")
    display_total: Decimal = Field(..., description="Totale mostrato (memorizzato o ricalcolato)")
    emit_date: datetime.date
    expiration_date: Optional[datetime.date] = None
    lines: list[DocumentLineRead] = Field(default_factory=list)
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class QuoteSummary(BaseModel):
    """Schema sintetico per liste e dashboard (senza righe)."""
    id: uuid.UUID
    num: str
    customer: CustomerSummary
    status: QuoteStatus
    status_label: str
    status_color: str
    allowed_actions: list[QuoteAction] = Field(default_factory=list)
    title: Optional[str] = None
    display_total: Decimal
    emit_date: datetime.date
    expiration_date: Optional[datetime.date] = None

    model_config = ConfigDict(from_attributes=True)
