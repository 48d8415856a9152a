"""
Schemas Pydantic per la Fatturazione
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Contiene:
- Enums: InvoiceStatus, InvoiceAction
- Matrice delle transizioni di stato (INVOICE_TRANSITIONS)
- Schemas per creazione e lettura delle fatture
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

class InvoiceStatus(str, Enum):
    """Stati della fattura."""
    UNPAID = "UNPAID"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class InvoiceAction(str, Enum):
    """Azioni richiedibili su una fattura."""
    PAY = "pay"
    CANCEL = "cancel"


# -------------------------------------------------------------------
# Matrice delle transizioni di stato valide
# -------------------------------------------------------------------

# Nota: la validazione delle transizioni avviene nel service layer (services/lifecycle.py)
# Questa matrice è definita qui come unica source of truth e importata dal service.
INVOICE_TRANSITIONS: dict[InvoiceStatus, dict[InvoiceAction, InvoiceStatus]] = {
    InvoiceStatus.UNPAID: {
        InvoiceAction.PAY: InvoiceStatus.PAID,
        InvoiceAction.CANCEL: InvoiceStatus.CANCELLED,
    },
    InvoiceStatus.PAID: {},  # Stato finale
    InvoiceStatus.CANCELLED: {},  # Stato finale
}


# -------------------------------------------------------------------
# Ritardo di pagamento
# -------------------------------------------------------------------

class InvoiceLateness(BaseModel):
    """
    Indicatore di ritardo di una fattura (solo visualizzazione).

    Attributes:
        is_late: True se la scadenza è passata
        days_late: Giorni trascorsi dalla scadenza (negativo se non ancora scaduta)
    """
    is_late: bool
    days_late: int

    model_config = ConfigDict(frozen=True)


# -------------------------------------------------------------------
# Fatturato di periodo
# -------------------------------------------------------------------

class RevenueBreakdown(BaseModel):
    """
    Fatturato di un insieme di fatture, ripartito per stato.

    Le fatture annullate non contribuiscono a nessuna voce.
    """
    total: Decimal = Decimal("0")
    paid_total: Decimal = Decimal("0")
    pending_total: Decimal = Decimal("0")

    model_config = ConfigDict(frozen=True)


# -------------------------------------------------------------------
# Schemas per Invoice
# -------------------------------------------------------------------

class InvoiceCreate(BaseModel):
    """
    Schema per la creazione di una fattura.

    La fattura nasce sempre in stato UNPAID. Se due_date manca
    viene calcolata dai giorni di pagamento configurati.
    """
    type: Literal["invoice"] = "invoice"
    customer_id: uuid.UUID = Field(..., description="UUID del cliente")
    quote_id: Optional[uuid.UUID] = Field(None, description="UUID del preventivo di origine")
    title: Optional[str] = Field(None, max_length=255, description="Titolo della fattura")
    emit_date: Optional[datetime.date] = Field(None, description="Data emissione (default: oggi)")
    due_date: Optional[datetime.date] = Field(None, description="Data scadenza pagamento")
    lines: list[DocumentLineCreate] = Field(..., min_length=1, description="Righe della fattura")

    _check_total = field_validator("lines")(check_lines_total)

    @model_validator(mode="after")
    def validate_dates(self) -> "InvoiceCreate":
        """La scadenza non può precedere la data di emissione."""
        if (
            self.emit_date is not None
            and self.due_date is not None
            and self.due_date < self.emit_date
        ):
            raise ValueError("La data di scadenza non può precedere la data di emissione")
        return self


class InvoiceRead(BaseModel):
    """Schema per la lettura di una fattura con righe, totale e ritardo."""
    id: uuid.UUID
    num: str
    customer_id: uuid.UUID
    customer: CustomerSummary
    quote_id: Optional[uuid.UUID] = None
    status: InvoiceStatus
    status_label: str = Field(..., description="Etichetta dello stato")
    status_color: str = Field(..., description="Colore del badge di stato")
    allowed_actions: list[InvoiceAction] = Field(default_factory=list, description="Azioni consentite")
    title: Optional[str] = None
    total: Decimal = Field(..., description="Totale calcolato dalle righe")
    emit_date: datetime.date
    due_date: datetime.date
    lateness: Optional[InvoiceLateness] = Field(None, description="Solo per fatture non pagate")
    lines: list[DocumentLineRead] = Field(default_factory=list)
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class InvoiceSummary(BaseModel):
    """Schema sintetico per liste e dashboard (senza righe)."""
    id: uuid.UUID
    num: str
    customer: CustomerSummary
    status: InvoiceStatus
    status_label: str
    status_color: str
    allowed_actions: list[InvoiceAction] = Field(default_factory=list)
    title: Optional[str] = None
    total: Decimal
    emit_date: datetime.date
    due_date: datetime.date
    lateness: Optional[InvoiceLateness] = None

    model_config = ConfigDict(from_attributes=True)
