"""
Schemas Pydantic condivisi tra preventivi e fatture
Progetto: Invoicing (Gestionale Preventivi e Fatture)
"""

import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Limiti imposti dalle colonne: quantity Integer, importi Numeric(12, 2)
MAX_LINE_QUANTITY = 1_000_000
MAX_DOCUMENT_TOTAL = Decimal("9999999999.99")


def check_lines_total(lines: list["DocumentLineCreate"]) -> list["DocumentLineCreate"]:
    """Il totale del documento deve essere memorizzabile."""
    total = sum((line.unit_price * line.quantity for line in lines), Decimal("0"))
    if total > MAX_DOCUMENT_TOTAL:
        raise ValueError(f"Totale del documento oltre il massimo consentito ({MAX_DOCUMENT_TOTAL})")
    return lines


# -------------------------------------------------------------------
# Schemas per le righe documento
# -------------------------------------------------------------------

class DocumentLineCreate(BaseModel):
    """
    Schema per la creazione di una riga di preventivo o fattura.

    Attributes:
        description: Descrizione della prestazione
        unit_price: Prezzo unitario (non negativo)
        quantity: Quantità (intero positivo)
    """
    description: str = Field(..., min_length=1, max_length=500, description="Descrizione della riga")
    unit_price: Decimal = Field(
        ...,
        ge=Decimal("0"),
        max_digits=12,
        decimal_places=2,
        description="Prezzo unitario",
    )
    quantity: int = Field(..., ge=1, le=MAX_LINE_QUANTITY, description="Quantità")

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v):
        """Rimuove gli spazi iniziali e finali dalla descrizione."""
        if isinstance(v, str):
            return v.strip()
        return v


class DocumentLineRead(BaseModel):
    """Schema per la lettura di una riga documento, con totale riga."""
    id: uuid.UUID
    position: int
    description: str
    unit_price: Decimal
    quantity: int
    total: Decimal = Field(..., description="Prezzo unitario × quantità")

    model_config = ConfigDict(from_attributes=True)


# -------------------------------------------------------------------
# Esito delle transizioni di stato
# -------------------------------------------------------------------

class TransitionResult(BaseModel):
    """Esito di una transizione di stato riuscita."""
    document_id: uuid.UUID = Field(..., description="UUID del documento")
    new_status: str = Field(..., description="Nuovo stato del documento")


class CustomerSummary(BaseModel):
    """Riferimento sintetico al cliente, incluso nei documenti."""
    id: uuid.UUID
    name: str

    model_config = ConfigDict(from_attributes=True)
