"""
Schemas Pydantic per l'entità Customer
Progetto: Invoicing (Gestionale Preventivi e Fatture)
"""
# Definisce gli schemi di validazione e serializzazione per l'API.

import datetime
import re
import uuid
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)


# -------------------------------------------------------------------
# Funzioni di normalizzazione e validazione
# -------------------------------------------------------------------

def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalizza il numero di telefono.

    Rimuove spazi e accetta solo + iniziale e cifre.

    Args:
        phone: Numero di telefono da normalizzare

    Returns:
        Numero di telefono normalizzato o None

    Raises:
        ValueError: Se il formato non è valido
    """
    if phone is None:
        return None

    normalized = phone.strip().replace(" ", "")
    if not normalized:
        return None

    # Regex: + seguito da numeri, oppure solo numeri
    if not re.match(r"^\+?\d+$", normalized):
        raise ValueError("Numero di telefono non valido")

    return normalized


def compose_address(street: str, postal_code: str, city: str) -> str:
    """
    Compone l'indirizzo postale nel formato memorizzato.

    Example:
        >>> compose_address("12 rue de la Paix", "75002", "Paris")
        '12 rue de la Paix, 75002 Paris'
    """
    return f"{street.strip()}, {postal_code.strip()} {city.strip()}"


def _strip_required(v):
    if isinstance(v, str):
        return v.strip()
    return v


def _empty_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


# -------------------------------------------------------------------
# Schemas per Creazione e Aggiornamento
# -------------------------------------------------------------------

class CustomerCreate(BaseModel):
    """
    Schema per la creazione di un cliente.

    L'indirizzo viene inserito per parti e memorizzato composto
    (vedi compose_address).
    """
    name: str = Field(..., min_length=1, max_length=255, description="Nome o ragione sociale")
    street: str = Field(..., min_length=1, max_length=300, description="Via e numero civico")
    postal_code: str = Field(..., min_length=1, max_length=20, description="CAP")
    city: str = Field(..., min_length=1, max_length=150, description="Città")
    email: Optional[EmailStr] = Field(None, description="Indirizzo email")
    phone: Optional[str] = Field(None, max_length=30, description="Numero di telefono")

    _strip_name = field_validator("name", "street", "postal_code", "city", mode="before")(_strip_required)
    _normalize_email = field_validator("email", mode="before")(_empty_to_none)
    _normalize_phone = field_validator("phone", mode="before")(normalize_phone)

    @property
    def address(self) -> str:
        """Indirizzo postale composto."""
        return compose_address(self.street, self.postal_code, self.city)


class CustomerUpdate(BaseModel):
    """
    Schema per l'aggiornamento di un cliente.

    Tutti i campi sono opzionali per permettere aggiornamenti parziali;
    le parti dell'indirizzo vanno però fornite insieme.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    street: Optional[str] = Field(None, min_length=1, max_length=300)
    postal_code: Optional[str] = Field(None, min_length=1, max_length=20)
    city: Optional[str] = Field(None, min_length=1, max_length=150)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)

    _strip_name = field_validator("name", "street", "postal_code", "city", mode="before")(_strip_required)
    _normalize_email = field_validator("email", mode="before")(_empty_to_none)
    _normalize_phone = field_validator("phone", mode="before")(normalize_phone)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        """Il nome è obbligatorio: può essere omesso ma non annullato."""
        if v is None:
            raise ValueError("Il nome non può essere nullo")
        return v

    @model_validator(mode="after")
    def validate_address_parts(self) -> "CustomerUpdate":
        """Via, CAP e città vanno aggiornati insieme."""
        parts = (self.street, self.postal_code, self.city)
        if any(p is not None for p in parts) and not all(p is not None for p in parts):
            raise ValueError("Per modificare l'indirizzo indicare via, CAP e città")
        return self

    @property
    def address(self) -> Optional[str]:
        """Indirizzo composto, se fornito."""
        if self.street is None:
            return None
        return compose_address(self.street, self.postal_code, self.city)


# -------------------------------------------------------------------
# Schemas per Lettura
# -------------------------------------------------------------------

class CustomerRead(BaseModel):
    """Schema per la lettura di un cliente."""
    id: uuid.UUID
    name: str
    address: str
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class CustomerList(BaseModel):
    """Schema per la lista clienti."""
    items: list[CustomerRead]
    total: int
