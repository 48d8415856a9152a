"""
Modello SQLAlchemy per l'entità Customer
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Rappresenta l'anagrafica dei clienti, radice di preventivi e fatture.
"""


from __future__ import annotations
from typing import Optional, TYPE_CHECKING, List

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicing.models import Base
from invoicing.models.mixins import TimestampMixin, UUIDMixin

# Import per type hinting relazioni (evita circular import)
if TYPE_CHECKING:
    from invoicing.models.invoice import Invoice
    from invoicing.models.quote import Quote


class Customer(Base, UUIDMixin, TimestampMixin):
    """
    Modello per l'anagrafica clienti.

    Un cliente possiede zero o più preventivi e fatture. Viene creato
    solo per azione esplicita dell'utente, mai automaticamente.

    Attributes:
        id: UUID primary key, generato automaticamente
        name: Nome o ragione sociale (obbligatorio)
        address: Indirizzo postale completo (obbligatorio)
        email: Indirizzo email
        phone: Numero di telefono
        created_at: Data/ora creazione record
        updated_at: Data/ora ultimo aggiornamento

    Relationships:
        quotes: Preventivi del cliente
        invoices: Fatture del cliente
    """

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Nome o ragione sociale",
    )

    address: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        doc="Indirizzo postale completo (via, CAP, città)",
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Indirizzo email",
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(30),
        nullable=True,
        doc="Numero di telefono",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    # La cancellazione di un cliente elimina i suoi documenti (e le loro righe)
    quotes: Mapped[List["Quote"]] = relationship(
        "Quote",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="Quote.emit_date.desc()",
        doc="Preventivi del cliente",
    )

    invoices: Mapped[List["Invoice"]] = relationship(
        "Invoice",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="Invoice.emit_date.desc()",
        doc="Fatture del cliente",
    )

    __table_args__ = (
        Index("ix_customers_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.name})>"
