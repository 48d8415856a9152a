"""
Modelli SQLAlchemy per la Fatturazione
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Contiene:
- Invoice: Fattura
- InvoiceLine: Righe della fattura
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicing.models import Base
from invoicing.models.mixins import TimestampMixin, UUIDMixin
from invoicing.schemas.invoice import InvoiceAction, InvoiceLateness, InvoiceStatus
from invoicing.services.calculations import document_total, line_total
from invoicing.services.display import invoice_lateness, status_color, status_label
from invoicing.services.lifecycle import allowed_invoice_actions

# Import per type hinting relazioni (evita circular import)
if TYPE_CHECKING:
    from invoicing.models.customer import Customer
    from invoicing.models.quote import Quote


class Invoice(Base, UUIDMixin, TimestampMixin):
    """
    Modello per le fatture.

    Creata in stato UNPAID; può diventare PAID o CANCELLED (stati finali).
    Il totale non è memorizzato: si calcola sempre dalle righe.

    Attributes:
        id: UUID primary key, generato automaticamente
        num: Numero progressivo annuale (formato: YYYY-NNN)
        customer_id: UUID del cliente
        quote_id: UUID del preventivo di origine (solo informativo)
        status: UNPAID, PAID, CANCELLED
        title: Titolo della fattura
        emit_date: Data emissione fattura
        due_date: Data scadenza pagamento

    Relationships:
        customer: Cliente associato
        quote: Preventivo di origine
        lines: Righe della fattura
    """

    __tablename__ = "invoices"

    # ------------------------------------------------------------
    # Colonne Relazioni
    # ------------------------------------------------------------
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        doc="UUID del cliente",
    )

    quote_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("quotes.id", ondelete="SET NULL"),
        nullable=True,
        doc="UUID del preventivo di origine (riferimento debole)",
    )

    # ------------------------------------------------------------
    # Colonne Identificazione
    # ------------------------------------------------------------
    num: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        doc="Numero fattura progressivo annuale (formato: YYYY-NNN)",
    )

    status: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="UNPAID",
        doc="Stato: UNPAID, PAID, CANCELLED",
    )

    title: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Titolo della fattura",
    )

    emit_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        default=date.today,
        doc="Data emissione fattura",
    )

    due_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        doc="Data scadenza pagamento",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    customer: Mapped["Customer"] = relationship(
        "Customer",
        back_populates="invoices",
        lazy="selectin",
        doc="Cliente associato",
    )

    quote: Mapped[Optional["Quote"]] = relationship(
        "Quote",
        back_populates="invoices",
        lazy="selectin",
        doc="Preventivo di origine",
    )

    lines: Mapped[List["InvoiceLine"]] = relationship(
        "InvoiceLine",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLine.position",
        lazy="selectin",
        doc="Righe della fattura",
    )

    # ------------------------------------------------------------
    # Indici e Vincoli
    # ------------------------------------------------------------
    __table_args__ = (
        Index("ix_invoices_customer_id", "customer_id"),
        Index("ix_invoices_emit_date", "emit_date"),
        Index("ix_invoices_due_date", "due_date"),
        Index("ix_invoices_status", "status"),
        CheckConstraint(
            "status IN ('UNPAID', 'PAID', 'CANCELLED')",
            name="ck_invoices_status",
        ),
    )

    @property
    def total(self) -> Decimal:
        """Totale calcolato dalle righe (mai memorizzato)."""
        return document_total(self.lines)

    @property
    def lateness(self) -> Optional[InvoiceLateness]:
        """Ritardo rispetto alla scadenza, solo per le fatture non pagate."""
        if self.status != InvoiceStatus.UNPAID:
            return None
        return invoice_lateness(self.due_date, date.today())

    @property
    def status_label(self) -> str:
        """Etichetta dello stato."""
        return status_label(InvoiceStatus(self.status))

    @property
    def status_color(self) -> str:
        """Colore del badge di stato."""
        return status_color(InvoiceStatus(self.status))

    @property
    def allowed_actions(self) -> list[InvoiceAction]:
        """Azioni consentite dallo stato corrente (anche su fatture scadute)."""
        return allowed_invoice_actions(self.status)

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, num={self.num}, status={self.status})>"


class InvoiceLine(Base, UUIDMixin):
    """
    Modello per le righe della fattura.

    Immutabile dopo la creazione; eliminata insieme alla fattura.

    Attributes:
        id: UUID primary key, generato automaticamente
        invoice_id: UUID della fattura padre
        position: Numero progressivo riga nella fattura
        description: Descrizione della riga
        unit_price: Prezzo unitario
        quantity: Quantità (intero positivo)
    """

    __tablename__ = "invoice_lines"

    invoice_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="UUID della fattura padre",
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Numero progressivo riga nella fattura",
    )

    description: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        doc="Descrizione della riga",
    )

    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        doc="Prezzo unitario",
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Quantità",
    )

    invoice: Mapped["Invoice"] = relationship(
        "Invoice",
        back_populates="lines",
        doc="Fattura padre",
    )

    __table_args__ = (
        CheckConstraint("unit_price >= 0", name="ck_invoice_lines_unit_price_positive"),
        CheckConstraint("quantity > 0", name="ck_invoice_lines_quantity_positive"),
    )

    @property
    def total(self) -> Decimal:
        """Totale riga."""
        return line_total(self)

    def __repr__(self) -> str:
        return (
            f"<InvoiceLine(id={self.id}, description={self.description}, "
            f"unit_price={self.unit_price}, quantity={self.quantity})>"
        )
