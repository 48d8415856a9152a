"""
Modelli SQLAlchemy per i Preventivi
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Contiene:
- Quote: Preventivo
- QuoteLine: Righe del preventivo
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
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicing.models import Base
from invoicing.models.mixins import TimestampMixin, UUIDMixin
from invoicing.schemas.quote import QuoteAction, QuoteStatus
from invoicing.services.calculations import line_total, quote_display_total
from invoicing.services.display import status_color, status_label
from invoicing.services.lifecycle import allowed_quote_actions

if TYPE_CHECKING:
    from invoicing.models.customer import Customer
    from invoicing.models.invoice import Invoice


class Quote(Base, UUIDMixin, TimestampMixin):
    """
    Modello per i preventivi.

    Creato in stato DRAFT; avanza solo in avanti verso SENT e poi
    ACCEPTED o DECLINED. Un DRAFT può essere eliminato definitivamente.

    Attributes:
        id: UUID primary key
        num: Numero progressivo annuale (formato: YYYY-NNN)
        customer_id: UUID del cliente proprietario
        status: DRAFT, SENT, ACCEPTED, DECLINED
        title: Titolo del preventivo
        notes: Note
        total_amount: Totale memorizzato alla creazione (può mancare: in quel
            caso si ricalcola dalle righe)
        emit_date: Data emissione
        expiration_date: Data di validità

    Relationships:
        customer: Cliente proprietario
        lines: Righe del preventivo (ordinate per posizione)
        invoices: Fatture generate a partire da questo preventivo
    """

    __tablename__ = "quotes"

    num: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        doc="Numero preventivo progressivo annuale (formato: YYYY-NNN)",
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        doc="UUID del cliente proprietario",
    )

    status: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="DRAFT",
        doc="Stato: DRAFT, SENT, ACCEPTED, DECLINED",
    )

    title: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Titolo del preventivo",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Note del preventivo",
    )

    total_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        doc="Totale memorizzato alla creazione (somma prezzo unitario × quantità)",
    )

    emit_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        default=date.today,
        doc="Data emissione",
    )

    expiration_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        doc="Data di scadenza del preventivo",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    customer: Mapped["Customer"] = relationship(
        "Customer",
        back_populates="quotes",
        lazy="selectin",
        doc="Cliente proprietario",
    )

    lines: Mapped[List["QuoteLine"]] = relationship(
        "QuoteLine",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteLine.position",
        lazy="selectin",
        doc="Righe del preventivo",
    )

    # Riferimento debole: alla cancellazione del preventivo il database
    # imposta quote_id a NULL sulle fatture
    invoices: Mapped[List["Invoice"]] = relationship(
        "Invoice",
        back_populates="quote",
        passive_deletes=True,
        doc="Fatture collegate al preventivo",
    )

    __table_args__ = (
        Index("ix_quotes_customer_id", "customer_id"),
        Index("ix_quotes_status", "status"),
        Index("ix_quotes_emit_date", "emit_date"),
        CheckConstraint(
            "status IN ('DRAFT', 'SENT', 'ACCEPTED', 'DECLINED')",
            name="ck_quotes_status",
        ),
        CheckConstraint(
            "total_amount IS NULL OR total_amount >= 0",
            name="ck_quotes_total_amount_positive",
        ),
    )

    @property
    def display_total(self) -> Decimal:
        """Totale mostrato: quello memorizzato, o ricalcolato dalle righe se assente."""
        return quote_display_total(self)

    @property
    def status_label(self) -> str:
        """Etichetta dello stato."""
        return status_label(QuoteStatus(self.status))

    @property
    def status_color(self) -> str:
        """Colore del badge di stato."""
        return status_color(QuoteStatus(self.status))

    @property
    def allowed_actions(self) -> list[QuoteAction]:
        """Azioni consentite dallo stato corrente."""
        return allowed_quote_actions(self.status)

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, num={self.num}, status={self.status})>"


class QuoteLine(Base, UUIDMixin):
    """
    Riga del preventivo: descrizione, prezzo unitario, quantità.

    Immutabile dopo la creazione; eliminata insieme al preventivo.
    """

    __tablename__ = "quote_lines"

    quote_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("quotes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="UUID del preventivo padre",
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Posizione della riga nel documento",
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

    quote: Mapped["Quote"] = relationship(
        "Quote",
        back_populates="lines",
        doc="Preventivo padre",
    )

    __table_args__ = (
        CheckConstraint("unit_price >= 0", name="ck_quote_lines_unit_price_positive"),
        CheckConstraint("quantity > 0", name="ck_quote_lines_quantity_positive"),
    )

    @property
    def total(self) -> Decimal:
        """Totale riga."""
        return line_total(self)

    def __repr__(self) -> str:
        return (
            f"<QuoteLine(id={self.id}, description={self.description}, "
            f"unit_price={self.unit_price}, quantity={self.quantity})>"
        )
