"""
Modello SQLAlchemy per il Registro Attività
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Ogni evento significativo del ciclo di vita di clienti, preventivi
e fatture produce una riga immutabile in questa tabella.
"""

from __future__ import annotations

import datetime
import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicing.models import Base
from invoicing.models.mixins import UUIDMixin, utc_now
from invoicing.schemas.activity import (
    CustomerSubject,
    InvoiceSubject,
    QuoteSubject,
    Subject,
)

if TYPE_CHECKING:
    from invoicing.models.customer import Customer
    from invoicing.models.invoice import Invoice
    from invoicing.models.quote import Quote


class Activity(Base, UUIDMixin):
    """
    Modello per le voci del registro attività (append-only).

    Il soggetto è esattamente uno tra cliente, preventivo e fattura:
    il vincolo è garantito dal database (ck_activities_single_subject)
    e a livello applicativo dalla variante `Subject`.

    Attributes:
        id: UUID primary key
        type: Tipo di attività (es. QUOTE_SENT)
        created_at: Istante di registrazione
        customer_id: Cliente soggetto dell'attività
        quote_id: Preventivo soggetto dell'attività
        invoice_id: Fattura soggetto dell'attività
    """

    __tablename__ = "activities"

    type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        doc="Tipo di attività",
    )

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        doc="Istante di registrazione",
    )

    customer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=True,
    )

    quote_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("quotes.id", ondelete="CASCADE"),
        nullable=True,
    )

    invoice_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=True,
    )

    # ------------------------------------------------------------
    # Relationships (sola lettura, per risolvere l'identificativo nel feed)
    # ------------------------------------------------------------
    customer: Mapped[Optional["Customer"]] = relationship(
        "Customer",
        lazy="selectin",
        viewonly=True,
    )

    quote: Mapped[Optional["Quote"]] = relationship(
        "Quote",
        lazy="selectin",
        viewonly=True,
    )

    invoice: Mapped[Optional["Invoice"]] = relationship(
        "Invoice",
        lazy="selectin",
        viewonly=True,
    )

    __table_args__ = (
        Index("ix_activities_created_at", "created_at"),
        Index("ix_activities_customer_id", "customer_id"),
        Index("ix_activities_quote_id", "quote_id"),
        Index("ix_activities_invoice_id", "invoice_id"),
        CheckConstraint(
            "(CASE WHEN customer_id IS NOT NULL THEN 1 ELSE 0 END"
            " + CASE WHEN quote_id IS NOT NULL THEN 1 ELSE 0 END"
            " + CASE WHEN invoice_id IS NOT NULL THEN 1 ELSE 0 END) = 1",
            name="ck_activities_single_subject",
        ),
    )

    @classmethod
    def from_subject(cls, activity_type: str, subject: Subject) -> "Activity":
        """Costruisce l'attività impostando la sola colonna del soggetto."""
        activity = cls(type=activity_type)
        if isinstance(subject, CustomerSubject):
            activity.customer_id = subject.customer_id
        elif isinstance(subject, QuoteSubject):
            activity.quote_id = subject.quote_id
        else:
            activity.invoice_id = subject.invoice_id
        return activity

    @property
    def subject(self) -> Subject:
        """Soggetto dell'attività come variante tipizzata."""
        if self.quote_id is not None:
            return QuoteSubject(quote_id=self.quote_id)
        if self.invoice_id is not None:
            return InvoiceSubject(invoice_id=self.invoice_id)
        return CustomerSubject(customer_id=self.customer_id)

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, type={self.type})>"
