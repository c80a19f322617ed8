"""Partners and their capital movements."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

INVESTMENT = "investment"
WITHDRAWAL = "withdrawal"


class Partner(SQLModel, table=True):
    __tablename__: ClassVar[str] = "partner"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    name: str = Field(nullable=False, max_length=120, index=True)
    phone: Optional[str] = Field(default=None, max_length=32)

    transactions: list["PartnerTransaction"] = Relationship(
        back_populates="partner",
        sa_relationship=relationship("PartnerTransaction", back_populates="partner"),
    )


class PartnerTransaction(SQLModel, table=True):
    """Money a partner put in or took out.

    The amount is never negative; ``direction`` says which way it moved.
    """

    __tablename__: ClassVar[str] = "partner_transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    partner_id: int = Field(foreign_key="partner.id", nullable=False, index=True)
    direction: str = Field(default=INVESTMENT, max_length=16)
    amount: float = Field(nullable=False, ge=0)
    payment_date: date = Field(nullable=False, index=True)
    payment_mode: str = Field(default="cash", max_length=32)
    transfer_ref: Optional[str] = Field(default=None, max_length=64, index=True)
    notes: Optional[str] = Field(default=None, max_length=255)

    partner: Partner = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Partner", back_populates="transactions"),
    )
