"""Mahajans (vendors), their bills and the payments made against them."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class Mahajan(SQLModel, table=True):
    """A vendor the business buys from on credit."""

    __tablename__: ClassVar[str] = "mahajan"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    name: str = Field(nullable=False, max_length=120, index=True)
    phone: Optional[str] = Field(default=None, max_length=32)
    payment_day: Optional[str] = Field(default=None, max_length=16)

    bills: list["Bill"] = Relationship(
        back_populates="mahajan",
        sa_relationship=relationship("Bill", back_populates="mahajan"),
    )


class Bill(SQLModel, table=True):
    __tablename__: ClassVar[str] = "bill"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    mahajan_id: int = Field(foreign_key="mahajan.id", nullable=False, index=True)
    bill_number: str = Field(nullable=False, max_length=64)
    bill_amount: float = Field(nullable=False, ge=0)
    bill_date: date = Field(nullable=False, index=True)
    due_date: Optional[date] = Field(default=None, index=True)
    interest_rate: Optional[float] = Field(default=None, description="Percent")
    interest_type: str = Field(default="none", max_length=16)
    description: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True)

    mahajan: Mahajan = Relationship(
        back_populates="bills",
        sa_relationship=relationship("Mahajan", back_populates="bills"),
    )
    transactions: list["BillTransaction"] = Relationship(
        back_populates="bill",
        sa_relationship=relationship("BillTransaction", back_populates="bill"),
    )


class BillTransaction(SQLModel, table=True):
    """Payment toward a bill; ``transaction_type`` is payment, principal or interest."""

    __tablename__: ClassVar[str] = "bill_transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    bill_id: int = Field(foreign_key="bill.id", nullable=False, index=True)
    amount: float = Field(nullable=False, ge=0)
    payment_date: date = Field(nullable=False, index=True)
    transaction_type: str = Field(default="payment", max_length=32)
    payment_mode: str = Field(default="cash", max_length=32)
    notes: Optional[str] = Field(default=None, max_length=255)

    bill: Bill = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Bill", back_populates="transactions"),
    )
