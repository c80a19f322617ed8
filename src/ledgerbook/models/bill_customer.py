"""Bill customers: buyers invoiced on credit, their sales and settlements."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

SALE_PAYMENT = "payment"
SALE_REFUND = "refund"


class BillCustomer(SQLModel, table=True):
    """A buyer the business sells to against invoices."""

    __tablename__: ClassVar[str] = "bill_customer"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    name: str = Field(nullable=False, max_length=120, index=True)
    phone: Optional[str] = Field(default=None, max_length=32)
    email: Optional[str] = Field(default=None, max_length=120)
    address: Optional[str] = Field(default=None, max_length=255)
    gst_number: Optional[str] = Field(default=None, max_length=32)

    sales: list["Sale"] = Relationship(
        back_populates="bill_customer",
        sa_relationship=relationship("Sale", back_populates="bill_customer"),
    )


class Sale(SQLModel, table=True):
    __tablename__: ClassVar[str] = "sale"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    bill_customer_id: int = Field(foreign_key="bill_customer.id", nullable=False, index=True)
    sale_number: str = Field(nullable=False, max_length=64)
    sale_amount: float = Field(nullable=False, ge=0)
    sale_date: date = Field(nullable=False, index=True)
    due_date: Optional[date] = Field(default=None)
    interest_rate: Optional[float] = Field(default=None, description="Percent")
    interest_type: str = Field(default="none", max_length=16)
    description: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True)

    bill_customer: BillCustomer = Relationship(
        back_populates="sales",
        sa_relationship=relationship("BillCustomer", back_populates="sales"),
    )
    transactions: list["SaleTransaction"] = Relationship(
        back_populates="sale",
        sa_relationship=relationship("SaleTransaction", back_populates="sale"),
    )


class SaleTransaction(SQLModel, table=True):
    """Money received against a sale, or a refund paid back (``transaction_type``)."""

    __tablename__: ClassVar[str] = "sale_transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    sale_id: int = Field(foreign_key="sale.id", nullable=False, index=True)
    amount: float = Field(nullable=False, ge=0)
    payment_date: date = Field(nullable=False, index=True)
    transaction_type: str = Field(default=SALE_PAYMENT, max_length=32)
    payment_mode: str = Field(default="cash", max_length=32)
    notes: Optional[str] = Field(default=None, max_length=255)

    sale: Sale = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Sale", back_populates="transactions"),
    )
