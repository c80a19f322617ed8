"""Customers, their loans and loan repayments."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class Customer(SQLModel, table=True):
    """A borrower whose loans are tracked."""

    __tablename__: ClassVar[str] = "customer"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    name: str = Field(nullable=False, max_length=120, index=True)
    phone: Optional[str] = Field(default=None, max_length=32)
    address: Optional[str] = Field(default=None, max_length=255)
    payment_day: Optional[str] = Field(default=None, max_length=16)

    loans: list["Loan"] = Relationship(
        back_populates="customer",
        sa_relationship=relationship("Loan", back_populates="customer"),
    )


class Loan(SQLModel, table=True):
    """Money disbursed to a customer."""

    __tablename__: ClassVar[str] = "loan"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    customer_id: int = Field(foreign_key="customer.id", nullable=False, index=True)
    loan_number: str = Field(nullable=False, max_length=64)
    principal_amount: float = Field(nullable=False, ge=0)
    interest_rate: Optional[float] = Field(default=None, description="Percent")
    interest_type: str = Field(default="none", max_length=16)
    loan_date: date = Field(nullable=False, index=True)
    due_date: Optional[date] = Field(default=None)
    description: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True)

    customer: Customer = Relationship(
        back_populates="loans",
        sa_relationship=relationship("Customer", back_populates="loans"),
    )
    transactions: list["LoanTransaction"] = Relationship(
        back_populates="loan",
        sa_relationship=relationship("LoanTransaction", back_populates="loan"),
    )


class LoanTransaction(SQLModel, table=True):
    """A repayment received against a loan."""

    __tablename__: ClassVar[str] = "loan_transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    loan_id: int = Field(foreign_key="loan.id", nullable=False, index=True)
    amount: float = Field(nullable=False, ge=0)
    payment_date: date = Field(nullable=False, index=True)
    transaction_type: str = Field(default="payment", max_length=32)
    payment_mode: str = Field(default="cash", max_length=32)
    notes: Optional[str] = Field(default=None, max_length=255)

    loan: Loan = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Loan", back_populates="transactions"),
    )
