"""Firm cash/bank accounts and their transactions."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

# Transaction types that take money out of a firm account.
OUTFLOW_TYPES = frozenset({"partner_withdrawal", "expense", "refund"})


class FirmAccount(SQLModel, table=True):
    __tablename__: ClassVar[str] = "firm_account"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    account_name: str = Field(nullable=False, max_length=120)
    account_type: str = Field(default="cash", max_length=32)

    transactions: list["FirmTransaction"] = Relationship(
        back_populates="account",
        sa_relationship=relationship("FirmTransaction", back_populates="account"),
    )


class FirmTransaction(SQLModel, table=True):
    __tablename__: ClassVar[str] = "firm_transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    firm_account_id: int = Field(foreign_key="firm_account.id", nullable=False, index=True)
    transaction_type: str = Field(nullable=False, max_length=32)
    amount: float = Field(nullable=False, ge=0)
    transaction_date: date = Field(nullable=False, index=True)
    description: Optional[str] = Field(default=None, max_length=255)

    account: FirmAccount = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("FirmAccount", back_populates="transactions"),
    )
