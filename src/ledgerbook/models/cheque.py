"""Cheques issued or received."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Cheque(SQLModel, table=True):
    """Status moves pending -> processing -> cleared | bounced by direct writes."""

    __tablename__: ClassVar[str] = "cheque"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    cheque_number: str = Field(nullable=False, max_length=64)
    cheque_date: date = Field(nullable=False, index=True)
    amount: float = Field(nullable=False, ge=0)
    bank_name: Optional[str] = Field(default=None, max_length=120)
    status: str = Field(default="pending", max_length=16, index=True)
    type: str = Field(default="received", max_length=16)
    party_name: Optional[str] = Field(default=None, max_length=120)
    mahajan_id: Optional[int] = Field(default=None, foreign_key="mahajan.id")
