from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import REAL, Column, Integer, Text, text
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel

CENTS = Decimal("0.01")
# Largest balance whose cents survive a round trip through a REAL column.
MAX_BALANCE = Decimal("1000000000000.00")


class Money(TypeDecorator):
    """REAL column surfaced as a Decimal rounded to cents."""

    impl = REAL
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> Optional[float]:
        if value is None:
            return None
        return float(Decimal(value).quantize(CENTS))

    def process_result_value(self, value: Any, dialect: Any) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(str(value)).quantize(CENTS)


class Account(SQLModel, table=True):
    __tablename__ = "accounts"
    __table_args__ = {"sqlite_autoincrement": True}

    account_number: Optional[int] = Field(
        default=None,
        sa_column=Column("accountNumber", Integer, primary_key=True, autoincrement=True),
    )
    name: str = Field(sa_column=Column("name", Text, nullable=False))
    balance: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column("balance", Money, nullable=False, server_default=text("0")),
    )
