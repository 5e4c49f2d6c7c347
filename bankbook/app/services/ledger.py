from __future__ import annotations

import logging
from decimal import Decimal
from typing import Union

from ..core.errors import InsufficientFundsError, ValidationError
from ..models import CENTS, MAX_BALANCE, AccountResponse
from .store import LedgerStore


logger = logging.getLogger(__name__)

Amount = Union[Decimal, int]


class LedgerService:
    """Business rules on top of :class:`LedgerStore`.

    Holds no account state of its own; every call reads the store again.
    """

    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _validate_account_number(self, account_number: int) -> None:
        if isinstance(account_number, bool) or not isinstance(account_number, int):
            raise ValidationError("Account number must be an integer")

    def _validate_amount(self, amount: Amount) -> Decimal:
        if isinstance(amount, bool) or not isinstance(amount, (Decimal, int)):
            raise ValidationError("Amount must be a Decimal or an integer")
        value = Decimal(amount)
        if not value.is_finite():
            raise ValidationError("Amount must be a finite number")
        if value <= 0:
            raise ValidationError("Amount must be greater than zero")
        if value > MAX_BALANCE:
            raise ValidationError(f"Amount must not exceed {MAX_BALANCE}")
        if value != value.quantize(CENTS):
            raise ValidationError("Amount must not have more than two decimal places")
        return value.quantize(CENTS)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def open_account(self, name: str) -> int:
        if not isinstance(name, str) or not name.strip():
            logger.info("account.created.rejected", extra={"reason": "blank name"})
            raise ValidationError("Account name must not be empty")
        account_number = self.store.create_account(name.strip())
        logger.info(
            "account.created",
            extra={"account_number": account_number, "owner_name": name.strip()},
        )
        return account_number

    def deposit(self, account_number: int, amount: Amount) -> Decimal:
        self._validate_account_number(account_number)
        value = self._validate_amount(amount)
        balance = self.store.adjust_balance(account_number, value)
        logger.info(
            "account.deposit",
            extra={"account_number": account_number, "amount": str(value), "balance": str(balance)},
        )
        return balance

    def withdraw(self, account_number: int, amount: Amount) -> Decimal:
        self._validate_account_number(account_number)
        value = self._validate_amount(amount)
        try:
            balance = self.store.adjust_balance(account_number, -value)
        except InsufficientFundsError:
            logger.info(
                "account.withdraw.rejected",
                extra={"account_number": account_number, "amount": str(value)},
            )
            raise
        logger.info(
            "account.withdraw",
            extra={"account_number": account_number, "amount": str(value), "balance": str(balance)},
        )
        return balance

    def get_account(self, account_number: int) -> AccountResponse:
        self._validate_account_number(account_number)
        return self.store.get_account(account_number)

    def snapshot(self) -> list[AccountResponse]:
        return self.store.list_accounts()
