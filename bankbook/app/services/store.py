from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal

from sqlalchemy import func, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.errors import InsufficientFundsError, NotFoundError, StorageError, ValidationError
from ..models import MAX_BALANCE, AccountModel, AccountResponse, Money


logger = logging.getLogger(__name__)


class AccountLocks:
    """One mutex per account number, kept only while some caller uses it."""

    def __init__(self) -> None:
        self._locks: dict[int, threading.Lock] = {}
        self._users: dict[int, int] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, account_number: int) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(account_number, threading.Lock())
            self._users[account_number] = self._users.get(account_number, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[account_number] -= 1
                if not self._users[account_number]:
                    del self._users[account_number]
                    del self._locks[account_number]


class LedgerStore:
    """Durable account table. Every public call is its own transaction."""

    def __init__(self, engine: Engine, locks: AccountLocks | None = None) -> None:
        self.engine = engine
        self.locks = locks if locks is not None else AccountLocks()

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        try:
            with Session(self.engine, expire_on_commit=False) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("store.failure", extra={"operation": operation})
            raise StorageError(f"{operation} failed: {exc}") from exc

    # Account operations -------------------------------------------------
    def create_account(self, name: str) -> int:
        if not name:
            raise ValidationError("Account name must not be empty")
        with self._session("create_account") as session:
            account = AccountModel(name=name, balance=Decimal("0.00"))
            session.add(account)
            session.commit()
            if account.account_number is None:
                raise StorageError("create_account failed: no account number assigned")
            return account.account_number

    def get_account(self, account_number: int) -> AccountResponse:
        with self._session("get_account") as session:
            account = session.get(AccountModel, account_number)
            if account is None:
                raise NotFoundError(f"Account {account_number} not found")
            return AccountResponse.model_validate(account)

    def get_balance(self, account_number: int) -> Decimal:
        stmt = select(AccountModel.balance).where(
            AccountModel.account_number == account_number
        )
        with self._session("get_balance") as session:
            balance = session.exec(stmt).first()
            if balance is None:
                raise NotFoundError(f"Account {account_number} not found")
            return balance

    def list_accounts(self) -> list[AccountResponse]:
        stmt = select(AccountModel).order_by(AccountModel.account_number)
        with self._session("list_accounts") as session:
            return [AccountResponse.model_validate(row) for row in session.exec(stmt)]

    # Balance mutation ---------------------------------------------------
    def adjust_balance(self, account_number: int, delta: Decimal) -> Decimal:
        """Apply ``delta`` to one account and return the new balance.

        The range check and the write are a single conditional UPDATE,
        run while this process holds the account's lock, so concurrent
        adjustments to one account apply one after another. The result
        must stay within ``0 <= balance <= MAX_BALANCE``.
        """
        if abs(delta) > MAX_BALANCE:
            raise ValidationError(f"Adjustment must not exceed {MAX_BALANCE}")
        new_balance = func.round(AccountModel.balance + delta, 2, type_=Money)
        stmt = (
            update(AccountModel)
            .where(AccountModel.account_number == account_number)
            .where(new_balance >= 0)
            .where(new_balance <= MAX_BALANCE)
            .values(balance=new_balance)
            .execution_options(synchronize_session=False)
        )
        with self.locks.hold(account_number):
            with self._session("adjust_balance") as session:
                result = session.exec(stmt)  # type: ignore[call-overload]
                if result.rowcount == 0:
                    account = session.get(AccountModel, account_number)
                    if account is None:
                        raise NotFoundError(f"Account {account_number} not found")
                    if account.balance + delta > MAX_BALANCE:
                        raise ValidationError(
                            f"Balance of account {account_number} would exceed {MAX_BALANCE}"
                        )
                    raise InsufficientFundsError(
                        f"Insufficient funds in account {account_number}"
                    )
                balance = session.exec(
                    select(AccountModel.balance).where(
                        AccountModel.account_number == account_number
                    )
                ).one()
                session.commit()
                return balance
