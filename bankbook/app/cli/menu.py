from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Optional

import pydantic

from ..core.errors import LedgerError
from ..models import AccountCreate, AccountResponse, MoneyMovementRequest
from ..services import LedgerService
from .messages import describe_error


logger = logging.getLogger(__name__)

OPTIONS = ("Create Account", "Deposit", "Withdraw", "Refresh Table", "Quit")

TABLE_HEADER = "Account Number | Name                 | Balance"
TABLE_RULE = "-" * 46


def render_table(rows: Sequence[AccountResponse]) -> str:
    lines = [TABLE_HEADER, TABLE_RULE]
    for row in rows:
        lines.append(f"{row.account_number:14d} | {row.name:<20} | {row.balance:.2f}")
    return "\n".join(lines)


def render_options() -> str:
    return "\n".join(f"{index}. {label}" for index, label in enumerate(OPTIONS, start=1))


class LedgerMenu:
    """Numbered text menu driving a :class:`LedgerService`.

    ``read`` and ``write`` default to :func:`input` and :func:`print`.
    """

    def __init__(
        self,
        service: LedgerService,
        read: Optional[Callable[[str], str]] = None,
        write: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.service = service
        self.read = read or input
        self.write = write or print

    def show_accounts(self) -> None:
        try:
            rows = self.service.snapshot()
        except LedgerError as exc:
            self.write(describe_error(exc))
            return
        self.write(render_table(rows))

    def create_account(self) -> None:
        raw_name = self.read("Enter name: ")
        try:
            payload = AccountCreate(name=raw_name)
            account_number = self.service.open_account(payload.name)
        except (pydantic.ValidationError, LedgerError) as exc:
            self.write(describe_error(exc))
            return
        self.write(f"Account created successfully. Account number: {account_number}")

    def move_money(self, is_deposit: bool) -> None:
        raw_account = self.read("Account number: ")
        raw_amount = self.read("Deposit amount: " if is_deposit else "Withdraw amount: ")
        try:
            payload = MoneyMovementRequest.model_validate(
                {"account_number": raw_account.strip(), "amount": raw_amount.strip()}
            )
            if is_deposit:
                balance = self.service.deposit(payload.account_number, payload.amount)
            else:
                balance = self.service.withdraw(payload.account_number, payload.amount)
        except (pydantic.ValidationError, LedgerError) as exc:
            self.write(describe_error(exc))
            return
        verb = "Deposit" if is_deposit else "Withdrawal"
        self.write(f"{verb} successful. New balance: {balance:.2f}")

    def run(self) -> None:
        while True:
            self.show_accounts()
            self.write(render_options())
            try:
                choice = self.read("Select option: ").strip()
            except EOFError:
                break
            try:
                if choice == "1":
                    self.create_account()
                elif choice == "2":
                    self.move_money(is_deposit=True)
                elif choice == "3":
                    self.move_money(is_deposit=False)
                elif choice == "4":
                    continue
                elif choice == "5":
                    break
                else:
                    self.write(f"Unknown option: {choice!r}")
            except EOFError:
                break
        logger.info("menu.closed")
