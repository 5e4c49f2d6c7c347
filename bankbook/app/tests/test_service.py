from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from ..core.errors import InsufficientFundsError, NotFoundError, ValidationError
from ..models import MAX_BALANCE
from ..services import LedgerService


def test_example_scenario(service: LedgerService) -> None:
    account = service.open_account("Alice")
    assert account == 1
    assert service.deposit(account, Decimal("100.00")) == Decimal("100.00")
    assert service.withdraw(account, Decimal("30.00")) == Decimal("70.00")

    with pytest.raises(InsufficientFundsError):
        service.withdraw(account, Decimal("1000.00"))

    rows = service.snapshot()
    assert [(row.account_number, row.name, row.balance) for row in rows] == [
        (1, "Alice", Decimal("70.00"))
    ]


def test_open_account_numbers_strictly_increase(service: LedgerService) -> None:
    issued = [service.open_account(name) for name in ("Ann", "Ben", "Cid", "Dot")]
    assert issued == sorted(set(issued))
    assert all(row.balance == Decimal("0.00") for row in service.snapshot())


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_open_account_rejects_blank_names(service: LedgerService, name: str) -> None:
    with pytest.raises(ValidationError):
        service.open_account(name)
    assert service.snapshot() == []


def test_open_account_strips_name(service: LedgerService) -> None:
    number = service.open_account("  Eve  ")
    assert service.get_account(number).name == "Eve"


@pytest.mark.parametrize(
    "amount",
    [Decimal("0"), Decimal("-5.00"), 0, -1, Decimal("NaN"), Decimal("Infinity"), Decimal("1.001")],
)
def test_deposit_rejects_invalid_amounts(service: LedgerService, amount) -> None:
    number = service.open_account("Fay")
    with pytest.raises(ValidationError):
        service.deposit(number, amount)
    with pytest.raises(ValidationError):
        service.withdraw(number, amount)
    assert service.get_account(number).balance == Decimal("0.00")


@pytest.mark.parametrize("amount", [1.5, "10.00", True])
def test_amount_must_be_decimal_or_int(service: LedgerService, amount) -> None:
    number = service.open_account("Gus")
    with pytest.raises(ValidationError):
        service.deposit(number, amount)


def test_account_number_must_be_int(service: LedgerService) -> None:
    with pytest.raises(ValidationError):
        service.deposit("1", Decimal("1.00"))  # type: ignore[arg-type]


def test_integer_amounts_are_accepted(service: LedgerService) -> None:
    number = service.open_account("Hal")
    assert service.deposit(number, 25) == Decimal("25.00")


def test_operations_on_missing_account(service: LedgerService) -> None:
    with pytest.raises(NotFoundError):
        service.deposit(99, Decimal("1.00"))
    with pytest.raises(NotFoundError):
        service.withdraw(99, Decimal("1.00"))
    with pytest.raises(NotFoundError):
        service.get_account(99)


def test_withdraw_exact_balance_leaves_zero(service: LedgerService) -> None:
    number = service.open_account("Ida")
    service.deposit(number, Decimal("45.67"))
    assert service.withdraw(number, Decimal("45.67")) == Decimal("0.00")


def test_withdraw_one_cent_over_balance_fails(service: LedgerService) -> None:
    number = service.open_account("Jon")
    service.deposit(number, Decimal("45.67"))
    with pytest.raises(InsufficientFundsError):
        service.withdraw(number, Decimal("45.68"))
    assert service.get_account(number).balance == Decimal("45.67")


def test_snapshot_reflects_cumulative_effect(service: LedgerService) -> None:
    a = service.open_account("Kim")
    b = service.open_account("Lou")
    service.deposit(a, Decimal("10.10"))
    service.deposit(b, Decimal("3.00"))
    service.deposit(a, Decimal("0.20"))
    service.withdraw(a, Decimal("5.05"))
    with pytest.raises(InsufficientFundsError):
        service.withdraw(b, Decimal("3.01"))
    service.withdraw(b, Decimal("3.00"))

    rows = service.snapshot()
    assert [(row.account_number, row.balance) for row in rows] == [
        (a, Decimal("5.25")),
        (b, Decimal("0.00")),
    ]


def test_reads_are_repeatable(service: LedgerService) -> None:
    number = service.open_account("Max")
    service.deposit(number, Decimal("8.80"))
    assert service.snapshot() == service.snapshot()
    assert service.store.get_balance(number) == service.store.get_balance(number)


def test_concurrent_movements_on_one_account_are_serialised(service: LedgerService) -> None:
    number = service.open_account("Ned")
    service.deposit(number, Decimal("100.00"))

    deposits = [Decimal("1.10")] * 40
    withdrawals = [Decimal("0.90")] * 40

    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(service.deposit, number, amount) for amount in deposits]
        futures += [pool.submit(service.withdraw, number, amount) for amount in withdrawals]
        for future in futures:
            future.result()

    expected = Decimal("100.00") + sum(deposits) - sum(withdrawals)
    assert service.get_account(number).balance == expected


def test_concurrent_movements_on_separate_accounts(service: LedgerService) -> None:
    numbers = [service.open_account(f"Owner {i}") for i in range(4)]

    def work(number: int) -> None:
        for _ in range(10):
            service.deposit(number, Decimal("2.50"))
            service.withdraw(number, Decimal("1.25"))

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(work, numbers))

    assert [row.balance for row in service.snapshot()] == [Decimal("12.50")] * 4


@pytest.mark.parametrize(
    "amount",
    [MAX_BALANCE + Decimal("0.01"), Decimal("1e30"), 10**40],
)
def test_amounts_above_maximum_are_rejected(service: LedgerService, amount) -> None:
    number = service.open_account("Oli")
    with pytest.raises(ValidationError):
        service.deposit(number, amount)
    with pytest.raises(ValidationError):
        service.withdraw(number, amount)
    assert service.get_account(number).balance == Decimal("0.00")


def test_deposit_up_to_maximum_balance_is_exact(service: LedgerService) -> None:
    number = service.open_account("Pam")
    assert service.deposit(number, MAX_BALANCE - Decimal("0.01")) == MAX_BALANCE - Decimal("0.01")
    assert service.deposit(number, Decimal("0.01")) == MAX_BALANCE


def test_deposit_past_maximum_balance_is_rejected(service: LedgerService) -> None:
    number = service.open_account("Quin")
    service.deposit(number, MAX_BALANCE)
    with pytest.raises(ValidationError):
        service.deposit(number, Decimal("0.01"))
    assert service.get_account(number).balance == MAX_BALANCE
    assert service.withdraw(number, Decimal("0.01")) == MAX_BALANCE - Decimal("0.01")
