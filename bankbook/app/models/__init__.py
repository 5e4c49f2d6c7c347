from .db import CENTS, MAX_BALANCE, Money
from .db import Account as AccountModel
from .schemas import AccountCreate, AccountResponse, MoneyMovementRequest

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "MoneyMovementRequest",
    "AccountModel",
    "CENTS",
    "MAX_BALANCE",
    "Money",
]
