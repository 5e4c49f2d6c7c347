from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Name of the account holder")

class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_number: int
    name: str
    balance: Decimal = Field(..., ge=0, description="Balance rounded to cents")

class MoneyMovementRequest(BaseModel):
    account_number: int = Field(..., ge=1)
    amount: Decimal = Field(..., allow_inf_nan=False, max_digits=15, decimal_places=2)
