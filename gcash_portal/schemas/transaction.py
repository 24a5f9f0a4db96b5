from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from decimal import Decimal
from datetime import datetime


def compute_total(amount: Decimal, charge: Optional[Decimal], include_charge: Optional[bool]) -> Decimal:
    """total = amount, plus the charge when it is passed on to the customer"""
    if include_charge and charge:
        return amount + charge
    return amount


# numeric(10,2)
MONEY_DIGITS = 10
MONEY_PLACES = 2


def fits_money_column(value: Decimal) -> bool:
    """True when value can be stored in a numeric(10,2) column without overflow."""
    return abs(value) < Decimal(10) ** (MONEY_DIGITS - MONEY_PLACES)


class TransactionCreate(BaseModel):
    customer_name: str = Field(min_length=1)
    phone_number: Optional[str] = None
    amount: Decimal = Field(max_digits=10, decimal_places=2, ge=0)
    charge: Decimal = Field(Decimal("0"), max_digits=10, decimal_places=2, ge=0)
    include_charge: bool = False
    total: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2, ge=0)
    type: str = Field(min_length=1)  # Cash In, Cash Out, ...
    date: Optional[datetime] = None
    status: Optional[str] = None
    # Note: user_email always comes from the caller's token

    @model_validator(mode="after")
    def check_total(self):
        expected = compute_total(self.amount, self.charge, self.include_charge)
        if not fits_money_column(expected):
            raise ValueError(f"total {expected} does not fit numeric({MONEY_DIGITS},{MONEY_PLACES})")
        if self.total is None:
            self.total = expected
        elif self.total != expected:
            raise ValueError(f"total must be {expected} for amount {self.amount}, charge {self.charge}, include_charge {self.include_charge}")
        return self


class TransactionUpdate(BaseModel):
    customer_name: Optional[str] = Field(None, min_length=1)
    phone_number: Optional[str] = None
    amount: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2, ge=0)
    charge: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2, ge=0)
    include_charge: Optional[bool] = None
    total: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2, ge=0)
    type: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    status: Optional[str] = None


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_email: str
    customer_name: str
    phone_number: Optional[str] = None
    amount: Decimal
    charge: Optional[Decimal] = None
    include_charge: Optional[bool] = None
    total: Decimal
    type: str
    date: Optional[datetime] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TypeSummary(BaseModel):
    type: str
    count: int
    total: Decimal


class TransactionSummary(BaseModel):
    count: int
    total_amount: Decimal
    total_charge: Decimal
    grand_total: Decimal
    by_type: List[TypeSummary]
