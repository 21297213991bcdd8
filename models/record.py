import datetime
import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class RecordKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError("amount must be a finite number")
    return value


# Модель, яку ми очікуємо від фронтенду при створенні.
# amount може прийти рядком ("12.50"), Pydantic перетворить на float.

class RecordCreate(BaseModel):
    source: str
    amount: float
    date: datetime.date
    icon: Optional[str] = None
    emoji: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def check_amount(cls, value: float) -> float:
        return _finite(value)


class RecordUpdate(BaseModel):
    source: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[datetime.date] = None
    icon: Optional[str] = None
    emoji: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def check_amount(cls, value: Optional[float]) -> Optional[float]:
        return None if value is None else _finite(value)


# Модель, яку ми повертаємо з бази даних (включаючи ID)

class Record(BaseModel):
    id: str
    source: str = ""
    amount: float = 0.0
    # ISO-дата; старі записи можуть містити довільний текст
    date: Optional[str] = None
    icon: str
    userEmail: Optional[str] = None
    createdAt: Optional[datetime.datetime] = None


class Transaction(Record):
    type: RecordKind


class Summary(BaseModel):
    totalIncome: float = 0.0
    totalExpense: float = 0.0
    balance: float = 0.0


class OperationResult(BaseModel):
    success: bool
    message: str
    changed: bool = False
