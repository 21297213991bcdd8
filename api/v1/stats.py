# api/v1/stats.py

from typing import List

from fastapi import APIRouter, Depends

from api.deps import get_expense_repository, get_income_repository, get_owner_email
from models.record import Summary, Transaction
from services import aggregation_service
from services.record_repository import RecordRepository

router = APIRouter()


@router.get("/summary", response_model=Summary)
async def get_summary(
    owner_email: str | None = Depends(get_owner_email),
    incomes: RecordRepository = Depends(get_income_repository),
    expenses: RecordRepository = Depends(get_expense_repository),
):
    """
    Загальний дохід, загальні витрати та баланс.
    """
    return await aggregation_service.summarize(incomes, expenses, owner_email)


@router.get("/transactions", response_model=List[Transaction])
async def get_transactions(
    owner_email: str | None = Depends(get_owner_email),
    incomes: RecordRepository = Depends(get_income_repository),
    expenses: RecordRepository = Depends(get_expense_repository),
):
    """
    Усі транзакції (доходи + витрати), новіші дати спочатку.
    """
    return await aggregation_service.merge_transactions(incomes, expenses, owner_email)
