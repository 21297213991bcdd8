# api/v1/expenses.py

from typing import List

from fastapi import APIRouter, Depends, status

from api.deps import get_expense_repository, get_owner_email
from models.record import OperationResult, Record, RecordCreate, RecordUpdate
from services.record_repository import RecordRepository, UpdateOutcome

router = APIRouter()


@router.post(
    "",
    response_model=Record,
    status_code=status.HTTP_201_CREATED
)
def create_expense(
    expense_data: RecordCreate,
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_expense_repository),
):
    """
    Створює новий запис про витрату (власник і createdAt ставляться на сервері).
    """
    return repo.add(expense_data, owner_email)


@router.get(
    "",
    response_model=List[Record]
)
def get_all_expenses(
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_expense_repository),
):
    """
    Усі витрати власника, новіші спочатку.
    """
    return repo.list(owner_email)


@router.get("/{expense_id}", response_model=Record)
def get_expense(
    expense_id: str,
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_expense_repository),
):
    return repo.get(expense_id, owner_email)


@router.put("/{expense_id}", response_model=OperationResult)
def update_expense(
    expense_id: str,
    expense_data: RecordUpdate,
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_expense_repository),
):
    outcome = repo.update(expense_id, expense_data, owner_email)
    if outcome is UpdateOutcome.UNCHANGED:
        return OperationResult(success=True, message="No changes to expense", changed=False)
    return OperationResult(success=True, message="Expense updated", changed=True)


@router.delete("/{expense_id}", response_model=OperationResult)
def delete_expense(
    expense_id: str,
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_expense_repository),
):
    repo.delete(expense_id, owner_email)
    return OperationResult(success=True, message="Expense deleted", changed=True)
