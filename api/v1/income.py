from typing import List

from fastapi import APIRouter, Depends, status

from api.deps import get_income_repository, get_owner_email
from models.record import OperationResult, Record, RecordCreate, RecordUpdate
from services.record_repository import RecordRepository, UpdateOutcome

router = APIRouter()


@router.post(
    "",
    response_model=Record,
    status_code=status.HTTP_201_CREATED
)
def create_income(
    income_data: RecordCreate,
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_income_repository),
):
    """
    Створює новий запис про дохід (власник і createdAt ставляться на сервері).
    """
    return repo.add(income_data, owner_email)


@router.get(
    "",
    response_model=List[Record]
)
def get_all_income(
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_income_repository),
):
    """
    Усі доходи власника, новіші спочатку.
    """
    return repo.list(owner_email)


@router.get("/{income_id}", response_model=Record)
def get_income(
    income_id: str,
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_income_repository),
):
    return repo.get(income_id, owner_email)


@router.put("/{income_id}", response_model=OperationResult)
def update_income(
    income_id: str,
    income_data: RecordUpdate,
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_income_repository),
):
    outcome = repo.update(income_id, income_data, owner_email)
    if outcome is UpdateOutcome.UNCHANGED:
        return OperationResult(success=True, message="No changes to income", changed=False)
    return OperationResult(success=True, message="Income updated", changed=True)


@router.delete("/{income_id}", response_model=OperationResult)
def delete_income(
    income_id: str,
    owner_email: str | None = Depends(get_owner_email),
    repo: RecordRepository = Depends(get_income_repository),
):
    repo.delete(income_id, owner_email)
    return OperationResult(success=True, message="Income deleted", changed=True)
