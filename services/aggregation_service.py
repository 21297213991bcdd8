from typing import List, Optional, Tuple

import anyio

from models.record import RecordKind, Summary, Transaction
from services.coercion import coerce_amount, parse_record_date
from services.record_repository import RecordRepository


async def _read_both(
    incomes: RecordRepository,
    expenses: RecordRepository,
    owner_email: Optional[str],
) -> Tuple[list, list]:
    """
    Читає обидві колекції паралельно. Firestore SDK синхронний → окремі потоки.
    """
    results: dict[RecordKind, list] = {}
    errors: list[Exception] = []

    async def _read(repo: RecordRepository):
        try:
            results[repo.kind] = await anyio.to_thread.run_sync(
                lambda: list(repo.iter_scope(owner_email))
            )
        except Exception as e:
            # Не даємо task group загорнути помилку в ExceptionGroup
            errors.append(e)

    async with anyio.create_task_group() as tg:
        tg.start_soon(_read, incomes)
        tg.start_soon(_read, expenses)

    if errors:
        raise errors[0]
    return results[RecordKind.INCOME], results[RecordKind.EXPENSE]


async def summarize(
    incomes: RecordRepository,
    expenses: RecordRepository,
    owner_email: Optional[str] = None,
) -> Summary:
    """
    Загальний дохід, загальні витрати та баланс у межах власника.
    """
    income_docs, expense_docs = await _read_both(incomes, expenses, owner_email)

    total_income = sum(coerce_amount((doc.to_dict() or {}).get("amount")) for doc in income_docs)
    total_expense = sum(coerce_amount((doc.to_dict() or {}).get("amount")) for doc in expense_docs)

    return Summary(
        totalIncome=total_income,
        totalExpense=total_expense,
        balance=total_income - total_expense,
    )


async def merge_transactions(
    incomes: RecordRepository,
    expenses: RecordRepository,
    owner_email: Optional[str] = None,
) -> List[Transaction]:
    """
    Доходи + витрати однією стрічкою, новіші дати спочатку.
    """
    income_docs, expense_docs = await _read_both(incomes, expenses, owner_email)

    feed = []
    for repo, docs in ((incomes, income_docs), (expenses, expense_docs)):
        for doc in docs:
            data = doc.to_dict() or {}
            record = repo.to_record(doc.id, data)
            feed.append(Transaction(type=repo.kind, **record.model_dump()))

    # Нерозпізнана дата -> date.min, тобто в кінець списку
    feed.sort(key=lambda tx: parse_record_date(tx.date), reverse=True)
    return feed
