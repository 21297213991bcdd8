import anyio
import pytest
from google.api_core import exceptions as gcp_exceptions

from models.record import RecordKind
from services import aggregation_service
from services.errors import MissingParameter, StoreUnavailable
from services.record_repository import RecordRepository


@pytest.fixture
def repos(db, settings):
    return (
        RecordRepository(db, RecordKind.INCOME, settings),
        RecordRepository(db, RecordKind.EXPENSE, settings),
    )


@pytest.fixture
def tenant_repos(db, tenant_settings):
    return (
        RecordRepository(db, RecordKind.INCOME, tenant_settings),
        RecordRepository(db, RecordKind.EXPENSE, tenant_settings),
    )


class TestSummarize:

    def test_empty_scope_is_zero(self, repos):
        summary = anyio.run(aggregation_service.summarize, *repos)

        assert (summary.totalIncome, summary.totalExpense, summary.balance) == (0, 0, 0)

    def test_sums_and_balance(self, repos, firestore_db):
        firestore_db.collection("incomes").seed({"amount": 10})
        firestore_db.collection("incomes").seed({"amount": "20"})
        firestore_db.collection("expenses").seed({"amount": 5})

        summary = anyio.run(aggregation_service.summarize, *repos)

        assert summary.totalIncome == 30
        assert summary.totalExpense == 5
        assert summary.balance == 25

    def test_garbage_amounts_contribute_zero(self, repos, firestore_db):
        firestore_db.collection("incomes").seed({"amount": "n/a"})
        firestore_db.collection("incomes").seed({"amount": 7})
        firestore_db.collection("expenses").seed({})

        summary = anyio.run(aggregation_service.summarize, *repos)

        assert summary.totalIncome == 7
        assert summary.totalExpense == 0

    def test_owner_scope(self, tenant_repos, firestore_db):
        firestore_db.collection("incomes").seed({"amount": 100, "userEmail": "alice@example.com"})
        firestore_db.collection("incomes").seed({"amount": 900, "userEmail": "bob@example.com"})
        firestore_db.collection("expenses").seed({"amount": 40, "userEmail": "alice@example.com"})

        summary = anyio.run(aggregation_service.summarize, *tenant_repos, "alice@example.com")

        assert summary.totalIncome == 100
        assert summary.balance == 60

    def test_multi_tenant_requires_owner(self, tenant_repos):
        with pytest.raises(MissingParameter):
            anyio.run(aggregation_service.summarize, *tenant_repos)

    def test_store_outage(self, repos, firestore_db):
        firestore_db.collection("expenses").fail_with = gcp_exceptions.DeadlineExceeded("slow")

        with pytest.raises(StoreUnavailable):
            anyio.run(aggregation_service.summarize, *repos)


class TestMergeTransactions:

    def test_date_descending(self, repos, firestore_db):
        firestore_db.collection("incomes").seed({"source": "Salary", "amount": 10, "date": "2024-01-01"})
        firestore_db.collection("expenses").seed({"source": "Rent", "amount": 5, "date": "2024-02-01"})

        feed = anyio.run(aggregation_service.merge_transactions, *repos)

        assert [(tx.source, tx.type) for tx in feed] == [
            ("Rent", RecordKind.EXPENSE),
            ("Salary", RecordKind.INCOME),
        ]

    def test_unparsable_date_sorts_last(self, repos, firestore_db):
        firestore_db.collection("incomes").seed({"source": "Broken", "amount": 1, "date": "someday"})
        firestore_db.collection("incomes").seed({"source": "Old", "amount": 1, "date": "1999-12-31"})
        firestore_db.collection("expenses").seed({"source": "New", "amount": 1, "date": "2024-06-30"})

        feed = anyio.run(aggregation_service.merge_transactions, *repos)

        assert [tx.source for tx in feed] == ["New", "Old", "Broken"]

    def test_empty(self, repos):
        assert anyio.run(aggregation_service.merge_transactions, *repos) == []
