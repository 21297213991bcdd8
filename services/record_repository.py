import logging
import re
from contextlib import contextmanager
from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterator, List, Optional

from google.api_core import exceptions as gcp_exceptions
from google.cloud.firestore_v1 import DELETE_FIELD
from google.cloud.firestore_v1.base_query import FieldFilter

from core.config import Settings
from models.record import Record, RecordCreate, RecordKind, RecordUpdate
from services.coercion import coerce_amount
from services.errors import InvalidIdentifier, MissingParameter, NotFound, StoreUnavailable

logger = logging.getLogger(__name__)

# Зарезервовані Firestore ідентифікатори: __foo__
_RESERVED_ID = re.compile(r"^__.*__$")
_MAX_ID_BYTES = 1500

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

# Тимчасові збої Firestore; решта помилок (права, індекси, аргументи) йде як 500
_TRANSIENT_ERRORS = (
    gcp_exceptions.ServiceUnavailable,
    gcp_exceptions.DeadlineExceeded,
    gcp_exceptions.InternalServerError,
    gcp_exceptions.ResourceExhausted,
    gcp_exceptions.Aborted,
    gcp_exceptions.RetryError,
)


class UpdateOutcome(str, Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def validate_record_id(record_id: str) -> str:
    if (
        not record_id
        or "/" in record_id
        or record_id in {".", ".."}
        or _RESERVED_ID.match(record_id)
        or len(record_id.encode("utf-8")) > _MAX_ID_BYTES
    ):
        raise InvalidIdentifier()
    return record_id


@contextmanager
def store_call(action: str):
    """
    Переводить транзиєнтні помилки Firestore у StoreUnavailable.
    """
    try:
        yield
    except _TRANSIENT_ERRORS as e:
        logger.warning(f"Firestore call failed during {action}: {e}")
        raise StoreUnavailable() from e


def _stored_date(value) -> Optional[str]:
    # Старі записи могли зберігати дату як datetime (Firestore timestamp)
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if value is None:
        return None
    return str(value)


def _created_at_key(record: Record) -> datetime:
    created = record.createdAt
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


class RecordRepository:
    """
    Доступ до однієї колекції записів (доходи або витрати).
    Контракт однаковий для обох видів.
    """

    def __init__(self, db, kind: RecordKind, settings: Settings):
        self.kind = kind
        self.settings = settings
        name = settings.INCOME_COLLECTION if kind is RecordKind.INCOME else settings.EXPENSE_COLLECTION
        self._collection = db.collection(name)

    def _require_owner(self, owner_email: Optional[str]) -> None:
        if self.settings.MULTI_TENANT and not owner_email:
            raise MissingParameter("email")

    def _resolve_icon(self, emoji: Optional[str], icon: Optional[str], prior: Optional[str] = None) -> str:
        return emoji or icon or prior or self.settings.DEFAULT_ICON

    def to_record(self, doc_id: str, data: dict) -> Record:
        return Record(
            id=doc_id,
            source=str(data.get("source") or ""),
            amount=coerce_amount(data.get("amount")),
            date=_stored_date(data.get("date")),
            icon=self._resolve_icon(data.get("emoji"), data.get("icon")),
            userEmail=data.get("userEmail"),
            createdAt=data.get("createdAt"),
        )

    def add(self, data: RecordCreate, owner_email: Optional[str] = None) -> Record:
        self._require_owner(owner_email)

        new_doc = {
            "source": data.source,
            "amount": float(data.amount),
            "date": data.date.isoformat(),
            "icon": self._resolve_icon(data.emoji, data.icon),
            "createdAt": datetime.now(timezone.utc),
        }
        if owner_email:
            new_doc["userEmail"] = owner_email

        with store_call(f"add {self.kind.value}"):
            _, doc_ref = self._collection.add(new_doc)

        logger.info(f"Created {self.kind.value} {doc_ref.id}")
        return self.to_record(doc_ref.id, new_doc)

    def iter_scope(self, owner_email: Optional[str] = None) -> Iterator:
        """
        Документи, видимі власнику (або всі, якщо власника не задано
        і мультитенантність вимкнена).
        """
        self._require_owner(owner_email)
        query = self._collection
        if owner_email:
            query = query.where(filter=FieldFilter("userEmail", "==", owner_email))
        with store_call(f"read {self.kind.value}s"):
            # Матеріалізуємо тут, щоб помилки стріму не вилітали назовні
            return iter(list(query.stream()))

    def list(self, owner_email: Optional[str] = None) -> List[Record]:
        records = [self.to_record(doc.id, doc.to_dict() or {}) for doc in self.iter_scope(owner_email)]
        # Сортуємо локально (новіші спочатку), щоб не вимагати композитних індексів
        records.sort(key=_created_at_key, reverse=True)
        return records

    def _load(self, record_id: str, owner_email: Optional[str]):
        validate_record_id(record_id)
        doc_ref = self._collection.document(record_id)
        with store_call(f"get {self.kind.value}"):
            doc = doc_ref.get()
        if not doc.exists:
            raise NotFound(self.kind)

        data = doc.to_dict() or {}
        # Чужий запис виглядає як відсутній
        if owner_email and data.get("userEmail") != owner_email:
            raise NotFound(self.kind)
        return doc_ref, data

    def get(self, record_id: str, owner_email: Optional[str] = None) -> Record:
        _, data = self._load(record_id, owner_email)
        return self.to_record(record_id, data)

    def update(self, record_id: str, data: RecordUpdate, owner_email: Optional[str] = None) -> UpdateOutcome:
        doc_ref, existing = self._load(record_id, owner_email)

        # Порівнюємо з тим, що бачить клієнт, а не з сирими полями документа
        current = self.to_record(record_id, existing)
        changes = {}

        if data.source is not None and data.source != existing.get("source"):
            changes["source"] = data.source
        if data.amount is not None and float(data.amount) != current.amount:
            changes["amount"] = float(data.amount)
        if data.date is not None and data.date.isoformat() != current.date:
            changes["date"] = data.date.isoformat()

        icon = self._resolve_icon(data.emoji, data.icon, current.icon)
        if icon != current.icon:
            changes["icon"] = icon
            # Старі записи тримали іконку в полі emoji
            if "emoji" in existing:
                changes["emoji"] = DELETE_FIELD

        if not changes:
            return UpdateOutcome.UNCHANGED

        with store_call(f"update {self.kind.value}"):
            doc_ref.update(changes)
        logger.info(f"Updated {self.kind.value} {record_id}: {sorted(changes)}")
        return UpdateOutcome.UPDATED

    def delete(self, record_id: str, owner_email: Optional[str] = None) -> None:
        doc_ref, _ = self._load(record_id, owner_email)
        with store_call(f"delete {self.kind.value}"):
            doc_ref.delete()
        logger.info(f"Deleted {self.kind.value} {record_id}")
