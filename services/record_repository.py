import hashlib
import logging
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generic, Iterator, TypeVar

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists, GoogleAPICallError, NotFound, RetryError
from google.cloud.firestore_v1.base_query import FieldFilter

from core.errors import DuplicateKeyError, RecordNotFoundError, StoreUnavailableError
from core.firebase import ensure_initialized
from models.record import RecordInDB

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=RecordInDB)

# Поля, якими керує саме сховище
STORE_MANAGED_FIELDS = {"id", "created_at", "updated_at"}


MAX_DOCUMENT_ID_BYTES = 1500
RESERVED_DOCUMENT_ID = re.compile(r"__.*__")


def is_valid_document_id(record_id) -> bool:
    # Обмеження Firestore на ID документа: інакше клієнт отримав би 500 замість "не знайдено"
    if not isinstance(record_id, str) or not record_id:
        return False
    if "/" in record_id or record_id in {".", ".."}:
        return False
    if RESERVED_DOCUMENT_ID.fullmatch(record_id):
        return False
    return len(record_id.encode("utf-8")) <= MAX_DOCUMENT_ID_BYTES


class RecordRepository(ABC, Generic[T]):
    """Шлюз до сховища записів одного типу."""

    model: type[T]
    unique_field: str | None = None

    @abstractmethod
    def find_all(self) -> list[T]: ...

    @abstractmethod
    def find_by_id(self, record_id: str) -> T | None: ...

    @abstractmethod
    def find_by_field(self, name: str, value) -> T | None: ...

    @abstractmethod
    def create(self, fields: dict) -> T: ...

    @abstractmethod
    def save(self, record: T) -> T: ...

    @abstractmethod
    def delete(self, record: T) -> T: ...


@contextmanager
def _store_errors(operation: str, collection: str, unique_field: str | None = None) -> Iterator[None]:
    try:
        yield
    except AlreadyExists as e:
        # Ключ створили паралельно, вже після нашої перевірки
        raise DuplicateKeyError(unique_field or "key", e.message) from e
    except NotFound as e:
        # update() документа, який видалили між перевіркою та записом
        raise RecordNotFoundError(f"Record not found in '{collection}'") from e
    except (GoogleAPICallError, RetryError) as e:
        logger.error(f"Firestore {operation} on '{collection}' failed: {e}")
        raise StoreUnavailableError() from e


def _key_id(value) -> str:
    # Значення може містити "/" або бути задовгим для ID документа
    return hashlib.sha256(str(value).encode("utf-8")).hexdigest()


def _owned_key(transaction, keys, value, record_id: str):
    """Документ-ключ значення, якщо він належить саме цьому запису, інакше None."""
    if value is None:
        return None
    key_ref = keys.document(_key_id(value))
    key_snapshot = key_ref.get(transaction=transaction)
    if key_snapshot.exists and (key_snapshot.to_dict() or {}).get("record_id") == record_id:
        return key_ref
    return None


# Тіла транзакцій. Усі читання виконуються до першого запису, як вимагає Firestore

def create_record_and_key(transaction, doc_ref, key_ref, data: dict, field: str):
    if key_ref.get(transaction=transaction).exists:
        raise DuplicateKeyError(field, data[field])
    transaction.create(key_ref, {"record_id": doc_ref.id, "value": data[field]})
    transaction.set(doc_ref, data)


def save_record_and_keys(transaction, doc_ref, keys, data: dict, field: str):
    snapshot = doc_ref.get(transaction=transaction)
    if not snapshot.exists:
        raise RecordNotFoundError(f"Record {doc_ref.id} not found")

    old_value = (snapshot.to_dict() or {}).get(field)
    new_value = data[field]
    if old_value != new_value:
        new_key_ref = keys.document(_key_id(new_value))
        if new_key_ref.get(transaction=transaction).exists:
            raise DuplicateKeyError(field, new_value)
        old_key_ref = _owned_key(transaction, keys, old_value, doc_ref.id)
        transaction.create(new_key_ref, {"record_id": doc_ref.id, "value": new_value})
        if old_key_ref is not None:
            transaction.delete(old_key_ref)
    transaction.update(doc_ref, data)


def delete_record_and_key(transaction, doc_ref, keys, field: str):
    # Значення беремо з поточного документа, а не з прочитаного раніше запису
    snapshot = doc_ref.get(transaction=transaction)
    if not snapshot.exists:
        return
    value = (snapshot.to_dict() or {}).get(field)
    key_ref = _owned_key(transaction, keys, value, doc_ref.id)
    transaction.delete(doc_ref)
    if key_ref is not None:
        transaction.delete(key_ref)


_create_with_key = firestore.transactional(create_record_and_key)
_save_with_key = firestore.transactional(save_record_and_keys)
_delete_with_key = firestore.transactional(delete_record_and_key)


class FirestoreRecordRepository(RecordRepository[T]):
    """
    Записи одного типу в колекції Firestore.

    Якщо задано ``unique_field``, для кожного значення поля зберігається
    документ-ключ у колекції ``<collection>_<field>_keys``. Ключ і запис
    пишуться в одній транзакції, тож два паралельні create з однаковим
    значенням не пройдуть обидва.
    """

    def __init__(self, collection: str, model: type[T], unique_field: str | None = None):
        self.collection = collection
        self.model = model
        self.unique_field = unique_field

    def _records(self):
        return ensure_initialized().collection(self.collection)

    def _keys(self):
        return ensure_initialized().collection(f"{self.collection}_{self.unique_field}_keys")

    def _to_model(self, snapshot) -> T:
        data = snapshot.to_dict() or {}
        data["id"] = snapshot.id
        return self.model(**data)

    def find_all(self) -> list[T]:
        with _store_errors("find_all", self.collection):
            docs = self._records().order_by("created_at").stream()
            return [self._to_model(doc) for doc in docs]

    def find_by_id(self, record_id: str) -> T | None:
        if not is_valid_document_id(record_id):
            return None
        with _store_errors("find_by_id", self.collection):
            doc = self._records().document(record_id).get()
        if not doc.exists:
            return None
        return self._to_model(doc)

    def find_by_field(self, name: str, value) -> T | None:
        with _store_errors("find_by_field", self.collection):
            docs = list(
                self._records().where(filter=FieldFilter(name, "==", value)).limit(1).stream()
            )
        if not docs:
            return None
        return self._to_model(docs[0])

    def create(self, fields: dict) -> T:
        data = {k: v for k, v in fields.items() if k not in STORE_MANAGED_FIELDS}
        data["created_at"] = firestore.SERVER_TIMESTAMP
        data["updated_at"] = firestore.SERVER_TIMESTAMP

        with _store_errors("create", self.collection, self.unique_field):
            doc_ref = self._records().document()
            if self.unique_field:
                key_ref = self._keys().document(_key_id(data[self.unique_field]))
                _create_with_key(ensure_initialized().transaction(), doc_ref, key_ref, data, self.unique_field)
            else:
                doc_ref.set(data)
            return self._to_model(doc_ref.get())

    def save(self, record: T) -> T:
        data = record.model_dump(exclude=STORE_MANAGED_FIELDS)
        data["updated_at"] = firestore.SERVER_TIMESTAMP

        with _store_errors("save", self.collection, self.unique_field):
            doc_ref = self._records().document(record.id)
            if self.unique_field:
                _save_with_key(ensure_initialized().transaction(), doc_ref, self._keys(), data, self.unique_field)
            else:
                doc_ref.update(data)
            return self._to_model(doc_ref.get())

    def delete(self, record: T) -> T:
        with _store_errors("delete", self.collection):
            doc_ref = self._records().document(record.id)
            if self.unique_field:
                _delete_with_key(ensure_initialized().transaction(), doc_ref, self._keys(), self.unique_field)
            else:
                doc_ref.delete()
        return record
