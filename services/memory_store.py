"""
Реалізації сховища записів і довідника користувачів у пам'яті.

Працюють при ``STORE_BACKEND=memory`` для локальної розробки без Firebase
та в тестах. Дані живуть лише поки живе процес.
"""
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Iterable

from core.errors import DuplicateKeyError, RecordNotFoundError
from models.user import UserInDB
from services.record_repository import STORE_MANAGED_FIELDS, RecordRepository, T
from services.user_lookup import UserLookup

logger = logging.getLogger(__name__)


class InMemoryRecordRepository(RecordRepository[T]):
    def __init__(self, model: type[T], unique_field: str | None = None):
        self.model = model
        self.unique_field = unique_field
        # dict зберігає порядок вставки, це і є порядок find_all
        self._documents: dict[str, dict] = {}
        self._lock = threading.Lock()

    def _to_model(self, record_id: str, data: dict) -> T:
        return self.model(id=record_id, **data)

    def _check_unique(self, data: dict, exclude_id: str | None = None) -> None:
        if not self.unique_field:
            return
        value = data.get(self.unique_field)
        for record_id, existing in self._documents.items():
            if record_id != exclude_id and existing.get(self.unique_field) == value:
                raise DuplicateKeyError(self.unique_field, value)

    def find_all(self) -> list[T]:
        with self._lock:
            return [self._to_model(rid, dict(data)) for rid, data in self._documents.items()]

    def find_by_id(self, record_id: str) -> T | None:
        with self._lock:
            data = self._documents.get(record_id) if isinstance(record_id, str) else None
            return self._to_model(record_id, dict(data)) if data is not None else None

    def find_by_field(self, name: str, value) -> T | None:
        with self._lock:
            for record_id, data in self._documents.items():
                if data.get(name) == value:
                    return self._to_model(record_id, dict(data))
        return None

    def create(self, fields: dict) -> T:
        now = datetime.now(timezone.utc)
        data = {k: v for k, v in fields.items() if k not in STORE_MANAGED_FIELDS}
        data["created_at"] = now
        data["updated_at"] = now

        with self._lock:
            self._check_unique(data)
            # uuid4 не повторюється, тож ID видаленого запису не буде виданий знову
            record_id = uuid.uuid4().hex
            self._documents[record_id] = data
        logger.debug(f"Stored {self.model.__name__} {record_id}")
        return self._to_model(record_id, dict(data))

    def save(self, record: T) -> T:
        data = record.model_dump(exclude=STORE_MANAGED_FIELDS)
        with self._lock:
            existing = self._documents.get(record.id)
            if existing is None:
                raise RecordNotFoundError(f"Record {record.id} not found")
            self._check_unique(data, exclude_id=record.id)
            data["created_at"] = existing["created_at"]
            data["updated_at"] = datetime.now(timezone.utc)
            self._documents[record.id] = data
            return self._to_model(record.id, dict(data))

    def delete(self, record: T) -> T:
        with self._lock:
            self._documents.pop(record.id, None)
        return record


class InMemoryUserLookup(UserLookup):
    def __init__(self, users: Iterable[UserInDB] = ()):
        self._users = {user.uid: user for user in users}

    def add(self, user: UserInDB) -> None:
        self._users[user.uid] = user

    def find_by_id(self, user_id: str) -> UserInDB | None:
        if not isinstance(user_id, str):
            return None
        return self._users.get(user_id)
