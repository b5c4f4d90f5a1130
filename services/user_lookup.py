# Читання користувачів для підпису записів іменем власника
import logging
from abc import ABC, abstractmethod
from typing import Iterable

from google.api_core.exceptions import GoogleAPICallError, RetryError

from core.errors import StoreUnavailableError
from core.firebase import ensure_initialized
from models.user import UserInDB
from services.record_repository import is_valid_document_id

logger = logging.getLogger(__name__)


class UserLookup(ABC):
    @abstractmethod
    def find_by_id(self, user_id: str) -> UserInDB | None:
        """Повертає None (а не помилку), якщо користувача немає."""

    def find_many(self, user_ids: Iterable[str]) -> dict[str, UserInDB]:
        users = {}
        for user_id in set(user_ids):
            user = self.find_by_id(user_id)
            if user is not None:
                users[user_id] = user
        return users


class FirestoreUserLookup(UserLookup):
    """Профілі з колекції 'users', де ID документа = UID з Firebase Auth."""

    def __init__(self, collection: str = "users"):
        self.collection = collection

    def _to_user(self, snapshot) -> UserInDB:
        data = snapshot.to_dict() or {}
        data["uid"] = snapshot.id
        return UserInDB(**data)

    def find_by_id(self, user_id: str) -> UserInDB | None:
        if not is_valid_document_id(user_id):
            return None
        try:
            doc = ensure_initialized().collection(self.collection).document(user_id).get()
        except (GoogleAPICallError, RetryError) as e:
            logger.error(f"Не вдалося прочитати користувача {user_id}: {e}")
            raise StoreUnavailableError() from e
        if not doc.exists:
            return None
        return self._to_user(doc)

    def find_many(self, user_ids: Iterable[str]) -> dict[str, UserInDB]:
        valid_ids = sorted({uid for uid in user_ids if is_valid_document_id(uid)})
        if not valid_ids:
            return {}

        db = ensure_initialized()
        refs = [db.collection(self.collection).document(uid) for uid in valid_ids]
        try:
            # Один запит на всіх власників замість запиту на кожен запис
            snapshots = list(db.get_all(refs))
        except (GoogleAPICallError, RetryError) as e:
            logger.error(f"Не вдалося прочитати користувачів: {e}")
            raise StoreUnavailableError() from e

        return {snap.id: self._to_user(snap) for snap in snapshots if snap.exists}
