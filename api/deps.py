import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin.auth import InvalidIdTokenError, ExpiredIdTokenError

import core.firebase as firebase
from core.config import settings
from models.contact import ContactInDB
from models.income import IncomeInDB
from models.info import InfoInDB
from services.contact_service import ContactService
from services.income_service import IncomeService
from services.info_service import InfoService
from services.memory_store import InMemoryRecordRepository, InMemoryUserLookup
from services.record_repository import FirestoreRecordRepository, RecordRepository
from services.user_lookup import FirestoreUserLookup, UserLookup

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> dict:
    """
    Перевіряє Firebase ID Token (який приходить як Bearer token).
    Без токена — 401, або локальний користувач, якщо AUTH_DISABLED.
    Якщо токен прострочений/невірний — 401, щоб фронт оновив сесію.
    """
    if not creds or not creds.credentials:
        if settings.AUTH_DISABLED:
            return {"uid": "local-dev"}
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if firebase.auth_client is None:
        firebase.initialize_firebase()

    try:
        # Додаємо невеликий допуск по часу (макс 60 сек за Firebase SDK)
        return firebase.auth_client.verify_id_token(creds.credentials, clock_skew_seconds=60)
    except (ExpiredIdTokenError, InvalidIdTokenError) as e:
        logger.warning(f"Token validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalid or expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except ValueError as e:
        logger.warning(f"Token validation error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


# --- Сервіси записів ---
# Один екземпляр на процес: memory-сховище мусить жити між запитами

def _repository(collection: str, model, unique_field: str | None = None) -> RecordRepository:
    if settings.STORE_BACKEND == "memory":
        return InMemoryRecordRepository(model, unique_field=unique_field)
    return FirestoreRecordRepository(collection, model, unique_field=unique_field)


@lru_cache
def get_user_lookup() -> UserLookup:
    if settings.STORE_BACKEND == "memory":
        return InMemoryUserLookup()
    return FirestoreUserLookup(settings.USERS_COLLECTION)


@lru_cache
def get_contact_service() -> ContactService:
    return ContactService(
        _repository(settings.CONTACTS_COLLECTION, ContactInDB),
        get_user_lookup(),
        unknown_username=settings.UNKNOWN_USERNAME,
    )


@lru_cache
def get_income_service() -> IncomeService:
    return IncomeService(
        _repository(settings.INCOME_COLLECTION, IncomeInDB, unique_field="title"),
        get_user_lookup(),
        unknown_username=settings.UNKNOWN_USERNAME,
    )


@lru_cache
def get_info_service() -> InfoService:
    return InfoService(
        _repository(settings.INFO_COLLECTION, InfoInDB),
        get_user_lookup(),
        unknown_username=settings.UNKNOWN_USERNAME,
    )
