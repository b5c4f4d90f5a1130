# Файл конфігурації, завантажує змінні з .env
from typing import Literal

from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    model_config = ConfigDict(extra="ignore", env_file=".env")

    # 1. Firebase
    # Якщо шлях не задано — використовуються Application Default Credentials
    FIREBASE_SERVICE_ACCOUNT_KEY_PATH: str | None = None

    # 2. Сховище: "firestore" для продакшну, "memory" для локальної розробки
    STORE_BACKEND: Literal["firestore", "memory"] = "firestore"

    CONTACTS_COLLECTION: str = "contacts"
    INCOME_COLLECTION: str = "income"
    INFO_COLLECTION: str = "info"
    USERS_COLLECTION: str = "users"

    # 3. CORS (кома-сепарейтед список)
    FRONTEND_ORIGIN: str = ""

    # 4. Відповіді API
    # Старі клієнти очікують 400 для "не знайдено", нові — 404
    NOT_FOUND_STATUS_CODE: int = 404
    UNKNOWN_USERNAME: str = "Unknown"

    # 5. Автентифікація: без токена працюємо як local-dev (тільки для розробки)
    AUTH_DISABLED: bool = False

    LOG_LEVEL: str = "INFO"


settings = Settings()
