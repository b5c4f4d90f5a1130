# Спільні Pydantic моделі для всіх типів записів
from datetime import datetime

from pydantic import BaseModel


class RecordInDB(BaseModel):
    """Запис, прочитаний зі сховища. ``user`` — UID власника."""

    id: str
    user: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RecordIdPayload(BaseModel):
    id: str | None = None


class MessageResponse(BaseModel):
    message: str
