from pydantic import BaseModel

from models.record import RecordInDB


# Поля, які фронтенд надсилає при створенні.
# Всі Optional: відсутні поля перевіряє сервіс і відповідає 400, а не 422
class ContactFields(BaseModel):
    user: str | None = None
    name: str | None = None
    phone: str | int | None = None
    email: str | None = None
    description: str | None = None


class ContactUpdate(ContactFields):
    id: str | None = None


class ContactInDB(RecordInDB):
    name: str
    phone: str | int
    email: str
    description: str


class ContactWithUser(ContactInDB):
    username: str
