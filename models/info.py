from pydantic import BaseModel

from models.record import RecordInDB


class InfoFields(BaseModel):
    user: str | None = None
    title: str | None = None
    description: str | None = None


class InfoUpdate(InfoFields):
    id: str | None = None


class InfoInDB(RecordInDB):
    title: str
    description: str


class InfoWithUser(InfoInDB):
    username: str
