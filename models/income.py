from pydantic import BaseModel

from models.record import RecordInDB


class IncomeFields(BaseModel):
    user: str | None = None
    amount: float | None = None
    title: str | None = None
    description: str | None = None


class IncomeUpdate(IncomeFields):
    id: str | None = None


class IncomeInDB(RecordInDB):
    amount: float
    title: str
    description: str


class IncomeWithUser(IncomeInDB):
    username: str
