# Pydantic модель користувача. Профілями керує окремий сервіс, тут лише читаємо

from pydantic import BaseModel


class UserInDB(BaseModel):
    uid: str
    username: str | None = None
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None

    @property
    def display_name(self) -> str | None:
        if self.username:
            return self.username
        display_parts = [self.first_name, self.middle_name or "", self.last_name]
        name = " ".join(part for part in display_parts if part).strip()
        return name or None
