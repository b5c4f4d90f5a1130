import logging
from typing import Generic

from pydantic import BaseModel

from core.errors import (
    DuplicateKeyError,
    RecordConflictError,
    RecordNotFoundError,
    RecordValidationError,
)
from services.record_repository import RecordRepository, T
from services.user_lookup import UserLookup

logger = logging.getLogger(__name__)


class RecordService(Generic[T]):
    """
    CRUD над записами одного типу.

    Підкласи задають назви для повідомлень, модель полів (всі її поля
    обов'язкові) та поле, яким запис підписується у відповідях.
    Усі перевірки виконуються до першого запису в сховище.
    """

    label: str = "Record"
    plural_label: str = "records"
    display_field: str = "title"
    unique_field: str | None = None
    fields_model: type[BaseModel]
    enriched_model: type[BaseModel]

    def __init__(self, repository: RecordRepository[T], user_lookup: UserLookup, unknown_username: str = "Unknown"):
        self.repository = repository
        self.user_lookup = user_lookup
        self.unknown_username = unknown_username

    @property
    def required_fields(self) -> list[str]:
        return list(self.fields_model.model_fields)

    def _has_all_fields(self, data: dict) -> bool:
        # 0 та "" вважаються відсутніми так само, як None
        return all(data.get(name) for name in self.required_fields)

    @property
    def _duplicate_message(self) -> str:
        return f"Duplicate {self.label.lower()} {self.unique_field}"

    def _check_duplicate(self, data: dict, record_id: str | None = None) -> None:
        if not self.unique_field:
            return
        duplicate = self.repository.find_by_field(self.unique_field, data[self.unique_field])
        # Дозволяємо зберегти запис під його ж поточною назвою
        if duplicate and duplicate.id != record_id:
            logger.warning(f"{self.label} {self.unique_field} '{data[self.unique_field]}' already taken by {duplicate.id}")
            raise RecordConflictError(self._duplicate_message)

    def _display(self, record: T) -> str:
        return str(getattr(record, self.display_field))

    def get_all(self) -> list[BaseModel]:
        records = self.repository.find_all()
        if not records:
            raise RecordNotFoundError(f"No {self.plural_label} found")

        owners = {record.user for record in records if record.user}
        users = self.user_lookup.find_many(owners) if owners else {}

        results = []
        for record in records:
            user = users.get(record.user) if record.user else None
            username = user.display_name if user and user.display_name else self.unknown_username
            results.append(self.enriched_model(**record.model_dump(), username=username))
        return results

    def create(self, fields: BaseModel) -> str:
        data = fields.model_dump(include=set(self.required_fields))
        if not self._has_all_fields(data):
            raise RecordValidationError("All fields are required")

        self._check_duplicate(data)

        try:
            record = self.repository.create(data)
        except DuplicateKeyError as e:
            logger.warning(f"Store rejected {self.label.lower()}: {e.message}")
            raise RecordConflictError(self._duplicate_message) from e

        if not record:
            raise RecordValidationError(f"Invalid {self.label.lower()} data received")

        logger.info(f"{self.label} {record.id} created")
        return f"New {self.label.lower()} created"

    def update(self, record_id: str | None, fields: BaseModel) -> str:
        data = fields.model_dump(include=set(self.required_fields))
        if not record_id or not self._has_all_fields(data):
            raise RecordValidationError("All fields are required")

        record = self.repository.find_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(f"{self.label} not found")

        self._check_duplicate(data, record_id=record.id)

        try:
            updated = self.repository.save(record.model_copy(update=data))
        except DuplicateKeyError as e:
            logger.warning(f"Store rejected {self.label.lower()} {record_id}: {e.message}")
            raise RecordConflictError(self._duplicate_message) from e
        except RecordNotFoundError as e:
            raise RecordNotFoundError(f"{self.label} not found") from e

        logger.info(f"{self.label} {record_id} updated")
        return f"'{self._display(updated)}' updated"

    def delete(self, record_id: str | None) -> str:
        if not record_id:
            raise RecordValidationError(f"{self.label} ID required")

        record = self.repository.find_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(f"{self.label} not found")

        self.repository.delete(record)

        logger.info(f"{self.label} {record.id} deleted")
        # Повідомлення будуємо з запису, прочитаного до видалення
        return f"{self.label} '{self._display(record)}' with ID {record.id} deleted"
