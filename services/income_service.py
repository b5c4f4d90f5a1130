from models.income import IncomeFields, IncomeInDB, IncomeWithUser
from services.record_service import RecordService


class IncomeService(RecordService[IncomeInDB]):
    """Доходи. Назва (title) унікальна серед усіх записів."""

    label = "Income"
    plural_label = "income"
    display_field = "title"
    unique_field = "title"
    fields_model = IncomeFields
    enriched_model = IncomeWithUser
