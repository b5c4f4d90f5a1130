from models.info import InfoFields, InfoInDB, InfoWithUser
from services.record_service import RecordService


class InfoService(RecordService[InfoInDB]):
    label = "Info"
    plural_label = "info"
    display_field = "title"
    fields_model = InfoFields
    enriched_model = InfoWithUser
