from models.contact import ContactFields, ContactInDB, ContactWithUser
from services.record_service import RecordService


class ContactService(RecordService[ContactInDB]):
    label = "Contact"
    plural_label = "contacts"
    display_field = "name"
    fields_model = ContactFields
    enriched_model = ContactWithUser
