import pytest

from core.errors import RecordNotFoundError, RecordValidationError
from models.contact import ContactFields
from models.info import InfoFields, InfoInDB
from models.user import UserInDB
from services.info_service import InfoService
from services.memory_store import InMemoryRecordRepository, InMemoryUserLookup


class CountingUserLookup(InMemoryUserLookup):
    def __init__(self, users=()):
        super().__init__(users)
        self.batches = []
        self.single_calls = 0

    def find_by_id(self, user_id):
        self.single_calls += 1
        return super().find_by_id(user_id)

    def find_many(self, user_ids):
        user_ids = set(user_ids)
        self.batches.append(user_ids)
        return {uid: self._users[uid] for uid in user_ids if uid in self._users}


@pytest.mark.parametrize("missing", ["user", "name", "phone", "email", "description"])
def test_create_contact_requires_every_field(contact_service, sample_contact, missing):
    sample_contact[missing] = ""

    with pytest.raises(RecordValidationError, match="All fields are required"):
        contact_service.create(ContactFields(**sample_contact))

    assert contact_service.repository.find_all() == []


def test_create_contact_rejects_none_and_zero(contact_service, sample_contact):
    with pytest.raises(RecordValidationError):
        contact_service.create(ContactFields(**{**sample_contact, "email": None}))
    with pytest.raises(RecordValidationError):
        contact_service.create(ContactFields(**{**sample_contact, "phone": 0}))


def test_create_contact_returns_message_only(contact_service, sample_contact):
    message = contact_service.create(ContactFields(**sample_contact))

    assert message == "New contact created"
    [stored] = contact_service.repository.find_all()
    assert stored.name == "Olena"
    assert contact_service.repository.find_by_id(stored.id) == stored
    assert stored.created_at is not None


@pytest.mark.parametrize("field", ["user", "title", "description"])
@pytest.mark.parametrize("empty", [None, ""])
def test_create_info_requires_every_field(info_service, sample_info, field, empty):
    with pytest.raises(RecordValidationError, match="All fields are required"):
        info_service.create(InfoFields(**{**sample_info, field: empty}))

    assert info_service.repository.find_all() == []


@pytest.mark.parametrize("field", ["user", "title", "description"])
def test_create_info_with_field_left_out(info_service, sample_info, field):
    fields = {k: v for k, v in sample_info.items() if k != field}

    with pytest.raises(RecordValidationError):
        info_service.create(InfoFields(**fields))

    assert info_service.repository.find_all() == []


def test_get_all_on_empty_collection(contact_service, info_service):
    with pytest.raises(RecordNotFoundError, match="No contacts found"):
        contact_service.get_all()
    with pytest.raises(RecordNotFoundError, match="No info found"):
        info_service.get_all()


def test_get_all_enriches_with_username(info_service):
    info_service.create(InfoFields(user="u1", title="A", description="x"))
    info_service.create(InfoFields(user="u2", title="B", description="x"))
    info_service.create(InfoFields(user="ghost", title="C", description="x"))

    records = info_service.get_all()

    assert [r.title for r in records] == ["A", "B", "C"]
    assert [r.username for r in records] == ["alice", "Bob Stone", "Unknown"]


def test_get_all_owner_missing_is_unknown(info_service):
    # Запис без власника, наприклад імпортований вручну
    info_service.repository.create({"user": None, "title": "Orphan", "description": "x"})

    [record] = info_service.get_all()

    assert record.username == "Unknown"


def test_get_all_batches_owner_lookup():
    lookup = CountingUserLookup([UserInDB(uid="u1", username="alice")])
    service = InfoService(InMemoryRecordRepository(InfoInDB), lookup, unknown_username="n/a")
    for title in ("A", "B", "C"):
        service.create(InfoFields(user="u1", title=title, description="x"))
    service.create(InfoFields(user="u9", title="D", description="x"))

    records = service.get_all()

    assert lookup.batches == [{"u1", "u9"}]
    assert lookup.single_calls == 0
    assert records[-1].username == "n/a"


def test_update_replaces_all_fields(contact_service, sample_contact):
    contact_service.create(ContactFields(**sample_contact))
    [stored] = contact_service.repository.find_all()

    changed = {**sample_contact, "user": "u2", "name": "Olena K.", "phone": 380501112233}
    message = contact_service.update(stored.id, ContactFields(**changed))

    assert message == "'Olena K.' updated"
    updated = contact_service.repository.find_by_id(stored.id)
    assert updated.user == "u2"
    assert updated.phone == 380501112233
    assert updated.created_at == stored.created_at


def test_update_requires_id_and_fields(contact_service, sample_contact):
    with pytest.raises(RecordValidationError, match="All fields are required"):
        contact_service.update(None, ContactFields(**sample_contact))

    contact_service.create(ContactFields(**sample_contact))
    [stored] = contact_service.repository.find_all()
    with pytest.raises(RecordValidationError):
        contact_service.update(stored.id, ContactFields(**{**sample_contact, "description": ""}))

    assert contact_service.repository.find_by_id(stored.id).description == "Accountant"


def test_update_unknown_id(contact_service, sample_contact):
    with pytest.raises(RecordNotFoundError, match="Contact not found"):
        contact_service.update("0123456789abcdef01234567", ContactFields(**sample_contact))


def test_delete_message_uses_record_read_before_delete(contact_service, sample_contact):
    contact_service.create(ContactFields(**sample_contact))
    [stored] = contact_service.repository.find_all()

    message = contact_service.delete(stored.id)

    assert message == f"Contact 'Olena' with ID {stored.id} deleted"
    assert contact_service.repository.find_by_id(stored.id) is None


def test_delete_validation_and_not_found(info_service):
    with pytest.raises(RecordValidationError, match="Info ID required"):
        info_service.delete("")
    with pytest.raises(RecordNotFoundError, match="Info not found"):
        info_service.delete("does-not-exist")


def test_info_lifecycle(info_service, sample_info):
    assert info_service.create(InfoFields(**sample_info)) == "New info created"

    [record] = info_service.get_all()
    assert record.username == "alice"

    message = info_service.update(record.id, InfoFields(**{**sample_info, "title": "T2"}))
    assert "T2" in message

    message = info_service.delete(record.id)
    assert "T2" in message
    assert record.id in message

    with pytest.raises(RecordNotFoundError):
        info_service.get_all()
