"""
Фікстури pytest для API записів.

Сервіси працюють на сховищі в пам'яті; HTTP-клієнт підміняє провайдери
сервісів і залежність автентифікації, тож проєкт Firebase не потрібен.
"""
import os

# Settings читаються при імпорті core.config
os.environ.setdefault("STORE_BACKEND", "memory")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from api.deps import (  # noqa: E402
    get_contact_service,
    get_current_user,
    get_income_service,
    get_info_service,
)
from main import create_app  # noqa: E402
from models.contact import ContactInDB  # noqa: E402
from models.income import IncomeInDB  # noqa: E402
from models.info import InfoInDB  # noqa: E402
from models.user import UserInDB  # noqa: E402
from services.contact_service import ContactService  # noqa: E402
from services.income_service import IncomeService  # noqa: E402
from services.info_service import InfoService  # noqa: E402
from services.memory_store import InMemoryRecordRepository, InMemoryUserLookup  # noqa: E402


@pytest.fixture
def user_lookup():
    return InMemoryUserLookup(
        [
            UserInDB(uid="u1", username="alice"),
            UserInDB(uid="u2", first_name="Bob", last_name="Stone"),
        ]
    )


@pytest.fixture
def contact_service(user_lookup):
    return ContactService(InMemoryRecordRepository(ContactInDB), user_lookup)


@pytest.fixture
def income_service(user_lookup):
    return IncomeService(InMemoryRecordRepository(IncomeInDB, unique_field="title"), user_lookup)


@pytest.fixture
def info_service(user_lookup):
    return InfoService(InMemoryRecordRepository(InfoInDB), user_lookup)


@pytest.fixture
def sample_contact():
    return {
        "user": "u1",
        "name": "Olena",
        "phone": "+380501234567",
        "email": "olena@example.com",
        "description": "Accountant",
    }


@pytest.fixture
def sample_income():
    return {"user": "u1", "amount": 1500.0, "title": "Rent", "description": "Flat on Khreshchatyk"}


@pytest.fixture
def sample_info():
    return {"user": "u1", "title": "T", "description": "D"}


@pytest.fixture
def app(contact_service, income_service, info_service):
    app = create_app()
    app.dependency_overrides[get_contact_service] = lambda: contact_service
    app.dependency_overrides[get_income_service] = lambda: income_service
    app.dependency_overrides[get_info_service] = lambda: info_service
    app.dependency_overrides[get_current_user] = lambda: {"uid": "u1"}
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
