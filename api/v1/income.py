from fastapi import APIRouter, Depends, status
from typing import List

# Імпортуємо залежності
from api.deps import get_income_service
from models.income import IncomeFields, IncomeUpdate, IncomeWithUser
from models.record import MessageResponse, RecordIdPayload
from services.income_service import IncomeService

router = APIRouter()

# --- 1. Отримати всі доходи ---

@router.get("/", response_model=List[IncomeWithUser])
def get_all_income(service: IncomeService = Depends(get_income_service)):
    """
    Отримує список усіх записів про доходи з іменем власника.
    """
    return service.get_all()

# --- 2. Створити дохід ---

@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_income(income_data: IncomeFields, service: IncomeService = Depends(get_income_service)):
    """
    Створює новий запис про дохід. Назва має бути унікальною (інакше 409).
    """
    return MessageResponse(message=service.create(income_data))

# --- 3. Оновити дохід ---

@router.patch("/", response_model=str)
def update_income(income_data: IncomeUpdate, service: IncomeService = Depends(get_income_service)):
    return service.update(income_data.id, income_data)

# --- 4. Видалити дохід ---

@router.delete("/", response_model=str)
def delete_income(payload: RecordIdPayload | None = None, service: IncomeService = Depends(get_income_service)):
    return service.delete(payload.id if payload else None)
