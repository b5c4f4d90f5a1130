from fastapi import APIRouter, Depends, status
from typing import List

from api.deps import get_contact_service
from models.contact import ContactFields, ContactUpdate, ContactWithUser
from models.record import MessageResponse, RecordIdPayload
from services.contact_service import ContactService

router = APIRouter()


@router.get("/", response_model=List[ContactWithUser])
def get_all_contacts(service: ContactService = Depends(get_contact_service)):
    """
    Повертає всі контакти, кожен з іменем власника (username).
    """
    return service.get_all()


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_contact(contact_data: ContactFields, service: ContactService = Depends(get_contact_service)):
    return MessageResponse(message=service.create(contact_data))


@router.patch("/", response_model=str)
def update_contact(contact_data: ContactUpdate, service: ContactService = Depends(get_contact_service)):
    """
    Повністю замінює поля контакту. Потрібні id та всі поля.
    """
    return service.update(contact_data.id, contact_data)


@router.delete("/", response_model=str)
def delete_contact(payload: RecordIdPayload | None = None, service: ContactService = Depends(get_contact_service)):
    return service.delete(payload.id if payload else None)
