from fastapi import APIRouter, Depends, status
from typing import List

from api.deps import get_info_service
from models.info import InfoFields, InfoUpdate, InfoWithUser
from models.record import MessageResponse, RecordIdPayload
from services.info_service import InfoService

router = APIRouter()


@router.get("/", response_model=List[InfoWithUser])
def get_all_info(service: InfoService = Depends(get_info_service)):
    return service.get_all()


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_info(info_data: InfoFields, service: InfoService = Depends(get_info_service)):
    return MessageResponse(message=service.create(info_data))


@router.patch("/", response_model=str)
def update_info(info_data: InfoUpdate, service: InfoService = Depends(get_info_service)):
    return service.update(info_data.id, info_data)


@router.delete("/", response_model=str)
def delete_info(payload: RecordIdPayload | None = None, service: InfoService = Depends(get_info_service)):
    return service.delete(payload.id if payload else None)
