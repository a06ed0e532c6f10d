"""
Custom field endpoints of one database
"""

from fastapi import APIRouter, Depends

from personbase.api.schemas import (
    SuccessResponse,
    CustomFieldCreate,
    CustomFieldUpdate,
    CustomFieldMove,
    CustomFieldResponse
)
from personbase.services.database_manager import DatabaseManager
from .deps import get_manager, access_password_header

router = APIRouter(prefix="/databases/{database_id}/fields", tags=["custom fields"])


def _schema(fields):
    return [CustomFieldResponse.from_field(f) for f in fields]


@router.get("/", response_model=SuccessResponse)
async def list_fields(
    database_id: str,
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    store = await manager.open_database(database_id, access_password)
    return SuccessResponse(message="Custom fields", data=_schema(store.schema.fields))


@router.post("/", response_model=SuccessResponse, status_code=201)
async def add_field(
    database_id: str,
    request: CustomFieldCreate,
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    field = await manager.add_field(database_id, access_password, request.name, request.kind, request.required)
    return SuccessResponse(
        message=f'Field "{field.name}" has been created',
        data=CustomFieldResponse.from_field(field)
    )


@router.put("/{field_id}", response_model=SuccessResponse)
async def update_field(
    database_id: str,
    field_id: str,
    request: CustomFieldUpdate,
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    field = await manager.update_field(
        database_id, access_password, field_id,
        name=request.name, kind=request.kind, required=request.required
    )
    return SuccessResponse(
        message=f'Field "{field.name}" has been updated',
        data=CustomFieldResponse.from_field(field)
    )


@router.delete("/{field_id}", response_model=SuccessResponse)
async def remove_field(
    database_id: str,
    field_id: str,
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    """Remove a field; values already stored for it stay in the records"""
    fields = await manager.remove_field(database_id, access_password, field_id)
    return SuccessResponse(message="Field has been deleted", data=_schema(fields))


@router.post("/{field_id}/move", response_model=SuccessResponse)
async def move_field(
    database_id: str,
    field_id: str,
    request: CustomFieldMove,
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    fields = await manager.reorder_field(database_id, access_password, field_id, request.direction)
    return SuccessResponse(message="Field order updated", data=_schema(fields))
