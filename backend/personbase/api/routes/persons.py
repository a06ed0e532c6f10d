"""
Person endpoints of one database
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from personbase.api.schemas import (
    SuccessResponse,
    EditRequest,
    PersonWrite,
    PersonResponse,
    PersonListResponse,
    PendingConfirmationResponse
)
from personbase.services.database_manager import DatabaseManager
from personbase.services.exceptions import NotFound
from .deps import get_manager, access_password_header, edit_password_header

router = APIRouter(prefix="/databases/{database_id}/persons", tags=["persons"])


@router.get("/", response_model=PersonListResponse)
async def list_persons(
    database_id: str,
    q: str = Query("", description="Matches DNI, given name or family name"),
    sort: str = Query("givenName", description="Fixed field to sort by"),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    """Search and sort the persons of a database"""
    store = await manager.open_database(database_id, access_password)
    try:
        persons = store.search(q, sort, direction)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PersonListResponse(
        persons=[PersonResponse.from_record(p) for p in persons],
        total=len(store),
        matched=len(persons)
    )


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(
    database_id: str,
    person_id: str,
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    store = await manager.open_database(database_id, access_password)
    person = store.get(person_id)
    if person is None:
        raise NotFound("Person", person_id)
    return PersonResponse.from_record(person)


@router.post("/", response_model=SuccessResponse, status_code=201)
async def add_person(
    database_id: str,
    request: PersonWrite,
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    """Add a person; every violated rule is reported at once"""
    person = await manager.add_person(database_id, access_password, request.to_draft())
    return SuccessResponse(
        message=f"{person.full_name} has been added successfully",
        data=PersonResponse.from_record(person)
    )


@router.put("/{person_id}", response_model=SuccessResponse)
async def update_person(
    database_id: str,
    person_id: str,
    request: PersonWrite,
    edit_password: str = Depends(edit_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    """Replace a person's data (edit password required)"""
    person = await manager.update_person(database_id, person_id, edit_password, request.to_draft())
    return SuccessResponse(
        message=f"The data of {person.full_name} has been updated",
        data=PersonResponse.from_record(person)
    )


@router.post("/{person_id}/delete-request", response_model=SuccessResponse)
async def request_person_delete(
    database_id: str,
    person_id: str,
    request: EditRequest,
    manager: DatabaseManager = Depends(get_manager)
):
    """First phase of deleting a person; confirm with the returned token"""
    pending = await manager.request_person_delete(database_id, person_id, request.edit_password)
    return SuccessResponse(
        message="Confirm to delete the person",
        data=PendingConfirmationResponse.from_pending(pending)
    )
