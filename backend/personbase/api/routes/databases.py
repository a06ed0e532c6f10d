"""
Database registry endpoints: create, open, edit, delete, recover, export
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from personbase.api.schemas import (
    SuccessResponse,
    DatabaseCreate,
    DatabaseUpdate,
    DatabaseResponse,
    AccessRequest,
    EditRequest,
    RecoveryRequest,
    RecoveredCredentialsResponse,
    PendingConfirmationResponse,
    CustomFieldResponse,
    PersonResponse
)
from personbase.services import reports, snapshot_codec
from personbase.services.database_manager import DatabaseManager
from personbase.services.exceptions import NotFound
from .deps import get_manager, access_password_header, edit_password_header

router = APIRouter(prefix="/databases", tags=["databases"])


@router.get("/", response_model=SuccessResponse)
async def list_databases(manager: DatabaseManager = Depends(get_manager)):
    """List registered databases (credentials are never returned)"""
    databases = await manager.list_databases()
    return SuccessResponse(
        message=f"{len(databases)} database(s)",
        data=[DatabaseResponse.from_record(db) for db in databases]
    )


@router.post("/", response_model=SuccessResponse, status_code=201)
async def create_database(request: DatabaseCreate, manager: DatabaseManager = Depends(get_manager)):
    """Create a database with the default contact fields"""
    database = await manager.create_database(
        name=request.name,
        description=request.description,
        access_password=request.access_password,
        edit_password=request.edit_password,
        recovery_key=request.recovery_key
    )
    return SuccessResponse(
        message=f'Database "{database.name}" created successfully',
        data=DatabaseResponse.from_record(database)
    )


@router.post("/{database_id}/open", response_model=SuccessResponse)
async def open_database(database_id: str, request: AccessRequest, manager: DatabaseManager = Depends(get_manager)):
    """Check the access password and return the database's schema"""
    store = await manager.open_database(database_id, request.access_password)
    database = await manager.registry.require(database_id)
    return SuccessResponse(
        message="Database opened",
        data={
            "database": DatabaseResponse.from_record(database),
            "schema": [CustomFieldResponse.from_field(f) for f in store.schema.fields]
        }
    )


@router.put("/{database_id}", response_model=SuccessResponse)
async def update_database(
    database_id: str,
    request: DatabaseUpdate,
    edit_password: str = Depends(edit_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    """Edit name, description or credentials (edit password required)"""
    database = await manager.update_metadata(
        database_id, edit_password, **request.model_dump(exclude_unset=True)
    )
    return SuccessResponse(
        message="Database updated",
        data=DatabaseResponse.from_record(database)
    )


@router.post("/{database_id}/delete-request", response_model=SuccessResponse)
async def request_database_delete(
    database_id: str,
    request: EditRequest,
    manager: DatabaseManager = Depends(get_manager)
):
    """First phase of deleting a database; confirm with the returned token"""
    pending = await manager.request_database_delete(database_id, request.edit_password)
    return SuccessResponse(
        message="Confirm to delete the database. This cannot be undone.",
        data=PendingConfirmationResponse.from_pending(pending)
    )


@router.post("/{database_id}/recover", response_model=SuccessResponse)
async def recover_credentials(
    database_id: str,
    request: RecoveryRequest,
    manager: DatabaseManager = Depends(get_manager)
):
    """Disclose both passwords to the holder of the recovery key"""
    credentials = await manager.recover_credentials(database_id, request.recovery_key)
    return SuccessResponse(
        message="Passwords recovered",
        data=RecoveredCredentialsResponse(
            access_password=credentials.access_password,
            edit_password=credentials.edit_password
        )
    )


@router.get("/{database_id}/export")
async def export_database(
    database_id: str,
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    """Download the database and its contents as JSON"""
    blob = await manager.export_database(database_id, access_password)
    database = await manager.registry.require(database_id)
    filename = snapshot_codec.export_filename(database, "json")
    return Response(
        content=blob,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/{database_id}/export.csv")
async def export_database_csv(
    database_id: str,
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    """Download the persons as a comma-separated table"""
    store = await manager.open_database(database_id, access_password)
    database = await manager.registry.require(database_id)
    content = snapshot_codec.to_csv(store.list(), store.schema.fields)
    filename = snapshot_codec.export_filename(database, "csv")
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/{database_id}/report", response_model=SuccessResponse)
async def database_report(
    database_id: str,
    person_id: Optional[str] = Query(None, description="Individual report for this person"),
    access_password: str = Depends(access_password_header),
    manager: DatabaseManager = Depends(get_manager)
):
    """Collective report data, or an individual one when person_id is given"""
    store = await manager.open_database(database_id, access_password)
    database = await manager.registry.require(database_id)

    if person_id is None:
        return SuccessResponse(
            message="Collective report",
            data={
                "database": database.name,
                "summary": reports.age_summary(store.list()).to_dict(),
                "persons": [PersonResponse.from_record(r) for r in store.list()]
            }
        )

    record = store.get(person_id)
    if record is None:
        raise NotFound("Person", person_id)
    return SuccessResponse(
        message="Individual report",
        data={
            "database": database.name,
            "sections": [s.to_dict() for s in reports.person_report(record, store.schema.fields)]
        }
    )
