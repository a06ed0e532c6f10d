"""
Full backup export/import and confirmation of pending destructive actions
"""

from fastapi import APIRouter, Depends, File, Response, UploadFile

from personbase.api.schemas import SuccessResponse
from personbase.services import snapshot_codec
from personbase.services.database_manager import DatabaseManager
from personbase.services.exceptions import NotFound
from .deps import get_manager

router = APIRouter(tags=["snapshots"])


@router.get("/snapshots/export")
async def export_all(manager: DatabaseManager = Depends(get_manager)):
    """
    Download every database and its contents.

    No password is asked for, and the backup carries every database's
    access password, edit password and recovery key. Anyone who can reach
    this endpoint can read and unlock all databases, so serve the API on
    localhost or behind an authenticating proxy only.
    """
    blob = await manager.export_all()
    return Response(
        content=blob,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{snapshot_codec.backup_filename()}"'}
    )


@router.post("/snapshots/import", response_model=SuccessResponse)
async def import_all(file: UploadFile = File(...), manager: DatabaseManager = Depends(get_manager)):
    """Add the databases of an export whose ids are not registered yet"""
    blob = await file.read()
    result = await manager.import_all(blob)
    return SuccessResponse(
        message=f"Imported {result.imported_count} database(s)",
        data=result.to_dict()
    )


@router.post("/confirmations/{token}", response_model=SuccessResponse)
async def confirm_action(token: str, manager: DatabaseManager = Depends(get_manager)):
    """Second phase of a destructive action"""
    outcome = await manager.confirm(token)
    return SuccessResponse(message="Action completed", data=outcome)


@router.delete("/confirmations/{token}", response_model=SuccessResponse)
async def cancel_action(token: str, manager: DatabaseManager = Depends(get_manager)):
    if not manager.confirmations.cancel(token):
        raise NotFound("Pending confirmation", token)
    return SuccessResponse(message="Action cancelled")
