from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.schemas import CreateFoldersRequestSchema
from app.application.dto.booking_record import parse_address
from app.application.exceptions import RemoteError, ValidationError
from app.application.use_cases.project_folders import ProjectFoldersUseCase
from app.infrastructure.dropbox.dropbox_client import DropboxClient
from app.wiring.dependencies import get_dropbox_client, get_project_folders_use_case


router = APIRouter(prefix="/api/dropbox")
logger = logging.getLogger(__name__)


@router.post("/create-folders")
def create_folders(
    req: CreateFoldersRequestSchema,
    uc: ProjectFoldersUseCase = Depends(get_project_folders_use_case),
) -> dict[str, str]:
    try:
        folders = uc.provision(parse_address(req.property_address), req.agent_name)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RemoteError as e:
        if e.status_code == 409:
            raise HTTPException(status_code=409, detail="A folder with this name already exists")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to create project folders")

    logger.info("Project folders created", extra={"booking_id": req.booking_id, "path": folders.folder_path})
    return {
        "rawPhotosLink": folders.raw_photos_link,
        "finalEditsLink": folders.final_edits_link,
    }


@router.post("/refresh-token")
def refresh_token(client: DropboxClient = Depends(get_dropbox_client)) -> dict[str, bool]:
    try:
        client.refresh_access_token()
    except RemoteError:
        raise HTTPException(status_code=500, detail="Failed to refresh Dropbox token")
    return {"success": True}


@router.get("/callback")
def oauth_callback(
    code: str | None = Query(None),
    client: DropboxClient = Depends(get_dropbox_client),
) -> dict[str, Any]:
    if not code:
        raise HTTPException(status_code=400, detail="No code provided")
    try:
        tokens = client.exchange_code(code)
    except RemoteError:
        raise HTTPException(status_code=500, detail="Failed to complete OAuth flow")
    return {
        "access_token": tokens.get("access_token"),
        "refresh_token": tokens.get("refresh_token"),
    }
