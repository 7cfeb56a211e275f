from typing import List
from fastapi import APIRouter, Depends

from dualpane.dependencies import get_workspace
from dualpane.schemas.events import Notice
from dualpane.services.workspace import Workspace

router = APIRouter(prefix="/api/notices", tags=["notices"])


@router.get("", response_model=List[Notice])
async def get_notices(workspace: Workspace = Depends(get_workspace)):
    """
    Most recent notices, oldest first
    """
    return workspace.notifier.recent()
