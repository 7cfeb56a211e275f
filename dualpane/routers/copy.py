from fastapi import APIRouter, Depends

from dualpane.dependencies import get_workspace
from dualpane.schemas.events import ActionResponse, CopyStatus
from dualpane.services.workspace import Workspace

router = APIRouter(prefix="/api/copy", tags=["copy"])


@router.get("", response_model=CopyStatus)
async def get_copy_status(workspace: Workspace = Depends(get_workspace)):
    return workspace.copy.status()


@router.post("/initiate", response_model=ActionResponse)
async def initiate_copy(workspace: Workspace = Depends(get_workspace)):
    """
    Request confirmation for copying the left selection into the right selection
    """
    accepted = await workspace.copy.initiate_copy()
    return ActionResponse(accepted=accepted)


@router.post("/confirm", response_model=ActionResponse)
async def confirm_copy(workspace: Workspace = Depends(get_workspace)):
    """
    Run the pending copy; progress is pushed over /ws while it runs
    """
    accepted = await workspace.copy.confirm_copy()
    return ActionResponse(accepted=accepted)


@router.post("/cancel", response_model=ActionResponse)
async def cancel_copy(workspace: Workspace = Depends(get_workspace)):
    accepted = workspace.copy.cancel_copy()
    return ActionResponse(accepted=accepted)
