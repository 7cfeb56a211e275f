from typing import List, Literal
from fastapi import APIRouter, Depends, HTTPException, Query

from dualpane.dependencies import get_workspace
from dualpane.schemas.events import NavigateRequest, PathRequest, SelectRequest, ToggleRequest
from dualpane.schemas.filesystem import ClipboardResult, PaneSnapshot
from dualpane.services.search import visible_paths
from dualpane.services.workspace import Workspace

router = APIRouter(prefix="/api/panes", tags=["panes"])

Side = Literal["left", "right"]


@router.get("/{side}", response_model=PaneSnapshot)
async def get_pane(side: Side, workspace: Workspace = Depends(get_workspace)):
    """
    Current root, history and selection of a pane
    """
    return workspace.pane(side).snapshot()


@router.post("/{side}/navigate", response_model=PaneSnapshot)
async def navigate(side: Side, request: NavigateRequest, workspace: Workspace = Depends(get_workspace)):
    """
    Show a new directory in the pane; failures are reported as notices
    """
    pane = workspace.pane(side)
    await workspace.navigation.navigate_to(pane, request.path, request.add_to_history)
    return pane.snapshot()


@router.post("/{side}/back", response_model=PaneSnapshot)
async def go_back(side: Side, workspace: Workspace = Depends(get_workspace)):
    pane = workspace.pane(side)
    await workspace.navigation.go_back(pane)
    return pane.snapshot()


@router.post("/{side}/forward", response_model=PaneSnapshot)
async def go_forward(side: Side, workspace: Workspace = Depends(get_workspace)):
    pane = workspace.pane(side)
    await workspace.navigation.go_forward(pane)
    return pane.snapshot()


@router.post("/{side}/expand", response_model=PaneSnapshot)
async def expand(side: Side, request: PathRequest, workspace: Workspace = Depends(get_workspace)):
    """
    Load the children of a directory already visible in the pane
    """
    pane = workspace.pane(side)
    node = workspace.tree.find(pane.root, request.path)
    if node is None:
        raise HTTPException(status_code=404, detail="Node not loaded in this pane")

    await workspace.tree.expand(node)
    return pane.snapshot()


@router.get("/{side}/visible", response_model=List[str])
async def get_visible(
    side: Side,
    query: str = Query("", description="Comma separated search terms"),
    regex: bool = Query(False, description="Treat terms as regular expressions"),
    workspace: Workspace = Depends(get_workspace)
):
    """
    Paths of loaded nodes that stay visible under a search filter
    """
    return visible_paths(workspace.pane(side).root, query, regex)


@router.post("/{side}/selection/toggle", response_model=PaneSnapshot)
async def toggle_selection(side: Side, request: ToggleRequest, workspace: Workspace = Depends(get_workspace)):
    """
    Toggle one path, or cascade into the loaded subtree with recursive=true
    """
    pane = workspace.pane(side)

    if not request.recursive:
        workspace.selection.toggle_selection(pane, request.path)
        return pane.snapshot()

    node = workspace.tree.find(pane.root, request.path)
    if node is None:
        raise HTTPException(status_code=404, detail="Node not loaded in this pane")

    selected = request.selected
    if selected is None:
        selected = not workspace.selection.is_selected(pane, node.path)
    workspace.selection.toggle_recursive(pane, node, selected)
    return pane.snapshot()


@router.put("/{side}/selection", response_model=PaneSnapshot)
async def set_selection(side: Side, request: SelectRequest, workspace: Workspace = Depends(get_workspace)):
    pane = workspace.pane(side)
    workspace.selection.set_selection(pane, request.path)
    return pane.snapshot()


@router.delete("/{side}/selection", response_model=PaneSnapshot)
async def clear_selection(side: Side, workspace: Workspace = Depends(get_workspace)):
    pane = workspace.pane(side)
    workspace.selection.clear_selection(pane)
    return pane.snapshot()


@router.post("/{side}/selection/clipboard", response_model=ClipboardResult)
async def copy_selection_to_clipboard(side: Side, workspace: Workspace = Depends(get_workspace)):
    """
    Put the selected paths on the system clipboard, one per line
    """
    pane = workspace.pane(side)
    copied = await workspace.selection.copy_to_clipboard(pane, workspace.clipboard)
    return ClipboardResult(text="\n".join(workspace.selection.selected_paths(pane)), copied=copied)
