from datetime import datetime, timezone
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from dualpane.schemas.filesystem import CopyProgress


NoticeLevel = Literal["info", "success", "error"]


class Notice(BaseModel):
    """Transient user-visible message (toast)"""
    type: Literal["notice"] = "notice"
    level: NoticeLevel = "info"
    message: str
    duration_ms: int = 3000
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CopyStatus(BaseModel):
    """Copy orchestrator state for the shell"""
    state: Literal["idle", "confirm_pending", "copying"]
    source_paths: List[str] = []
    destination: Optional[str] = None
    progress: Optional[CopyProgress] = None


class NavigateRequest(BaseModel):
    """Navigate a pane to a new root"""
    path: str
    add_to_history: bool = True


class PathRequest(BaseModel):
    """Request naming one node of a pane's tree"""
    path: str


class ToggleRequest(BaseModel):
    """Toggle selection of a node, optionally cascading into loaded children"""
    path: str
    recursive: bool = False
    selected: Optional[bool] = None


class SelectRequest(BaseModel):
    """Replace the single selection of a pane (None clears it)"""
    path: Optional[str] = None


class ActionResponse(BaseModel):
    """Response from a state-machine action"""
    status: str = "ok"
    accepted: bool
