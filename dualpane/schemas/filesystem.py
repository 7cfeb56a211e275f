from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, model_validator


class FileNode(BaseModel):
    """One file-system entry in a pane's tree

    children is None until the directory has been scanned; an empty list means
    the directory was scanned and holds nothing.
    """
    name: str
    path: str
    is_dir: bool
    size: int = 0
    mod_time: Optional[datetime] = None
    children: Optional[List["FileNode"]] = None
    is_loading: bool = False

    @model_validator(mode="after")
    def _files_have_no_children(self):
        if not self.is_dir and self.children is not None:
            raise ValueError(f"File node {self.path} cannot have children")
        return self

    @property
    def loaded(self) -> bool:
        return self.children is not None


class CopyProgress(BaseModel):
    """Status of an in-flight copy"""
    current_file: str = ""
    files_done: int = 0
    total_files: int = 0
    percentage: float = 0.0

    @classmethod
    def from_counts(cls, current_file: str, files_done: int, total_files: int) -> "CopyProgress":
        percentage = (files_done / total_files * 100) if total_files else 0.0
        return cls(
            current_file=current_file,
            files_done=files_done,
            total_files=total_files,
            percentage=percentage
        )

    @classmethod
    def starting(cls, total_files: int) -> "CopyProgress":
        return cls.from_counts("", 0, total_files)


class PaneSnapshot(BaseModel):
    """Read-only view of one pane"""
    side: Literal["left", "right"]
    multi_select: bool
    root: Optional[FileNode] = None
    history: List[str]
    history_index: int
    selection: List[str]
    is_loading: bool


class ClipboardResult(BaseModel):
    """Outcome of placing selected paths on the clipboard"""
    text: str
    copied: bool
