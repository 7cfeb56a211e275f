from typing import List
from fastapi import APIRouter, HTTPException, Query

from dualpane.schemas.filesystem import FileNode
from dualpane.services.filesystem import search_files

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("", response_model=List[FileNode])
async def search(
    path: str = Query(..., description="Root path to search"),
    query: str = Query("", description="Comma separated search terms"),
    regex: bool = Query(False, description="Treat terms as regular expressions")
):
    """
    Recursively search a directory for matching file and folder names
    """
    try:
        return await search_files(path, query, regex)
    except NotADirectoryError:
        raise HTTPException(status_code=404, detail="Path not found")
