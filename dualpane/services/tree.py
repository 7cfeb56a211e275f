"""
Lazy-loading directory tree cache.

Directories arrive from a scan with children=None and are filled in on first
expansion. Loaded state is presence of the children list, never its length,
so an empty directory is scanned exactly once.
"""

import logging
from contextlib import contextmanager
from typing import Awaitable, Callable, Iterator, Optional

from dualpane.schemas.filesystem import FileNode
from dualpane.services.notices import Notifier

logger = logging.getLogger(__name__)

Scanner = Callable[[str], Awaitable[FileNode]]


@contextmanager
def loading(node: FileNode) -> Iterator[FileNode]:
    """Mark a node as loading for the duration of the block"""
    node.is_loading = True
    try:
        yield node
    finally:
        node.is_loading = False


def walk(root: Optional[FileNode]) -> Iterator[FileNode]:
    """Yield every loaded node under root (inclusive), depth first"""
    if root is None:
        return
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if node.children:
            stack.extend(reversed(node.children))


def find(root: Optional[FileNode], path: str) -> Optional[FileNode]:
    """Find a loaded node by path"""
    for node in walk(root):
        if node.path == path:
            return node
    return None


class DirectoryTree:
    """Expands directory nodes on demand through an external scanner"""

    def __init__(self, scanner: Scanner, notifier: Notifier):
        self.scanner = scanner
        self.notifier = notifier

    async def expand(self, node: FileNode) -> bool:
        """
        Load the immediate children of a directory node.

        Args:
            node: Directory node to expand

        Returns:
            True if children were attached, False if nothing was done or the
            scan failed (the failure is raised as a notice, children stay None)
        """
        if not node.is_dir:
            return False
        if node.loaded:
            logger.debug(f"Already loaded: {node.path}")
            return False
        if node.is_loading:
            logger.debug(f"Expansion already in flight: {node.path}")
            return False

        try:
            with loading(node):
                result = await self.scanner(node.path)
        except Exception as e:
            logger.error(f"Failed to load children for {node.path}: {e}")
            await self.notifier.notify("error", f"Failed to open {node.path}: {e}")
            return False

        node.children = result.children if result.children is not None else []
        logger.debug(f"Loaded {len(node.children)} children for {node.path}")
        return True

    def find(self, root: Optional[FileNode], path: str) -> Optional[FileNode]:
        return find(root, path)
