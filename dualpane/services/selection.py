import asyncio
import logging
from typing import Callable, List, Optional

from dualpane.schemas.filesystem import FileNode
from dualpane.services.notices import Notifier
from dualpane.services.pane import PaneState

logger = logging.getLogger(__name__)

ClipboardWriter = Callable[[str], object]


class SelectionController:
    """
    Selection rules for both panes.

    Multi-select panes hold any number of paths and support a recursive
    cascade over the loaded part of a directory. Single-select panes hold at
    most one path (the copy destination).
    """

    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    def is_selected(self, pane: PaneState, path: str) -> bool:
        return path in pane.selection

    def toggle_selection(self, pane: PaneState, path: str) -> bool:
        """
        Flip the selection state of one path.

        Returns:
            True if the path is selected afterwards
        """
        if path in pane.selection:
            pane.selection.pop(path, None)
            return False

        if pane.multi_select:
            pane.selection[path] = None
        else:
            self.set_selection(pane, path)
        return True

    def toggle_recursive(self, pane: PaneState, node: FileNode, selected: bool) -> int:
        """
        Set the selection state of a node and all of its loaded descendants.

        Subtrees that have not been expanded yet are not fetched and are left
        alone.

        Args:
            pane: Pane owning the node
            node: Node to start from
            selected: State to apply

        Returns:
            Number of paths updated
        """
        if not pane.multi_select:
            self.set_selection(pane, node.path if selected else None)
            return 1

        count = 0
        stack = [node]
        while stack:
            current = stack.pop()
            if selected:
                pane.selection[current.path] = None
            else:
                pane.selection.pop(current.path, None)
            count += 1
            if current.is_dir and current.children:
                # Reversed so children pop off in listing order
                stack.extend(reversed(current.children))

        logger.debug(f"{'Selected' if selected else 'Deselected'} {count} paths under {node.path}")
        return count

    def set_selection(self, pane: PaneState, path: Optional[str]):
        """Replace the pane's selection with a single path, or clear it"""
        pane.selection.clear()
        if path is not None:
            pane.selection[path] = None

    def clear_selection(self, pane: PaneState):
        pane.selection.clear()

    def selected_paths(self, pane: PaneState) -> List[str]:
        """Selected paths in the order they were selected"""
        return list(pane.selection)

    def selected_path(self, pane: PaneState) -> Optional[str]:
        paths = self.selected_paths(pane)
        return paths[0] if paths else None

    async def copy_to_clipboard(self, pane: PaneState, set_text: ClipboardWriter) -> bool:
        """
        Place the selected paths on the clipboard, one per line.

        The writer runs in a worker thread since clipboard tools can block.
        Clipboard failures are logged and reported as False.
        """
        paths = self.selected_paths(pane)
        if not paths:
            await self.notifier.notify("info", "No files selected")
            return False

        text = "\n".join(paths)
        try:
            copied = await asyncio.to_thread(set_text, text)
        except Exception as e:
            logger.error(f"Failed to copy paths to clipboard: {e}")
            return False

        if copied is False:
            logger.warning("No clipboard tool accepted the selected paths")
            return False

        await self.notifier.notify("success", f"Copied {len(paths)} paths to clipboard")
        return True
