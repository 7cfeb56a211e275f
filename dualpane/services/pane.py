"""
Pane state and back/forward navigation.

Each pane keeps a browser-style history: navigating somewhere new drops any
forward entries, back/forward move a cursor and reload that entry. Overlapping
navigations on one pane are resolved latest-request-wins: every request takes
a token and a response whose token is no longer current is discarded.
"""

import logging
from typing import Dict, List, Literal, Optional

from dualpane.schemas.filesystem import FileNode, PaneSnapshot
from dualpane.services.notices import Notifier
from dualpane.services.tree import Scanner

logger = logging.getLogger(__name__)

PaneSide = Literal["left", "right"]


class PaneState:
    """
    One independent browsing context.

    The left pane is the multi-select copy source; the right pane holds a
    single selection used as the copy destination.
    """

    def __init__(self, side: PaneSide, multi_select: bool = True):
        self.side = side
        self.multi_select = multi_select
        self.root: Optional[FileNode] = None
        self.history: List[str] = []
        self.history_index = -1
        # Ordered set: keys in the order the user selected them
        self.selection: Dict[str, None] = {}
        self.is_loading = False
        self._request_token = 0

    @property
    def current_path(self) -> Optional[str]:
        if self.history_index < 0:
            return None
        return self.history[self.history_index]

    @property
    def can_go_back(self) -> bool:
        return self.history_index > 0

    @property
    def can_go_forward(self) -> bool:
        return self.history_index < len(self.history) - 1

    def next_request(self) -> int:
        self._request_token += 1
        return self._request_token

    def is_current_request(self, token: int) -> bool:
        return token == self._request_token

    def snapshot(self) -> PaneSnapshot:
        return PaneSnapshot(
            side=self.side,
            multi_select=self.multi_select,
            root=self.root,
            history=list(self.history),
            history_index=self.history_index,
            selection=sorted(self.selection),
            is_loading=self.is_loading
        )


class NavigationController:
    """Navigate panes and move through their history"""

    def __init__(self, scanner: Scanner, notifier: Notifier):
        self.scanner = scanner
        self.notifier = notifier

    async def _load_root(self, pane: PaneState, path: str) -> bool:
        """
        Scan path and install it as the pane's root.

        Returns:
            True if the root was replaced; False on failure or when a newer
            navigation on the same pane superseded this one
        """
        token = pane.next_request()
        pane.is_loading = True
        logger.info(f"Navigating {pane.side} pane to {path}")

        try:
            root = await self.scanner(path)
        except Exception as e:
            if pane.is_current_request(token):
                pane.is_loading = False
            logger.error(f"Failed to load {path} in {pane.side} pane: {e}")
            await self.notifier.notify("error", f"Failed to open {path}: {e}")
            return False

        if not pane.is_current_request(token):
            logger.debug(f"Discarding stale listing of {path} for {pane.side} pane")
            return False

        pane.root = root
        pane.is_loading = False
        return True

    async def navigate_to(self, pane: PaneState, path: str, add_to_history: bool = True) -> bool:
        """
        Replace the pane's root with a fresh listing of path.

        Args:
            pane: Pane to navigate
            path: Directory to show
            add_to_history: Record the visit, dropping any forward entries

        Returns:
            True if the pane now shows path
        """
        if not await self._load_root(pane, path):
            return False

        if add_to_history:
            del pane.history[pane.history_index + 1:]
            pane.history.append(path)
            pane.history_index = len(pane.history) - 1

        return True

    async def go_back(self, pane: PaneState) -> bool:
        if not pane.can_go_back:
            return False
        return await self._move(pane, pane.history_index - 1)

    async def go_forward(self, pane: PaneState) -> bool:
        if not pane.can_go_forward:
            return False
        return await self._move(pane, pane.history_index + 1)

    async def _move(self, pane: PaneState, index: int) -> bool:
        # The cursor only moves once the entry has actually loaded
        path = pane.history[index]
        if not await self.navigate_to(pane, path, add_to_history=False):
            return False
        pane.history_index = index
        return True
