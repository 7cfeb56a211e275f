"""
The two panes and the controllers acting on them.

A Workspace is created once per application and owned by it; nothing in the
core keeps module-level state.
"""

import logging
from functools import partial
from typing import Callable, Optional

from dualpane.config import Settings
from dualpane.services import filesystem
from dualpane.services.channel import EventChannel
from dualpane.services.copy import Copier, CopyOrchestrator
from dualpane.services.notices import Notifier
from dualpane.services.pane import NavigationController, PaneSide, PaneState
from dualpane.services.selection import ClipboardWriter, SelectionController
from dualpane.services.tree import DirectoryTree, Scanner

logger = logging.getLogger(__name__)


class Workspace:
    """
    Left (source, multi-select) and right (destination, single-select) panes.

    Collaborators are injected so tests can swap the file system out.
    """

    def __init__(
        self,
        scanner: Scanner,
        copier: Copier,
        get_home_dir: Callable[[], str],
        clipboard: ClipboardWriter,
        notifier: Optional[Notifier] = None,
        channel: Optional[EventChannel] = None
    ):
        self.get_home_dir = get_home_dir
        self.clipboard = clipboard
        self.notifier = notifier or Notifier()
        self.channel = channel or EventChannel()

        self.left = PaneState("left", multi_select=True)
        self.right = PaneState("right", multi_select=False)

        self.tree = DirectoryTree(scanner, self.notifier)
        self.navigation = NavigationController(scanner, self.notifier)
        self.selection = SelectionController(self.notifier)
        self.copy = CopyOrchestrator(
            source=self.left,
            destination=self.right,
            copier=copier,
            channel=self.channel,
            notifier=self.notifier,
            selection=self.selection
        )

    @classmethod
    def from_settings(cls, settings: Settings, notifier: Optional[Notifier] = None) -> "Workspace":
        """Workspace backed by the real file system"""
        channel = EventChannel()
        return cls(
            scanner=filesystem.scan_directory,
            copier=partial(filesystem.copy_files, channel=channel, delay=settings.copy_progress_delay),
            get_home_dir=partial(filesystem.get_home_dir, settings.home_dir),
            clipboard=filesystem.copy_text_to_clipboard,
            notifier=notifier,
            channel=channel
        )

    def pane(self, side: PaneSide) -> PaneState:
        return self.left if side == "left" else self.right

    async def initialize(self):
        """
        Point both panes at the home directory.

        Raises:
            OSError: if the home directory cannot be resolved
        """
        home = self.get_home_dir()
        logger.info(f"Home directory: {home}")
        for pane in (self.left, self.right):
            await self.navigation.navigate_to(pane, home)
