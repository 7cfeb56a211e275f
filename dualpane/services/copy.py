"""
Bulk copy life cycle.

    IDLE --initiate--> CONFIRM_PENDING --confirm--> COPYING --done--> IDLE
                              |
                              +--cancel--> IDLE

The source is the left pane's selection, the destination the right pane's
single selection. Progress arrives on the "copy-progress" channel, which is
only subscribed while a copy runs. Once COPYING there is no way to abort.
"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from dualpane.schemas.events import CopyStatus
from dualpane.schemas.filesystem import CopyProgress
from dualpane.services.channel import COPY_PROGRESS_EVENT, EventChannel
from dualpane.services.notices import Notifier
from dualpane.services.pane import PaneState
from dualpane.services.selection import SelectionController

logger = logging.getLogger(__name__)

Copier = Callable[[List[str], str], Awaitable[Any]]


class CopyState(str, Enum):
    IDLE = "idle"
    CONFIRM_PENDING = "confirm_pending"
    COPYING = "copying"


class CopyOrchestrator:
    """Confirm, run and report a copy from the source pane to the destination pane"""

    def __init__(
        self,
        source: PaneState,
        destination: PaneState,
        copier: Copier,
        channel: EventChannel,
        notifier: Notifier,
        selection: SelectionController
    ):
        self.source = source
        self.destination = destination
        self.copier = copier
        self.channel = channel
        self.notifier = notifier
        self.selection = selection
        self.state = CopyState.IDLE
        self.progress: Optional[CopyProgress] = None

    @property
    def source_paths(self) -> List[str]:
        return self.selection.selected_paths(self.source)

    @property
    def destination_path(self) -> Optional[str]:
        return self.selection.selected_path(self.destination)

    def status(self) -> CopyStatus:
        return CopyStatus(
            state=self.state.value,
            source_paths=self.source_paths,
            destination=self.destination_path,
            progress=self.progress
        )

    async def initiate_copy(self) -> bool:
        """
        Ask for confirmation of a copy.

        Returns:
            True if the orchestrator is now waiting for confirmation
        """
        if self.state != CopyState.IDLE:
            logger.warning(f"Cannot initiate copy while {self.state.value}")
            return False

        if not await self._has_source_and_destination():
            return False

        self.state = CopyState.CONFIRM_PENDING
        logger.info(f"Copy of {len(self.source.selection)} items to {self.destination_path} awaiting confirmation")
        return True

    async def _has_source_and_destination(self) -> bool:
        if not self.source.selection:
            await self.notifier.notify("info", "No files selected")
            return False

        if self.destination_path is None:
            await self.notifier.notify("info", "No destination selected")
            return False

        return True

    def cancel_copy(self) -> bool:
        if self.state != CopyState.CONFIRM_PENDING:
            logger.warning(f"Cannot cancel copy while {self.state.value}")
            return False

        self.state = CopyState.IDLE
        logger.info("Copy cancelled")
        return True

    async def confirm_copy(self) -> bool:
        """
        Run the confirmed copy to completion.

        The progress subscription, progress record and state are always reset,
        whatever the copier does.

        Returns:
            True if the copy succeeded
        """
        if self.state != CopyState.CONFIRM_PENDING:
            logger.warning(f"Cannot confirm copy while {self.state.value}")
            return False

        # Either pane may have changed while the confirmation was showing
        if not await self._has_source_and_destination():
            self.state = CopyState.IDLE
            return False

        source_paths = self.source_paths
        destination = self.destination_path

        self.state = CopyState.COPYING
        self.progress = CopyProgress.starting(len(source_paths))

        try:
            # Subscribe before dispatching so no progress event is missed
            with self.channel.subscribe(COPY_PROGRESS_EVENT, self._on_progress):
                logger.info(f"Copying {len(source_paths)} items to {destination}")
                try:
                    await self.copier(source_paths, destination)
                except Exception as e:
                    logger.error(f"Copy to {destination} failed: {e}")
                    await self.notifier.notify("error", f"Copy failed: {e}")
                    return False

            await self.notifier.notify("success", f"Copied {len(source_paths)} items to {destination}")
            self.selection.clear_selection(self.source)
            return True
        finally:
            self.progress = None
            self.state = CopyState.IDLE

    async def _on_progress(self, payload: Any):
        if self.state != CopyState.COPYING:
            return

        if isinstance(payload, CopyProgress):
            progress = payload
        else:
            progress = CopyProgress.model_validate(payload)

        self.progress = progress
        await self.notifier.publish("copy_progress", progress.model_dump())
