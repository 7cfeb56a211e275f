"""
Shared fakes for the file-system collaborators.
"""

import pytest
from typing import Callable, Dict, List, Optional, Tuple

from dualpane.schemas.filesystem import CopyProgress, FileNode
from dualpane.services.channel import COPY_PROGRESS_EVENT, EventChannel
from dualpane.services.notices import Notifier
from dualpane.services.workspace import Workspace


HOME = "/home/user"

LAYOUT: Dict[str, List[Tuple[str, bool]]] = {
    HOME: [("docs", True), ("empty", True), ("music", True), ("notes.txt", False)],
    f"{HOME}/docs": [("reports", True), ("a.txt", False), ("b.txt", False)],
    f"{HOME}/docs/reports": [("q1.pdf", False)],
    f"{HOME}/empty": [],
    f"{HOME}/music": [("song.mp3", False)],
    "/dest": [],
}


def join(parent: str, name: str) -> str:
    return f"{parent.rstrip('/')}/{name}"


class FakeFileSystem:
    """
    In-memory scanner.

    failures maps a path to the exception its scan raises; gates maps a path
    to an asyncio.Event the scan waits on before answering.
    """

    def __init__(self, layout=None):
        self.layout = dict(layout or LAYOUT)
        self.calls: List[str] = []
        self.failures: Dict[str, Exception] = {}
        self.gates = {}

    async def scan(self, path: str) -> FileNode:
        self.calls.append(path)

        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()

        if path in self.failures:
            raise self.failures[path]
        if path not in self.layout:
            raise FileNotFoundError(f"No such directory: {path}")

        children = [
            FileNode(name=name, path=join(path, name), is_dir=is_dir, size=0 if is_dir else 10)
            for name, is_dir in self.layout[path]
        ]
        return FileNode(name=path.rsplit("/", 1)[-1] or path, path=path, is_dir=True, children=children)


class FakeCopier:
    """
    Copier that emits scripted progress on the channel.

    observe, when set, is called before the first event and after each one;
    its results land in observed.
    """

    def __init__(self, channel: EventChannel):
        self.channel = channel
        self.calls: List[Tuple[List[str], str]] = []
        self.progress: List[object] = []
        self.error: Optional[Exception] = None
        self.observe: Optional[Callable[[], object]] = None
        self.observed: List[object] = []
        self.subscribers_during: Optional[int] = None

    def _observe(self):
        if self.observe is not None:
            self.observed.append(self.observe())

    async def __call__(self, source_paths: List[str], destination: str):
        self.calls.append((list(source_paths), destination))
        self.subscribers_during = self.channel.subscriber_count(COPY_PROGRESS_EVENT)

        self._observe()
        for payload in self.progress:
            await self.channel.emit(COPY_PROGRESS_EVENT, payload)
            self._observe()

        if self.error is not None:
            raise self.error


class RecordingBroadcast:
    """Broadcast sink that keeps every message"""

    def __init__(self):
        self.messages: List[Tuple[str, dict]] = []

    async def __call__(self, message_type: str, data: dict):
        self.messages.append((message_type, data))

    def of_type(self, message_type: str) -> List[dict]:
        return [data for kind, data in self.messages if kind == message_type]


class FakeClipboard:
    def __init__(self, result=True):
        self.result = result
        self.texts: List[str] = []

    def __call__(self, text: str):
        if isinstance(self.result, Exception):
            raise self.result
        self.texts.append(text)
        return self.result


@pytest.fixture
def fs():
    return FakeFileSystem()


@pytest.fixture
def broadcast():
    return RecordingBroadcast()


@pytest.fixture
def notifier(broadcast):
    return Notifier(broadcast=broadcast)


@pytest.fixture
def channel():
    return EventChannel()


@pytest.fixture
def copier(channel):
    return FakeCopier(channel)


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def workspace(fs, copier, clipboard, notifier, channel):
    return Workspace(
        scanner=fs.scan,
        copier=copier,
        get_home_dir=lambda: HOME,
        clipboard=clipboard,
        notifier=notifier,
        channel=channel
    )


@pytest.fixture
def progress_events():
    return [
        CopyProgress.from_counts("a.txt", 0, 2),
        {"current_file": "notes.txt", "files_done": 1, "total_files": 2, "percentage": 50.0},
    ]
