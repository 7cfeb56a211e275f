"""
File-system backends for DualPane.

These are the collaborators the core talks to: home directory lookup,
single-level directory scans, the bulk copy (which reports progress on the
event channel), clipboard placement and the recursive filename search.
Blocking work runs in worker threads so the event loop stays responsive.
"""

import asyncio
import logging
import os
import shutil
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from dualpane.config import CLIPBOARD_TIMEOUT, EXCLUDED_DIRS, MAX_SEARCH_DEPTH
from dualpane.schemas.filesystem import CopyProgress, FileNode
from dualpane.services.channel import COPY_PROGRESS_EVENT, EventChannel
from dualpane.services.search import matches

logger = logging.getLogger(__name__)


class DualPaneError(Exception):
    """Base error for DualPane backends"""


class CopyError(DualPaneError):
    """A copy could not be started or did not finish"""


def get_home_dir(override: Optional[str] = None) -> str:
    """
    Resolve the directory both panes start in.

    Args:
        override: Directory to use instead of the user's home (DUALPANE_HOME_DIR)

    Returns:
        Absolute path of the start directory

    Raises:
        OSError: if the directory cannot be resolved
    """
    home = Path(override) if override else Path.home()
    if not home.is_dir():
        raise NotADirectoryError(f"Home directory not found: {home}")
    return str(home.resolve())


def _mod_time(stat_result: os.stat_result) -> datetime:
    return datetime.fromtimestamp(stat_result.st_mtime, tz=timezone.utc)


def _scan_directory_sync(path: str) -> FileNode:
    logger.debug(f"Scanning directory: {path}")

    # lstat so a symlink is described as itself
    info = os.lstat(path)
    is_dir = os.path.isdir(path)

    name = os.path.basename(path.rstrip(os.sep)) or path
    if not is_dir:
        return FileNode(
            name=name,
            path=path,
            is_dir=False,
            size=info.st_size,
            mod_time=_mod_time(info)
        )

    children: List[FileNode] = []
    with os.scandir(path) as entries:
        for entry in entries:
            try:
                child_is_dir = entry.is_dir()
                child_info = entry.stat(follow_symlinks=False)
            except OSError:
                # Skip entries we can't stat
                continue

            children.append(FileNode(
                name=entry.name,
                path=os.path.join(path, entry.name),
                is_dir=child_is_dir,
                size=child_info.st_size,
                mod_time=_mod_time(child_info)
            ))

    # Directories first, then by name
    children.sort(key=lambda node: (not node.is_dir, node.name))

    logger.debug(f"Scan complete for {path}. Found {len(children)} items.")
    return FileNode(
        name=name,
        path=path,
        is_dir=True,
        size=info.st_size,
        mod_time=_mod_time(info),
        children=children
    )


async def scan_directory(path: str) -> FileNode:
    """
    List one directory level.

    Child directories come back with children=None (not yet loaded).

    Args:
        path: Directory (or file) to scan

    Returns:
        FileNode for path with its immediate children

    Raises:
        OSError: if the path does not exist or cannot be listed
    """
    return await asyncio.to_thread(_scan_directory_sync, path)


def _skip_symlinks(directory: str, names: List[str]) -> List[str]:
    return [name for name in names if os.path.islink(os.path.join(directory, name))]


def _copy_item(source: str, destination_dir: str):
    target = os.path.join(destination_dir, os.path.basename(source.rstrip(os.sep)))
    if os.path.isdir(source):
        # Links inside a copied tree are left out rather than recreated
        shutil.copytree(source, target, ignore=_skip_symlinks, dirs_exist_ok=True)
    else:
        # copy2 keeps the modification time
        shutil.copy2(source, target)


async def copy_files(
    source_paths: List[str],
    destination: str,
    channel: EventChannel,
    delay: float = 0.05
):
    """
    Copy files and directories into a destination directory.

    A CopyProgress is emitted on the copy-progress channel before each item
    and a final "Complete" record after the last one. Sources that no longer
    exist are skipped.

    Args:
        source_paths: Files or directories to copy
        destination: Existing directory to copy into
        channel: Channel receiving progress events
        delay: Pause between items so clients can render progress

    Raises:
        CopyError: if the destination is invalid, nothing is left to copy, or
            an item fails to copy
    """
    if not os.path.exists(destination):
        raise CopyError(f"destination directory does not exist: {destination}")
    if not os.path.isdir(destination):
        raise CopyError("destination is not a directory")

    items = [source for source in source_paths if os.path.exists(source)]
    skipped = len(source_paths) - len(items)
    if skipped:
        logger.warning(f"Skipping {skipped} missing source paths")

    total = len(items)
    if total == 0:
        raise CopyError("no valid items to copy")

    for index, source in enumerate(items):
        await channel.emit(
            COPY_PROGRESS_EVENT,
            CopyProgress.from_counts(os.path.basename(source), index, total)
        )

        try:
            await asyncio.to_thread(_copy_item, source, destination)
        except (OSError, shutil.Error) as e:
            logger.error(f"Failed to copy {source}: {e}")
            raise CopyError(f"failed to copy {source}: {e}") from e

        if delay:
            await asyncio.sleep(delay)

    await channel.emit(COPY_PROGRESS_EVENT, CopyProgress.from_counts("Complete", total, total))
    logger.info(f"Copied {total} items to {destination}")


def copy_text_to_clipboard(text: str) -> bool:
    """Best-effort clipboard copy across macOS, Windows, and common Linux tools"""
    if not text:
        return False

    command_candidates: List[List[str]] = []
    if sys.platform == "darwin":
        command_candidates.append(["pbcopy"])
    elif os.name == "nt":
        command_candidates.append(["clip"])
    else:
        command_candidates.extend([
            ["wl-copy"],
            ["xclip", "-selection", "clipboard"],
            ["xsel", "--clipboard", "--input"],
        ])

    for command in command_candidates:
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(command, input=text, text=True, check=False, timeout=CLIPBOARD_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Clipboard command {command[0]} failed: {e}")
            continue
        if proc.returncode == 0:
            return True

    return False


def _search_files_sync(root_path: str, query: str, is_regex: bool) -> List[FileNode]:
    root = Path(root_path)
    if not root.is_dir():
        raise NotADirectoryError(f"Invalid directory: {root_path}")

    results: List[FileNode] = []
    root_depth = len(root.parts)

    for dirpath, dirnames, filenames in os.walk(root):
        current_path = Path(dirpath)
        current_depth = len(current_path.parts) - root_depth

        # Filter excluded directories (modifying in-place affects os.walk traversal)
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS)

        entries = [(d, True) for d in dirnames] + [(f, False) for f in sorted(filenames)]

        # Stop descending past the depth limit (but still report this level)
        if current_depth >= MAX_SEARCH_DEPTH:
            dirnames.clear()

        for name, is_dir in entries:
            if not matches(name, query, is_regex):
                continue
            entry_path = current_path / name
            try:
                info = entry_path.stat()
            except OSError:
                # Skip entries we can't access
                continue
            results.append(FileNode(
                name=name,
                path=str(entry_path),
                is_dir=is_dir,
                size=info.st_size,
                mod_time=_mod_time(info)
            ))

    return results


async def search_files(root_path: str, query: str, is_regex: bool = False) -> List[FileNode]:
    """
    Recursively find entries under root_path whose name matches query.

    Excluded directories (VCS metadata, caches, virtualenvs, build outputs)
    are skipped and the walk stops MAX_SEARCH_DEPTH levels below the root.

    Args:
        root_path: Directory to search
        query: Search query (see services.search.matches)
        is_regex: Regex mode flag

    Returns:
        Matching entries, unloaded (children=None for directories)
    """
    return await asyncio.to_thread(_search_files_sync, root_path, query, is_regex)
