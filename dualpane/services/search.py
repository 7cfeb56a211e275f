"""
Filename matching for the search/filter box.

A query is a comma separated list of terms combined with OR. In exact mode a
term must equal the name (case-sensitive). In regex mode a term is a
case-insensitive pattern; a term that does not compile is matched as a
case-insensitive substring instead.
"""

import re
from functools import lru_cache
from typing import List, Optional, Pattern

from dualpane.schemas.filesystem import FileNode


def split_terms(query: str) -> List[str]:
    """
    Split a query into trimmed, non-empty terms.

    Args:
        query: Raw query text, e.g. "Documents , Photos"

    Returns:
        List of terms, e.g. ["Documents", "Photos"]
    """
    if not query:
        return []
    return [term.strip() for term in query.split(",") if term.strip()]


@lru_cache(maxsize=256)
def _compile(term: str) -> Optional[Pattern]:
    # None marks a malformed pattern; the substring fallback sticks for the term
    try:
        return re.compile(term, re.IGNORECASE)
    except re.error:
        return None


def _term_matches(name: str, term: str, is_regex: bool) -> bool:
    if not is_regex:
        return name == term

    pattern = _compile(term)
    if pattern is None:
        return term.lower() in name.lower()
    return pattern.search(name) is not None


def matches(name: str, query: str, is_regex: bool) -> bool:
    """
    Check whether a filename matches a search query.

    Args:
        name: Filename to test
        query: Comma separated terms; blank means match everything
        is_regex: Treat terms as regular expressions

    Returns:
        True if any term matches the name
    """
    terms = split_terms(query)
    if not terms:
        return True
    return any(_term_matches(name, term, is_regex) for term in terms)


def visible_paths(root: Optional[FileNode], query: str, is_regex: bool) -> List[str]:
    """
    Paths of loaded nodes that should stay visible under a filter.

    A node is visible when its name matches or when any loaded descendant
    matches, so the path down to every hit is kept. The root itself is always
    visible.

    Args:
        root: Root of a pane's tree
        query: Search query
        is_regex: Regex mode flag

    Returns:
        Visible paths in depth-first order
    """
    if root is None:
        return []

    # Post-order over an explicit stack: (node, children_done)
    order: List[str] = []
    visible = set()
    stack = [(root, False)]
    while stack:
        node, children_done = stack.pop()
        if not children_done:
            order.append(node.path)
            stack.append((node, True))
            for child in reversed(node.children or []):
                stack.append((child, False))
            continue

        if matches(node.name, query, is_regex):
            visible.add(node.path)
        elif any(child.path in visible for child in node.children or []):
            visible.add(node.path)

    visible.add(root.path)
    return [path for path in order if path in visible]
