"""Formats collections of notes for display.

:func:`render_tree` draws paths as a tree using box-drawing characters; :func:`render_list` prints them
one per line. :func:`sort_entries` and :func:`group_by_category` prepare entries for either.
"""

from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
import os
import os.path
from pathlib import PurePath
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from terminaltables import AsciiTable

from noxe.models import ListSort, NoteEntry

DEFAULT_LIMIT = 10

PathIsh = Union[str, Sequence[str]]


@dataclass
class PathNode:
    """A node in the tree built by :func:`build_tree`."""

    children: Dict[str, PathNode] = field(default_factory=dict)

    is_leaf: bool = False
    """True if some inserted path ended at this node."""


def _components(path: PathIsh) -> Tuple[str, ...]:
    if isinstance(path, str):
        return PurePath(path).parts
    return tuple(path)


def build_tree(paths: Iterable[PathIsh]) -> PathNode:
    root = PathNode()
    for path in paths:
        node = root
        for component in _components(path):
            node = node.children.setdefault(component, PathNode())
        if node is not root:
            node.is_leaf = True
    return root


def _subtree_lines(node: PathNode, prefix: str) -> Iterable[str]:
    names = sorted(node.children)
    for i, name in enumerate(names):
        last = i == len(names) - 1
        yield f'{prefix}{"└── " if last else "├── "}{name}'
        yield from _subtree_lines(node.children[name], prefix + ('    ' if last else '│   '))


def tree_lines(paths: Iterable[PathIsh]) -> List[str]:
    """Returns one line per node of the tree formed by paths, siblings sorted by name.

    For example, ``['b/x.md', 'a/y.md', 'a/z.md']`` gives::

        ├── a
        │   ├── y.md
        │   └── z.md
        └── b
            └── x.md
    """
    return list(_subtree_lines(build_tree(paths), ''))


def render_tree(paths: Iterable[PathIsh]) -> str:
    return '\n'.join(tree_lines(paths))


def render_list(paths: Iterable[PathIsh]) -> str:
    return '\n'.join(os.path.join(*_components(p)) for p in paths)


def display_parts(entry: NoteEntry, terse: bool = False) -> Tuple[str, ...]:
    """Returns the path components to show for an entry; only its name if terse is True."""
    return (entry.name,) if terse else entry.parts


def created_time(path: str) -> float:
    """Returns the birthtime of the file if the platform reports one, otherwise its ctime."""
    stat = os.stat(path)
    try:
        return stat.st_birthtime
    except AttributeError:
        return stat.st_ctime


def updated_time(path: str) -> float:
    return os.stat(path).st_mtime


def sort_entries(entries: Iterable[NoteEntry], sort: ListSort, limit: Optional[int] = None) -> List[NoteEntry]:
    """Returns the entries sorted as specified.

    NAME sorts ascending by file name. CREATED and UPDATED sort newest first and keep only the first
    ``limit`` entries (10 if limit is None). NAME only truncates if a limit is given.

    Raises ValueError if limit is negative.
    """
    if limit is not None and limit < 0:
        raise ValueError(f'limit must not be negative: {limit}')
    result = list(entries)
    if sort == ListSort.NAME:
        result.sort(key=lambda e: e.name)
        return result if limit is None else result[:limit]
    elif sort == ListSort.CREATED:
        result.sort(key=lambda e: created_time(e.path), reverse=True)
    elif sort == ListSort.UPDATED:
        result.sort(key=lambda e: updated_time(e.path), reverse=True)
    return result[:DEFAULT_LIMIT if limit is None else limit]


def category_of(entry: NoteEntry) -> str:
    """Returns the name of the innermost category containing the entry, or ``Uncategorized``."""
    return entry.parts[-2] if len(entry.parts) > 1 else 'Uncategorized'


def group_by_category(entries: Iterable[NoteEntry]) -> List[Tuple[str, List[Tuple[str, ...]]]]:
    """Groups entries by :func:`category_of`.

    Returns (category, paths) pairs sorted by category, where each path is ``(category, name)``.
    """
    groups = defaultdict(list)
    for entry in entries:
        category = category_of(entry)
        groups[category].append((category, entry.name))
    return sorted(groups.items())


def _format_time(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).strftime('%Y-%m-%d %H:%M')


def render_table(entries: Iterable[NoteEntry], terse: bool = False) -> str:
    data = [('Path', 'Kind', 'Created', 'Updated')]
    for entry in entries:
        data.append((os.path.join(*display_parts(entry, terse)),
                     entry.kind.value,
                     _format_time(created_time(entry.path)),
                     _format_time(updated_time(entry.path))))
    return AsciiTable(data).table
