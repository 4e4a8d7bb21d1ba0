"""Provides :func:`walk`, which finds the notes and categories in a note directory."""

import logging
import os
import os.path
from typing import Callable, Collection, List, Optional, Tuple

from noxe.classify import classify, has_main_file
from noxe.conf import default_ignore
from noxe.errors import IoError
from noxe.models import KindReq, KindReqIsh, NoteEntry, NoteKind

logger = logging.getLogger(__name__)


def walk(root: str, kinds: KindReqIsh = KindReq.notes(), predicate: Optional[Callable[[str], bool]] = None,
         ignore: Callable[[str, str], bool] = default_ignore, exclude: Collection[str] = frozenset())\
        -> List[NoteEntry]:
    """Returns the entries under root whose kind is requested in kinds and whose name satisfies predicate.

    The traversal is depth-first and pre-order, in the order :func:`os.scandir` reports entries; the
    root itself is never returned. Categories are always descended into. Directory notes are never
    descended into, whether or not they were requested, so files inside a directory note (images,
    chapters, and so on) are never returned.

    predicate receives the entry's file name; if it is None, every entry matches.

    Entries for which ``ignore(parent, name)`` returns True are skipped along with everything below them.
    Symbolic links are skipped as well.

    exclude names the folders a note template creates (compared case-insensitively). Those only exist
    inside directory notes, and the only directory note the walk can be inside is root itself, so they
    are skipped only directly inside root, and only when root is a directory note. Categories and notes
    elsewhere that happen to share one of these names are walked normally.

    Raises :exc:`noxe.errors.IoError` if any directory cannot be read; no partial result is returned.
    """
    kinds = KindReq.parse(kinds)
    excluded = {name.lower() for name in exclude} if exclude and has_main_file(root) else set()
    result = []
    try:
        _walk_in(root, (), kinds, predicate, ignore, excluded, result)
    except OSError as e:
        path = e.filename if e.filename else root
        raise IoError(f"Failed to read note directory '{path}'", path, e) from e
    logger.debug('found %d entries under %s', len(result), root)
    return result


def _walk_in(dirpath: str, parts: Tuple[str, ...], kinds: KindReq, predicate: Optional[Callable[[str], bool]],
             ignore: Callable[[str, str], bool], excluded: Collection[str], result: List[NoteEntry]) -> None:
    with os.scandir(dirpath) as it:
        entries = list(it)
    for entry in entries:
        if entry.is_symlink():
            continue
        if ignore(dirpath, entry.name):
            continue
        is_dir = entry.is_dir()
        if is_dir and entry.name.lower() in excluded:
            continue
        entry_parts = parts + (entry.name,)
        kind = classify(entry.path, is_dir=is_dir)
        if kind == NoteKind.UNCLASSIFIED:
            continue
        if kinds.wants(kind) and (predicate is None or predicate(entry.name)):
            result.append(NoteEntry(entry.path, entry_parts, kind))
        if kind == NoteKind.CATEGORY:
            _walk_in(entry.path, entry_parts, kinds, predicate, ignore, (), result)
