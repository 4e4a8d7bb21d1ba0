"""Decides what kind of note, if any, a path in the note directory is.

Classification only looks at the entry itself and its immediate children, never at its ancestors or at
the order in which entries are visited.
"""

import os.path

from noxe.errors import NoMainFileError, InvalidNoteTypeError
from noxe.models import NoteKind, NoteType


def is_note_extension(filename: str) -> bool:
    ext = os.path.splitext(filename)[1]
    return ext[1:].lower() in {t.value for t in NoteType}


def has_main_file(path: str) -> bool:
    return any(os.path.isfile(os.path.join(path, t.main_filename)) for t in NoteType)


def classify(path: str, is_dir: bool = None) -> NoteKind:
    """Returns the :class:`NoteKind` for the given path.

    is_dir may be passed when the caller already knows the entry's type (for example from
    :func:`os.scandir`), to avoid another stat call. Nonexistent paths are UNCLASSIFIED.
    """
    if is_dir is None:
        is_dir = os.path.isdir(path)
        if not (is_dir or os.path.isfile(path)):
            return NoteKind.UNCLASSIFIED
    if is_dir:
        return NoteKind.DIR_NOTE if has_main_file(path) else NoteKind.CATEGORY
    if is_note_extension(path):
        return NoteKind.FILE_NOTE
    return NoteKind.UNCLASSIFIED


def main_file(path: str, prefer: NoteType = NoteType.TYP) -> str:
    """Returns the file holding the content of the note at path.

    For a directory this is its ``main.typ`` or ``main.md``; if both exist, the one matching ``prefer`` is
    returned. For anything else the path itself is returned.

    Raises :exc:`noxe.errors.NoMainFileError` for a directory with no main file.
    """
    if not os.path.isdir(path):
        return path
    order = [prefer] + [t for t in NoteType if t != prefer]
    for note_type in order:
        candidate = os.path.join(path, note_type.main_filename)
        if os.path.isfile(candidate):
            return candidate
    raise NoMainFileError(f"No main file found in '{path}'", path)


def note_type_for(path: str) -> NoteType:
    ext = os.path.splitext(path)[1]
    if not ext:
        raise InvalidNoteTypeError(f"Failed to parse note type from '{path}'", path)
    try:
        return NoteType.parse(ext, path)
    except InvalidNoteTypeError as e:
        raise InvalidNoteTypeError(f"Failed to parse note type from '{path}'", path) from e


def is_note_name(reference: str) -> bool:
    """Returns True if the reference is a bare note name rather than a path.

    A name is a single path component, so ``foo`` and ``foo.md`` are names but ``notes/foo``, ``./foo``,
    ``/foo``, ``.`` and ``..`` are paths.
    """
    if not reference or reference in ('.', '..'):
        return False
    seps = {os.sep, '/'}
    if os.altsep:
        seps.add(os.altsep)
    return not any(sep in reference for sep in seps)
