"""Defines classes for representing notes, walk requests, and note templates.

The most important classes are :class:`NoteEntry`, :class:`NoteKind`, and :class:`KindReq`
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import os.path
from typing import Dict, Iterable, Optional, Set, Tuple, Union

from noxe.errors import InvalidNoteTypeError


class NoteType(Enum):
    """The file formats a note can be written in."""
    TYP = 'typ'
    MD = 'md'

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, ext: str, path: str = None) -> NoteType:
        """Maps a file extension (with or without the leading dot) to a note type, case-insensitively.

        Raises :exc:`noxe.errors.InvalidNoteTypeError` for anything else.
        """
        value = ext.lower().lstrip('.') if ext else ''
        for member in cls:
            if member.value == value:
                return member
        raise InvalidNoteTypeError(f"Invalid note type: '{ext}'", path if path is not None else ext)

    @property
    def main_filename(self) -> str:
        return f'main.{self.value}'


class NoteKind(Enum):
    """The classification of an entry in the note directory. Exactly one applies to every entry."""

    FILE_NOTE = 'file'
    """A file whose extension is a :class:`NoteType`."""

    DIR_NOTE = 'dir'
    """A directory containing ``main.md`` or ``main.typ``. Its contents are part of the note."""

    CATEGORY = 'category'
    """A plain directory used for grouping notes."""

    UNCLASSIFIED = 'unclassified'
    """Anything else, such as images or other files with unrecognized extensions."""


@dataclass
class KindReq:
    """Specifies which kinds of entries you want when walking the note directory.

    Some functions that take a KindReq parameter also accept strings or lists of strings as a convenience,
    which they will pass to :meth:`parse`.
    """

    file_notes: bool = False
    dir_notes: bool = False
    categories: bool = False

    @classmethod
    def parse(cls, val: KindReqIsh) -> KindReq:
        """Converts the parameter to a KindReq, if it isn't one already.

        You can pass a comma-separated string like ``"file_notes,dir_notes"`` or a list of strings like
        ``['categories']``. Each listed field will be set to True in the resulting KindReq.
        """
        if isinstance(val, KindReq):
            return val
        if isinstance(val, str):
            return cls.parse(s.strip() for s in val.split(',') if s.strip())
        return cls(**{k: True for k in val})

    @classmethod
    def notes(cls) -> KindReq:
        """Returns an instance that requests file-notes and dir-notes, but not categories."""
        return cls(file_notes=True, dir_notes=True)

    @classmethod
    def categories_only(cls) -> KindReq:
        return cls(categories=True)

    def wants(self, kind: NoteKind) -> bool:
        if kind == NoteKind.FILE_NOTE:
            return self.file_notes
        elif kind == NoteKind.DIR_NOTE:
            return self.dir_notes
        elif kind == NoteKind.CATEGORY:
            return self.categories
        return False


KindReqIsh = Union[str, Iterable[str], KindReq]


@dataclass
class NoteEntry:
    """An entry found while walking the note directory."""

    path: str
    """The entry's path, formed by joining the note directory root with :attr:`parts`."""

    parts: Tuple[str, ...]
    """The path components from the note directory root to this entry."""

    kind: NoteKind

    @property
    def name(self) -> str:
        return self.parts[-1]

    @property
    def relpath(self) -> str:
        return os.path.join(*self.parts)

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'path': self.path,
            'relpath': self.relpath,
            'name': self.name,
            'kind': self.kind.value,
        }


class ListSort(Enum):
    NAME = 'name'
    CREATED = 'created'
    UPDATED = 'updated'


PathContent = Union[Dict[str, 'PathContent'], str]


@dataclass
class NoteTemplate:
    """Describes what to create inside a new directory note.

    Usually loaded from a YAML file by :func:`noxe.templates.load_template`. Here's an example:

    .. code-block:: yaml

       paths:
         images: {}
         chapter:
           intro.typ: "= Introduction\\n"
         refs.bib: ""
       main.typ: |
         #include "chapter/intro.typ"
    """

    paths: Dict[str, PathContent] = field(default_factory=dict)
    """Maps names relative to the note folder to either a nested dict (a directory) or a string (file contents)."""

    main_typ: Optional[str] = None
    """Text appended to ``main.typ`` after the metadata, if the note is a typ note."""

    main_md: Optional[str] = None
    """Text appended to ``main.md`` after the metadata, if the note is a md note."""

    @classmethod
    def default(cls) -> NoteTemplate:
        """Returns the template used when none is configured: empty images, chapter, and bibliography folders."""
        return cls(paths={'images': {}, 'chapter': {}, 'bibliography': {}})

    def main_body(self, note_type: NoteType) -> Optional[str]:
        if note_type == NoteType.TYP:
            return self.main_typ
        return self.main_md

    def top_level_dirs(self) -> Set[str]:
        """Returns the names of the directories this template creates directly inside the note folder."""
        return {name for name, content in self.paths.items() if isinstance(content, dict)}
