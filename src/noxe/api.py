"""Provides the main entry point for using the library, :class:`Noxe`"""

from __future__ import annotations
from glob import glob
import logging
import os
import os.path
import re
from typing import Dict, Iterable, List, Optional, Set

from noxe.classify import note_type_for
from noxe.conf import NoxeConf
from noxe.errors import AlreadyExistsError, InvalidNoteTypeError, IoError, NotFoundError, SearchQueryError, \
    TemplateParseError
from noxe.metadata import metadata
from noxe.models import KindReq, NoteEntry, NoteTemplate, NoteType
from noxe.programs import edit_command, exec_with, preview_command
from noxe.resolve import AskFn, prompt_choice, resolve, resolve_note_file
from noxe.templates import create_template_paths, load_template
from noxe.walk import walk

logger = logging.getLogger(__name__)


class Noxe:
    """Main entry point for working programmatically with your notes.

    Generally, you should get an instance using the :meth:`Noxe.for_user` method.

    .. attribute:: conf
       :type: noxe.conf.NoxeConf

    .. attribute:: ask

       Called with the candidates when a note name matches more than one note, and must return the user's
       answer (see :func:`noxe.resolve.choose`). Defaults to :func:`noxe.resolve.prompt_choice`, which asks
       on the console.

    Here's an example of how to use this class. This would print the main file of every note in the
    note directory:

    .. code-block:: python

       from noxe.api import Noxe
       nd = Noxe.for_user()
       for entry in nd.list():
           print(nd.note_file(entry.path))
    """

    @staticmethod
    def for_user() -> Noxe:
        """Creates an instance using ``~/.noxe.conf.py`` (if it exists) and ``NOXE_*`` environment variables."""
        return NoxeConf.for_user().instantiate()

    def __init__(self, conf: NoxeConf, ask: AskFn = prompt_choice):
        self.conf = conf
        self.ask = ask

    def templates_by_name(self) -> Dict[str, str]:
        """Returns paths of note templates that are known based on the config.

        The name is the part of the filename before any `.` character. If multiple templates
        have the same name, the one whose path is lexicographically first will appear in the dict.
        """
        paths = [p for g in self.conf.template_globs for p in glob(os.path.expanduser(g), recursive=True)
                 if os.path.isfile(p)]
        paths.sort(reverse=True)
        return {os.path.split(p)[1].split('.')[0].lower(): p for p in paths}

    def template_for_name(self, name: str) -> Optional[str]:
        """Returns the path to the template for the given name, if one is found.

        If treating the name as a relative or absolute path leads to a file, that file is used.
        Otherwise, the name is looked up from :meth:`Noxe.templates_by_name`, case-insensitively.
        Returns None if a matching template cannot be found.
        """
        if os.path.isfile(name):
            return name
        else:
            return self.templates_by_name().get(name.lower())

    def template(self, name: str = None) -> NoteTemplate:
        """Loads the named template, or the configured one; returns the default template if neither is set.

        Raises :exc:`noxe.errors.NotFoundError` if the template cannot be found.
        """
        name = name or self.conf.template
        if not name:
            return NoteTemplate.default()
        path = self.template_for_name(name)
        if not path:
            raise NotFoundError(f"Template does not exist: '{name}'", name)
        return load_template(path)

    def new(self, note_path: str, note_type: NoteType = None, single_file: bool = False, author: str = None,
            keywords: Iterable[str] = (), template: str = None, with_metadata: bool = None) -> str:
        """Creates a new note and returns the path of its main file.

        If note_path ends with a note extension such as ``.md``, the note is a single file of that type.
        Otherwise, unless single_file is True, note_path becomes a folder containing ``main.<type>`` and
        the folders and files of the template. note_type, author, template and with_metadata default to
        the values in :attr:`conf`.

        Raises :exc:`noxe.errors.AlreadyExistsError` without changing anything if note_path exists.
        """
        ext = os.path.splitext(note_path)[1]
        if ext:
            try:
                note_type = NoteType.parse(ext, note_path)
                single_file = True
            except InvalidNoteTypeError:
                pass
        note_type = note_type or self.conf.note_type
        author = author if author is not None else self.conf.author
        with_metadata = self.conf.with_metadata if with_metadata is None else with_metadata

        if os.path.lexists(note_path):
            raise AlreadyExistsError(f"Note '{note_path}' already exists", note_path)

        title = os.path.splitext(os.path.basename(os.path.normpath(note_path)))[0]
        note_template = self.template(template)
        main_path = note_path if single_file else os.path.join(note_path, note_type.main_filename)

        content = ''
        if with_metadata:
            content += metadata(title, author, note_type, keywords)
        content += note_template.main_body(note_type) or ''

        try:
            if single_file:
                parent = os.path.dirname(note_path)
                if parent:
                    os.makedirs(parent, exist_ok=True)
            else:
                os.makedirs(note_path)
                create_template_paths(note_path, note_template.paths)
            with open(main_path, 'w') as file:
                file.write(content)
        except OSError as e:
            raise IoError(f"Failed to create main file '{main_path}'", main_path, e) from e
        logger.debug('created note %s', main_path)
        return main_path

    def _exclude(self) -> Set[str]:
        try:
            return self.template().top_level_dirs()
        except (NotFoundError, TemplateParseError, IoError) as e:
            logger.warning('Ignoring configured template while looking up notes: %s', e)
            return NoteTemplate.default().top_level_dirs()

    def find(self, reference: str = None) -> str:
        """Returns the path of the note a name or path refers to; see :func:`noxe.resolve.resolve`.

        If reference is None, the current directory is used. If the note directory is itself a directory
        note, the folders the configured template creates (such as ``images``) are not searched; when the
        configured template cannot be loaded, the default template's folders are used instead.
        """
        reference = os.getcwd() if reference is None else reference
        return resolve(self.conf.note_dir, reference, ask=self.ask, exclude=self._exclude(),
                       ignore=self.conf.ignore)

    def note_file(self, reference: str = None) -> str:
        """Like :meth:`find`, but returns the main file when the note is a folder."""
        reference = os.getcwd() if reference is None else reference
        return resolve_note_file(self.conf.note_dir, reference, ask=self.ask, exclude=self._exclude(),
                                 ignore=self.conf.ignore, prefer=self.conf.note_type)

    def preview(self, reference: str = None) -> (str, int):
        """Runs the preview program for the note's type. Returns the main file and the program's exit status.

        Raises :exc:`noxe.errors.InvalidNoteTypeError` if the note is not a typ or md file.
        """
        path = self.note_file(reference)
        command = preview_command(path, note_type_for(path), self.conf)
        return path, exec_with(path, command)

    def edit(self, reference: str = None) -> (str, int):
        """Runs the editor on the note's main file. Returns the main file and the editor's exit status."""
        path = self.note_file(reference)
        return path, exec_with(path, edit_command(self.conf))

    def search(self, query: str) -> List[NoteEntry]:
        """Returns the notes whose names match the regular expression query, ignoring case.

        Raises :exc:`noxe.errors.NotFoundError` if there are none.
        """
        try:
            pattern = re.compile(query, re.IGNORECASE)
        except re.error as e:
            raise SearchQueryError(f"Failed to build regex from '{query}'", query, e) from e
        result = walk(self.conf.note_dir, KindReq.notes(), lambda name: bool(pattern.search(name)),
                      ignore=self.conf.ignore)
        if not result:
            raise NotFoundError(f"No note found in '{self.conf.note_dir}'", query)
        return result

    def list(self, categories: bool = False) -> List[NoteEntry]:
        """Returns all notes in the note directory, or all categories if categories is True."""
        kinds = KindReq.categories_only() if categories else KindReq.notes()
        return walk(self.conf.note_dir, kinds, ignore=self.conf.ignore)
