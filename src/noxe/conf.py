from __future__ import annotations
from dataclasses import dataclass, field, replace
import os
import os.path
import shlex
from typing import Callable, List, Mapping, Optional, Set

from noxe.models import NoteType


def default_ignore(parentpath: str, filename: str) -> bool:
    return filename.startswith('.')


@dataclass
class NoxeConf:
    note_dir: str = '.'
    """The folder that is searched (recursively) when looking up notes by name, searching, or listing.

    Can also be set with the ``NOXE_DIR`` environment variable or the ``--note-dir`` argument.
    """

    author: Optional[str] = None
    """Written into the metadata of new notes. Environment variable: ``NOXE_AUTHOR``."""

    note_type: NoteType = NoteType.TYP
    """The type of new notes whose path does not have a note extension. Environment variable: ``NOXE_TYPE``.

    This is also the preferred main file when a directory note contains both ``main.typ`` and ``main.md``.
    """

    template: Optional[str] = None
    """Path or name of the YAML template used for new directory notes. Environment variable: ``NOXE_TEMPLATE``.

    If this is not set, new directory notes get empty ``images``, ``chapter`` and ``bibliography`` folders.
    """

    template_globs: Set[str] = field(default_factory=set)
    """A set of path globs such as ``{"/notes/templates/*.yaml"}`` to search for templates by name."""

    with_metadata: bool = True
    """If True, new notes start with a title/author/keywords/date header."""

    typst_command: List[str] = field(default_factory=list)
    """Program and arguments used to preview typ notes; the note path is appended.

    Defaults to ``tinymist preview --root <note folder>``. Environment variable: ``NOXE_TYPST_COMMAND``.
    """

    markdown_command: List[str] = field(default_factory=list)
    """Program and arguments used to preview md notes; the note path is appended.

    Defaults to ``glow``. Environment variable: ``NOXE_MARKDOWN_COMMAND``.
    """

    editor: List[str] = field(default_factory=list)
    """Program and arguments used by the ``edit`` command; the note path is appended.

    Defaults to the ``NOXE_EDITOR`` or ``EDITOR`` environment variable, or ``vim``.
    """

    ignore: Callable[[str, str], bool] = default_ignore
    """Use this to indicate files or folders that noxe should not look at.

    The first argument is the path to the directory containing the file/folder, and the second argument is
    the filename. If this function returns True, neither that path nor anything inside it will be found by
    name, searched, or listed.

    The default ignores all files or folders whose name begins with a period (``.``).
    """

    @classmethod
    def user_config_path(cls) -> str:
        return os.path.expanduser(os.path.join('~', '.noxe.conf.py'))

    @classmethod
    def for_user(cls, environ: Mapping[str, str] = None) -> NoxeConf:
        """Loads ``~/.noxe.conf.py`` if it exists, then applies environment variables.

        The config file is a Python script that must assign an instance of NoxeConf to the variable ``conf``.
        """
        path = cls.user_config_path()
        conf = cls()
        if os.path.exists(path):
            with open(path, 'r') as file:
                conf_script = file.read()
            context = {}
            exec(conf_script, context)
            if 'conf' not in context or not isinstance(context['conf'], cls):
                raise Exception('You need to assign an instance of NoxeConf to the variable `conf` '
                                f'in your config file: {path}')
            conf = context['conf']
        return conf.with_env(os.environ if environ is None else environ)

    def with_env(self, environ: Mapping[str, str]) -> NoxeConf:
        """Returns a copy with settings overridden by any ``NOXE_*`` variables present in environ."""
        changes = {}
        if environ.get('NOXE_DIR'):
            changes['note_dir'] = environ['NOXE_DIR']
        if environ.get('NOXE_AUTHOR'):
            changes['author'] = environ['NOXE_AUTHOR']
        if environ.get('NOXE_TYPE'):
            changes['note_type'] = NoteType.parse(environ['NOXE_TYPE'], 'NOXE_TYPE')
        if environ.get('NOXE_TEMPLATE'):
            changes['template'] = environ['NOXE_TEMPLATE']
        if environ.get('NOXE_TYPST_COMMAND'):
            changes['typst_command'] = shlex.split(environ['NOXE_TYPST_COMMAND'])
        if environ.get('NOXE_MARKDOWN_COMMAND'):
            changes['markdown_command'] = shlex.split(environ['NOXE_MARKDOWN_COMMAND'])
        editor = environ.get('NOXE_EDITOR') or (None if self.editor else environ.get('EDITOR'))
        if editor and editor.strip():
            changes['editor'] = shlex.split(editor)
        return replace(self, **changes)

    def standardize(self):
        return replace(
            self,
            note_dir=os.path.realpath(os.path.expanduser(self.note_dir))
        )

    def instantiate(self):
        from noxe.api import Noxe
        return Noxe(self.standardize())
