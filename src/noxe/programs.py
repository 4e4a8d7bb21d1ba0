"""Runs the external programs used to preview and edit notes."""

import logging
import os.path
import subprocess
from typing import List, Sequence

from noxe.conf import NoxeConf
from noxe.errors import ProgramError
from noxe.models import NoteType

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = ['vim']
DEFAULT_MARKDOWN_COMMAND = ['glow']


def preview_command(note_file: str, note_type: NoteType, conf: NoxeConf) -> List[str]:
    """Returns the configured preview program and arguments for the note type.

    When nothing is configured, typ notes use ``tinymist preview --root <folder containing note_file>``
    and md notes use ``glow``.
    """
    if note_type == NoteType.TYP:
        if conf.typst_command:
            return list(conf.typst_command)
        return ['tinymist', 'preview', '--root', os.path.dirname(os.path.abspath(note_file))]
    return list(conf.markdown_command or DEFAULT_MARKDOWN_COMMAND)


def edit_command(conf: NoxeConf) -> List[str]:
    return list(conf.editor or DEFAULT_EDITOR)


def exec_with(note_path: str, command: Sequence[str]) -> int:
    """Runs command with note_path appended as the last argument, and returns its exit status.

    Raises :exc:`noxe.errors.ProgramError` if the command is empty or cannot be started.
    """
    if not command:
        raise ProgramError('No program configured', note_path)
    args = [*command, note_path]
    logger.debug('running %s', args)
    try:
        completed = subprocess.run(args, check=False)
    except OSError as e:
        raise ProgramError(f"Failed to run '{command[0]}'", note_path, e) from e
    return completed.returncode
