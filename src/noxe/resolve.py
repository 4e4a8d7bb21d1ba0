"""Turns a note reference typed by the user into a concrete note.

A reference is either a path, which is used as-is, or a bare name, which is looked up anywhere in the note
directory. When a name matches more than one note, the user is asked to pick one; callers that cannot
prompt can pass their own ``ask`` function to :func:`resolve`.
"""

import logging
import os.path
import sys
from typing import Callable, Collection, List

from noxe.classify import is_note_extension, is_note_name, main_file
from noxe.conf import default_ignore
from noxe.errors import ChoiceOutOfRangeError, InvalidChoiceError, NotFoundError
from noxe.models import KindReq, NoteEntry, NoteType
from noxe.walk import walk

logger = logging.getLogger(__name__)

AskFn = Callable[[List[NoteEntry]], str]


def name_matcher(name: str) -> Callable[[str], bool]:
    """Returns a predicate matching entry names equal to name, ignoring case.

    For files with a note extension the name without its extension also counts, so ``report`` matches
    ``Report.md``. This is an exact match, never a substring match.
    """
    wanted = name.lower()

    def matches(entry_name: str) -> bool:
        if entry_name.lower() == wanted:
            return True
        return is_note_extension(entry_name) and os.path.splitext(entry_name)[0].lower() == wanted

    return matches


def find_candidates(root: str, name: str, exclude: Collection[str] = frozenset(),
                    ignore: Callable[[str, str], bool] = default_ignore) -> List[NoteEntry]:
    """Returns all file notes and directory notes under root matching name, in the order they were found."""
    return walk(root, KindReq.notes(), name_matcher(name), ignore=ignore, exclude=exclude)


def prompt_choice(candidates: List[NoteEntry]) -> str:
    """Lists the candidates on stderr and returns the line the user types on stdin."""
    print('Multiple matches found:', file=sys.stderr)
    for i, candidate in enumerate(candidates, start=1):
        print(f'{i}. {candidate.path}', file=sys.stderr)
    print('Enter the number of the note (default is 1): ', end='', file=sys.stderr, flush=True)
    try:
        return sys.stdin.readline()
    except (OSError, ValueError) as e:
        raise InvalidChoiceError('Failed to read user input', '<stdin>', e) from e


def choose(candidates: List[NoteEntry], answer: str) -> NoteEntry:
    """Picks one of the candidates based on the user's answer to :func:`prompt_choice`.

    Candidates are numbered from 1. An empty or non-numeric answer picks the first.

    Raises :exc:`noxe.errors.ChoiceOutOfRangeError` if the number does not match a candidate.
    """
    try:
        choice = int((answer or '').strip())
    except ValueError:
        choice = 1
    if choice < 1 or choice > len(candidates):
        raise ChoiceOutOfRangeError(f'Choice out of range: {choice} (expected 1 to {len(candidates)})',
                                    str(choice))
    return candidates[choice - 1]


def resolve(root: str, reference: str, ask: AskFn = prompt_choice, exclude: Collection[str] = frozenset(),
            ignore: Callable[[str, str], bool] = default_ignore) -> str:
    """Returns the path of the note the reference refers to.

    If the reference is a path (see :func:`noxe.classify.is_note_name`) it is returned unchanged, after
    checking that it exists. Otherwise, notes named like the reference are looked up under root
    using :func:`find_candidates`. If several are found, ``ask`` is called with them and its answer is
    interpreted by :func:`choose`.

    Raises :exc:`noxe.errors.NotFoundError` if nothing matches.
    """
    if not is_note_name(reference):
        if not os.path.exists(reference):
            raise NotFoundError(f"No note found at '{reference}'", reference)
        return reference

    candidates = find_candidates(root, reference, exclude=exclude, ignore=ignore)
    logger.debug('%d candidates for %r under %s', len(candidates), reference, root)
    if not candidates:
        raise NotFoundError(f"No note named '{reference}' found in '{root}'", reference)
    if len(candidates) == 1:
        return candidates[0].path
    return choose(candidates, ask(candidates)).path


def resolve_note_file(root: str, reference: str, ask: AskFn = prompt_choice, exclude: Collection[str] = frozenset(),
                      ignore: Callable[[str, str], bool] = default_ignore, prefer: NoteType = NoteType.TYP) -> str:
    """Like :func:`resolve`, but returns the note's main file when the note is a directory.

    Raises :exc:`noxe.errors.NoMainFileError` if the reference leads to a directory without a main file.
    """
    return main_file(resolve(root, reference, ask=ask, exclude=exclude, ignore=ignore), prefer=prefer)
