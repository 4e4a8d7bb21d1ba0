"""Defines the exceptions noxe raises for problems the user needs to know about.

Every exception carries the path or note reference it concerns. The command-line interface prints
any :class:`Error` with an ``Error:`` prefix and exits with a nonzero status.
"""


class Error(Exception):
    """Base class for all errors raised by noxe."""
    def __init__(self, message: str, path: str, cause: BaseException = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self):
        if self.cause is not None:
            return f'{self.message}: {self.cause}'
        return self.message


class NotFoundError(Error):
    """Raised when no note matches a name, path, or search query."""


class NoMainFileError(Error):
    """Raised when a directory was expected to be a note but contains neither ``main.md`` nor ``main.typ``."""


class InvalidNoteTypeError(Error):
    """Raised when a file extension does not correspond to a note type."""


class AlreadyExistsError(Error):
    """Raised when creating a note at a path that already exists."""


class InvalidChoiceError(Error):
    """Raised when the answer to a disambiguation prompt cannot be obtained or honored."""


class ChoiceOutOfRangeError(InvalidChoiceError):
    """Raised when the chosen number does not correspond to one of the listed candidates."""


class IoError(Error):
    """Raised when reading or writing the filesystem fails."""


class TemplateParseError(Error):
    """Raised when a note template file is malformed."""


class ProgramError(Error):
    """Raised when an external preview or edit program cannot be launched."""


class SearchQueryError(Error):
    """Raised when a search query is not a valid regular expression."""
