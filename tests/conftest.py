import pytest


NOTE_FILES = {
    '/notes/inbox.md': '# Inbox',
    '/notes/Report.md': 'top-level report',
    '/notes/todo.txt': 'not a note',
    '/notes/work/Report.md': 'work report',
    '/notes/work/meeting.typ': '= Meeting',
    '/notes/work/project/main.typ': '= Project',
    '/notes/work/project/images/diagram.png': '',
    '/notes/work/project/chapter/intro.typ': '= Intro',
    '/notes/journal/main.md': '# Journal',
    '/notes/archive/2023/old.md': 'old',
    '/notes/.git/config.md': 'hidden',
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('NOXE_DIR', 'NOXE_AUTHOR', 'NOXE_TYPE', 'NOXE_TEMPLATE', 'NOXE_TYPST_COMMAND',
                 'NOXE_MARKDOWN_COMMAND', 'NOXE_EDITOR', 'EDITOR'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def notes(fs):
    """Creates a sample note directory at /notes in the fake filesystem."""
    for path, contents in NOTE_FILES.items():
        fs.create_file(path, contents=contents)
    return '/notes'
