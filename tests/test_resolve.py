import io
import os
import pytest
from noxe.errors import ChoiceOutOfRangeError, NoMainFileError, NotFoundError
from noxe.models import NoteEntry, NoteKind, NoteType
from noxe.resolve import choose, find_candidates, name_matcher, prompt_choice, resolve, resolve_note_file


def never_ask(candidates):
    raise AssertionError('should not prompt')


def answer(text):
    asked = []

    def ask(candidates):
        asked.append(list(candidates))
        return text
    ask.asked = asked
    return ask


def test_name_matcher():
    matches = name_matcher('report')
    assert matches('Report.md')
    assert matches('REPORT.TYP')
    assert matches('report')
    assert not matches('report.txt')
    assert not matches('reports.md')
    assert not matches('my-report.md')
    assert name_matcher('Report.md')('report.md')


def test_resolve_single_file_note(fs):
    fs.create_file('/notes/Foo.md')
    assert resolve('/notes', 'Foo.md', ask=never_ask) == '/notes/Foo.md'
    assert resolve('/notes', 'Foo', ask=never_ask) == '/notes/Foo.md'
    assert resolve('/notes', 'foo.md', ask=never_ask) == '/notes/Foo.md'


def test_resolve_not_found(notes):
    with pytest.raises(NotFoundError, match='Nope'):
        resolve(notes, 'Nope', ask=never_ask)
    with pytest.raises(NotFoundError):
        resolve(notes, 'Repo', ask=never_ask)
    # categories are not notes
    with pytest.raises(NotFoundError):
        resolve(notes, 'archive', ask=never_ask)
    # files inside directory notes are not notes on their own
    with pytest.raises(NotFoundError):
        resolve(notes, 'intro', ask=never_ask)


def test_resolve_dir_note(notes):
    assert resolve(notes, 'project', ask=never_ask) == '/notes/work/project'
    assert resolve(notes, 'PROJECT', ask=never_ask) == '/notes/work/project'
    assert resolve_note_file(notes, 'project', ask=never_ask) == '/notes/work/project/main.typ'
    assert resolve_note_file(notes, 'journal', ask=never_ask) == '/notes/journal/main.md'
    assert resolve_note_file(notes, 'inbox', ask=never_ask) == '/notes/inbox.md'


def test_resolve_prefers_configured_main_file(fs):
    fs.create_file('/notes/both/main.md')
    fs.create_file('/notes/both/main.typ')
    assert resolve_note_file('/notes', 'both', ask=never_ask) == '/notes/both/main.typ'
    assert resolve_note_file('/notes', 'both', ask=never_ask, prefer=NoteType.MD) == '/notes/both/main.md'


def test_find_candidates_ambiguous(notes):
    candidates = find_candidates(notes, 'Report')
    assert sorted(c.relpath for c in candidates) == ['Report.md', 'work/Report.md']


def test_resolve_ambiguous(notes):
    candidates = find_candidates(notes, 'Report')

    ask = answer('2\n')
    assert resolve(notes, 'Report', ask=ask) == candidates[1].path
    assert ask.asked == [candidates]

    assert resolve(notes, 'Report', ask=answer('')) == candidates[0].path
    assert resolve(notes, 'report.md', ask=answer('\n')) == candidates[0].path
    assert resolve(notes, 'Report', ask=answer('first please')) == candidates[0].path
    with pytest.raises(ChoiceOutOfRangeError):
        resolve(notes, 'Report', ask=answer('0'))
    with pytest.raises(ChoiceOutOfRangeError):
        resolve(notes, 'Report', ask=answer('3'))


def test_choose():
    candidates = [NoteEntry(f'/notes/{i}.md', (f'{i}.md',), NoteKind.FILE_NOTE) for i in range(3)]
    assert choose(candidates, '1') is candidates[0]
    assert choose(candidates, ' 3 \n') is candidates[2]
    assert choose(candidates, '') is candidates[0]
    assert choose(candidates, None) is candidates[0]
    with pytest.raises(ChoiceOutOfRangeError, match='4'):
        choose(candidates, '4')
    with pytest.raises(ChoiceOutOfRangeError):
        choose(candidates, '-1')


def test_resolve_exclude(fs):
    fs.create_file('/paper/main.typ')
    fs.create_file('/paper/images/pic.md')
    fs.create_file('/paper/pic.md')
    assert resolve('/paper', 'pic', ask=never_ask, exclude={'images'}) == '/paper/pic.md'
    assert len(find_candidates('/paper', 'pic')) == 2


def test_resolve_exclude_keeps_real_notes(fs):
    fs.create_file('/notes/images/main.md')
    fs.create_file('/notes/bibliography/refs.md')
    exclude = {'images', 'chapter', 'bibliography'}
    assert resolve('/notes', 'images', ask=never_ask, exclude=exclude) == '/notes/images'
    assert resolve('/notes', 'refs', ask=never_ask, exclude=exclude) == '/notes/bibliography/refs.md'


def test_resolve_path(notes):
    os.chdir('/notes/work/project')
    assert resolve(notes, '/notes/work/project', ask=never_ask) == '/notes/work/project'
    assert resolve(notes, '../meeting.typ', ask=never_ask) == '../meeting.typ'
    assert resolve(notes, './chapter/intro.typ', ask=never_ask) == './chapter/intro.typ'
    assert resolve_note_file(notes, '/notes/work/project', ask=never_ask) == '/notes/work/project/main.typ'
    assert resolve_note_file(notes, '.', ask=never_ask) == './main.typ'
    with pytest.raises(NotFoundError):
        resolve(notes, 'nothing/here.md', ask=never_ask)
    with pytest.raises(NoMainFileError):
        resolve_note_file(notes, '/notes/archive', ask=never_ask)


def test_prompt_choice(notes, monkeypatch, capsys):
    candidates = find_candidates(notes, 'Report')
    monkeypatch.setattr('sys.stdin', io.StringIO('2\n'))
    assert prompt_choice(candidates) == '2\n'
    out, err = capsys.readouterr()
    assert out == ''
    assert err.startswith('Multiple matches found:\n')
    assert f'1. {candidates[0].path}\n' in err
    assert f'2. {candidates[1].path}\n' in err


def test_prompt_choice_eof(notes, monkeypatch, capsys):
    candidates = find_candidates(notes, 'Report')
    monkeypatch.setattr('sys.stdin', io.StringIO(''))
    assert resolve(notes, 'Report') == candidates[0].path
