import os
import pytest
import noxe.walk
from noxe.errors import IoError
from noxe.models import KindReq, NoteKind
from noxe.walk import walk


def relpaths(entries):
    return {e.relpath for e in entries}


def test_walk_notes(notes):
    entries = walk(notes)
    assert relpaths(entries) == {
        'inbox.md', 'Report.md', 'work/Report.md', 'work/meeting.typ', 'work/project', 'journal',
        'archive/2023/old.md'}
    kinds = {e.relpath: e.kind for e in entries}
    assert kinds['work/project'] == NoteKind.DIR_NOTE
    assert kinds['journal'] == NoteKind.DIR_NOTE
    assert kinds['inbox.md'] == NoteKind.FILE_NOTE
    for entry in entries:
        assert entry.path == os.path.join(notes, *entry.parts)


def test_walk_kinds(notes):
    assert relpaths(walk(notes, KindReq.categories_only())) == {'work', 'archive', 'archive/2023'}
    assert relpaths(walk(notes, 'dir_notes')) == {'work/project', 'journal'}
    assert relpaths(walk(notes, 'file_notes')) == {
        'inbox.md', 'Report.md', 'work/Report.md', 'work/meeting.typ', 'archive/2023/old.md'}
    assert walk(notes, KindReq()) == []


def test_walk_never_enters_dir_notes(notes):
    for kinds in ('file_notes', 'dir_notes', 'categories', 'file_notes,dir_notes,categories'):
        for entry in walk(notes, kinds):
            assert entry.parts[:2] != ('work', 'project') or len(entry.parts) == 2
            assert entry.parts[0] != 'journal' or len(entry.parts) == 1


def test_walk_is_preorder(notes):
    order = [e.relpath for e in walk(notes, 'file_notes,dir_notes,categories')]
    assert order.index('work') < order.index('work/meeting.typ')
    assert order.index('work') < order.index('work/project')
    assert order.index('archive') < order.index('archive/2023') < order.index('archive/2023/old.md')


def test_walk_categories_are_transparent(fs):
    fs.create_file('/notes/a/b/c/deep.md')
    fs.create_file('/notes/a/b/c/dirnote/main.typ')
    assert relpaths(walk('/notes')) == {'a/b/c/deep.md', 'a/b/c/dirnote'}


def test_walk_predicate(notes):
    assert relpaths(walk(notes, predicate=lambda name: name.lower().startswith('report'))) == {
        'Report.md', 'work/Report.md'}
    assert relpaths(walk(notes, 'categories', predicate=lambda name: name == '2023')) == {'archive/2023'}


def test_walk_predicate_does_not_stop_descent(notes):
    assert relpaths(walk(notes, 'file_notes,categories', predicate=lambda name: name == 'old.md')) == {
        'archive/2023/old.md'}


def test_walk_ignore(notes):
    assert '.git/config.md' not in relpaths(walk(notes))
    assert '.git/config.md' in relpaths(walk(notes, ignore=lambda parent, name: False))
    assert relpaths(walk(notes, ignore=lambda parent, name: name == 'work')) == {
        'inbox.md', 'Report.md', 'journal', 'archive/2023/old.md', '.git/config.md'}


def test_walk_exclude_inside_dir_note(notes):
    root = '/notes/work/project'
    assert relpaths(walk(root, 'file_notes,categories')) == {'main.typ', 'images', 'chapter', 'chapter/intro.typ'}
    assert relpaths(walk(root, 'file_notes,categories', exclude={'Chapter', 'IMAGES'})) == {'main.typ'}
    assert relpaths(walk(root, 'file_notes,categories', exclude={'images'})) == {
        'main.typ', 'chapter', 'chapter/intro.typ'}


def test_walk_exclude_outside_dir_note(fs):
    fs.create_file('/notes/images/main.md')
    fs.create_file('/notes/bibliography/refs.md')
    fs.create_file('/notes/misc/chapter/loose.md')
    assert relpaths(walk('/notes', exclude={'images', 'chapter', 'bibliography'})) == {
        'images', 'bibliography/refs.md', 'misc/chapter/loose.md'}


def test_walk_skips_symlinks(fs):
    fs.create_file('/elsewhere/linked.md')
    fs.create_file('/notes/real.md')
    fs.create_symlink('/notes/link.md', '/elsewhere/linked.md')
    fs.create_symlink('/notes/linkdir', '/elsewhere')
    assert relpaths(walk('/notes')) == {'real.md'}


def test_walk_missing_root(fs):
    with pytest.raises(IoError) as excinfo:
        walk('/nowhere')
    assert excinfo.value.path == '/nowhere'


def test_walk_root_is_file(fs):
    fs.create_file('/notes.md')
    with pytest.raises(IoError):
        walk('/notes.md')


def test_walk_unreadable_directory(notes, mocker):
    real_scandir = os.scandir

    def scandir(path):
        if path == '/notes/archive':
            raise PermissionError(13, 'Permission denied', path)
        return real_scandir(path)

    mocker.patch.object(noxe.walk.os, 'scandir', side_effect=scandir)
    with pytest.raises(IoError) as excinfo:
        walk(notes)
    assert excinfo.value.path == '/notes/archive'
    assert isinstance(excinfo.value.cause, PermissionError)
