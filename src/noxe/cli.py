"""Command-line interface for noxe."""


import argparse
from dataclasses import replace
import json
import logging
import shlex
import sys
from noxe.api import Noxe
from noxe.conf import NoxeConf
from noxe.errors import Error
from noxe.models import ListSort, NoteType
from noxe.render import category_of, display_parts, group_by_category, render_list, render_table, render_tree, \
    sort_entries


def _count(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f'must not be negative: {value}')
    return number


def _keywords(args) -> list:
    return [k.strip() for value in (args.keywords or []) for k in value.split(',') if k.strip()]


def _new(args, nd: Noxe) -> int:
    nd.new(args.note_path[0],
           note_type=NoteType(args.type[0]) if args.type else None,
           single_file=args.single_file,
           author=args.author[0] if args.author else None,
           keywords=_keywords(args),
           template=args.template[0] if args.template else None,
           with_metadata=False if args.no_metadata else None)
    print(f"Note '{args.note_path[0]}' created successfully!")
    return 0


def _preview(args, nd: Noxe) -> int:
    path, status = nd.preview(args.note)
    print(f"Previewing note '{path}'")
    return status


def _edit(args, nd: Noxe) -> int:
    _, status = nd.edit(args.note)
    return status


def _search(args, nd: Noxe) -> int:
    entries = nd.search(args.query[0])
    if args.json:
        print(json.dumps([e.as_json() for e in entries]))
    else:
        print('Found notes:')
        for entry in entries:
            print(entry.path)
    return 0


def _list(args, nd: Noxe) -> int:
    entries = nd.list(categories=args.category)
    if args.by_category:
        if args.json:
            groups = {}
            for entry in entries:
                groups.setdefault(category_of(entry), []).append(entry.as_json())
            print(json.dumps(groups, sort_keys=True))
            return 0
        for _, paths in group_by_category(entries):
            print(render_tree(paths))
        return 0

    sort = None
    if args.name:
        sort = ListSort.NAME
    elif args.created:
        sort = ListSort.CREATED
    elif args.updated:
        sort = ListSort.UPDATED
    if sort:
        entries = sort_entries(entries, sort, args.number[0] if args.number else None)

    if args.json:
        print(json.dumps([e.as_json() for e in entries]))
    elif args.table:
        print(render_table(entries, terse=args.terse))
    elif sort:
        if entries:
            print(render_list(display_parts(e, args.terse) for e in entries))
    elif entries:
        print(render_tree(display_parts(e, args.terse) for e in entries))
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='noxe', description='Create, preview, search and list notes.')
    parser.set_defaults(func=None, note_dir=None)
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debugging information to stderr.')

    subs = parser.add_subparsers(title='Commands')

    note_dir_help = ('The directory where the notes are stored. Defaults to the NOXE_DIR environment variable, '
                     'then `note_dir` in ~/.noxe.conf.py, then the current directory.')

    p_new = subs.add_parser('new', help='Create a new note.')
    p_new.add_argument('note_path', nargs=1,
                       help='The path of the note. If it ends with a note extension (.md or .typ), the note type '
                            'is inferred from it and the note is created as a single file. Otherwise, a folder '
                            'is created with a main file and the folders and files of the template.')
    p_new.add_argument('-a', '--author', nargs=1, help='The author of the note. Defaults to NOXE_AUTHOR.')
    p_new.add_argument('-k', '--keywords', action='append',
                       help='Comma-separated keywords for the note. May be given more than once.')
    p_new.add_argument('-t', '--type', nargs=1, choices=[t.value for t in NoteType],
                       help='The note type. Defaults to NOXE_TYPE, or typ.')
    p_new.add_argument('-s', '--single-file', action='store_true',
                       help='Create the note as a single file instead of a folder.')
    p_new.add_argument('-S', '--template', nargs=1,
                       help='Path or name of a YAML template for the note folder. Defaults to NOXE_TEMPLATE.')
    p_new.add_argument('--no-metadata', action='store_true',
                       help='Do not start the note with a title/author/keywords/date header.')
    p_new.set_defaults(func=_new)

    p_preview = subs.add_parser('preview', help='Preview a note.')
    p_preview.add_argument('note', nargs='?',
                           help='The path or name of the note. A name is searched for in the note directory; '
                                'if several notes match, you will be asked to choose. Defaults to the current '
                                'directory.')
    p_preview.add_argument('-d', '--note-dir', help=note_dir_help)
    p_preview.add_argument('--typst-command',
                           help='Program and arguments for previewing typ notes. The note path is appended.')
    p_preview.add_argument('--markdown-command',
                           help='Program and arguments for previewing md notes. The note path is appended.')
    p_preview.set_defaults(func=_preview)

    p_edit = subs.add_parser('edit', help='Edit a note.')
    p_edit.add_argument('note', nargs='?', help='The path or name of the note, as for the preview command.')
    p_edit.add_argument('-d', '--note-dir', help=note_dir_help)
    p_edit.add_argument('-e', '--editor',
                        help='Program and arguments for editing. The note path is appended. Defaults to '
                             'NOXE_EDITOR, then EDITOR, then vim.')
    p_edit.set_defaults(func=_edit)

    p_search = subs.add_parser('search', help='Search notes by name.')
    p_search.add_argument('query', nargs=1, help='Regular expression matched against note names, ignoring case.')
    p_search.add_argument('-d', '--note-dir', help=note_dir_help)
    p_search.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_search.set_defaults(func=_search)

    p_list = subs.add_parser('list', help='List notes as a tree, or sorted.')
    p_list.add_argument('-d', '--note-dir', help=note_dir_help)
    p_list.add_argument('-c', '--category', action='store_true', help='List categories instead of notes.')
    p_list_sorts = p_list.add_mutually_exclusive_group()
    p_list_sorts.add_argument('--by-category', action='store_true',
                              help='Show one tree per category, containing the notes directly inside it.')
    p_list_sorts.add_argument('--name', action='store_true', help='Show a flat list sorted by name.')
    p_list_sorts.add_argument('--created', action='store_true',
                              help='Show a flat list of the most recently created notes.')
    p_list_sorts.add_argument('--updated', action='store_true',
                              help='Show a flat list of the most recently modified notes.')
    p_list.add_argument('-n', '--number', nargs=1, type=_count,
                        help='How many notes to show when sorting. Defaults to 10 for --created and --updated.')
    p_list.add_argument('--terse', action='store_true', help='Show only names instead of relative paths.')
    p_list_formats = p_list.add_mutually_exclusive_group()
    p_list_formats.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_list_formats.add_argument('-t', '--table', action='store_true', help='Format output as a table.')
    p_list.set_defaults(func=_list)

    return parser


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr,
    )


def _conf_for(args) -> NoxeConf:
    conf = NoxeConf.for_user()
    changes = {}
    if args.note_dir:
        changes['note_dir'] = args.note_dir
    if getattr(args, 'typst_command', None):
        changes['typst_command'] = shlex.split(args.typst_command)
    if getattr(args, 'markdown_command', None):
        changes['markdown_command'] = shlex.split(args.markdown_command)
    if getattr(args, 'editor', None):
        changes['editor'] = shlex.split(args.editor)
    return replace(conf, **changes)


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    if not args.func:
        parser.print_help()
        return 1
    _setup_logging(args.verbose)
    try:
        nd = _conf_for(args).instantiate()
        return args.func(args, nd)
    except Error as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
