"""Loads note templates from YAML files and creates their folders and files inside new notes."""

import logging
import os
import os.path
from typing import Any, Dict

import yaml

from noxe.errors import IoError, TemplateParseError
from noxe.models import NoteTemplate, PathContent

logger = logging.getLogger(__name__)


def _check_name(name: Any, path: str) -> str:
    if not isinstance(name, str) or not name:
        raise TemplateParseError(f"Invalid name {name!r} in template file '{path}'", path)
    if os.path.isabs(name) or '..' in name.replace('\\', '/').split('/'):
        raise TemplateParseError(f"Name '{name}' in template file '{path}' must stay inside the note folder", path)
    return name


def _parse_paths(value: Any, path: str) -> Dict[str, PathContent]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TemplateParseError(f"Expected a mapping of names in template file '{path}'", path)
    result = {}
    for name, content in value.items():
        name = _check_name(name, path)
        if content is None or isinstance(content, dict):
            result[name] = _parse_paths(content, path)
        elif isinstance(content, str):
            result[name] = content
        else:
            raise TemplateParseError(f"Expected a mapping or text for '{name}' in template file '{path}'", path)
    return result


def _optional_text(doc: dict, key: str, path: str):
    value = doc.get(key)
    if value is not None and not isinstance(value, str):
        raise TemplateParseError(f"Expected text for '{key}' in template file '{path}'", path)
    return value


def load_template(path: str) -> NoteTemplate:
    """Reads a template from a YAML file.

    The file may have these top-level keys, all optional:

    * ``paths``: names of folders (nested mappings, or empty) and files (text contents) to create
    * ``main.typ``: text to put after the metadata in ``main.typ``
    * ``main.md``: text to put after the metadata in ``main.md``

    Raises :exc:`noxe.errors.IoError` if the file can't be read, or :exc:`noxe.errors.TemplateParseError`
    if it is not a valid template.
    """
    try:
        with open(path, 'r') as file:
            text = file.read()
    except OSError as e:
        raise IoError(f"Failed to read template file '{path}'", path, e) from e
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateParseError(f"Failed to parse template file '{path}'", path, e) from e
    if doc is None:
        doc = {}
    if not isinstance(doc, dict):
        raise TemplateParseError(f"Failed to parse template file '{path}': expected a mapping", path)
    return NoteTemplate(paths=_parse_paths(doc.get('paths'), path),
                        main_typ=_optional_text(doc, 'main.typ', path),
                        main_md=_optional_text(doc, 'main.md', path))


def create_template_paths(note_path: str, paths: Dict[str, PathContent]) -> None:
    """Creates the folders and files described by paths inside note_path.

    File contents are appended if the file already exists. This is not atomic: if something fails, whatever
    was created before the failure is left in place.

    Raises :exc:`noxe.errors.IoError`.
    """
    for name, content in paths.items():
        current = os.path.join(note_path, name)
        try:
            if isinstance(content, dict):
                os.makedirs(current, exist_ok=True)
            else:
                os.makedirs(os.path.dirname(current), exist_ok=True)
                with open(current, 'a') as file:
                    file.write(content)
        except OSError as e:
            raise IoError(f"Failed to create '{current}'", current, e) from e
        logger.debug('created %s', current)
        if isinstance(content, dict):
            create_template_paths(current, content)
