"""Formats the header placed at the top of new notes."""

from datetime import datetime
from typing import Iterable, Optional

from mako.template import Template

from noxe.models import NoteType

MD_TEMPLATE = Template(r"""---
title: "${title}"
% if author:
author: "${author}"
% endif
% if keywords:
keywords: [${', '.join(keywords)}]
% endif
date: "${date.strftime('%Y-%m-%d %H:%M:%S')}"
---

""")

TYP_TEMPLATE = Template(r"""#set document(title: "${title}"\
% if author:
, author: "${author}"\
% endif
% if keywords:
, keywords: (${' '.join('"%s",' % k for k in keywords)})\
% endif
, date: datetime(year: ${date.year}, month: ${date.month}, day: ${date.day}, \
hour: ${date.hour}, minute: ${date.minute}, second: ${date.second}))

""")


def metadata(title: str, author: Optional[str], note_type: NoteType, keywords: Iterable[str] = (),
             now: datetime = None) -> str:
    """Returns the metadata header for a new note.

    For md notes this is a YAML front matter block; for typ notes it is a ``#set document(...)`` rule.
    The date is the current local time unless now is given.
    """
    template = TYP_TEMPLATE if note_type == NoteType.TYP else MD_TEMPLATE
    return template.render(title=title, author=author, keywords=list(keywords),
                           date=now if now is not None else datetime.now())
