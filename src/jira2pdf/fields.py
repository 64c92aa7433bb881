# src/jira2pdf/fields.py
"""Registry of the issue fields that can be printed and how each one is rendered.

The order of ``jira_issue_fields`` in the config file is the order of the lines
in every issue block. Each line is basic HTML understood by fpdf2's
``write_html``::

    <b>Assignee:</b> Jane Doe<br />
"""
from __future__ import annotations

import html
import logging
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional

from .errors import ConfigError
from .parse import Issue, Progress

if TYPE_CHECKING:
    from .config import Settings

log = logging.getLogger(__name__)


class Field(Enum):
    KEY = ("Key", ())
    ID = ("Id", ())
    SUMMARY = ("Summary", ("summary",))
    DESCRIPTION = ("Description", ("description",))
    STATUS = ("Status", ("status",))
    ASSIGNEE = ("Assignee", ("assignee",))
    REPORTER = ("Reporter", ("reporter",))
    CREATOR = ("Creator", ("creator",))
    PRIORITY = ("Priority", ("priority",))
    TYPE = ("Type", ("issuetype",))
    PROJECT = ("Project", ("project",))
    PROGRESS = ("Progress", ("progress",))
    CREATED = ("Created", ("created",))
    DUE_DATE = ("Due date", ("duedate",))
    RESOLUTION_DATE = ("Resolution date", ("resolutiondate",))
    COMMENT = ("Comment", ("comment",))

    def __init__(self, label: str, api_fields: tuple[str, ...]) -> None:
        self.label = label
        self.api_fields = api_fields

    def render(self, issue: Issue, settings: "Settings") -> str:
        return _RULES[self](issue, settings)


DEFAULT_FIELDS: tuple[Field, ...] = (
    Field.KEY,
    Field.SUMMARY,
    Field.STATUS,
    Field.ASSIGNEE,
    Field.CREATED,
    Field.DESCRIPTION,
)

_BY_LABEL: Dict[str, Field] = {f.label: f for f in Field}


def parse_field_selection(names: Iterable[str]) -> tuple[Field, ...]:
    """Map configured names to fields. Lookup is case-sensitive."""
    names = list(names)
    unknown = [n for n in names if n not in _BY_LABEL]
    if unknown:
        known = ", ".join(_BY_LABEL)
        raise ConfigError(f"unknown issue field(s): {', '.join(unknown)} (known: {known})")
    return tuple(_BY_LABEL[n] for n in names)


def api_fields_for(selection: Iterable[Field]) -> List[str]:
    out: List[str] = []
    for f in selection:
        for name in f.api_fields:
            if name not in out:
                out.append(name)
    return out


def _text(value: Optional[str], limit: Optional[int] = None) -> str:
    if not value:
        return ""
    if limit is not None:
        value = value[:limit]
    value = html.escape(value, quote=False)
    return value.replace("\r\n", "\n").replace("\n", "<br />")


def _timestamp(issue: Issue, field_name: str, value: Optional[str], settings: "Settings") -> str:
    if not value:
        return ""
    try:
        parsed = datetime.strptime(value, settings.api_datetime_format)
    except ValueError as e:
        log.warning(
            "Error on parse field %r",
            field_name,
            extra={"issue": issue.key, "field": field_name, "value": value, "error": str(e)},
        )
        return ""
    return _text(parsed.strftime(settings.datetime_format))


def _progress(p: Optional[Progress]) -> str:
    if p is None:
        return ""
    return f"{p.progress}/{p.total}"


def _comments(issue: Issue, settings: "Settings") -> str:
    if not issue.comments:
        return ""
    lines = ["<br />"]
    for c in issue.comments:
        lines.append(f"<u>{_text(c.author)}</u> - {_text(c.body, settings.max_field_length)}<br />")
    return "".join(lines)


_RULES: Dict[Field, Callable[[Issue, "Settings"], str]] = {
    Field.KEY: lambda i, s: _text(i.key),
    Field.ID: lambda i, s: _text(i.id),
    Field.SUMMARY: lambda i, s: _text(i.summary),
    Field.DESCRIPTION: lambda i, s: _text(i.description, s.max_field_length),
    Field.STATUS: lambda i, s: _text(i.status),
    Field.ASSIGNEE: lambda i, s: _text(i.assignee),
    Field.REPORTER: lambda i, s: _text(i.reporter),
    Field.CREATOR: lambda i, s: _text(i.creator),
    Field.PRIORITY: lambda i, s: _text(i.priority),
    Field.TYPE: lambda i, s: _text(i.issue_type),
    Field.PROJECT: lambda i, s: _text(i.project),
    Field.PROGRESS: lambda i, s: _progress(i.progress),
    Field.CREATED: lambda i, s: _timestamp(i, "created", i.created, s),
    Field.DUE_DATE: lambda i, s: _text(i.due_date),
    Field.RESOLUTION_DATE: lambda i, s: _timestamp(i, "resolutiondate", i.resolution_date, s),
    Field.COMMENT: _comments,
}


def render_fields(issue: Issue, selection: Iterable[Field], settings: "Settings") -> str:
    """Render one issue block; the label is kept even when the value is empty."""
    return "".join(f"<b>{f.label}:</b> {f.render(issue, settings)}<br />" for f in selection)
