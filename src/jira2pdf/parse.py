# src/jira2pdf/parse.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Comment:
    author: str
    body: str


@dataclass(frozen=True)
class Progress:
    progress: int
    total: int


@dataclass(frozen=True)
class Issue:
    id: str
    key: str
    summary: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    assignee: Optional[str] = None
    reporter: Optional[str] = None
    creator: Optional[str] = None
    priority: Optional[str] = None
    issue_type: Optional[str] = None
    project: Optional[str] = None
    created: Optional[str] = None   # raw API string, parsed at render time
    due_date: Optional[str] = None
    resolution_date: Optional[str] = None
    progress: Optional[Progress] = None
    aggregate_progress: Optional[Progress] = None
    comments: List[Comment] = field(default_factory=list)


def _get(d: Dict[str, Any], path: str, default=None):
    """Small helper for nested dicts addressed with 'a.b.c' paths."""
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _user_name(f: Dict[str, Any], key: str) -> Optional[str]:
    return _get(f, f"{key}.displayName") or _get(f, f"{key}.name")


def _progress(f: Dict[str, Any], key: str) -> Optional[Progress]:
    p = f.get(key)
    if not isinstance(p, dict):
        return None
    return Progress(progress=int(p.get("progress") or 0), total=int(p.get("total") or 0))


def _comments(f: Dict[str, Any]) -> List[Comment]:
    # search returns {"comment": {"comments": [...]}}; tolerate a bare list too
    raw = f.get("comment")
    if isinstance(raw, dict):
        raw = raw.get("comments")
    out = []
    for c in raw or []:
        if not isinstance(c, dict):
            continue
        author = _get(c, "author.displayName") or _get(c, "author.name") or ""
        out.append(Comment(author=author, body=c.get("body") or ""))
    return out


def parse_issue(raw: Dict[str, Any]) -> Issue:
    f = raw.get("fields", {}) or {}

    return Issue(
        id=str(raw.get("id") or ""),
        key=str(raw.get("key") or ""),
        summary=f.get("summary"),
        description=f.get("description"),
        status=_get(f, "status.name"),
        assignee=_user_name(f, "assignee"),
        reporter=_user_name(f, "reporter"),
        creator=_user_name(f, "creator"),
        priority=_get(f, "priority.name"),
        issue_type=_get(f, "issuetype.name"),
        project=_get(f, "project.name") or _get(f, "project.key"),
        created=f.get("created"),
        due_date=f.get("duedate"),
        resolution_date=f.get("resolutiondate"),
        progress=_progress(f, "progress"),
        aggregate_progress=_progress(f, "aggregateprogress"),
        comments=_comments(f),
    )
