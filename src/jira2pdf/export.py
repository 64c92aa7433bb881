# src/jira2pdf/export.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from .config import Settings
from .fields import api_fields_for
from .jira_api import JiraClient
from .pdf import build_partitioned_documents

log = logging.getLogger(__name__)


def resolve_projects(settings: Settings, client: JiraClient) -> List[str]:
    if settings.projects:
        return list(settings.projects)
    return client.list_project_keys()


def export_projects(settings: Settings, client: JiraClient) -> Dict[str, List[Path]]:
    """
    Runs /myself first (auth sanity check), then fetches and prints every
    project one after the other. The first fatal error ends the run.
    """
    me = client.get_myself()
    log.info("Auth ok", extra={"account": me.get("name") or me.get("displayName")})

    fields = api_fields_for(settings.fields)
    written: Dict[str, List[Path]] = {}
    for project in resolve_projects(settings, client):
        issues = client.fetch_issues(settings.jql_for(project), fields=fields)
        if not issues:
            log.info("No issues, skipping project", extra={"project": project})
            written[project] = []
            continue
        written[project] = build_partitioned_documents(project, issues, settings)
        log.info("Project done", extra={"project": project, "issues": len(issues), "files": len(written[project])})
    return written
