# src/jira2pdf/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml
from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError
from .fields import DEFAULT_FIELDS, Field, parse_field_selection

log = logging.getLogger(__name__)

USERNAME_ENV = "J2P_USERNAME"
PASSWORD_ENV = "J2P_PASSWORD"

DEFAULT_JQL = "project = {project} ORDER BY created ASC"
WRITE_ERROR_POLICIES = ("abort", "continue")


def _quote_jql_str(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _positive_int(raw: dict, key: str, default: int) -> int:
    val = raw.get(key, default)
    if isinstance(val, bool) or not isinstance(val, int) or val <= 0:
        raise ConfigError(f"'{key}' must be a positive integer, got {val!r}")
    return val


def _optional_str(raw: dict, key: str, default: Optional[str] = None) -> Optional[str]:
    val = raw.get(key, default)
    if val is not None and not isinstance(val, str):
        raise ConfigError(f"'{key}' must be a string, got {val!r}")
    return val


def _strftime_pattern(raw: dict, key: str, default: str) -> str:
    val = _optional_str(raw, key) or default
    # a Go layout such as 2006-01-02 would be printed literally
    if "%" not in val:
        raise ConfigError(f"'{key}' must be a Python strftime pattern like {default!r}, got {val!r}")
    return val


@dataclass(frozen=True)
class Settings:
    base_url: str
    username: str
    password: str
    fields: tuple[Field, ...] = DEFAULT_FIELDS
    projects: tuple[str, ...] = ()
    jql_query: str = DEFAULT_JQL
    datetime_format: str = "%Y-%m-%d %H:%M:%S"
    api_datetime_format: str = "%Y-%m-%dT%H:%M:%S.%f%z"
    page_size: int = 4000
    issues_per_pdf: int = 2000
    max_field_length: Optional[int] = None
    output_dir: Path = field(default_factory=lambda: Path("."))
    on_write_error: str = "abort"
    insecure_skip_verify: bool = False
    ca_bundle: Optional[str] = None
    timeout_s: float = 30.0

    @classmethod
    def load(cls, path: str | Path, env_path: Optional[str | Path] = None) -> "Settings":
        """Read credentials from the environment and everything else from the YAML file."""
        dotenv_file = env_path or find_dotenv(usecwd=True)
        if dotenv_file:
            load_dotenv(dotenv_file, override=False)

        username = os.getenv(USERNAME_ENV) or ""
        password = os.getenv(PASSWORD_ENV) or ""
        if not username:
            raise ConfigError(f"environment variable {USERNAME_ENV} not set")
        if not password:
            raise ConfigError(f"environment variable {PASSWORD_ENV} not set")

        try:
            with open(path, "r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh)
        except OSError as e:
            raise ConfigError(f"cannot open config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"cannot parse config file {path}: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(f"config file {path} must contain a mapping")

        return cls.from_mapping(raw, username=username, password=password)

    @classmethod
    def from_mapping(cls, raw: dict[str, Any], *, username: str, password: str) -> "Settings":
        base_url = raw.get("jira_url")
        if not base_url or not isinstance(base_url, str):
            raise ConfigError("'jira_url' is required")

        names = raw.get("jira_issue_fields")
        if names is None:
            selection = DEFAULT_FIELDS
        elif isinstance(names, list) and all(isinstance(n, str) for n in names):
            selection = parse_field_selection(names)
        else:
            raise ConfigError("'jira_issue_fields' must be a list of field names")

        projects = raw.get("projects") or []
        if not isinstance(projects, list) or not all(isinstance(p, str) and p for p in projects):
            raise ConfigError("'projects' must be a list of project keys")

        max_len = raw.get("max_field_length")
        if max_len is not None and (isinstance(max_len, bool) or not isinstance(max_len, int) or max_len < 0):
            raise ConfigError(f"'max_field_length' must be a non-negative integer, got {max_len!r}")

        policy = raw.get("on_write_error", "abort")
        if policy not in WRITE_ERROR_POLICIES:
            raise ConfigError(f"'on_write_error' must be one of {', '.join(WRITE_ERROR_POLICIES)}, got {policy!r}")

        jql = _optional_str(raw, "jql_query", DEFAULT_JQL) or DEFAULT_JQL
        if "{project}" not in jql:
            raise ConfigError("'jql_query' must contain the {project} placeholder")

        insecure = raw.get("insecure_skip_verify", False)
        if not isinstance(insecure, bool):
            raise ConfigError(f"'insecure_skip_verify' must be true or false, got {insecure!r}")

        try:
            timeout_s = float(raw.get("timeout_s", 30.0))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'timeout_s' must be a number: {e}") from e

        return cls(
            base_url=base_url.rstrip("/"),
            username=username,
            password=password,
            fields=selection,
            # dict.fromkeys keeps the first occurrence order
            projects=tuple(dict.fromkeys(projects)),
            jql_query=jql,
            datetime_format=_strftime_pattern(raw, "datetime_format", cls.datetime_format),
            api_datetime_format=_strftime_pattern(raw, "api_datetime_format", cls.api_datetime_format),
            page_size=_positive_int(raw, "query_page_size", cls.page_size),
            issues_per_pdf=_positive_int(raw, "issues_per_pdf", cls.issues_per_pdf),
            max_field_length=max_len,
            output_dir=Path(_optional_str(raw, "output_dir", ".") or "."),
            on_write_error=policy,
            insecure_skip_verify=insecure,
            ca_bundle=_optional_str(raw, "ca_bundle"),
            timeout_s=timeout_s,
        )

    def jql_for(self, project: str) -> str:
        return self.jql_query.replace("{project}", _quote_jql_str(project))

    def build_client(self, transport: httpx.BaseTransport | None = None) -> httpx.Client:
        if self.insecure_skip_verify:
            log.warning("TLS certificate verification is disabled", extra={"base_url": self.base_url})
            verify: bool | str = False
        else:
            verify = self.ca_bundle if self.ca_bundle else True
        return httpx.Client(
            base_url=self.base_url,
            auth=httpx.BasicAuth(self.username, self.password),
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(self.timeout_s),
            verify=verify,
            transport=transport,
        )
