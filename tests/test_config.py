# tests/test_config.py
from __future__ import annotations

from pathlib import Path

import pytest

from jira2pdf.config import Settings
from jira2pdf.errors import ConfigError
from jira2pdf.fields import DEFAULT_FIELDS, Field


def write_config(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "config.yaml"
    p.write_text(text, encoding="utf-8")
    return p


@pytest.fixture
def creds(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("J2P_USERNAME", "tester")
    monkeypatch.setenv("J2P_PASSWORD", "secret")


def test_load_applies_defaults(creds, tmp_path):
    cfg = write_config(tmp_path, "jira_url: https://jira.example.com/\n")
    s = Settings.load(cfg)
    assert s.base_url == "https://jira.example.com"
    assert s.username == "tester"
    assert s.password == "secret"
    assert s.page_size == 4000
    assert s.issues_per_pdf == 2000
    assert s.datetime_format == "%Y-%m-%d %H:%M:%S"
    assert s.api_datetime_format == "%Y-%m-%dT%H:%M:%S.%f%z"
    assert s.fields == DEFAULT_FIELDS
    assert s.max_field_length is None
    assert s.on_write_error == "abort"
    assert s.insecure_skip_verify is False


def test_load_file_overrides_defaults(creds, tmp_path):
    cfg = write_config(tmp_path, """
jira_url: https://jira.example.com
projects: [ABC, XYZ, ABC]
jira_issue_fields: [Summary, Key, Comment]
query_page_size: 100
issues_per_pdf: 50
max_field_length: 20
on_write_error: continue
""")
    s = Settings.load(cfg)
    assert s.projects == ("ABC", "XYZ")
    assert s.fields == (Field.SUMMARY, Field.KEY, Field.COMMENT)
    assert s.page_size == 100
    assert s.issues_per_pdf == 50
    assert s.max_field_length == 20
    assert s.on_write_error == "continue"


@pytest.mark.parametrize("missing", ["J2P_USERNAME", "J2P_PASSWORD"])
def test_missing_credentials(creds, monkeypatch, tmp_path, missing):
    cfg = write_config(tmp_path, "jira_url: https://jira.example.com\n")
    monkeypatch.setenv(missing, "")
    with pytest.raises(ConfigError, match=missing):
        Settings.load(cfg)


def test_credentials_checked_before_file(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigError, match="J2P_USERNAME"):
        Settings.load(tmp_path / "does-not-exist.yaml")


def test_credentials_from_dotenv(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    # registered with monkeypatch so the values load_dotenv sets are undone
    for name in ("J2P_USERNAME", "J2P_PASSWORD"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    env = tmp_path / ".env"
    env.write_text("J2P_USERNAME=from-file\nJ2P_PASSWORD=pw\n", encoding="utf-8")
    cfg = write_config(tmp_path, "jira_url: https://jira.example.com\n")
    s = Settings.load(cfg, env_path=env)
    assert s.username == "from-file"


def test_missing_file(creds, tmp_path):
    with pytest.raises(ConfigError, match="cannot open"):
        Settings.load(tmp_path / "nope.yaml")


def test_invalid_yaml(creds, tmp_path):
    cfg = write_config(tmp_path, "jira_url: [unclosed\n")
    with pytest.raises(ConfigError, match="cannot parse"):
        Settings.load(cfg)


@pytest.mark.parametrize("text, match", [
    ("- just\n- a list\n", "mapping"),
    ("projects: [ABC]\n", "jira_url"),
    ("jira_url: x\nquery_page_size: 0\n", "query_page_size"),
    ("jira_url: x\nissues_per_pdf: -1\n", "issues_per_pdf"),
    ("jira_url: x\nmax_field_length: -3\n", "max_field_length"),
    ("jira_url: x\non_write_error: ignore\n", "on_write_error"),
    ("jira_url: x\njql_query: 'project = ABC'\n", "placeholder"),
])
def test_schema_errors(creds, tmp_path, text, match):
    cfg = write_config(tmp_path, text)
    with pytest.raises(ConfigError, match=match):
        Settings.load(cfg)


def test_unknown_field_name_is_rejected(creds, tmp_path):
    cfg = write_config(tmp_path, "jira_url: x\njira_issue_fields: [Key, assignee, Bogus]\n")
    with pytest.raises(ConfigError) as ei:
        Settings.load(cfg)
    assert "assignee" in str(ei.value)
    assert "Bogus" in str(ei.value)


def test_jql_for_quotes_project(settings):
    assert settings.jql_for("ABC") == 'project = "ABC" ORDER BY created ASC'


def test_build_client_uses_basic_auth(settings):
    client = settings.build_client()
    try:
        assert str(client.base_url).rstrip("/") == "https://jira.example.com"
        assert client.auth is not None
    finally:
        client.close()


@pytest.mark.parametrize("key", ["datetime_format", "api_datetime_format"])
def test_go_layout_is_rejected(creds, tmp_path, key):
    cfg = write_config(tmp_path, f"jira_url: x\n{key}: '2006-01-02 15:04:05'\n")
    with pytest.raises(ConfigError, match="strftime"):
        Settings.load(cfg)
