# src/jira2pdf/main.py
from __future__ import annotations

import argparse
import logging

from . import __version__
from .config import Settings
from .errors import Jira2PdfError
from .export import export_projects
from .jira_api import JiraClient
from .logging_setup import setup_logging_from_env

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jira2pdf", description="Export Jira issues to PDF files.")
    parser.add_argument("-f", "--file", required=True, help="YAML config file for creating the pdf.")
    parser.add_argument("-v", "--version", action="version", version=f"Jira2PDF {__version__}")
    return parser


def run(config_file: str) -> int:
    try:
        settings = Settings.load(config_file)
        with JiraClient(settings) as client:
            written = export_projects(settings, client)
    except Jira2PdfError as e:
        log.error("%s", e, extra={"error_type": type(e).__name__})
        return 1

    total = sum(len(paths) for paths in written.values())
    log.info("Export done", extra={"projects": len(written), "files": total})
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging_from_env()
    return run(args.file)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
