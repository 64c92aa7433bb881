"""Export Jira issues into PDF reports."""

__version__ = "1.0.0"
