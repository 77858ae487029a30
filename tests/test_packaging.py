"""Packaging regression tests.

Tests that verify the installed package structure and behavior.
"""

from pathlib import Path


def test_source_layout():
    """Package, kernel and _internal live under src/."""
    repo_root = Path(__file__).resolve().parent.parent
    src_pkg = repo_root / "src" / "jira_field_formatter"

    assert src_pkg.exists(), "jira_field_formatter package should exist in src/"
    assert (src_pkg / "kernel" / "__init__.py").exists(), "kernel should be a package"
    assert (src_pkg / "_internal" / "__init__.py").exists(), "_internal should be a package"


def test_import_boundary():
    """Package and kernel import cleanly and report a version."""
    import jira_field_formatter
    import jira_field_formatter.kernel  # noqa: F401

    # Check version: in dev mode it's "dev", in installed mode it's "1.0.0"
    assert jira_field_formatter.__version__ in ("1.0.0", "dev")


def test_library_logger_has_null_handler():
    """Importing the library never configures logging output for the application."""
    import logging

    import jira_field_formatter  # noqa: F401

    handlers = logging.getLogger("jira_field_formatter").handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)
