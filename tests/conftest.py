"""Pytest configuration for tests.

Tests import the installed jira_field_formatter package. Benchmarks marked
``perf`` are collected but skipped unless ``--run-perf`` is given.
"""

import pytest

from jira_field_formatter.kernel.classifier import SchemaClassifier

PERF_MARKER = "perf"


def pytest_addoption(parser):
    parser.addoption(
        "--run-perf",
        action="store_true",
        default=False,
        help="Also run the bulk classify/format benchmarks marked 'perf'.",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-perf"):
        return
    gated = pytest.mark.skip(reason=f"{PERF_MARKER} benchmark; run with --run-perf")
    for item in items:
        if item.get_closest_marker(PERF_MARKER) is not None:
            item.add_marker(gated)


@pytest.fixture
def classifier():
    """A fresh classifier so memoization state never leaks between tests."""
    return SchemaClassifier()


@pytest.fixture
def createmeta_entries():
    """Field entries shaped like a createmeta response for one project/issue type."""
    return [
        {"fieldId": "summary", "name": "Summary", "required": True,
         "schema": {"type": "string", "system": "summary"}},
        {"fieldId": "issuetype", "name": "Issue Type", "required": True,
         "schema": {"type": "issuetype", "system": "issuetype"}},
        {"fieldId": "fixVersions", "name": "Fix Versions", "required": False,
         "schema": {"type": "array", "items": "version", "system": "fixVersions"}},
        {"fieldId": "labels", "name": "Labels", "required": False,
         "schema": {"type": "array", "items": "string", "system": "labels"}},
        {"fieldId": "duedate", "name": "Due Date", "required": False,
         "schema": {"type": "date", "system": "duedate"}},
        {"fieldId": "customfield_10010", "name": "Hardware", "required": False,
         "schema": {"type": "option-with-child",
                    "custom": "com.atlassian.jira.plugin.system.customfieldtypes:cascadingselect",
                    "customId": 10010}},
        {"fieldId": "customfield_10020", "name": "Checklist", "required": False,
         "schema": {"type": "array", "items": "checklist-item",
                    "custom": "com.okapya.jira.checklist:checklist", "customId": 10020}},
        {"fieldId": "watches", "name": "Watchers", "required": False,
         "schema": {"type": "watches", "system": "watches"}},
        {"fieldId": "customfield_10030", "name": "Mystery", "required": False,
         "schema": {"type": "sd-feedback", "custom": "com.atlassian.servicedesk:sd-request-feedback"}},
    ]
