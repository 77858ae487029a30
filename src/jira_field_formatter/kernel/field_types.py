"""Field-type taxonomy: the closed set of internal field types and their format families.

Every other module works in terms of these tags. Nothing outside this module
invents a field type.
"""

from enum import Enum
from typing import Any, Optional


class FieldType(str, Enum):
    """Internal field types understood by the formatter."""

    ISSUE_TYPE = "issuetype"
    ASSIGNEE = "assignee"
    REPORTER = "reporter"
    PRIORITY = "priority"
    RESOLUTION = "resolution"
    STATUS = "status"
    SECURITY_LEVEL = "securitylevel"
    USER = "user"
    OPTION = "option"
    VERSION = "version"
    COMPONENT = "component"
    ISSUE_LINK = "issuelink"
    ISSUE_LINKS = "issuelinks"
    PROJECT = "project"
    OPTION_WITH_CHILD = "option-with-child"
    TIME_TRACKING = "timetracking"
    ATTACHMENT = "attachment"
    WATCHES = "watches"
    SD_SERVICE_LEVEL_AGREEMENT = "sd-servicelevelagreement"
    SD_APPROVALS = "sd-approvals"
    SD_CUSTOMER_REQUEST_TYPE = "sd-customerrequesttype"
    DATE = "date"
    DATETIME = "datetime"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    ANY = "any"
    # Only valid as an array item type
    CHECKLIST_ITEM = "checklist-item"


class FieldFormat(str, Enum):
    """Format family a field type serializes through."""

    NAME = "name"
    KEY = "key"
    OBJECT = "object"
    ARRAY = "array"
    PRIMITIVE = "primitive"


FIELD_TYPES = frozenset(t for t in FieldType if t is not FieldType.CHECKLIST_ITEM)

ARRAY_ITEM_TYPES = frozenset(t for t in FieldType if t is not FieldType.ARRAY)

NAME_FORMAT_TYPES = frozenset({
    FieldType.ISSUE_TYPE,
    FieldType.ASSIGNEE,
    FieldType.REPORTER,
    FieldType.PRIORITY,
    FieldType.RESOLUTION,
    FieldType.STATUS,
    FieldType.SECURITY_LEVEL,
    FieldType.USER,
    FieldType.OPTION,
    FieldType.VERSION,
    FieldType.COMPONENT,
    FieldType.ATTACHMENT,
    FieldType.SD_SERVICE_LEVEL_AGREEMENT,
    FieldType.SD_APPROVALS,
    FieldType.SD_CUSTOMER_REQUEST_TYPE,
})

KEY_FORMAT_TYPES = frozenset({
    FieldType.ISSUE_LINK,
    FieldType.ISSUE_LINKS,
    FieldType.PROJECT,
})

OBJECT_FORMAT_TYPES = frozenset({
    FieldType.DATE,
    FieldType.DATETIME,
    FieldType.OPTION_WITH_CHILD,
    FieldType.TIME_TRACKING,
    FieldType.WATCHES,
})

DATE_TIME_TYPES = frozenset({FieldType.DATE, FieldType.DATETIME})

FIELD_TYPE_DESCRIPTIONS = {
    FieldType.ISSUE_TYPE: 'Issue type (e.g., "Bug", "Story")',
    FieldType.ASSIGNEE: "User assigned to the issue",
    FieldType.REPORTER: "User who reported the issue",
    FieldType.PRIORITY: 'Issue priority (e.g., "High", "Low")',
    FieldType.RESOLUTION: 'Issue resolution (e.g., "Fixed")',
    FieldType.STATUS: "Workflow status",
    FieldType.SECURITY_LEVEL: "Issue security level",
    FieldType.USER: "Generic user field",
    FieldType.OPTION: "Single select option",
    FieldType.VERSION: "Version field",
    FieldType.COMPONENT: "Component field",
    FieldType.ISSUE_LINK: "Link to another issue",
    FieldType.ISSUE_LINKS: "Multiple links to other issues",
    FieldType.PROJECT: "Project reference",
    FieldType.OPTION_WITH_CHILD: "Cascading select field (Parent -> Child)",
    FieldType.TIME_TRACKING: 'Time tracking (e.g., "2w 3d 4h 30m")',
    FieldType.ATTACHMENT: "File attachment reference",
    FieldType.WATCHES: "Comma separated list of watcher user names",
    FieldType.SD_SERVICE_LEVEL_AGREEMENT: "Service desk SLA",
    FieldType.SD_APPROVALS: "Service desk approvals",
    FieldType.SD_CUSTOMER_REQUEST_TYPE: "Service desk customer request type",
    FieldType.DATE: "Date field (YYYY-MM-DD)",
    FieldType.DATETIME: "DateTime field (ISO format)",
    FieldType.ARRAY: "Array of values",
    FieldType.STRING: "Text string",
    FieldType.NUMBER: "Numeric value",
    FieldType.ANY: "Any value type",
    FieldType.CHECKLIST_ITEM: "Checklist item (JSON array literal, array items only)",
}


def coerce_field_type(tag: Any) -> Optional[FieldType]:
    """Resolve a tag (enum member or its string value) to a FieldType, or None."""
    if isinstance(tag, FieldType):
        return tag
    if not isinstance(tag, str):
        return None
    try:
        return FieldType(tag)
    except ValueError:
        return None


def is_valid_field_type(tag: Any) -> bool:
    """True if tag is a member of the field-type taxonomy."""
    return coerce_field_type(tag) in FIELD_TYPES


def is_valid_array_field_type(tag: Any) -> bool:
    """True if tag may appear as the item type of an array field."""
    return coerce_field_type(tag) in ARRAY_ITEM_TYPES


def get_field_format(tag: Any) -> FieldFormat:
    """Resolve a field type to the format family it serializes through."""
    field_type = coerce_field_type(tag)
    if field_type in NAME_FORMAT_TYPES:
        return FieldFormat.NAME
    if field_type in KEY_FORMAT_TYPES:
        return FieldFormat.KEY
    if field_type in OBJECT_FORMAT_TYPES:
        return FieldFormat.OBJECT
    if field_type is FieldType.ARRAY:
        return FieldFormat.ARRAY
    return FieldFormat.PRIMITIVE
