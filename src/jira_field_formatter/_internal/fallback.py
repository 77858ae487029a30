"""Once-only warning for fields whose schema fell back to ANY.

Bulk operations can build thousands of fields from the same unrecognized
schema shape, so a reporter warns at most once. The module-level default
reporter gives once-per-process behavior; pass your own reporter to scope it
differently.
"""

import logging
import threading
from typing import Optional

from jira_field_formatter.kernel.field import Field


logger = logging.getLogger(__name__)


class FallbackReporter:
    """Logs the first classification fallback it sees and ignores the rest."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._logger = log or logger
        self._warned = False
        self._lock = threading.Lock()

    @property
    def warned(self) -> bool:
        return self._warned

    def report(self, field: Field) -> bool:
        """Warn about field if it is a fallback and nothing was warned yet. Returns True if logged."""
        if not field.is_fallback:
            return False
        with self._lock:
            if self._warned:
                return False
            self._warned = True
        self._logger.warning(
            "Schema mapping warning for %s: %s (treating as 'any')",
            field.key,
            field.classification.reason,
        )
        return True

    def reset(self) -> None:
        with self._lock:
            self._warned = False


default_reporter = FallbackReporter()
