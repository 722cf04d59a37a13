# Entrypoint for the seo_auditor package.
# This file makes the public API available to programmers.

from __future__ import annotations

from seo_auditor.__about__ import __version__
from seo_auditor.api import audit_signals, audit_url
from seo_auditor.errors import InspectionError, NavigationError, NavigationTimeout
from seo_auditor.grading import grade_for
from seo_auditor.models import AuditResult, PageSignals, PerformanceSignals

# The __all__ variable defines the public API of the package.
# When a user writes `from seo_auditor import *`, only these names will be imported.
__all__ = [
    "audit_url",
    "audit_signals",
    "grade_for",
    "AuditResult",
    "PageSignals",
    "PerformanceSignals",
    "InspectionError",
    "NavigationError",
    "NavigationTimeout",
    "__version__",
]
