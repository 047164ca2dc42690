"""
Top-level package for the recruiting assessment core.

This package resolves recommended assessment templates for a role and
industry, filters assessment results, and aggregates a candidate's
results into a comprehensive report.  Seed data, an HTTP app and a
batch CLI sit around those functions.  There are no side effects on
import.
"""

from .recommend import describe_industry, describe_role, key_areas, resolve_templates
from .results import ReportNotFoundError, build_report, filter_results

__all__ = [
    "ReportNotFoundError",
    "build_report",
    "describe_industry",
    "describe_role",
    "filter_results",
    "key_areas",
    "resolve_templates",
]
