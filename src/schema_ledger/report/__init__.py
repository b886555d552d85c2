"""Report assembly over a project's snapshot history."""

from .assembler import ReportData, ReportEntry, build_report, latest_changes

__all__ = ["ReportData", "ReportEntry", "build_report", "latest_changes"]
