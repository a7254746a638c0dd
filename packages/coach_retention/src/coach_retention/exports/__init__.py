"""Report and roster exporters."""

from coach_retention.exports.excel_report import write_excel_report
from coach_retention.exports.roster_export import write_roster_csv, write_roster_json

__all__ = ["write_excel_report", "write_roster_csv", "write_roster_json"]
