"""Export rows for the spreadsheet collaborator."""

from .export_rows import ExportRow, ExportRowBuilder, build_export_rows
from .matchers import (
    DateMatcher,
    DocumentReferenceMatcher,
    SettlementStatusMatcher,
    ValueMatcher,
)

__all__ = [
    "ExportRow",
    "ExportRowBuilder",
    "build_export_rows",
    "DateMatcher",
    "DocumentReferenceMatcher",
    "SettlementStatusMatcher",
    "ValueMatcher",
]
