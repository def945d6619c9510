"""
Tests for the per-run audit trail.
"""

import json

import pytest

from conciliador.models import AuditAction
from conciliador.utils.audit_logger import AuditLogger


@pytest.fixture
def audit():
    logger = AuditLogger("run-1", "Comercial Rio Ltda")
    logger.record(AuditAction.SUPPLIER_PRESENCE_CHECKED, "Presence checked", present=True)
    logger.record(
        AuditAction.MODEL_FAILED,
        "Model call failed",
        success=False,
        error_message="API error: 500",
    )
    return logger


class TestAuditLogger:
    def test_record_keeps_details(self, audit):
        entry = audit.entries[0]

        assert entry.action == AuditAction.SUPPLIER_PRESENCE_CHECKED
        assert entry.details == {"present": True}
        assert entry.success

    def test_filters(self, audit):
        assert len(audit.get_entries(action_filter="model_failed")) == 1
        assert len(audit.get_entries(success_only=True)) == 1

    def test_summary(self, audit):
        summary = audit.summary()

        assert summary["total_entries"] == 2
        assert summary["error_count"] == 1
        assert summary["action_counts"] == {
            "supplier_presence_checked": 1,
            "model_failed": 1,
        }

    def test_export_to_file(self, audit, tmp_path):
        path = audit.export_to_file(tmp_path / "audit" / "run-1.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["run_id"] == "run-1"
        assert data["total_entries"] == 2
        assert data["entries"][1]["error_message"] == "API error: 500"

    def test_filter_accepts_enum(self, audit):
        assert audit.get_entries(action_filter=AuditAction.MODEL_FAILED)[0].error_message == (
            "API error: 500"
        )

    def test_last_error_in_summary(self, audit):
        assert audit.summary()["last_error"] == "API error: 500"
