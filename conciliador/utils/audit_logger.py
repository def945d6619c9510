"""
Per-run audit trail of guardrail decisions (gate, model call, overrides).
"""

import json
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog

from ..config import get_settings
from ..models import AuditAction, AuditEntry

logger = structlog.get_logger()


class AuditLogger:
    """
    Collects the decisions taken while reconciling one supplier.
    Entries stay in memory on the run and can be dumped as JSON.
    """

    def __init__(self, run_id: str, supplier: str = ""):
        self.run_id = run_id
        self.supplier = supplier
        self.entries: List[AuditEntry] = []
        self.settings = get_settings()
        self._log = logger.bind(run_id=run_id, supplier=supplier)

    def log(self, entry: AuditEntry) -> None:
        self.entries.append(entry)
        if entry.success:
            self._log.info(entry.message, action=entry.action.value, **entry.details)
        else:
            self._log.warning(
                entry.message,
                action=entry.action.value,
                error=entry.error_message,
                **entry.details,
            )

    def record(
        self,
        action: AuditAction,
        message: str,
        success: bool = True,
        error_message: Optional[str] = None,
        **details: Any,
    ) -> AuditEntry:
        """Create an entry from keyword details and log it."""
        entry = AuditEntry(
            action=action,
            message=message,
            details=details,
            success=success,
            error_message=error_message,
        )
        self.log(entry)
        return entry

    def get_entries(
        self,
        action_filter: Optional[Union[AuditAction, str]] = None,
        success_only: bool = False,
    ) -> List[AuditEntry]:
        """Entries for one action (enum or its value), optionally successes only."""
        selected = self.entries
        if action_filter:
            wanted = AuditAction(action_filter)
            selected = [e for e in selected if e.action == wanted]
        if success_only:
            selected = [e for e in selected if e.success]
        return selected

    def to_payload(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "supplier": self.supplier,
            "exported_at": datetime.utcnow().isoformat(),
            "total_entries": len(self.entries),
            "entries": [entry.to_dict() for entry in self.entries],
        }

    def export_to_file(self, output_path: Optional[Path] = None) -> Path:
        """Write the trail to ``reports_dir/audit_<run_id>.json`` unless a path is given."""
        path = output_path or self.settings.reports_dir / f"audit_{self.run_id}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(self.to_payload(), indent=2, ensure_ascii=False, default=str),
            encoding="utf-8",
        )
        self._log.info("Audit trail exported", path=str(path))
        return path

    def summary(self) -> Dict[str, Any]:
        failures = [e for e in self.entries if not e.success]
        return {
            "total_entries": len(self.entries),
            "success_count": len(self.entries) - len(failures),
            "error_count": len(failures),
            "action_counts": dict(Counter(e.action.value for e in self.entries)),
            "last_error": failures[-1].error_message if failures else None,
        }
