import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from ...application.ports.audit_logger import AuditLogger


def hash_phone_number(phone: str) -> str:
    """One-way hash so audit lines never carry the raw number"""
    return hashlib.sha256(phone.encode()).hexdigest()


class StdAuditLogger(AuditLogger):
    """Writes one ``AUDIT: {json}`` line per verification event.

    ``details`` carries the transition (``send_code`` / ``check_code``), the
    provider outcome and, for failures, the error kind.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def log(self, action: str, phone: Optional[str], success: bool = True,
            details: Optional[Dict[str, Any]] = None) -> None:
        details = details or {}
        entry = {
            "at": datetime.now(timezone.utc).isoformat(),
            "event": action,
            "transition": details.get("transition"),
            "phone_hash": hash_phone_number(phone) if phone else None,
            "success": success,
            "details": {k: v for k, v in details.items() if k != "transition"},
        }
        level = logging.INFO if success else logging.WARNING
        self._logger.log(level, f"AUDIT: {json.dumps(entry, sort_keys=True)}")
