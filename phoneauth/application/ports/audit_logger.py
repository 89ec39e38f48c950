from typing import Optional, Dict, Any, Protocol


class AuditLogger(Protocol):
    def log(self, action: str, phone: Optional[str], success: bool = True,
            details: Optional[Dict[str, Any]] = None) -> None:
        ...
