import json
import logging

from phoneauth.infrastructure.audit.std_logger import StdAuditLogger, hash_phone_number


def audit_lines(caplog):
    return [json.loads(r.getMessage()[len("AUDIT: "):]) for r in caplog.records if r.getMessage().startswith("AUDIT: ")]


def test_audit_line_hashes_phone_and_lifts_transition(caplog):
    caplog.set_level(logging.INFO)
    StdAuditLogger().log("code_requested", "+15551234567", details={"transition": "send_code", "resend": True})

    [entry] = audit_lines(caplog)
    assert entry["event"] == "code_requested"
    assert entry["transition"] == "send_code"
    assert entry["phone_hash"] == hash_phone_number("+15551234567")
    assert entry["details"] == {"resend": True}
    assert "+15551234567" not in caplog.text


def test_failures_log_at_warning_without_phone(caplog):
    caplog.set_level(logging.INFO)
    StdAuditLogger().log("authentication_failed", None, success=False, details={"kind": "missing_phone_number"})

    [record] = [r for r in caplog.records if r.getMessage().startswith("AUDIT: ")]
    assert record.levelno == logging.WARNING
    [entry] = audit_lines(caplog)
    assert entry["phone_hash"] is None
    assert entry["success"] is False
    assert entry["details"] == {"kind": "missing_phone_number"}
