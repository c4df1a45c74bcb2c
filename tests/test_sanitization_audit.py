import hashlib
import logging

import pytest

from Security.metrics import get_sanitizer_metrics_snapshot
from Security.sanitization_audit import fingerprint, record_sanitization

PAYLOAD = "<script>x</script>"


@pytest.fixture
def audit_log(caplog):
    with caplog.at_level(logging.INFO, logger="security.sanitizer"):
        yield caplog


def _audit_messages(caplog):
    return [r.getMessage() for r in caplog.records if r.name == "security.sanitizer"]


def test_fingerprint_is_short_sha256():
    assert fingerprint("abc") == hashlib.sha256(b"abc").hexdigest()[:12]


def test_unchanged_values_are_not_logged(audit_log):
    assert record_sanitization("plain_text", "city", "Austin", "Austin") == []
    assert _audit_messages(audit_log) == []


def test_modified_values_are_logged_without_raw_text(audit_log):
    threats = record_sanitization("plain_text", "notes", PAYLOAD, "")
    assert threats == ["script-block", "script-close", "script-open"]

    messages = _audit_messages(audit_log)
    assert len(messages) == 1
    message = messages[0]
    assert "sanitizer=plain_text" in message
    assert "field=notes" in message
    assert "threats=script-block,script-close,script-open" in message
    assert "length_in=18 length_out=0" in message
    assert f"fingerprint={fingerprint(PAYLOAD)}" in message
    assert "<script" not in message


def test_modified_without_known_threat(audit_log):
    assert record_sanitization("plain_text", "city", "a<b", "a&lt;b") == []
    assert "threats=-" in _audit_messages(audit_log)[0]


def test_audit_switch(monkeypatch, audit_log):
    monkeypatch.setenv("FEATURE_SANITIZATION_AUDIT", "false")
    assert record_sanitization("plain_text", "notes", PAYLOAD, "") == ["script-block", "script-close", "script-open"]
    assert _audit_messages(audit_log) == []


def test_metrics_count_outcomes_and_threats():
    before = get_sanitizer_metrics_snapshot(["stripped_markup"], ["event-handler"])

    record_sanitization("stripped_markup", "notes", "<img onerror=x>", "")
    record_sanitization("stripped_markup", "notes", "fine", "fine")

    after = get_sanitizer_metrics_snapshot(["stripped_markup"], ["event-handler"])
    assert after["stripped_markup"]["modified"] == before["stripped_markup"]["modified"] + 1
    assert after["stripped_markup"]["unchanged"] == before["stripped_markup"]["unchanged"] + 1
    assert after["threats"]["event-handler"] == before["threats"]["event-handler"] + 1
