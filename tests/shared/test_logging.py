"""
Tests for log redaction and structlog configuration.
"""

import io

from encryptedconfig.shared.infrastructure.logging import configure_logging, get_logger, privacy_redactor


class TestPrivacyRedactor:
    """Secret-looking values never reach the renderer."""

    def test_sensitive_keys_are_replaced(self):
        event = privacy_redactor(None, "info", {"event": "loaded", "plaintext": b"hunter2", "secret_value": "x"})

        assert event["plaintext"] == "[REDACTED]"
        assert event["secret_value"] == "[REDACTED]"
        assert event["event"] == "loaded"

    def test_assignments_in_strings_are_scrubbed(self):
        event = privacy_redactor(None, "info", {"event": "failed", "detail": "password=hunter2 user=bob"})

        assert "hunter2" not in event["detail"]
        assert "user=bob" in event["detail"]

    def test_other_values_pass_through(self):
        event = privacy_redactor(None, "info", {"event": "found", "namespace": "/foo", "count": 2})

        assert event == {"event": "found", "namespace": "/foo", "count": 2}


def test_configure_logging_writes_events():
    stream = io.StringIO()
    configure_logging(stream)

    get_logger("encryptedconfig.test").warning("metatron_disabled", namespace="/foo")

    assert "metatron_disabled" in stream.getvalue()
