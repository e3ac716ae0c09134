"""Tests for Sentry SDK configuration with privacy-compliant settings."""

from typing import Any
from unittest.mock import patch

from core.sentry_config import _before_send, init_sentry


class TestBeforeSendPIIScrubbing:
    """Tests for PII scrubbing in _before_send."""

    def test_scrubs_user_identity_but_keeps_id(self) -> None:
        event: dict[str, Any] = {
            "user": {
                "id": "123",
                "email": "user@example.com",
                "username": "testuser",
                "ip_address": "192.168.1.100",
            }
        }
        result = _before_send(event, {})  # type: ignore[arg-type]
        assert result is not None
        assert result["user"] == {"id": "123", "ip_address": "{{auto}}"}

    def test_filters_report_text_from_extra(self) -> None:
        event: dict[str, Any] = {
            "extra": {"reason": "he called me names", "report_id": 4}
        }
        result = _before_send(event, {})  # type: ignore[arg-type]
        assert result is not None
        assert result["extra"]["reason"] == "[Filtered]"
        assert result["extra"]["report_id"] == 4


class TestInitSentry:
    """Tests for init_sentry."""

    def test_disabled_without_dsn(self, monkeypatch) -> None:
        monkeypatch.delenv("SENTRY_DSN", raising=False)
        with patch("core.sentry_config.sentry_sdk.init") as mock_init:
            assert init_sentry() is False
            mock_init.assert_not_called()

    def test_initializes_with_dsn(self, monkeypatch) -> None:
        monkeypatch.setenv("SENTRY_DSN", "https://key@sentry.example.com/1")
        monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", "0.5")
        with patch("core.sentry_config.sentry_sdk.init") as mock_init:
            assert init_sentry() is True

        kwargs = mock_init.call_args[1]
        assert kwargs["send_default_pii"] is False
        assert kwargs["traces_sample_rate"] == 0.5
        assert kwargs["before_send"] is _before_send
