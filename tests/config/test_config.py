from __future__ import annotations

import logging
from pathlib import Path
from uuid import UUID

import pytest

from venue_claims.config import (
    ConfigurationError,
    MissingConfigurationError,
    configure_logging,
    get_evidence_store_config,
    get_notification_config,
    get_workflow_settings,
    require_env_vars,
)
from venue_claims.config.workflow import DEFAULT_UPLOAD_TIMEOUT_SECONDS


def test_require_env_vars_reports_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SITE_BASE_URL", "https://example.test")
    monkeypatch.setenv("NOTIFICATION_API_KEY", "   ")
    monkeypatch.delenv("EVIDENCE_STORE_URL", raising=False)

    with pytest.raises(MissingConfigurationError) as exc_info:
        require_env_vars(["SITE_BASE_URL", "NOTIFICATION_API_KEY", "EVIDENCE_STORE_URL"])

    assert str(exc_info.value) == (
        "Missing configuration for: EVIDENCE_STORE_URL, NOTIFICATION_API_KEY"
    )
    assert exc_info.value.names == ("EVIDENCE_STORE_URL", "NOTIFICATION_API_KEY")
    assert require_env_vars(["SITE_BASE_URL"]) == {"SITE_BASE_URL": "https://example.test"}


def test_workflow_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SITE_BASE_URL", raising=False)
    monkeypatch.delenv("EVIDENCE_UPLOAD_TIMEOUT_SECONDS", raising=False)

    settings = get_workflow_settings()

    assert settings.upload_timeout_seconds == DEFAULT_UPLOAD_TIMEOUT_SECONDS
    assert settings.venue_url(UUID(int=1)).endswith(f"/venues/{UUID(int=1)}")


def test_workflow_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SITE_BASE_URL", "https://venues.example.test/")
    monkeypatch.setenv("EVIDENCE_UPLOAD_TIMEOUT_SECONDS", "12.5")

    settings = get_workflow_settings()

    assert settings.upload_timeout_seconds == 12.5
    assert settings.venue_url(UUID(int=7)) == f"https://venues.example.test/venues/{UUID(int=7)}"


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_invalid_upload_timeout_is_rejected(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("EVIDENCE_UPLOAD_TIMEOUT_SECONDS", raw)

    with pytest.raises(ConfigurationError, match="EVIDENCE_UPLOAD_TIMEOUT_SECONDS"):
        get_workflow_settings()


def test_evidence_store_defaults_to_local_directory(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("EVIDENCE_STORE_URL", raising=False)
    monkeypatch.setenv("VENUE_CLAIMS_DATA_DIR", str(tmp_path))

    config = get_evidence_store_config()

    assert config.backend == "local"
    assert config.local_root == tmp_path.resolve() / "evidence"


def test_evidence_store_over_http(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EVIDENCE_STORE_URL", "https://storage.example.test/bucket")
    monkeypatch.setenv("EVIDENCE_STORE_TOKEN", "secret")

    config = get_evidence_store_config()

    assert config.backend == "http"
    assert config.resilience is not None
    assert config.resilience.base_url == "https://storage.example.test/bucket/"
    assert config.resilience.default_headers == {"Authorization": "Bearer secret"}


def test_http_evidence_store_requires_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EVIDENCE_STORE_URL", "https://storage.example.test/bucket")
    monkeypatch.delenv("EVIDENCE_STORE_TOKEN", raising=False)

    with pytest.raises(MissingConfigurationError, match="EVIDENCE_STORE_TOKEN"):
        get_evidence_store_config()


def test_notification_config_backends(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NOTIFICATION_WEBHOOK_URL", raising=False)
    monkeypatch.setenv("NOTIFICATION_SENDER", "claims@example.test")

    assert get_notification_config().backend == "log"
    assert get_notification_config().sender == "claims@example.test"

    monkeypatch.setenv("NOTIFICATION_WEBHOOK_URL", "https://mail.example.test/send")
    monkeypatch.delenv("NOTIFICATION_API_KEY", raising=False)
    webhook = get_notification_config()

    assert webhook.backend == "webhook"
    assert webhook.webhook_url == "https://mail.example.test/send"
    assert webhook.resilience is not None
    assert webhook.resilience.default_headers is None


def test_configure_logging_passes_level_and_force(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging(level=logging.DEBUG, force=True)

    assert calls[0]["level"] == logging.DEBUG
    assert calls[0]["force"] is True


@pytest.mark.parametrize(("raw", "expected"), [("debug", logging.DEBUG), ("chatty", logging.INFO)])
def test_configure_logging_reads_level_from_environment(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: int
) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("VENUE_CLAIMS_LOG_LEVEL", raw)

    configure_logging()

    assert calls[0]["level"] == expected
