"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .evidence import EvidenceStoreConfig, get_evidence_store_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .notifications import NotificationConfig, get_notification_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)
from .workflow import WorkflowSettings, get_workflow_settings

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "EvidenceStoreConfig",
    "MissingConfigurationError",
    "NotificationConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "WorkflowSettings",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_evidence_store_config",
    "get_notification_config",
    "get_storage_config",
    "get_workflow_settings",
    "require_env_vars",
]
