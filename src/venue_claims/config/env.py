"""Reading settings from the process environment.

Blank values count as unset everywhere, so ``FOO=`` in a ``.env`` file behaves
like leaving ``FOO`` out.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


def optional_env_var(name: str) -> str | None:
    raw = os.environ.get(name, "").strip()
    return raw or None


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Look up every name at once so one error lists everything missing."""

    found = {name: optional_env_var(name) for name in names}
    absent = [name for name, value in found.items() if value is None]
    if absent:
        raise MissingConfigurationError(absent)
    return {name: value for name, value in found.items() if value is not None}


def float_env_var(name: str, default: float) -> float:
    """Positive float from ``name``, or ``default`` when unset."""

    raw = optional_env_var(name)
    if raw is None:
        return default
    try:
        parsed = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if parsed <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return parsed
