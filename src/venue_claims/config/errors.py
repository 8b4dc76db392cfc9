"""Errors raised while reading claim workflow settings from the environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """A setting such as the upload timeout or a store URL has an unusable value."""


class MissingConfigurationError(ConfigurationError):
    """Settings that the chosen evidence store or notifier depends on are unset.

    ``names`` lists every missing variable in sorted order, so one run reports
    all of them.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")
