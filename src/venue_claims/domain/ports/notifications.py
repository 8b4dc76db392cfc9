"""Port for claim lifecycle notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from venue_claims.domain.model import NotificationTemplate


@runtime_checkable
class NotificationDispatcher(Protocol):
    """Fire-and-forget delivery; returns ``False`` rather than raising on failure."""

    def send(
        self,
        template: NotificationTemplate,
        recipient: str,
        params: Mapping[str, object],
    ) -> bool: ...
