from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class PendingAuthorization:
    context: dict[str, Any]
    expires_at: float


class StateStore(Protocol):
    def put(self, state_id: str, context: dict[str, Any], ttl: float) -> None: ...
    def take(self, state_id: str) -> dict[str, Any] | None: ...


class InMemoryStateStore:
    """Pending authorization requests keyed by their opaque state value.

    Entries are single-use (take() removes them) and time-bounded.
    The authorize/token handlers do not consult this store yet.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._by_state: dict[str, PendingAuthorization] = {}

    def put(self, state_id: str, context: dict[str, Any], ttl: float) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive (got {ttl!r})")
        self._by_state[state_id] = PendingAuthorization(
            context=dict(context), expires_at=self._clock() + ttl
        )

    def take(self, state_id: str) -> dict[str, Any] | None:
        """Remove and return the context, or None if unknown or expired."""
        record = self._by_state.pop(state_id, None)
        if record is None:
            return None
        if self._clock() >= record.expires_at:
            return None
        return record.context

    def __len__(self) -> int:
        return len(self._by_state)
