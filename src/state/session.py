"""Bridge session states and the transitions allowed between them."""

from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    CONNECTING = "connecting"
    CONFIGURED = "configured"
    STREAMING = "streaming"
    FINISHING = "finishing"
    ERRORED = "errored"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.ERRORED, SessionState.CLOSED)


SESSION_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.CONNECTING: frozenset(
        {SessionState.CONFIGURED, SessionState.FINISHING, SessionState.ERRORED, SessionState.CLOSED}
    ),
    SessionState.CONFIGURED: frozenset(
        {SessionState.STREAMING, SessionState.FINISHING, SessionState.ERRORED, SessionState.CLOSED}
    ),
    SessionState.STREAMING: frozenset({SessionState.FINISHING, SessionState.ERRORED, SessionState.CLOSED}),
    SessionState.FINISHING: frozenset({SessionState.ERRORED, SessionState.CLOSED}),
    SessionState.ERRORED: frozenset({SessionState.CLOSED}),
    SessionState.CLOSED: frozenset(),
}


def can_transition(current: SessionState, target: SessionState) -> bool:
    return target in SESSION_TRANSITIONS[current]


__all__ = ["SESSION_TRANSITIONS", "SessionState", "can_transition"]
