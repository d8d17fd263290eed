"""Minimal session registry for the DocChat HTTP API.

An in-memory dict of session_id -> ConversationController. Each controller
owns its own Session; the store only hands them out by id. Nothing is
written to disk: a session lives until it is deleted, sits idle longer
than `idle_ttl`, or is pushed out as the least recently used one when
`max_sessions` is reached.
"""

import logging
import time
from typing import Callable, Dict, Optional
from uuid import uuid4

from ..agents.conversation_controller import ConversationController


logger = logging.getLogger(__name__)

ControllerFactory = Callable[[str], ConversationController]


class SessionStore:
    """In-memory controller registry with idle eviction.

    Parameters
    ----------
    controller_factory:
        Called with a fresh session_id to build the controller for a new
        session. The server wires the extraction gate, chat transport and
        log store in here.
    idle_ttl:
        Seconds since last access after which a session is dropped.
        None disables idle eviction.
    max_sessions:
        Upper bound on live sessions. None means unbounded.
    clock:
        Monotonic time source; tests pass a fake.
    """

    def __init__(
        self,
        controller_factory: ControllerFactory,
        idle_ttl: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._controller_factory = controller_factory
        self._idle_ttl = idle_ttl
        self._max_sessions = max_sessions
        self._clock = clock
        # Insertion order doubles as LRU order: touched sessions move to the end.
        self._sessions: Dict[str, ConversationController] = {}
        self._last_access: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self) -> ConversationController:
        """Create a new IDLE session and return its controller."""
        self.evict_idle()
        if self._max_sessions is not None:
            while self._sessions and len(self._sessions) >= self._max_sessions:
                oldest = next(iter(self._sessions))
                logger.info("[SESSION] session limit reached; evicting %s", oldest)
                self._drop(oldest)

        session_id = str(uuid4())
        controller = self._controller_factory(session_id)
        self._sessions[session_id] = controller
        self._last_access[session_id] = self._clock()
        return controller

    def get_session(self, session_id: str) -> Optional[ConversationController]:
        """Return the controller for `session_id`, or None if unknown or expired."""
        self.evict_idle()
        controller = self._sessions.pop(session_id, None)
        if controller is None:
            return None
        self._sessions[session_id] = controller
        self._last_access[session_id] = self._clock()
        return controller

    def delete_session(self, session_id: str) -> bool:
        """Forget a session. Returns False if it did not exist."""
        return self._drop(session_id)

    def evict_idle(self) -> int:
        """Drop sessions idle for longer than `idle_ttl`; return how many."""
        if self._idle_ttl is None:
            return 0
        cutoff = self._clock() - self._idle_ttl
        expired = [sid for sid, seen in self._last_access.items() if seen < cutoff]
        for session_id in expired:
            logger.info("[SESSION] evicting idle session %s", session_id)
            self._drop(session_id)
        return len(expired)

    def _drop(self, session_id: str) -> bool:
        self._last_access.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None
