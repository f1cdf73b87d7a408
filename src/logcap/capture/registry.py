"""
Registry of active capture sessions.
Single source of truth for whether a session id can still be stopped.
"""

from typing import Any

from logcap.capture.base import LogSession
from logcap.capture.errors import RegistryInvariantError
from logcap.logger import get_logger

logger = get_logger(__name__)


class SessionRegistry:
    """
    In-memory map of session id to LogSession.

    Created once by the server at startup and handed to the controller.
    Every operation is synchronous.
    """

    def __init__(self):
        self._sessions: dict[str, LogSession] = {}

    def insert(self, session: LogSession) -> None:
        """
        Add a session to the registry.

        Raises:
            RegistryInvariantError: If the id is already present.
        """
        if session.session_id in self._sessions:
            raise RegistryInvariantError(
                f"Session id already registered: {session.session_id}"
            )
        self._sessions[session.session_id] = session
        logger.debug(
            f"Registered session {session.session_id} "
            f"({session.target_kind.value} {session.target_id})"
        )

    def lookup(self, session_id: str) -> LogSession | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> LogSession | None:
        """
        Remove and return a session in one step.

        Returns:
            The removed session, or None if it was not registered.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            logger.warning(f"Attempted to remove unknown session: {session_id}")
        return session

    def list_sessions(self) -> list[dict[str, Any]]:
        """Snapshot of active sessions, oldest first."""
        return [
            session.to_dict()
            for session in sorted(self._sessions.values(), key=lambda s: s.started_at)
        ]

    def sessions(self) -> list[LogSession]:
        return list(self._sessions.values())

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
