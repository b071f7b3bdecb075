"""
In-memory registry of active voice interview sessions.

Sessions live for the lifetime of the process. ``get`` hands out an
independent copy: callers mutate it and ``put`` it back, so a transition
that aborts halfway leaves the stored session untouched. Each session has
an ``asyncio.Lock`` that callers hold around a get/mutate/put sequence.
"""
import asyncio
import copy
import logging
import secrets
import string
import time
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from mock_me.models.voice_interview import VoiceInterviewSession

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """Opaque session token: ``session_<epoch-ms>_<9 base36 chars>``."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"session_{millis}_{suffix}"


class SessionStore:
    """
    Dictionary-backed session store with per-session locks.
    """

    def __init__(self):
        self._sessions: Dict[str, VoiceInterviewSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self, session: VoiceInterviewSession) -> None:
        if session.session_id in self._sessions:
            raise ValueError(f"Session already exists: {session.session_id}")
        self._sessions[session.session_id] = copy.deepcopy(session)
        logger.info(f"Created voice interview session {session.session_id}")

    def get(self, session_id: str) -> Optional[VoiceInterviewSession]:
        session = self._sessions.get(session_id)
        return copy.deepcopy(session) if session is not None else None

    def put(self, session_id: str, session: VoiceInterviewSession) -> bool:
        """
        Write back a modified session.

        Returns False (and stores nothing) when the session was removed in
        the meantime.
        """
        if session_id not in self._sessions:
            logger.warning(f"Dropping update for removed session {session_id}")
            return False
        self._sessions[session_id] = copy.deepcopy(session)
        return True

    def delete(self, session_id: str) -> bool:
        self._locks.pop(session_id, None)
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info(f"Removed voice interview session {session_id}")
        return removed

    def lock(self, session_id: str) -> asyncio.Lock:
        """Lock serializing transitions on one session."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    def reap_expired(self, max_age: timedelta, now: Optional[datetime] = None) -> List[str]:
        """Remove sessions started more than ``max_age`` ago; returns their ids."""
        now = now or datetime.now(timezone.utc)
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if now - session.started_at > max_age
        ]
        for session_id in expired:
            self.delete(session_id)
        if expired:
            logger.info(f"Reaped {len(expired)} expired voice interview session(s)")
        return expired
