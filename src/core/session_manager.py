"""
Session Manager - Holds the resized image of each upload with an LRU cache.

A session keeps the resized, unfiltered buffer of one upload so that a filter
change only re-runs Filter -> Encode. Each session has its own lock: only one
operation may be in flight per image.
"""

import logging
import time
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, Iterator, List, Optional, Tuple

from common.constants import SessionConstants
from common.enums import FilterKind, SessionState
from core.exceptions import SessionNotFoundError
from domain_types import EncodedImage, PixelBuffer

logger = logging.getLogger(__name__)

# Allowed lifecycle transitions; any state may also go back to EMPTY
TRANSITIONS = {
    SessionState.EMPTY: {SessionState.VALIDATED},
    SessionState.VALIDATED: {SessionState.DECODED},
    SessionState.DECODED: {SessionState.RESIZED},
    SessionState.RESIZED: {SessionState.FILTERED},
    SessionState.FILTERED: {SessionState.ENCODED},
    SessionState.ENCODED: {SessionState.FILTERED},
}


@dataclass(frozen=True)
class SessionSnapshot:
    """Consistent view of a session, taken while its lock was held"""

    session_id: str
    state: SessionState
    filter: FilterKind
    resized: Optional[PixelBuffer]
    encoded: Optional[EncodedImage]
    original_size: Optional[Tuple[int, int]]
    filename: Optional[str]


@dataclass
class ImageSession:
    """State of one uploaded image"""

    session_id: str
    state: SessionState = SessionState.EMPTY
    resized: Optional[PixelBuffer] = None
    encoded: Optional[EncodedImage] = None
    filter: FilterKind = FilterKind.NORMAL
    original_size: Optional[Tuple[int, int]] = None
    filename: Optional[str] = None
    created_at: float = field(default_factory=time.time)
    last_access: float = field(default_factory=time.time)
    lock: Lock = field(default_factory=Lock, repr=False)

    def advance(self, new_state: SessionState) -> None:
        """
        Move to the next lifecycle state.

        Raises:
            ValueError: If the transition is not allowed
        """
        if new_state != SessionState.EMPTY and new_state not in TRANSITIONS[self.state]:
            raise ValueError(
                f"Invalid session transition: {self.state.value} -> {new_state.value}"
            )
        self.state = new_state

    def snapshot(self) -> SessionSnapshot:
        """Copy the current render; call with the session lock held."""
        return SessionSnapshot(
            session_id=self.session_id,
            state=self.state,
            filter=self.filter,
            resized=self.resized,
            encoded=self.encoded,
            original_size=self.original_size,
            filename=self.filename,
        )

    def reset(self) -> None:
        """Drop the image and go back to EMPTY."""
        self.resized = None
        self.encoded = None
        self.original_size = None
        self.filter = FilterKind.NORMAL
        self.state = SessionState.EMPTY

    def to_dict(self) -> Dict:
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "filter": self.filter.value,
            "width": self.resized.width if self.resized is not None else None,
            "height": self.resized.height if self.resized is not None else None,
            "original_size": list(self.original_size) if self.original_size else None,
            "filename": self.filename,
            "created_at": self.created_at,
            "last_access": self.last_access,
        }


class ImageSessionManager:
    """
    Stores image sessions in memory with LRU eviction.

    The manager lock guards the session table; each session's own lock
    serializes the operations on that image.
    """

    def __init__(self, max_sessions: int = SessionConstants.DEFAULT_MAX_SESSIONS):
        """
        Initialize Session Manager

        Args:
            max_sessions: Maximum number of sessions kept in memory
        """
        self.max_sessions = max_sessions
        self.sessions: "OrderedDict[str, ImageSession]" = OrderedDict()
        self.lock = Lock()

        logger.info(f"Session Manager initialized: max {max_sessions} sessions")

    def create(self, filename: Optional[str] = None) -> ImageSession:
        """
        Create an empty session.

        Args:
            filename: Optional original file name, kept for display

        Returns:
            New session in EMPTY state
        """
        session = ImageSession(session_id=str(uuid.uuid4()), filename=filename)
        self._publish(session)
        return session

    @contextmanager
    def open_session(self, filename: Optional[str] = None) -> Iterator[ImageSession]:
        """
        Create a session that is already held by the caller.

        The session lock is taken before the session becomes visible, so it
        cannot be evicted or used by another operation until the block exits.
        If the block raises, the session is removed.

        Usage:
            with manager.open_session("shirt.png") as session:
                ...

        Raises:
            MemoryError: If every stored session is busy
        """
        session = ImageSession(session_id=str(uuid.uuid4()), filename=filename)
        session.lock.acquire()
        try:
            self._publish(session)
        except Exception:
            session.lock.release()
            raise

        try:
            yield session
        except Exception:
            with self.lock:
                self.sessions.pop(session.session_id, None)
            session.reset()
            logger.debug(f"Discarded session {session.session_id}")
            raise
        finally:
            session.lock.release()

    def _publish(self, session: ImageSession) -> None:
        """Store a session, evicting idle sessions to make room"""
        with self.lock:
            while len(self.sessions) >= self.max_sessions:
                if not self._evict_oldest():
                    raise MemoryError("Cannot free a session slot: all sessions are busy")

            self.sessions[session.session_id] = session

        logger.debug(f"Created session {session.session_id}")

    def get(self, session_id: str) -> ImageSession:
        """
        Get session by ID.

        Raises:
            SessionNotFoundError: If no session has this ID
        """
        with self.lock:
            session = self.sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)

            session.last_access = time.time()
            self.sessions.move_to_end(session_id)
            return session

    def has_session(self, session_id: str) -> bool:
        with self.lock:
            return session_id in self.sessions

    @contextmanager
    def session_lock(self, session_id: str) -> Iterator[ImageSession]:
        """
        Hold a session exclusively for one operation.

        Usage:
            with manager.session_lock(session_id) as session:
                ...

        Raises:
            SessionNotFoundError: If no session has this ID
        """
        session = self.get(session_id)
        with session.lock:
            yield session

    def delete(self, session_id: str) -> bool:
        """
        Delete a session.

        Returns:
            True if deleted, False if not found
        """
        with self.lock:
            session = self.sessions.pop(session_id, None)

        if session is None:
            return False

        with session.lock:
            session.reset()

        logger.debug(f"Deleted session {session_id}")
        return True

    def list_sessions(self) -> List[Dict]:
        """List all sessions, oldest access first."""
        with self.lock:
            return [session.to_dict() for session in self.sessions.values()]

    def _evict_oldest(self) -> bool:
        """Evict the least recently used session that is not in use"""
        for session_id, session in list(self.sessions.items()):
            if session.lock.acquire(blocking=False):
                try:
                    session.reset()
                    del self.sessions[session_id]
                finally:
                    session.lock.release()
                logger.debug(f"Evicted session {session_id}")
                return True
        return False

    def get_stats(self) -> Dict:
        """Get session statistics"""
        with self.lock:
            buffer_bytes = sum(
                s.resized.nbytes for s in self.sessions.values() if s.resized is not None
            )
            return {
                "total_sessions": len(self.sessions),
                "max_sessions": self.max_sessions,
                "buffer_size_mb": buffer_bytes / (1024 * 1024),
                "busy_sessions": sum(1 for s in self.sessions.values() if s.lock.locked()),
            }

    def cleanup(self):
        """Drop all sessions"""
        with self.lock:
            logger.info("Cleaning up Session Manager...")
            for session in self.sessions.values():
                session.reset()
            self.sessions.clear()
            logger.info("Session Manager cleanup complete")
