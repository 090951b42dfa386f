"""
Image Service - Business logic for preview image operations.

This service ties the pipeline to image sessions: an upload creates a
session holding the resized image, and a filter change re-renders from that
session without decoding again.
"""

import logging
from typing import Dict, List, Union

from common.enums import FilterKind, SessionState
from core.exceptions import SessionNotFoundError
from core.pipeline import ImagePipeline
from core.session_manager import ImageSessionManager, SessionSnapshot
from domain_types import RawUpload

logger = logging.getLogger(__name__)


class ImageService:
    """
    Service for uploading images and switching their filter.

    This service provides high-level image operations for the API layer.
    """

    def __init__(self, pipeline: ImagePipeline, session_manager: ImageSessionManager):
        """
        Initialize image service.

        Args:
            pipeline: Image pipeline instance
            session_manager: Session manager instance
        """
        self.pipeline = pipeline
        self.session_manager = session_manager

    def upload(
        self, upload: RawUpload, kind: Union[FilterKind, str] = FilterKind.NORMAL
    ) -> SessionSnapshot:
        """
        Ingest an upload into a new session.

        Args:
            upload: Uploaded bytes with declared media type
            kind: Filter applied to the first render

        Returns:
            Snapshot of the new session in ENCODED state

        Raises:
            PipelineError: If any stage fails; no session is kept in that case
            MemoryError: If every stored session is busy
        """
        kind = FilterKind(kind)

        with self.session_manager.open_session(filename=upload.filename) as session:
            result = self.pipeline.ingest(upload, kind, on_state=session.advance)
            session.resized = result.resized
            session.encoded = result.encoded
            session.filter = result.filter
            session.original_size = result.original_size
            snapshot = session.snapshot()

        logger.info(
            f"Upload stored in session {snapshot.session_id}: "
            f"{result.resized.width}x{result.resized.height} ({kind.value})"
        )
        return snapshot

    def change_filter(self, session_id: str, kind: Union[FilterKind, str]) -> SessionSnapshot:
        """
        Re-render a session with another filter.

        Args:
            session_id: Session identifier
            kind: Filter to apply to the stored resized image

        Returns:
            Snapshot of the updated session

        Raises:
            SessionNotFoundError: If the session does not exist or holds no image
        """
        kind = FilterKind(kind)

        with self.session_manager.session_lock(session_id) as session:
            if session.resized is None:
                raise SessionNotFoundError(session_id)

            try:
                encoded = self.pipeline.reapply_filter(
                    session.resized, kind, on_state=session.advance
                )
            except Exception:
                # The previous render is still valid
                session.state = SessionState.ENCODED
                raise
            session.encoded = encoded
            session.filter = kind
            snapshot = session.snapshot()

        logger.info(f"Applied {kind.value} filter to session {session_id}")
        return snapshot

    def get_preview(self, session_id: str) -> SessionSnapshot:
        """
        Get the current render of a session.

        Waits for an in-flight operation on the session to finish.

        Raises:
            SessionNotFoundError: If the session does not exist or holds no image
        """
        with self.session_manager.session_lock(session_id) as session:
            if session.encoded is None:
                raise SessionNotFoundError(session_id)
            return session.snapshot()

    def clear(self, session_id: str) -> None:
        """
        Remove an image and its session.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        if not self.session_manager.delete(session_id):
            raise SessionNotFoundError(session_id)
        logger.info(f"Cleared session {session_id}")

    def list_sessions(self) -> List[Dict]:
        return self.session_manager.list_sessions()

    def get_stats(self) -> Dict:
        """
        Get session statistics.

        Returns:
            Statistics dictionary with:
            - total_sessions: Number of sessions stored
            - max_sessions: Session limit
            - buffer_size_mb: Memory held by resized buffers
            - busy_sessions: Sessions with an operation in flight
        """
        return self.session_manager.get_stats()

    def get_available_filters(self) -> List[str]:
        return self.pipeline.filter_engine.get_available_filters()
