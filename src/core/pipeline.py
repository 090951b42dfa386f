"""
Image ingestion pipeline.

Sequences Validate -> Decode -> Resize -> Filter -> Encode for a new upload,
and Filter -> Encode for a filter change on an already resized image. The
resized, unfiltered buffer is returned to the caller so a filter change never
re-validates, re-decodes or re-resizes.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple, Union

from common.constants import PipelineConstants
from common.enums import FilterKind, PipelineStage, SessionState
from core.exceptions import (
    CorruptDataError,
    EncodeFailureError,
    PipelineError,
    ProcessingFailureError,
)
from core.image.codec import decode, encode
from core.image.filters import FilterEngine
from core.image.processors import resize
from core.image.validation import validate
from domain_types import EncodedImage, PixelBuffer, RawUpload

logger = logging.getLogger(__name__)

StateCallback = Callable[[SessionState], None]

# State reached once each stage completes
STAGE_STATES = {
    PipelineStage.VALIDATE: SessionState.VALIDATED,
    PipelineStage.DECODE: SessionState.DECODED,
    PipelineStage.RESIZE: SessionState.RESIZED,
    PipelineStage.FILTER: SessionState.FILTERED,
    PipelineStage.ENCODE: SessionState.ENCODED,
}


def stage_error(stage: PipelineStage, error: Exception) -> PipelineError:
    """Wrap an unexpected exception in the error type of the stage it escaped from."""
    reason = f"{type(error).__name__}: {error}"
    if stage == PipelineStage.DECODE:
        return CorruptDataError("unknown", reason)
    if stage == PipelineStage.ENCODE:
        return EncodeFailureError(reason)
    return ProcessingFailureError(stage, reason)


@dataclass
class PipelineResult:
    """Outcome of ingesting one upload."""

    encoded: EncodedImage
    resized: PixelBuffer
    filter: FilterKind
    original_size: Tuple[int, int]
    stage_times_ms: Dict[str, float] = field(default_factory=dict)

    @property
    def processing_time_ms(self) -> float:
        return sum(self.stage_times_ms.values())


class ImagePipeline:
    """
    Orchestrates the pipeline stages.

    The pipeline itself holds only immutable limits, so one instance can be
    shared by concurrent callers as long as each call owns its buffers.
    """

    def __init__(
        self,
        max_upload_bytes: int = PipelineConstants.MAX_UPLOAD_BYTES,
        max_width: int = PipelineConstants.MAX_DIMENSION,
        max_height: int = PipelineConstants.MAX_DIMENSION,
        brightness_delta: int = PipelineConstants.BRIGHTNESS_DELTA,
        encode_quality: float = PipelineConstants.ENCODE_QUALITY,
    ):
        """
        Initialize pipeline limits.

        Args:
            max_upload_bytes: Largest accepted upload
            max_width: Maximum output width
            max_height: Maximum output height
            brightness_delta: Amount added per channel by the bright filter
            encode_quality: JPEG quality on a [0, 1] scale
        """
        self.max_upload_bytes = max_upload_bytes
        self.max_width = max_width
        self.max_height = max_height
        self.brightness_delta = brightness_delta
        self.encode_quality = encode_quality
        self.filter_engine = FilterEngine(brightness_delta=brightness_delta)

        logger.info(
            f"Image pipeline initialized: max upload {max_upload_bytes} bytes, "
            f"max size {max_width}x{max_height}, quality {encode_quality}"
        )

    @classmethod
    def from_config(cls, config) -> "ImagePipeline":
        """Build a pipeline from a PipelineConfig."""
        return cls(
            max_upload_bytes=config.max_upload_bytes,
            max_width=config.max_dimension,
            max_height=config.max_dimension,
            brightness_delta=config.brightness_delta,
            encode_quality=config.encode_quality,
        )

    def _run_stage(
        self,
        stage: PipelineStage,
        timings: Dict[str, float],
        on_state: Optional[StateCallback],
        func,
        *args,
    ):
        """Run one stage, recording its duration and reporting the state reached."""
        start = time.perf_counter()
        try:
            result = func(*args)
        except PipelineError as e:
            logger.warning(f"Pipeline failed at {stage.value}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {stage.value} stage: {e}", exc_info=True)
            raise stage_error(stage, e) from e

        timings[stage.value] = (time.perf_counter() - start) * 1000
        logger.debug(f"Stage {stage.value} completed in {timings[stage.value]:.1f}ms")
        if on_state is not None:
            on_state(STAGE_STATES[stage])
        return result

    def ingest(
        self,
        upload: RawUpload,
        kind: Union[FilterKind, str] = FilterKind.NORMAL,
        on_state: Optional[StateCallback] = None,
    ) -> PipelineResult:
        """
        Run the full pipeline on a new upload.

        Args:
            upload: Bytes and declared media type from the caller
            kind: Filter to apply to the resized image (normal by default)
            on_state: Optional callback invoked with each state reached

        Returns:
            PipelineResult with the encoded image and the retained resized buffer

        Raises:
            PipelineError: First failure encountered; its stage attribute names the stage
            ValueError: If kind names no filter
        """
        kind = FilterKind(kind)
        timings: Dict[str, float] = {}

        self._run_stage(
            PipelineStage.VALIDATE, timings, on_state, validate, upload, self.max_upload_bytes
        )
        decoded = self._run_stage(PipelineStage.DECODE, timings, on_state, decode, upload)
        resized = self._run_stage(
            PipelineStage.RESIZE,
            timings,
            on_state,
            resize,
            decoded,
            self.max_width,
            self.max_height,
        )
        filtered = self._run_stage(
            PipelineStage.FILTER, timings, on_state, self.filter_engine.apply, resized, kind
        )
        encoded = self._run_stage(
            PipelineStage.ENCODE, timings, on_state, encode, filtered, self.encode_quality
        )

        result = PipelineResult(
            encoded=encoded,
            resized=resized,
            filter=kind,
            original_size=decoded.size,
            stage_times_ms=timings,
        )

        logger.info(
            f"Ingested {upload.filename or 'upload'} ({upload.size} bytes): "
            f"{decoded.width}x{decoded.height} -> {resized.width}x{resized.height}, "
            f"{kind.value} filter, {encoded.size} bytes in {result.processing_time_ms:.1f}ms"
        )
        return result

    def reapply_filter(
        self,
        resized: PixelBuffer,
        kind: Union[FilterKind, str],
        on_state: Optional[StateCallback] = None,
    ) -> EncodedImage:
        """
        Apply a different filter to a buffer produced by a previous ingest.

        Args:
            resized: Resized, unfiltered buffer from PipelineResult.resized
            kind: Filter to apply
            on_state: Optional callback invoked with each state reached

        Returns:
            Newly encoded image

        Raises:
            PipelineError: If filtering or encoding fails, tagged with the stage
            ValueError: If kind names no filter
        """
        kind = FilterKind(kind)
        timings: Dict[str, float] = {}

        filtered = self._run_stage(
            PipelineStage.FILTER, timings, on_state, self.filter_engine.apply, resized, kind
        )
        encoded = self._run_stage(
            PipelineStage.ENCODE, timings, on_state, encode, filtered, self.encode_quality
        )

        logger.debug(
            f"Reapplied {kind.value} filter to {resized.width}x{resized.height} "
            f"in {sum(timings.values()):.1f}ms"
        )
        return encoded
