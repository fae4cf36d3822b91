"""Worksheet enrichment state machine.

    idle -> capturing -> image_ready -> analyzing -> idle (merged)
                                                  -> image_ready (failed)

File import reaches image_ready directly from idle. The image is owned by the
workflow instance and never persisted; only the merged narrative survives, in
the caller's draft.
"""

import asyncio
from enum import StrEnum
from typing import Optional

from tutor_reports.clients.base_llm_client import BaseLLMClient
from tutor_reports.exceptions import AnalysisFailedError, CaptureDeviceError, WorkflowStateError
from tutor_reports.schemas.reports import ReportDraft
from tutor_reports.services.enrichment.capture import (
    BaseCaptureDevice,
    CaptureHandle,
    encode_jpeg,
    normalize_to_jpeg,
)
from tutor_reports.services.enrichment.prompts import WORKSHEET_ANALYSIS_PROMPT, merge_analysis
from tutor_reports.utils.logger import get_logger

log = get_logger(__name__)


class EnrichmentState(StrEnum):
    IDLE = "idle"
    CAPTURING = "capturing"
    IMAGE_READY = "image_ready"
    ANALYZING = "analyzing"


class EnrichmentWorkflow:
    """
    Capture or import a worksheet image, analyze it, merge the narrative.

    Safe for single-threaded async use within one event loop. Requests that are
    not defined for the current state raise WorkflowStateError and change
    nothing. A generation counter is bumped whenever the image or device is
    abandoned, so results of awaits that finish afterwards are dropped.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        capture_device: BaseCaptureDevice,
        jpeg_quality: int = 92,
        prompt: str = WORKSHEET_ANALYSIS_PROMPT,
    ):
        self.llm_client = llm_client
        self.capture_device = capture_device
        self.jpeg_quality = jpeg_quality
        self.prompt = prompt

        self._state = EnrichmentState.IDLE
        self._image: Optional[bytes] = None
        self._handle: Optional[CaptureHandle] = None
        self._generation = 0

    @property
    def state(self) -> EnrichmentState:
        return self._state

    @property
    def image(self) -> Optional[bytes]:
        """JPEG payload held in image_ready/analyzing."""
        return self._image

    def _require(self, action: str, *allowed: EnrichmentState) -> None:
        if self._state not in allowed:
            raise WorkflowStateError(action, self._state.value)

    def _release_handle(self) -> None:
        if self._handle is not None:
            self._handle.release()
            self._handle = None

    # --- capture ---

    async def start_capture(self) -> None:
        """idle -> capturing. Acquisition failure returns to idle."""
        self._require("start capture", EnrichmentState.IDLE)
        self._state = EnrichmentState.CAPTURING
        generation = self._generation

        try:
            handle = await asyncio.to_thread(self.capture_device.acquire)
        except CaptureDeviceError as e:
            if generation == self._generation:
                self._state = EnrichmentState.IDLE
            log.warning("capture device unavailable", reason=e.reason)
            raise
        except OSError as e:
            if generation == self._generation:
                self._state = EnrichmentState.IDLE
            log.warning("capture device unavailable", reason="os_error", error=str(e))
            raise CaptureDeviceError("os_error") from e

        if generation != self._generation:
            # Cancelled while acquiring
            handle.release()
            return

        self._handle = handle
        log.info("capture started")

    async def snapshot(self) -> bytes:
        """capturing -> image_ready. The device is released whatever happens."""
        self._require("take snapshot", EnrichmentState.CAPTURING)
        if self._handle is None:
            raise WorkflowStateError("take snapshot", "acquiring")

        handle, self._handle = self._handle, None
        generation = self._generation
        try:
            frame = await asyncio.to_thread(handle.read_frame)
            image = encode_jpeg(frame, self.jpeg_quality)
        except CaptureDeviceError:
            if generation == self._generation:
                self._state = EnrichmentState.IDLE
            raise
        except OSError as e:
            if generation == self._generation:
                self._state = EnrichmentState.IDLE
            raise CaptureDeviceError("encode_failed") from e
        finally:
            handle.release()

        if generation != self._generation:
            raise WorkflowStateError("take snapshot", self._state.value)

        self._image = image
        self._state = EnrichmentState.IMAGE_READY
        log.info("snapshot taken", image_bytes=len(image))
        return image

    def cancel_capture(self) -> None:
        """capturing -> idle, keeping nothing."""
        self._require("cancel capture", EnrichmentState.CAPTURING)
        self._release_handle()
        self._generation += 1
        self._state = EnrichmentState.IDLE
        log.info("capture cancelled")

    # --- image ---

    def import_image(self, data: bytes) -> bytes:
        """idle|image_ready -> image_ready from an uploaded file, re-encoded as JPEG."""
        self._require("import image", EnrichmentState.IDLE, EnrichmentState.IMAGE_READY)
        image = normalize_to_jpeg(data, self.jpeg_quality)
        self._image = image
        self._state = EnrichmentState.IMAGE_READY
        log.info("image imported", image_bytes=len(image))
        return image

    def discard_image(self) -> None:
        """image_ready|analyzing -> idle. A pending analysis result will be ignored."""
        self._require("discard image", EnrichmentState.IMAGE_READY, EnrichmentState.ANALYZING)
        self._image = None
        self._generation += 1
        self._state = EnrichmentState.IDLE
        log.info("image discarded")

    def reset(self) -> None:
        """Return to idle from any state, releasing the device and dropping the image."""
        self._release_handle()
        self._image = None
        self._generation += 1
        self._state = EnrichmentState.IDLE

    # --- analysis ---

    async def analyze(self, draft: ReportDraft) -> Optional[str]:
        """
        image_ready -> analyzing -> idle, appending the narrative to draft.details.

        Args:
            draft: Draft whose details field receives the analysis

        Returns:
            The narrative text, or None if the image was discarded while waiting

        Raises:
            AnalysisFailedError: On service failure or empty output; state goes
                back to image_ready and draft.details is untouched
        """
        self._require("analyze", EnrichmentState.IMAGE_READY)
        if self._image is None:
            raise WorkflowStateError("analyze", "no_image")

        image = self._image
        generation = self._generation
        provider = self.llm_client.provider_name
        self._state = EnrichmentState.ANALYZING
        log.info("analysis started", provider=provider, image_bytes=len(image))

        try:
            text = await self.llm_client.analyze_image(image, self.prompt)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._state = EnrichmentState.IMAGE_READY
            raise
        except Exception as e:
            if generation != self._generation:
                log.info("late analysis failure ignored", provider=provider)
                return None
            self._state = EnrichmentState.IMAGE_READY
            log.error("analysis failed", provider=provider, error=str(e), exc_info=True)
            raise AnalysisFailedError(provider=provider, reason=str(e)) from e

        if generation != self._generation:
            log.info("late analysis ignored", provider=provider)
            return None

        if not text or not text.strip():
            self._state = EnrichmentState.IMAGE_READY
            log.warning("analysis returned no text", provider=provider)
            raise AnalysisFailedError(provider=provider, reason="empty response")

        draft.details = merge_analysis(draft.details, text)
        self._image = None
        self._state = EnrichmentState.IDLE
        log.info("analysis merged", provider=provider, chars=len(text))
        return text
