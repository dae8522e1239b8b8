"""
キャプチャクライアント
Owns the camera session, the gallery and the single outbound submission.

State is two flags: idle/staged (gallery empty or not) and ready/submitting.
Submit is only accepted from staged × ready. While a submission is in flight
every mutation is refused so the payload and thumbnail indices stay put.
"""
from __future__ import annotations

import threading
from typing import Optional

import requests

import config
from modules.camera import CameraSession
from modules.errors import (
    CameraUnavailableError,
    EmptyGalleryError,
    GalleryFullError,
    SubmissionError,
    SubmissionInProgressError,
)
from modules.gallery import Gallery, Thumbnail
from modules.logger import get_logger
from modules.models import CapturedImage, SubmissionPayload, SubmitResult
from modules.preprocessing import encode_frame

log = get_logger("capture_client")

MSG_SUBMIT_OK = "送信しました (upload complete)"
MSG_SUBMIT_FAILED = "送信に失敗しました (upload failed)"


class CaptureClient:
    def __init__(
        self,
        camera: Optional[CameraSession] = None,
        gallery: Optional[Gallery] = None,
        endpoint: str = config.WEBHOOK_URL,
        timeout: float = config.SUBMIT_TIMEOUT_SEC,
        session: Optional[requests.Session] = None,
        jpeg_quality: int = config.JPEG_QUALITY,
    ):
        self.camera = camera or CameraSession()
        self.gallery = gallery if gallery is not None else Gallery()
        self.endpoint = endpoint
        self.timeout = timeout
        self.jpeg_quality = jpeg_quality
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._submitting = False
        self.status_message = ""

    # ── 状態 ──

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def can_submit(self) -> bool:
        return not self._submitting and not self.gallery.is_empty

    @property
    def state(self) -> dict:
        return {
            "gallery": "idle" if self.gallery.is_empty else "staged",
            "submission": "submitting" if self._submitting else "ready",
        }

    def snapshot_state(self) -> dict:
        """Gallery render and status flags taken under one lock."""
        with self._lock:
            return {
                "images": [t.to_dict() for t in self.gallery.render()],
                "count": len(self.gallery),
                "max_photos": self.gallery.max_items,
                "can_submit": self.can_submit,
                "state": self.state,
                "camera_open": self.camera.is_open,
                "status": self.status_message,
            }

    def _ensure_not_submitting(self):
        if self._submitting:
            raise SubmissionInProgressError()

    # ── カメラ ──

    def initialize(self):
        """Open the camera. Failure leaves capture() unusable; there is no retry."""
        with self._lock:
            try:
                self.camera.open()
            except CameraUnavailableError as e:
                self.status_message = str(e)
                raise
            self.status_message = ""

    def close(self):
        # waits for an in-progress capture() to finish reading
        with self._lock:
            self.camera.close()

    # ── ギャラリー操作 ──

    def capture(self) -> CapturedImage:
        """Grab the current camera frame and append it to the gallery."""
        with self._lock:
            self._ensure_not_submitting()
            if self.gallery.is_full:
                raise GalleryFullError(self.gallery.max_items)
            frame = self.camera.read_frame()
            image = CapturedImage.from_jpeg_bytes(encode_frame(frame, self.jpeg_quality))
            index = self.gallery.add(image)
        log.info(f"Captured image #{index} ({image.size_bytes} bytes)")
        return image

    def add_image(self, data_url: str) -> CapturedImage:
        """Append a frame encoded by the browser (canvas.toDataURL)."""
        image = CapturedImage.from_data_url(data_url)
        with self._lock:
            self._ensure_not_submitting()
            index = self.gallery.add(image)
        log.info(f"Added browser image #{index} ({image.size_bytes} bytes)")
        return image

    def delete_at(self, index: int) -> CapturedImage:
        with self._lock:
            self._ensure_not_submitting()
            removed = self.gallery.delete_at(index)
            remaining = len(self.gallery)
        log.info(f"Deleted image #{index}, {remaining} left")
        return removed

    def render(self) -> list[Thumbnail]:
        with self._lock:
            return self.gallery.render()

    # ── 送信 ──

    def submit(self, user_id: Optional[str] = None) -> SubmitResult:
        """
        ギャラリー全体を Webhook へ 1 回の POST で送信する。

        On a 2xx response the gallery is cleared. On any other status or a
        transport error the gallery is left untouched and SubmissionError is
        raised. No retry.
        """
        with self._lock:
            self._ensure_not_submitting()
            if self.gallery.is_empty:
                raise EmptyGalleryError()
            if not self.endpoint:
                self.status_message = MSG_SUBMIT_FAILED
                raise SubmissionError("送信先 URL が設定されていません (WEBHOOK_URL is not configured)")
            payload = SubmissionPayload.build(self.gallery.snapshot(), user_id)
            self._submitting = True

        count = len(payload.images)
        log.info(f"Submitting {count} image(s) user={payload.user_id} ts={payload.timestamp}")
        try:
            try:
                resp = self._session.post(
                    self.endpoint,
                    json=payload.to_dict(),
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                self.status_message = MSG_SUBMIT_FAILED
                log.error(f"Submission failed: {e}")
                raise SubmissionError(f"{MSG_SUBMIT_FAILED}: {e}") from e

            if not 200 <= resp.status_code < 300:
                self.status_message = MSG_SUBMIT_FAILED
                log.error(f"Submission rejected: HTTP {resp.status_code}")
                raise SubmissionError(
                    f"{MSG_SUBMIT_FAILED}: HTTP {resp.status_code}",
                    status_code=resp.status_code,
                )

            with self._lock:
                self.gallery.clear()
            self.status_message = MSG_SUBMIT_OK
            log.info(f"Submitted {count} image(s): HTTP {resp.status_code}")
            return SubmitResult(
                status_code=resp.status_code,
                image_count=count,
                user_id=payload.user_id,
                timestamp=payload.timestamp,
            )
        finally:
            with self._lock:
                self._submitting = False
