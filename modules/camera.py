"""
カメラモジュール
Server-side camera session wrapping OpenCV VideoCapture.

In the browser flow the page owns the stream (getUserMedia) and posts
encoded frames; this session is used when the server itself has the camera
(kiosk mode, tools/snap_and_send.py). Exactly one handle is held at a time
and it is always released on close() or when leaving a ``with`` block.
"""
from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

import config
from modules.errors import CameraNotInitializedError, CameraUnavailableError, FrameReadError
from modules.logger import get_logger

log = get_logger("camera")


class CameraSession:
    """カメラの取得・解放を管理するクラス"""

    def __init__(self, index: int = config.CAMERA_INDEX,
                 width: int = config.CAPTURE_WIDTH, height: int = config.CAPTURE_HEIGHT):
        self.index = index
        self.width = width
        self.height = height
        self._cap: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> "CameraSession":
        if self._cap is not None:
            return self

        log.info(f"Opening camera index={self.index}")
        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            log.error(f"Camera index={self.index} not available")
            raise CameraUnavailableError(
                "カメラにアクセスできません (camera access denied or no device present)"
            )

        if self.width and self.height:
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        self._cap = cap
        log.info(f"Camera opened: {self.resolution[0]}x{self.resolution[1]}")
        return self

    def read_frame(self) -> np.ndarray:
        """Current frame at the source resolution (BGR)."""
        cap = self._cap
        if cap is None:
            raise CameraNotInitializedError("カメラが起動していません (camera not started)")

        ret, frame = cap.read()
        if not ret or frame is None:
            log.warning("read() returned no frame")
            raise FrameReadError("フレームを取得できませんでした (no frame from camera)")
        return frame

    @property
    def resolution(self) -> tuple[int, int]:
        if self._cap is None:
            return (0, 0)
        return (
            int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

    def close(self):
        if self._cap is None:
            return
        cap, self._cap = self._cap, None
        cap.release()
        log.info(f"Camera index={self.index} released")

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self):
        state = "open" if self.is_open else "closed"
        return f"CameraSession(index={self.index}, state='{state}')"
