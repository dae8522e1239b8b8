"""
例外定義
Errors raised by the capture client. The web layer maps each one to an
HTTP status and shows the message to the user.
"""
from typing import Optional


class CaptureError(Exception):
    """Base class for all capture form errors."""


# ── カメラ ──

class CameraUnavailableError(CaptureError):
    """Camera access denied or no device present."""


class CameraNotInitializedError(CaptureError):
    """capture() called before the camera was opened."""


class FrameReadError(CaptureError):
    """The device did not return a frame, or it could not be encoded."""


# ── ギャラリー ──

class InvalidImageError(CaptureError, ValueError):
    """Not a base64 JPEG data URL."""


class GalleryFullError(CaptureError):
    def __init__(self, limit: int):
        super().__init__(f"最大 {limit} 枚まで撮影できます (limit: {limit} photos)")
        self.limit = limit


class GalleryIndexError(CaptureError, IndexError):
    def __init__(self, index: int, size: int):
        super().__init__(f"Image index {index} out of range (gallery has {size})")
        self.index = index
        self.size = size


# ── 送信 ──

class EmptyGalleryError(CaptureError):
    def __init__(self):
        super().__init__("送信する画像がありません (no images to submit)")


class SubmissionInProgressError(CaptureError):
    def __init__(self):
        super().__init__("送信中です (a submission is already in progress)")


class SubmissionError(CaptureError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
