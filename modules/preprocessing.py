"""
フレームのエンコード
Turns a raw camera frame into the JPEG bytes stored in the gallery.

Frames are kept at source resolution; no resizing or recompression
happens after this step.
"""
import cv2
import numpy as np

import config
from modules.errors import FrameReadError


def encode_frame(frame: np.ndarray, quality: int = config.JPEG_QUALITY) -> bytes:
    """
    BGR フレームを JPEG バイト列に変換する。

    Args:
        frame: HxWx3 (BGR) or HxW (grayscale) uint8 array from OpenCV
        quality: JPEG quality 0-100

    Returns:
        JPEG バイト列
    """
    if frame is None or not isinstance(frame, np.ndarray) or frame.size == 0:
        raise FrameReadError("空のフレームはエンコードできません (empty frame)")

    ok, encoded = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise FrameReadError("JPEG エンコードに失敗しました (encoding failed)")
    return encoded.tobytes()
