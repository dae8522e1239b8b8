"""
共通テストフィクスチャ

Camera and HTTP are always mocked; no device or network is needed.
"""
import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

# ログはテスト用の一時ディレクトリへ
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="capture-form-logs-"))

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import cv2
import numpy as np
import pytest
import requests

from modules.camera import CameraSession
from modules.client import CaptureClient
from modules.gallery import Gallery
from modules.models import CapturedImage

WEBHOOK = "https://flow.example.test/trigger"


def make_frame(shade: int = 0) -> np.ndarray:
    """Solid-colour BGR frame; shade makes frames distinguishable."""
    img = np.zeros((48, 64, 3), dtype=np.uint8)
    img[:, :] = (shade % 256, 64, 128)
    return img


def make_jpeg(shade: int = 0) -> bytes:
    ok, encoded = cv2.imencode(".jpg", make_frame(shade))
    assert ok
    return encoded.tobytes()


def make_image(shade: int = 0) -> CapturedImage:
    return CapturedImage.from_jpeg_bytes(make_jpeg(shade))


def make_response(status_code: int = 200) -> MagicMock:
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    return resp


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def fake_camera() -> MagicMock:
    """Open camera whose frames get brighter on every read."""
    camera = MagicMock(spec=CameraSession)
    camera.is_open = True
    shades = iter(range(0, 256, 10))
    camera.read_frame.side_effect = lambda: make_frame(next(shades))
    return camera


@pytest.fixture
def http_session() -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.post.return_value = make_response(200)
    return session


@pytest.fixture
def client(fake_camera, http_session) -> CaptureClient:
    return CaptureClient(
        camera=fake_camera,
        gallery=Gallery(max_items=10),
        endpoint=WEBHOOK,
        session=http_session,
    )
