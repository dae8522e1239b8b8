"""
キャプチャフォーム 設定ファイル
Configuration for the camera capture form.

Camera capture runs client-side via getUserMedia by default; the server-side
OpenCV camera is an alternative source for kiosks and headless use.
"""
import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# ── 送信先 (Webhook) ──
# Cloud flow trigger URL. Set here or via environment variable.
WEBHOOK_URL = os.environ.get("WEBHOOK_URL", "")
SUBMIT_TIMEOUT_SEC = int(os.environ.get("SUBMIT_TIMEOUT_SEC", "30"))

# ── ギャラリー設定 ──
MAX_PHOTOS = int(os.environ.get("MAX_PHOTOS", "10"))
DEFAULT_USER_ID = "anonymous"

# ── 画像設定 ──
CAMERA_INDEX = int(os.environ.get("CAMERA_INDEX", "0"))
CAPTURE_WIDTH = 0   # 0 = keep source resolution
CAPTURE_HEIGHT = 0
JPEG_QUALITY = 92

# ── Flask 設定 ──
FLASK_HOST = "0.0.0.0"
FLASK_PORT = int(os.environ.get("FLASK_PORT", "5000"))
FLASK_DEBUG = os.environ.get("FLASK_DEBUG", "") == "1"

# ── ログ設定 ──
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_DIR = os.environ.get("LOG_DIR", os.path.join(BASE_DIR, "logs"))
