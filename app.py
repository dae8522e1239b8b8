"""
キャプチャフォーム: メインアプリケーション
Flask web application for the camera capture form.

Architecture: the page captures frames client-side via getUserMedia and
posts them as base64 JPEG data URLs. A server-side camera can be started
instead. The collected images are relayed in one JSON POST to the
configured webhook.
"""
import atexit

from flask import Blueprint, Flask, current_app, jsonify, render_template, request

import config
from modules.client import CaptureClient
from modules.errors import (
    CameraNotInitializedError,
    CameraUnavailableError,
    CaptureError,
    EmptyGalleryError,
    FrameReadError,
    GalleryFullError,
    GalleryIndexError,
    InvalidImageError,
    SubmissionError,
    SubmissionInProgressError,
)
from modules.logger import get_logger

log = get_logger("app")

bp = Blueprint("capture", __name__)

# 例外 → HTTP ステータス
ERROR_STATUS = {
    InvalidImageError: 400,
    EmptyGalleryError: 400,
    GalleryIndexError: 404,
    GalleryFullError: 409,
    SubmissionInProgressError: 409,
    FrameReadError: 500,
    SubmissionError: 502,
    CameraUnavailableError: 503,
    CameraNotInitializedError: 503,
}


def _client() -> CaptureClient:
    return current_app.extensions["capture_client"]


def _gallery_response(client: CaptureClient):
    data = client.snapshot_state()
    data["success"] = True
    return jsonify(data)


@bp.app_errorhandler(CaptureError)
def handle_capture_error(e):
    status = next((code for exc, code in ERROR_STATUS.items() if isinstance(e, exc)), 500)
    return jsonify({"success": False, "error": str(e)}), status


# ── ページルート ──

@bp.route("/")
def index():
    """メイン画面（キャプチャ）"""
    client = _client()
    return render_template(
        "index.html",
        max_photos=client.gallery.max_items,
        default_user_id=config.DEFAULT_USER_ID,
    )


# ── API エンドポイント ──

@bp.route("/camera/start", methods=["POST"])
def camera_start():
    """サーバー側カメラを起動する"""
    _client().initialize()
    return jsonify({"success": True})


@bp.route("/camera/stop", methods=["POST"])
def camera_stop():
    """サーバー側カメラを解放する"""
    _client().close()
    return jsonify({"success": True})


@bp.route("/capture", methods=["POST"])
def capture():
    """ブラウザから送られた画像、またはサーバー側カメラの画像を追加"""
    client = _client()
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    image_data = data.get("image")

    if image_data:
        client.add_image(image_data)
    else:
        client.capture()
    return _gallery_response(client)


@bp.route("/images/<int(signed=True):index>", methods=["DELETE"])
def delete_image(index):
    """画像を削除する（位置指定）"""
    client = _client()
    client.delete_at(index)
    return _gallery_response(client)


@bp.route("/gallery")
def gallery():
    """サムネイル一覧を JSON で返す"""
    return _gallery_response(_client())


@bp.route("/submit", methods=["POST"])
def submit():
    """全画像を Webhook へ送信する"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    result = _client().submit(data.get("userId", ""))
    return jsonify(result.to_dict())


@bp.route("/status")
def status():
    return jsonify(_client().snapshot_state())


def create_app(client=None) -> Flask:
    app = Flask(__name__)
    client = client or CaptureClient()
    app.extensions["capture_client"] = client
    app.register_blueprint(bp)
    return app


# ── 起動 ──

if __name__ == "__main__":
    log.info("=" * 50)
    log.info("  Capture Form: camera capture & relay")
    log.info("=" * 50)
    log.info(f"  Webhook: {config.WEBHOOK_URL or '(not configured)'}")
    log.info(f"  Server: http://localhost:{config.FLASK_PORT}")
    log.info(f"  Max photos: {config.MAX_PHOTOS}")
    log.info("=" * 50)

    app = create_app()
    atexit.register(app.extensions["capture_client"].close)
    app.run(
        host=config.FLASK_HOST,
        port=config.FLASK_PORT,
        debug=config.FLASK_DEBUG,
        threaded=True,
    )
