"""
ヘッドレス撮影・送信ツール
Open the local camera, capture N frames and submit them in one request.

    python tools/snap_and_send.py --count 3 --user alice
"""
import argparse
import os
import sys
import time

# プロジェクトルートをパスに追加
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from modules.camera import CameraSession
from modules.client import CaptureClient
from modules.errors import CaptureError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Capture photos and send them to the webhook")
    parser.add_argument("--count", type=int, default=1, help="number of photos")
    parser.add_argument("--interval", type=float, default=1.0, help="seconds between photos")
    parser.add_argument("--user", default="", help=f"user id (default: {config.DEFAULT_USER_ID})")
    parser.add_argument("--camera", type=int, default=config.CAMERA_INDEX)
    parser.add_argument("--url", default=config.WEBHOOK_URL, help="webhook URL")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        with CameraSession(index=args.camera) as camera:
            client = CaptureClient(camera=camera, endpoint=args.url)
            for i in range(args.count):
                if i:
                    time.sleep(args.interval)
                image = client.capture()
                print(f"  ✓ photo {i + 1}/{args.count} ({image.size_bytes} bytes)")
            result = client.submit(args.user)
    except CaptureError as e:
        print(f"失敗: {e}", file=sys.stderr)
        return 1

    print(f"完了！ {result.image_count} 枚送信しました (user={result.user_id}, HTTP {result.status_code})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
