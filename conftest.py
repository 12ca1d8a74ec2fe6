"""テスト共通のフィクスチャ"""
import hashlib
import json
import threading
import time

import pytest

from s3_asset_uploader.exceptions import ProbeTransportError, UploadTransportError
from s3_asset_uploader.core.remote_store import HeadResult
from s3_asset_uploader.models.config import LoggingConfig
from s3_asset_uploader.utils.logger import LoggerManager


@pytest.fixture(autouse=True)
def logger():
    """テストごとにロガーを初期化"""
    LoggerManager.reset()
    yield LoggerManager.setup(LoggingConfig(level="DEBUG"))
    LoggerManager.reset()


def md5_of(path) -> str:
    with open(path, "rb") as f:
        return hashlib.md5(f.read()).hexdigest()


class FakeStore:
    """メモリ上のバケット。同時実行数を記録する"""

    def __init__(self, objects=None, fail_heads=(), fail_uploads=(), delay=0.0, delays=None):
        self.objects = dict(objects or {})
        self.fail_heads = set(fail_heads)
        self.fail_uploads = set(fail_uploads)
        self.delay = delay
        self.delays = delays or {}
        self.head_calls = []
        self.uploads = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def _enter(self):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)

    def _leave(self):
        with self._lock:
            self.in_flight -= 1

    def head(self, key):
        self._enter()
        try:
            time.sleep(self.delays.get(key, self.delay))
            with self._lock:
                self.head_calls.append(key)
            if key in self.fail_heads:
                raise ProbeTransportError(key, "connection reset")
            if key in self.objects:
                return HeadResult(status_code=200, etag=self.objects[key])
            return HeadResult(status_code=404)
        finally:
            self._leave()

    def upload(self, local_file, remote_key, settings):
        self._enter()
        try:
            time.sleep(self.delays.get(remote_key, self.delay))
            if remote_key in self.fail_uploads:
                raise UploadTransportError(local_file, remote_key, "access denied")
            with self._lock:
                self.uploads.append(remote_key)
                self.objects[remote_key] = md5_of(local_file)
            return f"Uploaded {local_file} to {remote_key}"
        finally:
            self._leave()


@pytest.fixture
def store_factory():
    return FakeStore


@pytest.fixture
def build_dir(tmp_path):
    """ビルド成果物とマニフェストを作成する"""
    build = tmp_path / "build"
    (build / "css").mkdir(parents=True)
    (build / "js").mkdir()
    (build / "css" / "app.css").write_text("body { color: red; }")
    (build / "js" / "app.js").write_text("console.log('app');")
    (build / "js" / "vendor.js").write_text("/* vendor */")

    manifest = {"__manifest_config__": {"version": 1}}
    for rel in ("css/app.css", "js/app.js", "js/vendor.js"):
        path = build / rel
        manifest[rel] = {
            "relpath": rel,
            "abspath": str(path),
            "hash": md5_of(path),
        }
    (tmp_path / "manifest.json").write_text(json.dumps(manifest))
    return build
