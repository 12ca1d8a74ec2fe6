"""マニフェストのレコード定義と読み込み"""
from dataclasses import dataclass
from typing import List, Optional
import json
import os

from ..exceptions import ManifestError
from .config import UploadSettings


# マニフェスト自体のメタデータを表す予約キー
MANIFEST_CONFIG = "__manifest_config__"


@dataclass(frozen=True)
class AssetRecord:
    """マニフェストの1エントリ"""
    key: str
    local_path: Optional[str]
    relative_path: str
    content_hash: Optional[str] = None
    gzip_hash: Optional[str] = None

    @property
    def is_asset(self) -> bool:
        """メタデータではなく実アセットか"""
        return bool(self.key) and self.key != MANIFEST_CONFIG

    def matches_etag(self, etag: Optional[str]) -> bool:
        """ETagがいずれかのハッシュと一致するか"""
        if not etag:
            return False
        hashes = [h for h in (self.content_hash, self.gzip_hash) if h]
        return etag in hashes


@dataclass(frozen=True)
class UploadInstruction:
    """1ファイル分のアップロード指示"""
    record: AssetRecord
    remote_key: str
    source_file: str
    upload_options: UploadSettings


def load_manifest(manifest_path: str) -> List[AssetRecord]:
    """マニフェストJSONを読み込んでレコードのリストを返す

    マニフェストはアセット名をキーとするオブジェクトで、各値は
    ``relpath``、``abspath``、``hash``、``gzipHash`` を持つ。
    値がオブジェクトでないエントリはアセットではないので読み飛ばす。
    """
    if not os.path.isfile(manifest_path):
        raise ManifestError(f"Manifest file {manifest_path} not found.")

    try:
        with open(manifest_path, "r", encoding="utf-8") as file:
            data = json.load(file)
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestError(f"Error reading manifest {manifest_path}: {e}")

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {manifest_path} must be a JSON object")

    records = []
    for key, entry in data.items():
        if not isinstance(entry, dict):
            continue
        records.append(AssetRecord(
            key=key,
            local_path=entry.get("abspath"),
            relative_path=entry.get("relpath") or "",
            content_hash=entry.get("hash"),
            gzip_hash=entry.get("gzipHash"),
        ))
    return records
