"""アップロード先キーの解決"""
from typing import Optional

from ..models.manifest import AssetRecord
from ..utils.file_utils import build_dest_key


class DestinationResolver:
    """レコードからS3のキーを求める

    HEADとアップロードで同じキーを使うため、両フェーズで共有する。
    """

    def __init__(self, dest: str = "", rel_root: Optional[str] = None, encode: bool = False):
        self.dest = dest
        self.rel_root = rel_root
        self.encode = encode

    def remote_key(self, record: AssetRecord) -> str:
        """ValueError: rel_root指定時にlocal_pathがない"""
        return build_dest_key(
            self.dest,
            record.relative_path,
            local_path=record.local_path,
            rel_root=self.rel_root,
            encode=self.encode,
        )
