"""S3のHEADでアップロードが必要なアセットを判定する"""
import threading
from dataclasses import dataclass, field
from typing import List, Sequence

from ..models.manifest import AssetRecord
from ..utils.concurrency import run_bounded
from ..utils.logger import LoggerManager
from .paths import DestinationResolver
from .remote_store import RemoteStore


@dataclass
class ProbeResult:
    """HEADチェックの結果"""
    needs_upload: List[AssetRecord] = field(default_factory=list)
    head_count: int = 0


class ExistenceProber:
    """マニフェストの各アセットについてS3上のETagを確認する"""

    def __init__(self, store: RemoteStore, resolver: DestinationResolver, enabled: bool = True):
        self.store = store
        self.resolver = resolver
        self.enabled = enabled
        self.logger = LoggerManager.get_logger()
        self._lock = threading.Lock()
        self._head_count = 0

    def probe(self, manifest: Sequence[AssetRecord], concurrency_limit: int = 0) -> ProbeResult:
        """アップロードが必要なレコードを返す

        結果はHEADの完了順ではなくマニフェストの順に並ぶ。
        HEADするキーはアップロード先と同じDestinationResolverで求める。
        無効化されている場合はHEADを行わずマニフェストをそのまま返す。
        """
        if not self.enabled:
            return ProbeResult(needs_upload=list(manifest), head_count=0)

        self._head_count = 0
        self.logger.info(f"Check of S3 HEAD requested. {len(manifest)} assets to check. Starting...")

        settled = run_bounded(self._needs_upload, manifest, concurrency_limit)

        needs_upload = []
        for record, future in settled:
            error = future.exception()
            if error is not None:
                self.logger.warning(f"HEAD check for {record.key} failed, queueing upload: {error}")
                needs_upload.append(record)
            elif future.result():
                needs_upload.append(record)

        result = ProbeResult(needs_upload=needs_upload, head_count=self._head_count)
        self.logger.info(
            f"S3 check complete. Total checks done: {result.head_count} "
            f"New files to upload: {len(result.needs_upload)}"
        )
        return result

    def _needs_upload(self, record: AssetRecord) -> bool:
        if not record.is_asset:
            return False

        try:
            key = self.resolver.remote_key(record)
        except ValueError as e:
            self.logger.warning(f"Cannot compute S3 key for {record.key}: {e}")
            return True

        self.logger.debug(f"Requesting S3 HEAD for: {record.key} ({key})")
        try:
            response = self.store.head(key)
        except Exception as e:
            self._count()
            self.logger.warning(f"S3 HEAD failed for {key}, queueing upload: {e}")
            return True

        count = self._count()
        self.logger.debug(
            f"S3 HEAD response: status={response.status_code} etag={response.etag} "
            f"count={count} key={key}"
        )

        if not response.found:
            return True
        return not record.matches_etag(response.etag)

    def _count(self) -> int:
        with self._lock:
            self._head_count += 1
            return self._head_count
