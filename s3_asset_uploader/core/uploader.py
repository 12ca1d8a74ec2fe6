"""S3アップロード実行クラス"""
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..exceptions import UploadTransportError
from ..models.config import UploadSettings
from ..models.manifest import AssetRecord, UploadInstruction
from ..utils.concurrency import run_bounded
from ..utils.file_utils import expand_file
from ..utils.logger import LoggerManager
from .paths import DestinationResolver
from .remote_store import RemoteStore


@dataclass
class UploadResult:
    """アップロード結果"""
    source_file: str
    remote_key: str
    success: bool
    error: Optional[Exception] = None


@dataclass
class BatchResult:
    """1バッチ分のアップロード結果（完了順）"""
    results: List[UploadResult] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def success(self) -> bool:
        return self.failed == 0

    @property
    def first_error(self) -> Optional[Exception]:
        for result in self.results:
            if not result.success:
                return result.error
        return None

    def raise_for_failure(self):
        """失敗があれば最初に発生したエラーを送出する"""
        error = self.first_error
        if error is None:
            return
        if isinstance(error, UploadTransportError):
            raise error
        failed = next(r for r in self.results if not r.success)
        raise UploadTransportError(failed.source_file, failed.remote_key, str(error)) from error


class UploadExecutor:
    """ファイルアップロードの実行"""

    def __init__(self, store: RemoteStore, dry_run: bool = False):
        self.store = store
        self.dry_run = dry_run
        self.logger = LoggerManager.get_logger()

    def upload(self, instruction: UploadInstruction) -> UploadResult:
        """単一ファイルをアップロード"""
        source, key = instruction.source_file, instruction.remote_key

        if self.dry_run:
            self.logger.info(f"[DRY RUN]: Would upload {source} to {key}")
            return UploadResult(source, key, success=True)

        self.logger.info(f"Uploading: {source} to {key}")
        try:
            message = self.store.upload(source, key, instruction.upload_options)
        except Exception as e:
            self.logger.error(f"Upload failed: {e}")
            return UploadResult(source, key, success=False, error=e)

        self.logger.info(message)
        return UploadResult(source, key, success=True)


class UploadScheduler:
    """アップロード指示の組み立てと並列実行"""

    def __init__(self, executor: UploadExecutor, resolver: DestinationResolver,
                 settings: Optional[UploadSettings] = None):
        self.executor = executor
        self.resolver = resolver
        self.settings = settings or UploadSettings()
        self.logger = LoggerManager.get_logger()

    def resolve(self, records: Sequence[AssetRecord]) -> List[UploadInstruction]:
        """レコードからアップロード指示を作る

        ローカルファイルが見つからないレコードは警告を出して除外する。
        """
        instructions = []
        seen = set()

        for record in records:
            if record in seen:
                continue
            seen.add(record)

            if not record.local_path:
                continue

            try:
                remote_key = self.resolver.remote_key(record)
            except ValueError as e:
                self.logger.warning(f"Skipping {record.key}: {e}")
                continue

            source_file = expand_file(record.local_path)
            if source_file is None:
                self.logger.warning(f"Could not expand file: {record.local_path}")
                continue

            instructions.append(UploadInstruction(
                record=record,
                remote_key=remote_key,
                source_file=source_file,
                upload_options=self.settings,
            ))

        return instructions

    def dispatch(self, instructions: Sequence[UploadInstruction], concurrency_limit: int = 0) -> BatchResult:
        """アップロードを並列実行し、全件の完了を待つ

        1件が失敗しても他のアップロードは最後まで実行される。
        """
        batch = BatchResult()
        lock = threading.Lock()

        def _upload(instruction: UploadInstruction) -> UploadResult:
            result = self.executor.upload(instruction)
            with lock:
                batch.results.append(result)
            return result

        self.logger.info(f"Starting upload of {len(instructions)} files")
        run_bounded(_upload, instructions, concurrency_limit)
        self.logger.info(f"Upload completed: {batch.successful} successful, {batch.failed} failed")
        return batch
