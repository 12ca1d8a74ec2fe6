"""アップロードタスクの実行"""
from typing import Optional, Tuple

from ..exceptions import ValidationError
from ..models.config import AssetTarget, Config, UploadOptions
from ..models.manifest import load_manifest
from ..utils.file_utils import expand_directory
from ..utils.logger import LoggerManager
from .paths import DestinationResolver
from .prober import ExistenceProber
from .remote_store import RemoteStore
from .s3_client import S3ClientManager
from .transfer import TransferConfigManager
from .uploader import BatchResult, UploadExecutor, UploadScheduler


class AssetSyncTask:
    """1ターゲット分のHEADチェックとアップロード"""

    def __init__(self, target: AssetTarget, options: UploadOptions, store: RemoteStore):
        self.target = target
        self.options = options
        self.store = store
        self.logger = LoggerManager.get_logger()

        self.dest_path = ""
        self.rel_path: Optional[str] = None
        self.concurrency_limit = 0

    def validate_options(self):
        """設定値を検証して内部のパラメータを決める"""
        try:
            self.dest_path = self.target.upload.dest.format(target=self.target.name)
        except (KeyError, IndexError, ValueError) as e:
            raise ValidationError(f"Invalid dest template {self.target.upload.dest!r}: {e}")

        if self.target.upload.rel:
            self.rel_path = expand_directory(self.target.upload.rel)
            if self.rel_path is None:
                raise ValidationError(f"Relative path does not exist: {self.target.upload.rel}")

        max_operations = self.options.max_operations
        if isinstance(max_operations, bool) or not isinstance(max_operations, int):
            raise ValidationError(f"max_operations must be an integer: {max_operations!r}")
        self.concurrency_limit = max_operations
        if self.concurrency_limit < 0:
            raise ValidationError(f"max_operations must be >= 0: {self.concurrency_limit}")

    def run(self) -> BatchResult:
        """タスクを実行する

        Raises:
            ManifestError: マニフェストが読めない
            ValidationError: 設定値が不正
            UploadTransportError: アップロードに失敗したファイルがある（最初の1件）
        """
        manifest = load_manifest(self.target.manifest)
        self.validate_options()

        resolver = DestinationResolver(self.dest_path, self.rel_path, self.options.encode_paths)

        prober = ExistenceProber(self.store, resolver, enabled=self.options.check_s3_head)
        probe_result = prober.probe(manifest, self.concurrency_limit)

        scheduler = UploadScheduler(
            UploadExecutor(self.store, dry_run=self.options.dry_run),
            resolver,
            self.target.upload,
        )
        instructions = scheduler.resolve(probe_result.needs_upload)
        batch = scheduler.dispatch(instructions, self.concurrency_limit)

        batch.raise_for_failure()
        return batch


class TaskRunner:
    """設定された全ターゲットを順に実行"""

    def __init__(self, config: Config, s3_client=None):
        self.config = config
        self.logger = LoggerManager.get_logger()

        if s3_client is None:
            s3_client = S3ClientManager(config.aws, config.options).get_client()
        self.s3_client = s3_client
        self.transfer_config = TransferConfigManager.create_config(config.options)

    def create_task(self, target: AssetTarget) -> AssetSyncTask:
        store = RemoteStore(self.s3_client, target.bucket, self.transfer_config)
        return AssetSyncTask(target, self.config.options, store)

    def run_all_tasks(self) -> Tuple[int, int]:
        """全てのタスクを実行"""
        total_tasks = len(self.config.targets)
        successful_tasks = 0
        failed_tasks = 0

        self.logger.info(f"Starting upload tasks: {total_tasks} tasks to process")

        for i, target in enumerate(self.config.targets, 1):
            if not target.enabled:
                self.logger.info(f"Skipping disabled task: {target.name}")
                continue

            self.logger.info(f"Task {i}/{total_tasks}: Starting '{target.name}'")

            try:
                batch = self.create_task(target).run()
                successful_tasks += 1
                self.logger.info(
                    f"Task {i}/{total_tasks}: '{target.name}' completed successfully "
                    f"({batch.successful} files uploaded)"
                )
            except Exception as e:
                failed_tasks += 1
                self.logger.error(f"Task {i}/{total_tasks}: '{target.name}' failed with error: {e}")

        self.logger.info(
            f"Upload tasks completed: {successful_tasks} successful, {failed_tasks} failed"
        )
        return successful_tasks, failed_tasks
