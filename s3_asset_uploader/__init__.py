"""S3 Asset Uploader パッケージ"""
from typing import Tuple
from .exceptions import (
    AssetUploaderError,
    ManifestError,
    ProbeTransportError,
    UploadTransportError,
    ValidationError,
)
from .models.config import Config
from .utils.logger import LoggerManager
from .core.task_runner import TaskRunner


class S3AssetUploader:
    """S3アセットアップローダーのメインクラス"""

    def __init__(self, config: Config, s3_client=None):
        self.config = config

        self.logger = LoggerManager.setup(self.config.logging, debug=self.config.options.debug)
        self.logger.info("S3 Asset Uploader initialized")

        self.task_runner = TaskRunner(self.config, s3_client=s3_client)

    @classmethod
    def from_file(cls, config_path: str = "config.json") -> 'S3AssetUploader':
        return cls(Config.from_file(config_path))

    def run(self) -> Tuple[int, int]:
        """全ターゲットのアップロードを実行"""
        self.logger.info("Starting S3 asset upload process...")
        return self.task_runner.run_all_tasks()


def run(config_path: str = "config.json") -> Tuple[int, int]:
    """設定ファイルを読み込んで全ターゲットを実行する"""
    return S3AssetUploader.from_file(config_path).run()


__all__ = [
    'AssetUploaderError',
    'Config',
    'ManifestError',
    'ProbeTransportError',
    'S3AssetUploader',
    'UploadTransportError',
    'ValidationError',
    'run',
]
