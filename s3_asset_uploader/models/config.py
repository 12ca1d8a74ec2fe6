"""設定管理用のデータクラス"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import json
import os
import re


ROLE_ARN_PATTERN = re.compile(r'^arn:aws:iam::[0-9]{12}:role/[a-zA-Z0-9+=,.@_-]+$')
SESSION_NAME_PATTERN = re.compile(r'^[a-zA-Z0-9_.-]{2,64}$')
# AssumeRoleで指定できるセッション時間（秒）
SESSION_DURATION_RANGE = (900, 43200)


@dataclass
class LoggingConfig:
    """ロギング設定

    HEADとアップロードはワーカースレッドで実行されるため、
    デフォルトのフォーマットにスレッド名を含める。
    """
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - [%(threadName)s] %(message)s"
    file: Optional[str] = None
    # boto3/botocore/urllib3のロガーのレベル
    library_level: str = "WARNING"


@dataclass
class AssumeRoleConfig:
    """S3クライアント作成時にAssumeRoleするロール"""
    role_arn: str
    session_name: str
    external_id: Optional[str] = None
    duration_seconds: int = 3600

    def __post_init__(self):
        if not ROLE_ARN_PATTERN.match(self.role_arn):
            raise ValueError(
                f"Invalid role_arn: {self.role_arn}. "
                "Expected arn:aws:iam::ACCOUNT_ID:role/ROLE_NAME"
            )
        if not SESSION_NAME_PATTERN.match(self.session_name or ""):
            raise ValueError(
                f"Invalid session_name: {self.session_name!r}. "
                "Must be 2-64 alphanumeric characters, underscores, hyphens or periods"
            )
        low, high = SESSION_DURATION_RANGE
        if not low <= self.duration_seconds <= high:
            raise ValueError(
                f"Invalid duration_seconds: {self.duration_seconds}. Must be between {low} and {high}"
            )


@dataclass
class AWSConfig:
    """接続先のリージョンと認証情報"""
    region: str
    profile: Optional[str] = None
    endpoint_url: Optional[str] = None  # S3互換ストレージ用
    assume_role: Optional[AssumeRoleConfig] = None

    def __post_init__(self):
        if isinstance(self.assume_role, dict):
            self.assume_role = AssumeRoleConfig(**self.assume_role)
        elif self.assume_role is not None and not isinstance(self.assume_role, AssumeRoleConfig):
            raise TypeError(
                f"assume_role must be dict or AssumeRoleConfig, got {type(self.assume_role)}"
            )


@dataclass
class UploadOptions:
    """全ターゲット共通のオプション"""
    check_s3_head: bool = True
    max_operations: int = 0  # 0は無制限
    encode_paths: bool = False
    debug: bool = False
    dry_run: bool = False
    # boto3の転送設定
    multipart_threshold: int = 100 * 1024 * 1024  # 100MB
    max_concurrency: int = 4
    multipart_chunksize: int = 10 * 1024 * 1024  # 10MB
    use_threads: bool = True
    max_io_queue: int = 100
    io_chunksize: int = 262144  # 256KB


@dataclass
class UploadSettings:
    """アップロード先とオブジェクト属性"""
    dest: str = ""
    rel: Optional[str] = None
    acl: Optional[str] = None
    content_encoding: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class AssetTarget:
    """マニフェスト単位のアップロードターゲット"""
    name: str
    manifest: str
    bucket: str

    description: Optional[str] = None
    enabled: bool = True
    upload: UploadSettings = field(default_factory=UploadSettings)

    def __post_init__(self):
        if isinstance(self.upload, dict):
            self.upload = UploadSettings(**self.upload)
        elif not isinstance(self.upload, UploadSettings):
            raise TypeError(
                f"upload must be dict or UploadSettings, got {type(self.upload)}"
            )


@dataclass
class Config:
    """メイン設定クラス"""
    logging: LoggingConfig
    aws: AWSConfig
    options: UploadOptions
    targets: List[AssetTarget]

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """辞書から設定を組み立てる"""
        return cls(
            logging=LoggingConfig(**data.get("logging", {})),
            aws=AWSConfig(**data.get("aws", {})),
            options=UploadOptions(**data.get("options", {})),
            targets=[AssetTarget(**target) for target in data.get("targets", [])],
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """設定ファイルから読み込み"""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file {config_path} not found.")

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error decoding JSON from {config_path}: {e}")

        try:
            return cls.from_dict(data)
        except Exception as e:
            raise RuntimeError(f"Error loading configuration: {e}")
