"""S3アセットアップローダー コアモジュール"""
from .paths import DestinationResolver
from .prober import ExistenceProber, ProbeResult
from .remote_store import HeadResult, RemoteStore
from .s3_client import S3ClientManager
from .task_runner import AssetSyncTask, TaskRunner
from .uploader import BatchResult, UploadExecutor, UploadResult, UploadScheduler

__all__ = [
    'AssetSyncTask',
    'BatchResult',
    'DestinationResolver',
    'ExistenceProber',
    'HeadResult',
    'ProbeResult',
    'RemoteStore',
    'S3ClientManager',
    'TaskRunner',
    'UploadExecutor',
    'UploadResult',
    'UploadScheduler',
]
