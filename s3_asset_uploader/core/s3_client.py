"""S3クライアント管理"""
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError, NoCredentialsError

from ..models.config import AWSConfig, UploadOptions
from ..utils.logger import LoggerManager


# botocoreのデフォルト値
DEFAULT_POOL_CONNECTIONS = 10
# max_operations=0（無制限）のときの上限
UNBOUNDED_POOL_CONNECTIONS = 100


def pool_connections(options: UploadOptions) -> int:
    """クライアントのコネクションプールサイズを決める

    HEADとアップロードのワーカーが1つのクライアントを共有するため、
    同時実行数に合わせる。マルチパート転送ではアップロード1件が
    max_concurrency本の接続を使う。
    不正なmax_operationsはここでは無制限扱いにし、タスク側の検証に任せる。
    """
    max_operations = options.max_operations
    if isinstance(max_operations, bool) or not isinstance(max_operations, int) or max_operations <= 0:
        return UNBOUNDED_POOL_CONNECTIONS
    per_operation = options.max_concurrency if options.use_threads else 1
    needed = max_operations * max(per_operation, 1)
    return max(DEFAULT_POOL_CONNECTIONS, min(needed, UNBOUNDED_POOL_CONNECTIONS))


class S3ClientManager:
    """スレッド間で共有するS3クライアントの作成"""

    def __init__(self, aws_config: AWSConfig, options: Optional[UploadOptions] = None):
        self.aws_config = aws_config
        self.options = options or UploadOptions()
        self.logger = LoggerManager.get_logger()
        self._client = None

    def get_client(self):
        """S3クライアントを取得（初回のみ作成）"""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def client_config(self) -> BotoConfig:
        return BotoConfig(max_pool_connections=pool_connections(self.options))

    def _create_client(self):
        credentials = None
        if self.aws_config.assume_role:
            credentials = self._assume_role()

        kwargs: Dict[str, Any] = {
            'region_name': self.aws_config.region,
            'config': self.client_config(),
        }
        if self.aws_config.endpoint_url:
            kwargs['endpoint_url'] = self.aws_config.endpoint_url

        try:
            client = self._session(credentials).client('s3', **kwargs)
        except NoCredentialsError:
            self.logger.error("AWS credentials not available.")
            raise

        self.logger.info(
            f"S3 client created ({'assumed role' if credentials else 'default'} credentials, "
            f"pool size {kwargs['config'].max_pool_connections})"
        )
        return client

    def _session(self, credentials: Optional[Dict[str, str]] = None) -> boto3.Session:
        if credentials:
            return boto3.Session(**credentials)
        if self.aws_config.profile:
            return boto3.Session(profile_name=self.aws_config.profile)
        return boto3.Session()

    def _assume_role(self) -> Optional[Dict[str, str]]:
        """AssumeRoleで一時的な認証情報を取得する

        失敗した場合はNoneを返し、通常の認証情報で続行する。
        """
        role = self.aws_config.assume_role
        sts_client = self._session().client(
            'sts',
            region_name=self.aws_config.region,
            endpoint_url=f"https://sts.{self.aws_config.region}.amazonaws.com"
        )

        params = {
            'RoleArn': role.role_arn,
            'RoleSessionName': role.session_name,
            'DurationSeconds': role.duration_seconds,
        }
        if role.external_id:
            params['ExternalId'] = role.external_id

        try:
            credentials = sts_client.assume_role(**params)['Credentials']
        except ClientError as e:
            self.logger.error(f"Error assuming role {role.role_arn}: {e}")
            return None

        self.logger.info(f"Assumed role successfully: {role.role_arn}")
        return {
            'aws_access_key_id': credentials['AccessKeyId'],
            'aws_secret_access_key': credentials['SecretAccessKey'],
            'aws_session_token': credentials['SessionToken'],
        }
