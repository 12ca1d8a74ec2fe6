"""S3バケットに対するHEADとアップロード操作"""
from dataclasses import dataclass
from typing import Optional

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import ProbeTransportError, UploadTransportError
from ..models.config import UploadSettings
from .transfer import TransferConfigManager


@dataclass(frozen=True)
class HeadResult:
    """HEADリクエストの結果"""
    status_code: int
    etag: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status_code == 200


def normalize_etag(etag: Optional[str]) -> Optional[str]:
    """S3が返すETagの前後のダブルクォートを外す"""
    if etag is None:
        return None
    return etag.strip().strip('"')


class RemoteStore:
    """1つのバケットに対する操作をまとめたクラス

    boto3クライアントは全スレッドで共有される。
    """

    def __init__(self, s3_client, bucket: str, transfer_config=None):
        self.s3_client = s3_client
        self.bucket = bucket
        self.transfer_config = transfer_config

    def head(self, key: str) -> HeadResult:
        """オブジェクトのメタデータを取得する

        404や403などの応答はHeadResultとして返し、通信自体の失敗は
        ProbeTransportErrorを送出する。
        """
        try:
            response = self.s3_client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            return HeadResult(status_code=self._error_status(e))
        except BotoCoreError as e:
            raise ProbeTransportError(key, str(e)) from e

        status = response.get('ResponseMetadata', {}).get('HTTPStatusCode', 200)
        return HeadResult(status_code=status, etag=normalize_etag(response.get('ETag')))

    def upload(self, local_file: str, remote_key: str, settings: UploadSettings) -> str:
        """ファイルをアップロードして完了メッセージを返す"""
        extra_args = TransferConfigManager.create_extra_args(settings, local_file)
        try:
            self.s3_client.upload_file(
                local_file,
                self.bucket,
                remote_key,
                ExtraArgs=extra_args,
                Config=self.transfer_config
            )
        except (S3UploadFailedError, ClientError, BotoCoreError, OSError) as e:
            raise UploadTransportError(local_file, remote_key, str(e)) from e

        return f"Uploaded {local_file} to s3://{self.bucket}/{remote_key}"

    @staticmethod
    def _error_status(error: ClientError) -> int:
        status = error.response.get('ResponseMetadata', {}).get('HTTPStatusCode')
        if status:
            return int(status)
        code = error.response.get('Error', {}).get('Code', '')
        if code.isdigit():
            return int(code)
        if code in ('NoSuchKey', 'NotFound'):
            return 404
        return 0
