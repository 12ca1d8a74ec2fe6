"""S3転送設定管理"""
import mimetypes
from typing import Any, Dict

from boto3.s3.transfer import TransferConfig as BotoTransferConfig
from ..models.config import UploadOptions, UploadSettings


# UploadSettings.headersのHTTPヘッダー名とupload_fileのExtraArgsの対応
_HEADER_ARGS = {
    'cache-control': 'CacheControl',
    'content-type': 'ContentType',
    'content-encoding': 'ContentEncoding',
    'content-disposition': 'ContentDisposition',
    'content-language': 'ContentLanguage',
    'expires': 'Expires',
}


class TransferConfigManager:
    """S3転送設定の管理"""

    @staticmethod
    def create_config(options: UploadOptions) -> BotoTransferConfig:
        """UploadOptionsからTransferConfigを作成"""
        return BotoTransferConfig(
            multipart_threshold=options.multipart_threshold,
            max_concurrency=options.max_concurrency,
            multipart_chunksize=options.multipart_chunksize,
            use_threads=options.use_threads,
            max_io_queue=options.max_io_queue,
            io_chunksize=options.io_chunksize,
        )

    @staticmethod
    def create_extra_args(settings: UploadSettings, local_file: str) -> Dict[str, Any]:
        """UploadSettingsからupload_fileのExtraArgsを作成

        Content-Typeはヘッダー指定がなければ拡張子から推測する。
        対応表にないヘッダーはユーザーメタデータとして送る。
        """
        extra_args: Dict[str, Any] = {}

        content_type, _ = mimetypes.guess_type(local_file)
        if content_type:
            extra_args['ContentType'] = content_type
        if settings.content_encoding:
            extra_args['ContentEncoding'] = settings.content_encoding
        if settings.acl:
            extra_args['ACL'] = settings.acl

        metadata = {}
        for name, value in settings.headers.items():
            arg = _HEADER_ARGS.get(name.lower())
            if arg:
                extra_args[arg] = value
            else:
                metadata[name] = value
        if metadata:
            extra_args['Metadata'] = metadata

        return extra_args
