"""アップローダーの例外定義"""


class AssetUploaderError(Exception):
    """パッケージ共通の基底例外"""


class ManifestError(AssetUploaderError):
    """マニフェストが存在しない、または読み込めない"""


class ValidationError(AssetUploaderError):
    """設定値が不正"""


class ProbeTransportError(AssetUploaderError):
    """HEADリクエストの通信エラー"""

    def __init__(self, key: str, message: str):
        super().__init__(f"HEAD {key} failed: {message}")
        self.key = key


class UploadTransportError(AssetUploaderError):
    """アップロードの通信エラー"""

    def __init__(self, source_file: str, remote_key: str, message: str):
        super().__init__(f"Upload of {source_file} to {remote_key} failed: {message}")
        self.source_file = source_file
        self.remote_key = remote_key
