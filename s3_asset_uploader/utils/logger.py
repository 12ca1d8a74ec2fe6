"""ロギング設定ユーティリティ"""
import logging
import os
from typing import List, Optional
from ..models.config import LoggingConfig


LOGGER_NAME = "s3_asset_uploader"
# デバッグ時にHTTPの詳細ログで埋まらないようレベルを分けるロガー
LIBRARY_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")


def _level(name: str, default: int = logging.INFO) -> int:
    return getattr(logging, name.upper(), default)


def _build_handlers(config: LoggingConfig) -> List[logging.Handler]:
    """コンソールと（設定があれば）ファイルのハンドラーを作る"""
    formatter = logging.Formatter(config.format, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        log_dir = os.path.dirname(config.file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


class LoggerManager:
    """パッケージロガーの設定と管理"""

    _logger: Optional[logging.Logger] = None

    @classmethod
    def setup(cls, config: LoggingConfig, debug: bool = False) -> logging.Logger:
        """ロガーをセットアップ

        debugが真の場合は設定に関わらずDEBUGレベルにする。
        2回目以降の呼び出しは既存のロガーを返す。
        """
        if cls._logger is not None:
            if debug:
                cls._logger.setLevel(logging.DEBUG)
            return cls._logger

        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.DEBUG if debug else _level(config.level))
        logger.handlers = _build_handlers(config)

        for name in LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(_level(config.library_level, logging.WARNING))

        cls._logger = logger
        return logger

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """設定済みのロガーを取得

        setup()前はハンドラー未設定のパッケージロガーを返し、
        出力先はアプリケーション側のlogging設定に任せる。
        """
        if cls._logger is None:
            return logging.getLogger(LOGGER_NAME)
        return cls._logger

    @classmethod
    def reset(cls):
        """ロガーを未設定の状態に戻す"""
        if cls._logger is not None:
            for handler in cls._logger.handlers:
                handler.close()
            cls._logger.handlers = []
        cls._logger = None
