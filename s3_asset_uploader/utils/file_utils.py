"""パス解決関連のユーティリティ"""
import glob
import os
import posixpath
from typing import Optional
from urllib.parse import quote


# encodeURIComponentがエスケープしない記号
_URI_COMPONENT_SAFE = "-_.!~*'()"


def expand_file(pattern: Optional[str]) -> Optional[str]:
    """パス（globパターン可）に一致する最初のファイルを返す"""
    if not pattern:
        return None
    if os.path.isfile(pattern):
        return pattern
    for match in sorted(glob.glob(pattern)):
        if os.path.isfile(match):
            return match
    return None


def expand_directory(pattern: Optional[str]) -> Optional[str]:
    """パス（globパターン可）に一致する最初のディレクトリを返す"""
    if not pattern:
        return None
    if os.path.isdir(pattern):
        return pattern
    for match in sorted(glob.glob(pattern)):
        if os.path.isdir(match):
            return match
    return None


def to_posix(path: str) -> str:
    return path.replace(os.sep, "/")


def join_key(prefix: str, path: str) -> str:
    """キーのプレフィックスとパスを結合して正規化する"""
    joined = posixpath.join(prefix, path) if prefix else path
    if not joined:
        return ""
    return posixpath.normpath(joined)


def encode_key(key: str) -> str:
    """キー全体をパーセントエンコードする（"/"も含む）"""
    return quote(key, safe=_URI_COMPONENT_SAFE)


def build_dest_key(dest: str, relative_path: str, local_path: Optional[str] = None,
                   rel_root: Optional[str] = None, encode: bool = False) -> str:
    """アップロード先のキーを組み立てる

    rel_rootが指定されていればlocal_pathをrel_rootからの相対パスにして
    サブディレクトリを保ったままdestに結合する。指定がなければ
    relative_pathのファイル名だけをdestに結合する。
    """
    if rel_root:
        if not local_path:
            raise ValueError("local_path is required when rel_root is set")
        key = join_key(dest, to_posix(os.path.relpath(local_path, rel_root)))
    else:
        key = join_key(dest, posixpath.basename(to_posix(relative_path)))

    if encode:
        key = encode_key(key)
    return key
