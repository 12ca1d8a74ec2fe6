#!/usr/bin/env python3
"""S3 Asset Uploader - エントリーポイント"""
import sys

from s3_asset_uploader import S3AssetUploader


def main():
    """メイン関数"""
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.json"
    try:
        uploader = S3AssetUploader.from_file(config_path)
        successful, failed = uploader.run()

        # 終了コードを設定
        sys.exit(0 if failed == 0 else 1)

    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
