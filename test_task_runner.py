"""タスク実行のテスト"""
from unittest.mock import Mock, patch

import pytest

from s3_asset_uploader.core.task_runner import AssetSyncTask, TaskRunner
from s3_asset_uploader.exceptions import ManifestError, UploadTransportError, ValidationError
from s3_asset_uploader.models.config import AssetTarget, AWSConfig, Config, LoggingConfig, UploadOptions
from s3_asset_uploader.utils.logger import LoggerManager


ALL_KEYS = ["production/css/app.css", "production/js/app.js", "production/js/vendor.js"]


def make_target(build_dir, **upload):
    upload.setdefault("dest", "{target}/")
    upload.setdefault("rel", str(build_dir))
    return AssetTarget(
        name="production",
        manifest=str(build_dir.parent / "manifest.json"),
        bucket="assets",
        upload=upload,
    )


class TestAssetSyncTask:

    def test_uploads_everything_to_empty_bucket(self, build_dir, store_factory):
        store = store_factory()
        task = AssetSyncTask(make_target(build_dir), UploadOptions(max_operations=2), store)

        batch = task.run()

        assert batch.successful == 3
        assert sorted(store.uploads) == ALL_KEYS
        assert sorted(store.head_calls) == ALL_KEYS

    def test_second_run_uploads_nothing(self, build_dir, store_factory):
        store = store_factory()
        options = UploadOptions(max_operations=2)
        AssetSyncTask(make_target(build_dir), options, store).run()
        store.uploads.clear()

        batch = AssetSyncTask(make_target(build_dir), options, store).run()

        assert batch.successful == 0
        assert store.uploads == []

    def test_second_run_with_basename_keys_uploads_nothing(self, build_dir, store_factory):
        store = store_factory()
        target = make_target(build_dir, dest="site/", rel=None)
        AssetSyncTask(target, UploadOptions(), store).run()
        store.uploads.clear()

        AssetSyncTask(target, UploadOptions(), store).run()

        assert sorted(store.objects) == ["site/app.css", "site/app.js", "site/vendor.js"]
        assert store.uploads == []

    def test_only_changed_assets_are_uploaded(self, build_dir, store_factory):
        store = store_factory()
        AssetSyncTask(make_target(build_dir), UploadOptions(), store).run()
        store.uploads.clear()
        store.objects["production/js/app.js"] = "stale"

        AssetSyncTask(make_target(build_dir), UploadOptions(), store).run()

        assert store.uploads == ["production/js/app.js"]

    def test_head_check_disabled(self, build_dir, store_factory):
        store = store_factory()
        AssetSyncTask(make_target(build_dir), UploadOptions(), store).run()
        store.uploads.clear()

        AssetSyncTask(make_target(build_dir), UploadOptions(check_s3_head=False), store).run()

        assert sorted(store.uploads) == ALL_KEYS

    def test_missing_manifest(self, build_dir, store_factory):
        store = store_factory()
        (build_dir.parent / "manifest.json").unlink()

        with pytest.raises(ManifestError):
            AssetSyncTask(make_target(build_dir), UploadOptions(), store).run()
        assert store.head_calls == []

    def test_missing_relative_root(self, build_dir, store_factory):
        store = store_factory()
        target = make_target(build_dir, rel=str(build_dir / "does-not-exist"))

        with pytest.raises(ValidationError):
            AssetSyncTask(target, UploadOptions(), store).run()
        assert store.head_calls == []
        assert store.uploads == []

    @pytest.mark.parametrize("value", ["many", -1, 2.5, True, "4"])
    def test_invalid_max_operations(self, build_dir, store_factory, value):
        store = store_factory()

        with pytest.raises(ValidationError):
            AssetSyncTask(make_target(build_dir), UploadOptions(max_operations=value), store).run()
        assert store.head_calls == []

    def test_invalid_dest_template(self, build_dir, store_factory):
        with pytest.raises(ValidationError):
            AssetSyncTask(make_target(build_dir, dest="{unknown}/"), UploadOptions(), store_factory()).run()

    def test_upload_failure_raises_after_siblings_complete(self, build_dir, store_factory):
        store = store_factory(fail_uploads={"production/js/app.js"})

        with pytest.raises(UploadTransportError) as exc_info:
            AssetSyncTask(make_target(build_dir), UploadOptions(max_operations=1), store).run()

        assert exc_info.value.remote_key == "production/js/app.js"
        assert sorted(store.uploads) == ["production/css/app.css", "production/js/vendor.js"]

    def test_runs_without_logger_setup(self, build_dir, store_factory):
        LoggerManager.reset()
        store = store_factory()

        batch = AssetSyncTask(make_target(build_dir), UploadOptions(), store).run()

        assert batch.successful == 3
        assert sorted(store.uploads) == ALL_KEYS

    def test_encode_paths(self, build_dir, store_factory):
        store = store_factory()

        AssetSyncTask(make_target(build_dir), UploadOptions(encode_paths=True), store).run()

        assert "production%2Fcss%2Fapp.css" in store.uploads


class TestTaskRunner:

    def _config(self, targets):
        return Config(
            logging=LoggingConfig(),
            aws=AWSConfig(region="us-east-1"),
            options=UploadOptions(),
            targets=targets,
        )

    def test_counts_successful_and_failed_targets(self, build_dir, store_factory):
        good = make_target(build_dir)
        broken = AssetTarget(name="broken", manifest=str(build_dir / "missing.json"), bucket="assets")
        disabled = AssetTarget(name="off", manifest="x.json", bucket="assets", enabled=False)
        runner = TaskRunner(self._config([good, broken, disabled]), s3_client=Mock())

        store = store_factory()
        with patch.object(TaskRunner, "create_task",
                          side_effect=lambda target: AssetSyncTask(target, runner.config.options, store)):
            successful, failed = runner.run_all_tasks()

        assert (successful, failed) == (1, 1)
        assert sorted(store.uploads) == ALL_KEYS

    def test_create_task_binds_bucket(self, build_dir):
        client = Mock()
        runner = TaskRunner(self._config([make_target(build_dir)]), s3_client=client)

        task = runner.create_task(runner.config.targets[0])

        assert task.store.bucket == "assets"
        assert task.store.s3_client is client

    @patch("s3_asset_uploader.core.task_runner.S3ClientManager")
    def test_creates_client_from_aws_config(self, mock_manager):
        config = self._config([])

        runner = TaskRunner(config)

        mock_manager.assert_called_once_with(config.aws, config.options)
        assert runner.s3_client is mock_manager.return_value.get_client.return_value
