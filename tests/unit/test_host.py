"""Tests for the manifest-backed service and the local bucket uploader."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from hashdeploy.core.naming import NamingOverrideScope, ProviderNaming
from hashdeploy.host.service import LoggingCliLog, ManifestService
from hashdeploy.host.uploader import LocalBucketUploader


class TestManifestService:
    def test_targets_resolve_relative_paths(self, make_service, tmp_dir: Path):
        service = make_service({"create": {"artifact": "dist/create.zip"}})
        target = service.get_target("create")
        assert target.artifact_path == tmp_dir / "dist" / "create.zip"

    def test_targets_preserve_declaration_order(self, make_service):
        service = make_service(
            {"b": {"artifact": "b.zip"}, "a": {"image": "repo:tag"}, "c": {"package_disabled": True}}
        )
        assert service.list_target_names() == ["b", "a", "c"]
        assert service.get_target("a").has_image
        assert service.get_target("c").package_disabled

    def test_unknown_target(self, make_service):
        with pytest.raises(KeyError):
            make_service().get_target("nope")

    def test_provider_values(self, make_service):
        service = make_service()
        assert service.service_name == "orders"
        assert service.get_stage() == "prod"
        assert service.get_deployment_prefix() == "deploy"
        assert asyncio.run(service.get_deployment_bucket_name()) == "orders-deployments"

    def test_replace_and_save(self, make_service, make_manifest, parse_manifest, tmp_dir):
        service = make_service({"create": {"artifact": "create.zip"}})
        moved = service.get_target("create").model_copy(
            update={"artifact_path": tmp_dir / "create-ff.zip"}
        )
        service.replace_target(moved)
        service.set_artifact_directory_name("deploy/orders/prod")
        path = service.save()

        saved = parse_manifest(path)
        assert saved.functions["create"].artifact == Path("create-ff.zip")
        assert saved.package.artifact_directory_name == "deploy/orders/prod"

    def test_save_without_path(self, make_service):
        service = ManifestService(make_service().manifest)
        with pytest.raises(ValueError):
            service.save()


class TestLoggingCliLog:
    def test_records_and_logs(self, caplog):
        log = LoggingCliLog("hashdeploy.test", keep_messages=True)
        with caplog.at_level("INFO", logger="hashdeploy.test"):
            log.log("hello")
        assert log.messages == ["hello"]
        assert "hello" in caplog.text

    def test_does_not_collect_by_default(self, caplog):
        log = LoggingCliLog("hashdeploy.test")
        with caplog.at_level("INFO", logger="hashdeploy.test"):
            log.log("hello")
        assert log.messages == []
        assert "hello" in caplog.text


class TestLocalBucketUploader:
    def test_artifact_upload_skips_existing(self, make_artifact, tmp_dir):
        uploader = LocalBucketUploader(tmp_dir / "buckets")
        artifact = make_artifact("handler-ff.zip", b"abc")

        first = uploader.upload_artifacts("bucket", "deploy/orders/prod", [artifact])
        second = uploader.upload_artifacts("bucket", "deploy/orders/prod", [artifact])

        assert first[0].uploaded is True
        assert second[0].uploaded is False
        assert first[0].key == "deploy/orders/prod/handler-ff.zip"
        assert uploader.object_path("bucket", first[0].key).read_bytes() == b"abc"

    def test_descriptor_uses_naming_suffix(self, make_artifact, tmp_dir, fixed_clock, fixed_prefix):
        uploader = LocalBucketUploader(tmp_dir / "buckets")
        descriptor = make_artifact("template.json", b"{}")
        naming = ProviderNaming("template.json")

        plain = uploader.upload_descriptor("bucket", "dir", naming, descriptor)
        with NamingOverrideScope(naming, clock=fixed_clock):
            stamped = uploader.upload_descriptor("bucket", "dir", naming, descriptor)

        assert plain.key == "dir/template.json"
        assert stamped.key == f"dir/{fixed_prefix}/template.json"
        assert uploader.object_path("bucket", stamped.key).exists()
        assert stamped.uploaded is True
