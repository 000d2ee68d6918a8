"""Tests for PackagingPrecondition — all-or-nothing eligibility."""

from __future__ import annotations

from pathlib import Path

import pytest

from hashdeploy.core.errors import HashingError, PreconditionError
from hashdeploy.core.precondition import PackagingPrecondition
from hashdeploy.models.targets import BuildTarget, DeploymentBatch


@pytest.fixture
def precondition() -> PackagingPrecondition:
    return PackagingPrecondition()


class TestPackagingPrecondition:
    def test_all_eligible_in_order(self, precondition):
        batch = DeploymentBatch(
            targets=[
                BuildTarget(name="a", artifact_path=Path("a.zip")),
                BuildTarget(name="b", artifact_path=Path("b.zip")),
            ]
        )
        eligible = precondition.validate(batch)
        assert [e.target.name for e in eligible] == ["a", "b"]
        assert [e.artifact_path for e in eligible] == [Path("a.zip"), Path("b.zip")]

    def test_image_and_disabled_are_skipped(self, precondition):
        batch = DeploymentBatch(
            targets=[
                BuildTarget(name="img", image="123.dkr.ecr/repo:tag"),
                BuildTarget(name="off", package_disabled=True),
                BuildTarget(name="zip", artifact_path=Path("zip.zip")),
            ]
        )
        assert [e.target.name for e in precondition.validate(batch)] == ["zip"]

    def test_image_wins_over_artifact(self, precondition):
        batch = DeploymentBatch(
            targets=[BuildTarget(name="img", image="repo:tag", artifact_path=Path("x.zip"))]
        )
        assert precondition.validate(batch) == []

    def test_missing_artifact_rejects_batch(self, precondition):
        batch = DeploymentBatch(
            targets=[
                BuildTarget(name="first", artifact_path=Path("1.zip")),
                BuildTarget(name="second"),
                BuildTarget(name="third", artifact_path=Path("3.zip")),
            ]
        )
        with pytest.raises(PreconditionError) as exc_info:
            precondition.validate(batch)
        assert exc_info.value.target_name == "second"
        assert "second" in str(exc_info.value)
        assert isinstance(exc_info.value, HashingError)

    def test_first_offender_is_reported(self, precondition):
        batch = DeploymentBatch(targets=[BuildTarget(name="x"), BuildTarget(name="y")])
        with pytest.raises(PreconditionError, match="x"):
            precondition.validate(batch)

    def test_empty_batch(self, precondition):
        assert precondition.validate(DeploymentBatch()) == []
