"""Tests for core data models."""

from __future__ import annotations

import dataclasses
import uuid

import pytest

from fission_spec.models import (
    DEPLOYMENT_CONFIG_KIND,
    SPEC_API_VERSION,
    DeploymentConfig,
    TypeMeta,
    generate_uid,
)


class TestGenerateUid:
    def test_is_canonical_uuid4(self) -> None:
        uid = generate_uid()
        assert len(uid) == 36
        parsed = uuid.UUID(uid)
        assert str(parsed) == uid
        assert parsed.version == 4

    def test_unique(self) -> None:
        assert generate_uid() != generate_uid()


class TestTypeMeta:
    def test_defaults(self) -> None:
        meta = TypeMeta()
        assert meta.api_version == SPEC_API_VERSION == "fission.io/v1"
        assert meta.kind == DEPLOYMENT_CONFIG_KIND == "DeploymentConfig"


class TestDeploymentConfig:
    def test_defaults(self) -> None:
        config = DeploymentConfig(name="demo")
        assert config.api_version == SPEC_API_VERSION
        assert config.kind == DEPLOYMENT_CONFIG_KIND
        assert uuid.UUID(config.uid)

    def test_each_instance_gets_own_uid(self) -> None:
        assert DeploymentConfig(name="a").uid != DeploymentConfig(name="a").uid

    def test_frozen(self) -> None:
        config = DeploymentConfig(name="demo", uid="fixed")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.uid = "other"  # type: ignore[misc]

    def test_type_meta(self) -> None:
        config = DeploymentConfig(name="demo", uid="fixed")
        assert config.type_meta == TypeMeta()

    def test_to_dict_uses_wire_keys(self) -> None:
        config = DeploymentConfig(name="demo", uid="fixed")
        assert config.to_dict() == {
            "apiVersion": "fission.io/v1",
            "kind": "DeploymentConfig",
            "name": "demo",
            "uid": "fixed",
        }
