"""Tests for deployment config serialization."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from fission_spec.config import (
    CONFIG_BANNER,
    DeploymentConfigError,
    dump_deployment_config,
    load_deployment_config,
)
from fission_spec.models import DeploymentConfig


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


class TestDumpDeploymentConfig:
    def test_starts_with_banner(self) -> None:
        text = dump_deployment_config(DeploymentConfig(name="demo", uid="abc"))
        lines = text.splitlines()
        assert lines[:3] == [
            "# This file is generated by the 'fission spec init' command.",
            "# See the README in this directory for background and usage information.",
            "# Do not edit the UID below: that will break 'fission spec apply'",
        ]
        assert text.startswith(CONFIG_BANNER)

    def test_keys_are_sorted(self) -> None:
        text = dump_deployment_config(DeploymentConfig(name="demo", uid="abc"))
        body = text[len(CONFIG_BANNER) :]
        assert body == "apiVersion: fission.io/v1\nkind: DeploymentConfig\nname: demo\nuid: abc\n"

    def test_numeric_looking_uid_stays_a_string(self) -> None:
        text = dump_deployment_config(DeploymentConfig(name="demo", uid="12345"))
        assert yaml.safe_load(text)["uid"] == "12345"


class TestLoadDeploymentConfig:
    def test_reads_dumped_config(self, tmp_path: Path) -> None:
        original = DeploymentConfig(name="demo", uid="0f8fad5b-d9cb-469f-a165-70867728950e")
        path = _write(tmp_path / "config.yaml", dump_deployment_config(original))

        assert load_deployment_config(path) == original

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_deployment_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yaml", "name: [unclosed\n")
        with pytest.raises(DeploymentConfigError, match="YAML parse error"):
            load_deployment_config(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yaml", "- a\n- b\n")
        with pytest.raises(DeploymentConfigError, match="must be a mapping"):
            load_deployment_config(path)

    def test_collects_all_errors(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "config.yaml",
            "apiVersion: fission.io/v1\nkind: Function\nuid: 7\n",
        )
        with pytest.raises(DeploymentConfigError) as excinfo:
            load_deployment_config(path)

        errors = excinfo.value.errors
        assert "name is required" in errors
        assert "uid must be a string" in errors
        assert "kind must be 'DeploymentConfig', got 'Function'" in errors
        assert excinfo.value.path == path.resolve()

    def test_blank_uid_rejected(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "config.yaml",
            "apiVersion: fission.io/v1\nkind: DeploymentConfig\nname: demo\nuid: '  '\n",
        )
        with pytest.raises(DeploymentConfigError, match="uid must be a non-empty string"):
            load_deployment_config(path)
