"""Spec directory initialization (``fission spec init``).

Creates the spec directory, drops a README explaining how specs are used and
writes the deployment config that stamps every applied resource with a UID.

Safety guarantees:
- An existing deployment config is never overwritten; its UID is kept.
- The config is created with an exclusive open, so two concurrent
  initializers cannot both write a UID into the same directory.
- A config reserved by a failed or interrupted run is removed so the run
  can be retried.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

import yaml

from fission_spec.config import DEPLOYMENT_CONFIG_FILENAME, dump_deployment_config
from fission_spec.models import DeploymentConfig, generate_uid
from fission_spec.naming import kubify_name

log = logging.getLogger(__name__)

__all__ = [
    "README_FILENAME",
    "SPEC_README",
    "ConfigAlreadyExistsError",
    "DirectoryCreateError",
    "FileWriteError",
    "InitResult",
    "SerializationError",
    "SpecInitError",
    "SpecInitializer",
    "init_spec_dir",
]

README_FILENAME = "README"

SPEC_README = """
Fission Specs
=============

This is a set of specifications for a Fission app.  This includes functions,
environments, and triggers; we collectively call these things "resources".

How to use these specs
----------------------

These specs are handled with the 'fission spec' command.  See 'fission spec --help'.

'fission spec apply' will "apply" all resources specified in this directory to your
cluster.  That means it checks what resources exist on your cluster, what resources are
specified in the specs directory, and reconciles the difference by creating, updating or
deleting resources on the cluster.

'fission spec apply' will also package up your source code (or compiled binaries) and
upload the archives to the cluster if needed.  It uses 'ArchiveUploadSpec' resources in
this directory to figure out which files to archive.

You can use 'fission spec apply --watch' to watch for file changes and continuously keep
the cluster updated.

You can add YAMLs to this directory by writing them manually, but it's easier to generate
them.  Use 'fission function create --spec' to generate a function spec,
'fission environment create --spec' to generate an environment spec, and so on.

You can edit any of the files in this directory, except 'fission-deployment-config.yaml',
which contains a UID that you should never change.  To apply your changes simply use
'fission spec apply'.

fission-deployment-config.yaml
------------------------------

fission-deployment-config.yaml contains a UID.  This UID is what fission uses to correlate
resources on the cluster to resources in this directory.

All resources created by 'fission spec apply' are annotated with this UID.  Resources on
the cluster that are _not_ annotated with this UID are never modified or deleted by
fission.
"""


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class SpecInitError(RuntimeError):
    """Raised when a spec directory cannot be initialized."""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(message)


class DirectoryCreateError(SpecInitError):
    """The spec directory (or one of its parents) could not be created."""


class ConfigAlreadyExistsError(SpecInitError):
    """The spec directory already holds a deployment config."""


class SerializationError(SpecInitError):
    """The deployment config could not be rendered as YAML."""


class FileWriteError(SpecInitError):
    """The README or the deployment config could not be written."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InitResult:
    """Files produced by a successful initialization."""

    spec_dir: Path
    readme_path: Path
    config_path: Path
    config: DeploymentConfig


class SpecInitializer:
    """Initialize a single spec directory.

    ``complete()`` resolves the name and UID and creates the directory;
    ``run()`` writes the README and the deployment config. ``execute()``
    does both.

    Args:
        spec_dir: Directory to initialize; missing parents are created.
        name: Deployment name. Empty or ``None`` derives one from *cwd*.
        deploy_id: Deployment UID. Empty or ``None`` generates a UUID.
        cwd: Directory the default name is derived from (defaults to the
            process working directory).
        readme_text: README contents.
    """

    def __init__(
        self,
        spec_dir: Path,
        *,
        name: str | None = None,
        deploy_id: str | None = None,
        cwd: Path | None = None,
        readme_text: str = SPEC_README,
    ) -> None:
        self.spec_dir = spec_dir
        self._name = name
        self._deploy_id = deploy_id
        self._cwd = cwd
        self._readme_text = readme_text
        self.config: DeploymentConfig | None = None

    @property
    def readme_path(self) -> Path:
        return self.spec_dir / README_FILENAME

    @property
    def config_path(self) -> Path:
        return self.spec_dir / DEPLOYMENT_CONFIG_FILENAME

    def execute(self) -> InitResult:
        self.complete()
        return self.run()

    def complete(self) -> DeploymentConfig:
        name = self._name or self._default_name()
        uid = self._deploy_id or generate_uid()

        log.info("Creating fission spec directory '%s'", self.spec_dir)
        try:
            self.spec_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"create spec directory '{self.spec_dir}': {exc}"
            raise DirectoryCreateError(msg, self.spec_dir) from exc

        self.config = DeploymentConfig(name=name, uid=uid)
        return self.config

    def run(self) -> InitResult:
        if self.config is None:
            msg = "complete() must be called before run()"
            raise RuntimeError(msg)
        config = self.config

        try:
            payload = dump_deployment_config(config)
        except yaml.YAMLError as exc:
            msg = f"error serializing deployment config: {exc}"
            raise SerializationError(msg, self.config_path) from exc

        # The exclusive create doubles as the existence check.
        stream = self._reserve_config()
        try:
            self._write_files(stream, payload)
        except BaseException:
            log.debug("Removing partially written %s", self.config_path)
            self.config_path.unlink(missing_ok=True)
            raise

        log.info("Initialized spec directory '%s' (uid %s)", self.spec_dir, config.uid)
        return InitResult(
            spec_dir=self.spec_dir,
            readme_path=self.readme_path,
            config_path=self.config_path,
            config=config,
        )

    # -- helpers -----------------------------------------------------------

    def _default_name(self) -> str:
        try:
            cwd = Path(os.path.abspath(self._cwd)) if self._cwd else _working_directory()
        except OSError as exc:
            msg = f"error getting current working directory: {exc}"
            raise SpecInitError(msg, self._cwd or Path(".")) from exc
        return kubify_name(cwd.name)

    def _reserve_config(self) -> TextIO:
        try:
            return self.config_path.open("x", encoding="utf-8")
        except FileExistsError as exc:
            raise _already_exists(self.spec_dir) from exc
        except OSError as exc:
            msg = f"error writing deployment config '{self.config_path}': {exc}"
            raise FileWriteError(msg, self.config_path) from exc

    def _write_readme(self) -> None:
        log.debug("Writing %s", self.readme_path)
        try:
            self.readme_path.write_text(self._readme_text, encoding="utf-8")
        except OSError as exc:
            msg = f"error writing README '{self.readme_path}': {exc}"
            raise FileWriteError(msg, self.readme_path) from exc

    def _write_files(self, stream: TextIO, payload: str) -> None:
        # Closing flushes the config body, so close errors count as write errors.
        try:
            with stream:
                self._write_readme()
                log.debug("Writing %s", self.config_path)
                stream.write(payload)
        except OSError as exc:
            msg = f"error writing deployment config '{self.config_path}': {exc}"
            raise FileWriteError(msg, self.config_path) from exc


def init_spec_dir(
    spec_dir: Path,
    name: str | None = None,
    deploy_id: str | None = None,
    *,
    cwd: Path | None = None,
) -> InitResult:
    """Initialize *spec_dir* and return the files that were written.

    Raises:
        DirectoryCreateError: If the directory cannot be created.
        ConfigAlreadyExistsError: If the directory already has a deployment
            config. Nothing is written in that case.
        SerializationError: If the config cannot be rendered.
        FileWriteError: If the README or the config cannot be written.
    """
    return SpecInitializer(spec_dir, name=name, deploy_id=deploy_id, cwd=cwd).execute()


def _already_exists(spec_dir: Path) -> ConfigAlreadyExistsError:
    msg = f"Spec DeploymentConfig already exists in directory '{spec_dir}'"
    return ConfigAlreadyExistsError(msg, spec_dir)


def _working_directory() -> Path:
    # Prefer $PWD when it names the same directory, so a symlinked
    # working directory keeps the link's name.
    cwd = os.getcwd()
    pwd = os.environ.get("PWD", "")
    if pwd and os.path.isabs(pwd) and os.path.exists(pwd) and os.path.samefile(pwd, cwd):
        return Path(pwd)
    return Path(cwd)
